"""mmplug - command line tool to manage plugin projects"""

__version__ = "0.1.0"
