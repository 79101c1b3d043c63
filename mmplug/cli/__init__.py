"""mmplug command line interface"""
