"""CLI main entry point"""

import click

from mmplug import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mmplug")
def cli():
    """mmplug is a command line tool to manage plugin projects"""


# Import subcommands
from mmplug.cli.doctor import doctor

cli.add_command(doctor)


if __name__ == "__main__":
    cli()
