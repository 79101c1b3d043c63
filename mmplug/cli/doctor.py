"""
mmplug doctor - Check that the development environment can build the plugin

Usage:
    mmplug doctor                        # Check the current directory
    mmplug doctor --project-dir ./plugin # Check another plugin project
    mmplug doctor --verbose              # Debug logging on stderr

Read-only: reports compatibility of Go and Node.js, never installs anything.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from mmplug.config import ConfigError, load_doctor_config
from mmplug.core.doctor import (
    DoctorRunner,
    ManifestError,
    print_header,
    print_manifest_error,
    print_report,
)
from mmplug.core.doctor.report import fail_line


def _setup_logging(level: str):
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    root = logging.getLogger("mmplug")
    root.handlers = [handler]
    root.setLevel(level)
    root.propagate = False


@click.command()
@click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Plugin project root",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Doctor config file (default: <project-dir>/.mmplug.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def doctor(project_dir: Path, config_path: Optional[Path], verbose: bool):
    """Check if your development environment is set up correctly"""
    console = Console()

    try:
        config = load_doctor_config(project_dir, config_path)
    except (ConfigError, FileNotFoundError) as e:
        console.print(fail_line(f"Invalid doctor configuration: {e}"), style="red", markup=False, soft_wrap=True)
        sys.exit(1)

    _setup_logging("DEBUG" if verbose else config.log_level)

    print_header(console)

    try:
        outcome = DoctorRunner(project_dir, config).run()
    except ManifestError as e:
        print_manifest_error(e, console)
        sys.exit(1)

    print_report(outcome, console)
    sys.exit(outcome.exit_code)


if __name__ == "__main__":
    doctor()
