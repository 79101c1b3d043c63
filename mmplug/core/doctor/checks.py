"""
Component checks

Each check walks the same five steps and stops at the first failure:
1. Locate the requirement source (go.mod / .nvmrc)
2. Parse the required version
3. Run the tool's version command
4. Parse the installed version
5. Compare

A failed step becomes a FAIL result; it never aborts the other component.
"""

import logging
import shlex
import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from mmplug.config import DoctorConfig

from .errors import (
    CheckError,
    ComparisonError,
    ComparisonMismatch,
    FailureKind,
    InstalledParseError,
    ProbeInvocationError,
    RequirementParseError,
    RequirementSourceMissing,
    VersionParseError,
)
from .gomod import GoModError, read_go_version
from .versions import (
    at_least,
    major_minor_equal,
    parse_pin,
    parse_runtime_output,
    parse_toolchain_output,
    parse_version,
    with_prefix,
)

logger = logging.getLogger(__name__)

GO_INSTALL_MESSAGE = "Please follow the instructions at https://go.dev to download the correct version."
NVM_INSTALL_MESSAGE = (
    "You can download the required Node.js version using Node Version Manager "
    "(https://github.com/nvm-sh/nvm). Once nvm is installed, run `nvm install` "
    "in this directory to install the correct Node version."
)

Probe = Callable[[Sequence[str]], str]
Which = Callable[[str], Optional[str]]


class CheckStatus(Enum):
    """Check result status"""
    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"  # component not declared by the manifest


@dataclass
class CheckResult:
    """Verdict of one component check"""
    name: str
    status: CheckStatus
    summary: str
    details: List[str] = field(default_factory=list)  # remediation lines
    failure: Optional[FailureKind] = None
    required: Optional[str] = None
    installed: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == CheckStatus.PASS

    @classmethod
    def from_error(cls, name: str, error: CheckError, required: Optional[str] = None,
                   installed: Optional[str] = None) -> "CheckResult":
        return cls(
            name=name,
            status=CheckStatus.FAIL,
            summary=error.message,
            details=error.hints,
            failure=error.kind,
            required=required,
            installed=installed,
        )


def run_probe(command: Sequence[str]) -> str:
    """
    Run a version command and return its stdout.

    Raises:
        FileNotFoundError: Command not on PATH
        subprocess.CalledProcessError: Non-zero exit
    """
    logger.debug("Running %s", shlex.join(command))
    result = subprocess.run(list(command), capture_output=True, text=True, check=True)
    logger.debug("%s printed %r", command[0], result.stdout.strip())
    return result.stdout


def _probe_cause(error: Exception) -> str:
    if isinstance(error, subprocess.CalledProcessError):
        stderr = (error.stderr or "").strip()
        cause = f"exit status {error.returncode}"
        return f"{cause}: {stderr}" if stderr else cause
    return str(error)


class ComponentChecker(ABC):
    """Base for the toolchain and runtime checks"""

    name = ""

    def __init__(self, project_dir: Path, config: DoctorConfig, probe: Optional[Probe] = None):
        self.project_dir = project_dir
        self.config = config
        self.probe = probe or run_probe

    def run(self) -> CheckResult:
        required = installed = None
        try:
            required = self.read_requirement()
            installed = self.read_installed()
            return self.compare(installed, required)
        except CheckError as e:
            logger.debug("%s check failed (%s): %s", self.name, e.kind.value, e.message)
            return CheckResult.from_error(self.name, e, required=required, installed=installed)

    @abstractmethod
    def read_requirement(self) -> str:
        """Steps 1-2: locate and parse the required version"""

    @abstractmethod
    def read_installed(self) -> str:
        """Steps 3-4: run the version command and parse its output"""

    @abstractmethod
    def compare(self, installed: str, required: str) -> CheckResult:
        """Step 5: PASS result, or raise ComparisonMismatch"""


class ToolchainChecker(ComponentChecker):
    """Installed Go must be at least the go.mod `go` directive"""

    name = "go"

    def read_requirement(self) -> str:
        filename = self.config.build_config_file
        path = self.project_dir / filename
        if not path.is_file():
            raise RequirementSourceMissing(f"No {filename} file found for server plugin.")

        try:
            required = read_go_version(path)
            parse_version(with_prefix(required))
        except (GoModError, ComparisonError, OSError, UnicodeDecodeError) as e:
            raise RequirementParseError(f"Failed to parse {filename} file. Error: {e}") from e
        return required

    def read_installed(self) -> str:
        command = self.config.toolchain_command
        try:
            output = self.probe(command)
        except (OSError, subprocess.CalledProcessError) as e:
            raise ProbeInvocationError(
                f"Failed to run `{shlex.join(command)}` command. Error: {_probe_cause(e)}"
            ) from e
        except UnicodeDecodeError as e:
            raise InstalledParseError(
                f"Failed to parse installed Go version from `{shlex.join(command)}` command. Error: {e}"
            ) from e

        try:
            installed = parse_toolchain_output(output, prefix=self.config.toolchain_prefix)
            parse_version(with_prefix(installed))
        except (VersionParseError, ComparisonError) as e:
            raise InstalledParseError(
                f"Failed to parse installed Go version from `{shlex.join(command)}` command. Error: {e}"
            ) from e
        return installed

    def compare(self, installed: str, required: str) -> CheckResult:
        if not at_least(with_prefix(installed), with_prefix(required)):
            raise ComparisonMismatch(
                f"Go version {installed} is incompatible with required version {required}",
                hints=[GO_INSTALL_MESSAGE],
            )
        return CheckResult(
            name=self.name,
            status=CheckStatus.PASS,
            summary=f"Go version {installed} is compatible with required version {required}",
            required=required,
            installed=installed,
        )


class RuntimeChecker(ComponentChecker):
    """Installed Node.js must match the .nvmrc pin on major.minor"""

    name = "node"

    def __init__(self, project_dir: Path, config: DoctorConfig, probe: Optional[Probe] = None,
                 which: Optional[Which] = None):
        super().__init__(project_dir, config, probe)
        self.which = which or shutil.which

    def read_requirement(self) -> str:
        filename = self.config.pin_file
        path = self.project_dir / filename
        if not path.is_file():
            raise RequirementSourceMissing(
                f"No {filename} file found, therefore the required Node.js version is unknown."
            )

        try:
            required = parse_pin(path.read_text(encoding="utf-8"))
            parse_version(required)
        except (VersionParseError, ComparisonError, OSError, UnicodeDecodeError) as e:
            raise RequirementParseError(f"Failed to parse {filename} file. Error: {e}") from e
        logger.debug("%s pins node %s", path, required)
        return required

    def read_installed(self) -> str:
        command = self.config.runtime_command
        try:
            output = self.probe(command)
        except (OSError, subprocess.CalledProcessError) as e:
            raise ProbeInvocationError(
                f"Node.js is not installed or not in PATH. Error: {_probe_cause(e)}",
                hints=[NVM_INSTALL_MESSAGE],
            ) from e
        except UnicodeDecodeError as e:
            raise InstalledParseError(
                f"Failed to parse installed Node.js version from `{shlex.join(command)}` command. Error: {e}"
            ) from e

        try:
            installed = parse_runtime_output(output)
            parse_version(installed)
        except (VersionParseError, ComparisonError) as e:
            raise InstalledParseError(
                f"Failed to parse installed Node.js version from `{shlex.join(command)}` command. Error: {e}"
            ) from e
        return installed

    def compare(self, installed: str, required: str) -> CheckResult:
        if major_minor_equal(installed, required):
            return CheckResult(
                name=self.name,
                status=CheckStatus.PASS,
                summary=f"Installed Node.js version {installed} is compatible with required version {required}",
                required=required,
                installed=installed,
            )

        manager = self.config.version_manager
        if self.which(manager):
            hint = f"Run `{manager} install` in this directory to install the correct version."
        else:
            hint = NVM_INSTALL_MESSAGE
        raise ComparisonMismatch(
            f"Installed Node.js version {installed} is incompatible with required version {required}",
            hints=[hint],
        )
