"""
Doctor - Plugin project environment checker

Verifies the local toolchain and runtime against a plugin project:
- Go against the go.mod `go` directive (server component)
- Node.js against the .nvmrc pin (webapp component)
Read-only: reports compatibility, never installs anything.
"""

from .checks import CheckResult, CheckStatus, RuntimeChecker, ToolchainChecker
from .errors import DoctorError, FailureKind, ManifestError
from .manifest import ManifestDescriptor, load_applicability
from .report import print_header, print_manifest_error, print_report
from .runner import DoctorRunner, RunOutcome

__all__ = [
    "CheckResult",
    "CheckStatus",
    "RuntimeChecker",
    "ToolchainChecker",
    "DoctorError",
    "FailureKind",
    "ManifestError",
    "ManifestDescriptor",
    "load_applicability",
    "print_header",
    "print_manifest_error",
    "print_report",
    "DoctorRunner",
    "RunOutcome",
]
