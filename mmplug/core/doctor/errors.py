"""
Doctor error taxonomy

Two tiers:
- Manifest errors are fatal: the run aborts before any check
- Check errors downgrade one component to FAIL; the other component still runs
"""

from enum import Enum
from typing import List, Optional


class FailureKind(Enum):
    """Why a component check failed"""
    REQUIREMENT_SOURCE_MISSING = "requirement_source_missing"
    REQUIREMENT_PARSE = "requirement_parse"
    PROBE_INVOCATION = "probe_invocation"
    INSTALLED_PARSE = "installed_parse"
    COMPARISON_MISMATCH = "comparison_mismatch"


class DoctorError(Exception):
    """Base class for doctor errors"""


class ManifestError(DoctorError):
    """Plugin manifest cannot be used; aborts the whole run"""


class ManifestNotFoundError(ManifestError):
    """No plugin manifest in the project directory"""


class ManifestInvalidError(ManifestError):
    """Manifest is unreadable or declares neither server nor webapp"""


class VersionParseError(DoctorError, ValueError):
    """Raw text contains no recognizable version token"""


class ComparisonError(DoctorError, ValueError):
    """Operand is not a valid semantic version"""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid version: {value!r}")


class CheckError(DoctorError):
    """A step of a component check failed"""

    kind: FailureKind

    def __init__(self, message: str, hints: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.hints = list(hints or [])


class RequirementSourceMissing(CheckError):
    kind = FailureKind.REQUIREMENT_SOURCE_MISSING


class RequirementParseError(CheckError):
    kind = FailureKind.REQUIREMENT_PARSE


class ProbeInvocationError(CheckError):
    kind = FailureKind.PROBE_INVOCATION


class InstalledParseError(CheckError):
    kind = FailureKind.INSTALLED_PARSE


class ComparisonMismatch(CheckError):
    kind = FailureKind.COMPARISON_MISMATCH
