"""
Doctor runner

Sequencing: manifest gate first, then the toolchain check (server), then the
runtime check (webapp). Undeclared components are SKIP results and take no
part in the overall verdict.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from mmplug.config import DoctorConfig

from .checks import CheckResult, CheckStatus, ComponentChecker, RuntimeChecker, ToolchainChecker
from .manifest import ManifestDescriptor, load_applicability

logger = logging.getLogger(__name__)

CheckerFactory = Callable[[Path, DoctorConfig], ComponentChecker]


@dataclass
class RunOutcome:
    """All verdicts of one doctor run"""
    manifest: ManifestDescriptor
    results: List[CheckResult] = field(default_factory=list)

    @property
    def applicable(self) -> List[CheckResult]:
        return [r for r in self.results if r.status != CheckStatus.SKIP]

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.applicable)

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1


class DoctorRunner:
    """Runs the checks that apply to a plugin project"""

    def __init__(
        self,
        project_dir: Path,
        config: Optional[DoctorConfig] = None,
        toolchain_checker: CheckerFactory = ToolchainChecker,
        runtime_checker: CheckerFactory = RuntimeChecker,
    ):
        self.project_dir = project_dir
        self.config = config or DoctorConfig()
        self.toolchain_checker = toolchain_checker
        self.runtime_checker = runtime_checker

    def run(self) -> RunOutcome:
        """
        Run all applicable checks.

        Raises:
            ManifestError: Manifest missing or invalid; no check has run
        """
        manifest = load_applicability(self.project_dir)
        outcome = RunOutcome(manifest=manifest)

        if manifest.has_server:
            outcome.results.append(self.toolchain_checker(self.project_dir, self.config).run())
        else:
            outcome.results.append(CheckResult(
                name=ToolchainChecker.name,
                status=CheckStatus.SKIP,
                summary="No server component found in manifest, assuming webapp-only plugin.",
            ))

        if manifest.has_webapp:
            outcome.results.append(self.runtime_checker(self.project_dir, self.config).run())
        else:
            outcome.results.append(CheckResult(
                name=RuntimeChecker.name,
                status=CheckStatus.SKIP,
                summary="No webapp component found in manifest, assuming server-only plugin.",
            ))

        logger.debug(
            "Doctor finished: %d applicable, passed=%s",
            len(outcome.applicable),
            outcome.passed,
        )
        return outcome
