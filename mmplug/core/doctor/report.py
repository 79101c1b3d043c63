"""
Doctor report formatting

Line builders are pure functions; printing goes through a rich Console
passed in by the caller. Output layout:

- one ✅/❌ line per check, followed by plain remediation lines
- ℹ️ notes for components the manifest does not declare
- a blank line between the manifest, toolchain, runtime and summary phases
"""

from typing import List, Optional

from rich.console import Console

from .checks import CheckResult, CheckStatus
from .errors import ManifestError
from .runner import RunOutcome

SUCCESS_GLYPH = "✅"
FAIL_GLYPH = "❌"
NOTE_GLYPH = "ℹ️"

HEADER = "Checking project dependencies"
ALL_PASSED = "All checks passed."
NOT_ALL_PASSED = "Not all checks passed. Please fix the above issues and try again."


def success_line(message: str) -> str:
    return f"{SUCCESS_GLYPH} {message}"


def fail_line(message: str) -> str:
    return f"{FAIL_GLYPH} {message}"


def note_line(message: str) -> str:
    return f"{NOTE_GLYPH}  {message}"


def summary_line(passed: bool) -> str:
    return success_line(ALL_PASSED) if passed else fail_line(NOT_ALL_PASSED)


def result_lines(result: CheckResult) -> List[str]:
    """Lines for one check: verdict line, then remediation lines"""
    if result.status == CheckStatus.SKIP:
        return [note_line(result.summary)]
    if result.status == CheckStatus.PASS:
        head = success_line(result.summary)
    else:
        head = fail_line(result.summary)
    return [head] + list(result.details)


def _print(console: Console, line: str, style: Optional[str] = None):
    console.print(line, style=style, markup=False, emoji=False, highlight=False, soft_wrap=True)


def _print_result(console: Console, result: CheckResult):
    style = {
        CheckStatus.PASS: "green",
        CheckStatus.FAIL: "red",
        CheckStatus.SKIP: "dim",
    }[result.status]

    lines = result_lines(result)
    _print(console, lines[0], style)
    for line in lines[1:]:
        _print(console, line)


def print_header(console: Console):
    _print(console, HEADER, "bold cyan")


def print_report(outcome: RunOutcome, console: Console):
    """Print manifest, check and summary phases"""
    manifest = outcome.manifest
    console.print()
    _print(console, success_line(f"Found plugin manifest {manifest.path.name} ({manifest.components})"), "green")

    for result in outcome.results:
        console.print()
        _print_result(console, result)

    console.print()
    _print(console, summary_line(outcome.passed), "bold green" if outcome.passed else "bold red")


def print_manifest_error(error: ManifestError, console: Console):
    console.print()
    _print(console, fail_line(f"Failed to load plugin manifest: {error}"), "red")
    console.print()
    _print(console, summary_line(False), "bold red")
