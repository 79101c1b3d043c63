"""
go.mod reader

Only the `go` directive matters to the doctor: it declares the minimum Go
toolchain a server plugin builds with.
"""

import logging
import re
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Go toolchain version grammar: 1.19, 1.21.3, 1.21rc1
GO_VERSION_PATTERN = re.compile(r"^([1-9][0-9]*)\.(0|[1-9][0-9]*)(\.(0|[1-9][0-9]*))?([a-z]+[0-9]+)?$")


class GoModError(ValueError):
    """go.mod contents are malformed"""

    def __init__(self, path: str, lineno: Optional[int], message: str):
        self.path = path
        self.lineno = lineno
        location = f"{path}:{lineno}" if lineno else path
        super().__init__(f"{location}: {message}")


def parse_go_version(data: str, path: str = "go.mod") -> str:
    """
    Return the version declared by the `go` directive.

    Raises:
        GoModError: Directive missing, repeated, or not a valid Go version
    """
    version = None
    seen_at = None

    for lineno, line in enumerate(data.splitlines(), start=1):
        line = line.split("//", 1)[0].strip()
        if not line:
            continue
        words = line.split()
        if words[0] != "go":
            continue

        if seen_at is not None:
            raise GoModError(path, lineno, f"repeated go statement (first at line {seen_at})")
        if len(words) != 2:
            raise GoModError(path, lineno, "go directive expects exactly one argument")
        if not GO_VERSION_PATTERN.match(words[1]):
            raise GoModError(path, lineno, f"invalid go version '{words[1]}': must match format 1.23.0")

        version = words[1]
        seen_at = lineno

    if version is None:
        raise GoModError(path, None, "missing go directive")
    return version


def read_go_version(path: Path) -> str:
    """
    Read go.mod and return its `go` directive.

    Raises:
        FileNotFoundError: If go.mod does not exist
        GoModError: If go.mod is malformed
    """
    data = path.read_text(encoding="utf-8")
    version = parse_go_version(data, path=path.name)
    logger.debug("go.mod %s declares go %s", path, version)
    return version
