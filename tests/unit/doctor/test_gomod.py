from __future__ import annotations

from pathlib import Path

import pytest

from mmplug.core.doctor.gomod import GoModError, parse_go_version, read_go_version

GO_MOD = """module github.com/example/plugin

go 1.19 // minimum toolchain

require (
\tgithub.com/pkg/errors v0.9.1
)
"""


def test_parse_go_version_reads_directive() -> None:
    assert parse_go_version(GO_MOD) == "1.19"


def test_parse_go_version_accepts_patch_and_prerelease() -> None:
    assert parse_go_version("module m\ngo 1.21.3\n") == "1.21.3"
    assert parse_go_version("module m\ngo 1.21rc1\n") == "1.21rc1"


def test_parse_go_version_ignores_commented_directive() -> None:
    assert parse_go_version("module m\n// go 1.12\ngo 1.20\n") == "1.20"


def test_missing_directive_is_an_error() -> None:
    with pytest.raises(GoModError, match="missing go directive"):
        parse_go_version("module m\n")


def test_repeated_directive_reports_line() -> None:
    with pytest.raises(GoModError) as exc:
        parse_go_version("module m\ngo 1.19\ngo 1.20\n")
    assert exc.value.lineno == 3
    assert "repeated go statement" in str(exc.value)


@pytest.mark.parametrize("line", ["go", "go 1.19 1.20", "go v1.19", "go 1", "go 1.019"])
def test_invalid_directive(line: str) -> None:
    with pytest.raises(GoModError):
        parse_go_version(f"module m\n{line}\n")


def test_read_go_version(tmp_path: Path) -> None:
    p = tmp_path / "go.mod"
    p.write_text(GO_MOD, encoding="utf-8")
    assert read_go_version(p) == "1.19"


def test_read_go_version_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_go_version(tmp_path / "go.mod")
