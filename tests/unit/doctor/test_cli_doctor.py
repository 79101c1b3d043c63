from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import Dict, Sequence

import pytest
from click.testing import CliRunner

from mmplug import __version__
from mmplug.cli.main import cli
from mmplug.core.doctor import checks


def _write_project(root: Path, server: bool = True, webapp: bool = True) -> Path:
    manifest: Dict[str, object] = {"id": "com.example.demo"}
    if server:
        manifest["server"] = {"executable": "server/dist/plugin.exe"}
    if webapp:
        manifest["webapp"] = {"bundle_path": "webapp/dist/main.js"}
    (root / "plugin.json").write_text(json.dumps(manifest), encoding="utf-8")
    (root / "go.mod").write_text("module example.com/plugin\n\ngo 1.19\n", encoding="utf-8")
    (root / ".nvmrc").write_text("v18\n", encoding="utf-8")
    return root


def _fake_tools(monkeypatch: pytest.MonkeyPatch, outputs: Dict[str, str], nvm: bool = False) -> None:
    def fake_probe(command: Sequence[str]) -> str:
        if command[0] not in outputs:
            raise FileNotFoundError(2, "No such file or directory", command[0])
        return outputs[command[0]]

    monkeypatch.setattr(checks, "run_probe", fake_probe)
    monkeypatch.setattr(shutil, "which", lambda name: "/usr/bin/nvm" if nvm else None)
    monkeypatch.delenv("MMPLUG_CONFIG", raising=False)
    monkeypatch.delenv("MMPLUG_LOG_LEVEL", raising=False)


def _doctor(project: Path):
    return CliRunner().invoke(cli, ["doctor", "--project-dir", str(project)])


def test_version_option() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_doctor_all_checks_pass(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_tools(monkeypatch, {"go": "go version go1.19.5 linux/amd64\n", "node": "v18.2.0\n"})

    result = _doctor(_write_project(tmp_path))

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "Checking project dependencies"
    assert "✅ Found plugin manifest plugin.json (server, webapp)" in lines
    assert "✅ Go version 1.19.5 is compatible with required version 1.19" in lines
    assert "✅ Installed Node.js version v18.2.0 is compatible with required version v18" in lines
    assert lines[-1] == "✅ All checks passed."


def test_doctor_phases_are_separated_by_blank_lines(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_tools(monkeypatch, {"go": "go version go1.19.5 linux/amd64\n", "node": "v18.2.0\n"})

    lines = _doctor(_write_project(tmp_path)).output.splitlines()

    assert lines == [
        "Checking project dependencies",
        "",
        "✅ Found plugin manifest plugin.json (server, webapp)",
        "",
        "✅ Go version 1.19.5 is compatible with required version 1.19",
        "",
        "✅ Installed Node.js version v18.2.0 is compatible with required version v18",
        "",
        "✅ All checks passed.",
    ]


def test_doctor_runtime_mismatch_prints_remediation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_tools(monkeypatch, {"go": "go version go1.20.1 linux/amd64", "node": "v16.20.0"}, nvm=True)

    result = _doctor(_write_project(tmp_path))

    assert result.exit_code == 1
    lines = result.output.splitlines()
    i = lines.index("❌ Installed Node.js version v16.20.0 is incompatible with required version v18")
    assert lines[i + 1] == "Run `nvm install` in this directory to install the correct version."
    assert lines[-1] == "❌ Not all checks passed. Please fix the above issues and try again."


def test_doctor_node_missing_shows_install_message(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_tools(monkeypatch, {"go": "go version go1.20.1 linux/amd64"})

    result = _doctor(_write_project(tmp_path))

    assert result.exit_code == 1
    assert "❌ Node.js is not installed or not in PATH." in result.output
    assert checks.NVM_INSTALL_MESSAGE in result.output


def test_doctor_webapp_only_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_tools(monkeypatch, {"node": "v18.2.0"})

    result = _doctor(_write_project(tmp_path, server=False))

    assert result.exit_code == 0, result.output
    assert "assuming webapp-only plugin" in result.output
    assert "Go version" not in result.output


def test_doctor_manifest_without_components(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_tools(monkeypatch, {"go": "go version go1.20.1 linux/amd64", "node": "v18.2.0"})

    result = _doctor(_write_project(tmp_path, server=False, webapp=False))

    assert result.exit_code == 1
    assert "❌ Failed to load plugin manifest:" in result.output
    assert "Go version" not in result.output
    assert "Node.js version" not in result.output


def test_doctor_no_manifest(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_tools(monkeypatch, {})

    result = _doctor(tmp_path)

    assert result.exit_code == 1
    assert "failed to find manifest" in result.output


def test_doctor_bad_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_tools(monkeypatch, {})
    project = _write_project(tmp_path)
    (project / ".mmplug.yaml").write_text("nonsense: true\n", encoding="utf-8")

    result = _doctor(project)

    assert result.exit_code == 1
    assert "Invalid doctor configuration" in result.output


def test_run_probe_reports_missing_command() -> None:
    with pytest.raises(FileNotFoundError):
        checks.run_probe(["mmplug-definitely-not-a-real-command", "--version"])


def test_run_probe_raises_on_non_zero_exit(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(*args, **kwargs):
        raise subprocess.CalledProcessError(3, args[0], output="", stderr="bad flag")

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(subprocess.CalledProcessError):
        checks.run_probe(["node", "-v"])
