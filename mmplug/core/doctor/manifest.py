"""
Plugin manifest gate

Finds the plugin manifest (plugin.json / plugin.yaml / plugin.yml) and decides
which component checks apply. A plugin must declare a server part, a webapp
part, or both.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

from .errors import ManifestInvalidError, ManifestNotFoundError

logger = logging.getLogger(__name__)

MANIFEST_FILENAMES = ("plugin.json", "plugin.yaml", "plugin.yml")


@dataclass(frozen=True)
class ManifestDescriptor:
    """Which optional components a plugin declares"""
    path: Path
    plugin_id: str
    has_server: bool
    has_webapp: bool

    @property
    def components(self) -> str:
        parts = []
        if self.has_server:
            parts.append("server")
        if self.has_webapp:
            parts.append("webapp")
        return ", ".join(parts) or "none"


def find_manifest(directory: Path) -> Path:
    """Return the first manifest file present in directory"""
    for name in MANIFEST_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            logger.debug("Found manifest %s", candidate)
            return candidate

    raise ManifestNotFoundError(
        f"failed to find manifest in {directory} (looked for {', '.join(MANIFEST_FILENAMES)})"
    )


def _read_manifest_data(path: Path) -> Dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except OSError as e:
        raise ManifestInvalidError(f"failed to open {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise ManifestInvalidError(f"failed to parse manifest {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestInvalidError(f"failed to parse manifest {path}: expected an object at top level")
    return data


def load_manifest(path: Path) -> ManifestDescriptor:
    """Parse a manifest file into a descriptor (no applicability check)"""
    data = _read_manifest_data(path)
    return ManifestDescriptor(
        path=path,
        plugin_id=str(data.get("id") or ""),
        has_server=data.get("server") is not None,
        has_webapp=data.get("webapp") is not None,
    )


def load_applicability(directory: Path) -> ManifestDescriptor:
    """
    Load the project manifest and enforce that it declares a component.

    Raises:
        ManifestNotFoundError: No manifest in directory
        ManifestInvalidError: Manifest unparsable or declares neither component
    """
    manifest = load_manifest(find_manifest(directory))

    if not manifest.has_server and not manifest.has_webapp:
        raise ManifestInvalidError(
            f"manifest {manifest.path.name} declares neither a server nor a webapp component"
        )

    logger.debug("Manifest %s components: %s", manifest.plugin_id or manifest.path, manifest.components)
    return manifest
