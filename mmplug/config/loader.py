"""
Doctor configuration loader

Loads doctor settings from YAML and lets environment variables override them.

Priority (high to low):
1. MMPLUG_CONFIG environment variable (path)
2. config_path argument
3. <project_dir>/.mmplug.yaml
4. Hardcoded defaults

MMPLUG_LOG_LEVEL overrides log_level from any source.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MMPLUG_CONFIG"
LOG_LEVEL_ENV_VAR = "MMPLUG_LOG_LEVEL"
PROJECT_CONFIG_FILENAME = ".mmplug.yaml"


class ConfigError(ValueError):
    """Doctor configuration is malformed"""


@dataclass
class DoctorConfig:
    """Doctor settings"""
    build_config_file: str = "go.mod"
    pin_file: str = ".nvmrc"
    toolchain_command: List[str] = field(default_factory=lambda: ["go", "version"])
    toolchain_prefix: str = "go"
    runtime_command: List[str] = field(default_factory=lambda: ["node", "-v"])
    version_manager: str = "nvm"
    log_level: str = "WARNING"


def _validate(data: Dict[str, Any], source: Path) -> Dict[str, Any]:
    known = {f.name: f for f in fields(DoctorConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"{source}: unknown setting(s): {', '.join(unknown)}")

    for name, value in data.items():
        if name.endswith("_command"):
            if (not isinstance(value, list) or not value
                    or not all(isinstance(v, str) for v in value)):
                raise ConfigError(f"{source}: {name} must be a non-empty list of strings")
        elif not isinstance(value, str) or not value:
            raise ConfigError(f"{source}: {name} must be a non-empty string")
    return data


def _resolve_config_path(project_dir: Path, config_path: Optional[Path]) -> Optional[Path]:
    env_config_path = os.getenv(CONFIG_ENV_VAR)
    if env_config_path:
        config_path = Path(env_config_path)

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Doctor config not found: {config_path}")
        if not config_path.is_file():
            raise ConfigError(f"Doctor config is not a file: {config_path}")
        return config_path

    default_path = project_dir / PROJECT_CONFIG_FILENAME
    if default_path.is_file():
        return default_path
    return None


def load_doctor_config(project_dir: Path, config_path: Optional[Path] = None) -> DoctorConfig:
    """
    Load doctor settings for a project.

    Args:
        project_dir: Plugin project root
        config_path: Explicit config file (optional)

    Returns:
        DoctorConfig

    Raises:
        FileNotFoundError: Explicit config file does not exist
        ConfigError: Config file is unreadable, not valid YAML or has bad settings
    """
    config_path = _resolve_config_path(project_dir, config_path)

    data: Dict[str, Any] = {}
    if config_path is not None:
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"{config_path}: {e}") from e

        # Empty file means defaults
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"{config_path}: expected a mapping at top level")
        data = _validate(loaded, config_path)
        logger.debug("Loaded doctor config from %s", config_path)

    config = DoctorConfig(**data)

    env_log_level = os.getenv(LOG_LEVEL_ENV_VAR)
    if env_log_level:
        config.log_level = env_log_level

    config.log_level = config.log_level.upper()
    if not isinstance(logging.getLevelName(config.log_level), int):
        raise ConfigError(f"unknown log level: {config.log_level}")

    return config
