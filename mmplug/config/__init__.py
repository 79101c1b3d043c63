"""Configuration management for mmplug"""

from mmplug.config.loader import (
    ConfigError,
    DoctorConfig,
    load_doctor_config,
)

__all__ = [
    "ConfigError",
    "DoctorConfig",
    "load_doctor_config",
]
