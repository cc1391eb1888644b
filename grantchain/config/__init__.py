"""Configuration management"""

from .schema import RequestConfig, ScenarioConfig, DialogTextConfig
from .config import Config, default_config_paths

__all__ = [
    "Config",
    "RequestConfig",
    "ScenarioConfig",
    "DialogTextConfig",
    "default_config_paths",
]
