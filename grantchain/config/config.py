"""Configuration management"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from grantchain.permission.errors import ConfigError
from .schema import RequestConfig, ScenarioConfig

logger = logging.getLogger(__name__)


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / "grantchain.json",
        Path.home() / ".config" / "grantchain" / "config.json",
    ]


class Config(BaseModel):
    """Main configuration"""
    request: RequestConfig = Field(default_factory=RequestConfig)
    scenario: ScenarioConfig = Field(default_factory=ScenarioConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load config from file, falling back to defaults"""
        if path is None:
            for candidate in default_config_paths():
                if candidate.exists():
                    path = candidate
                    break

        if path is None:
            return cls()
        if not path.exists():
            raise ConfigError(path, "file not found")

        try:
            data = json.loads(path.read_text())
            config = cls(**data)
        except json.JSONDecodeError as e:
            raise ConfigError(path, f"invalid JSON: {e}") from e
        except ValidationError as e:
            raise ConfigError(path, str(e)) from e

        logger.debug(f"Loaded config from {path}")
        return config

    def save(self, path: Path):
        """Save config to file"""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))
