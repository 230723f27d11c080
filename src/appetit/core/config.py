"""Configuration loading and validation."""

import os
import json
import hashlib
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/109.0.0.0 Safari/537.36"
)

# Environment variable pointing at a config file
CONFIG_ENV_VAR = "APPETIT_CONFIG"


class InterpreterConfig(BaseModel):
    """Interpreter configuration."""
    allow_exec: bool = Field(default=False)
    verbose: bool = Field(default=False)
    dev: bool = Field(default=False)
    timer: bool = Field(default=False)
    colour: bool = Field(default=True)

    # Nested run statements deeper than this are rejected
    max_run_depth: int = Field(default=64, ge=1, le=1000)

    download_timeout_seconds: float = Field(default=60.0, gt=0)
    download_user_agent: str = Field(default=DEFAULT_USER_AGENT)

    def config_hash(self) -> str:
        """Generate hash of config for change detection."""
        return hashlib.sha256(
            self.model_dump_json().encode()
        ).hexdigest()[:16]


class ConfigLoader:
    """Loads and validates YAML/JSON interpreter configuration."""

    def __init__(self, config_dir: Optional[str] = None):
        if config_dir is None:
            config_dir = os.path.join(Path.home(), ".config", "appetit")
        self.config_dir = Path(config_dir)

    def default_path(self) -> Optional[Path]:
        """Find the config file to use when none is given explicitly."""
        env_path = os.getenv(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path)

        for name in ("appetit.yaml", "appetit.yml", "appetit.json"):
            candidate = self.config_dir / name
            if candidate.exists():
                return candidate
        return None

    def load(
        self,
        path: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None,
    ) -> InterpreterConfig:
        """
        Load interpreter configuration.

        Args:
            path: Explicit config file; falls back to default_path()
            overrides: Values that win over the file (command line flags)

        Returns:
            Validated InterpreterConfig
        """
        config_path = Path(path) if path else self.default_path()

        data: dict[str, Any] = {}
        if config_path is not None:
            data = self._load_file(config_path)

        if overrides:
            data.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return InterpreterConfig(**data)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid interpreter config: {e}",
                config_path=str(config_path) if config_path else None,
            )

    def _load_file(self, path: Path) -> dict[str, Any]:
        """Load YAML or JSON file."""
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}", config_path=str(path))

        try:
            content = path.read_text()

            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content) or {}
            elif path.suffix == ".json":
                data = json.loads(content)
            else:
                raise ConfigError(
                    f"Unsupported config format: {path.suffix}",
                    config_path=str(path)
                )
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}", config_path=str(path))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON: {e}", config_path=str(path))

        if not isinstance(data, dict):
            raise ConfigError(
                "Config file must contain a mapping of settings",
                config_path=str(path),
            )
        return data
