# Task board configuration
# Override the API endpoint via taskboard.yaml or environment variables.

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .client import BoardApiClient
from .errors import ConfigError

CONFIG_PATH = Path.home() / ".config" / "taskboard" / "taskboard.yaml"

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Runtime configuration for the board client."""

    api_base_url: str = "http://localhost:8000"
    project_id: int = 0
    api_key_env: str = "TASKBOARD_API_KEY"
    timeout: float = 5.0
    log_level: str = "INFO"

    @property
    def api_key(self) -> Optional[str]:
        """API key read from the environment variable named by api_key_env."""
        return os.environ.get(self.api_key_env) or None

    def apply_env(self) -> None:
        """Environment overrides for the endpoint."""
        url = os.environ.get("TASKBOARD_API_URL")
        if url:
            self.api_base_url = url
        project = os.environ.get("TASKBOARD_PROJECT_ID")
        if project:
            try:
                self.project_id = int(project)
            except ValueError:
                raise ConfigError(f"TASKBOARD_PROJECT_ID must be an integer, got {project!r}")

    def make_client(self) -> BoardApiClient:
        if not self.project_id:
            raise ConfigError(
                "project_id is not configured.\n"
                "Set it in taskboard.yaml or export TASKBOARD_PROJECT_ID=<id>"
            )
        return BoardApiClient(
            self.api_base_url,
            self.project_id,
            api_key=self.api_key,
            timeout=self.timeout,
        )

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path) if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{cfg_path} must contain a mapping")
            known = {f.name for f in fields(cls)}
            unknown = sorted(set(data) - known)
            if unknown:
                logger.warning(f"Ignoring unknown config keys in {cfg_path}: {unknown}")
            cfg = cls(**{k: v for k, v in data.items() if k in known})
            cfg.check_types(str(cfg_path))
        else:
            cfg = cls()
        cfg.apply_env()
        return cfg

    def check_types(self, source: str = "config") -> None:
        """Coerce YAML scalars to the field types, or raise ConfigError."""
        for name in ("api_base_url", "api_key_env", "log_level"):
            if not isinstance(getattr(self, name), str):
                raise ConfigError(f"{name} in {source} must be a string, got {getattr(self, name)!r}")
        try:
            self.project_id = int(self.project_id)
        except (TypeError, ValueError):
            raise ConfigError(
                f"project_id in {source} must be an integer, got {self.project_id!r}"
            ) from None
        try:
            self.timeout = float(self.timeout)
        except (TypeError, ValueError):
            raise ConfigError(
                f"timeout in {source} must be a number of seconds, got {self.timeout!r}"
            ) from None
        if self.timeout <= 0:
            raise ConfigError(f"timeout in {source} must be positive, got {self.timeout}")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [taskboard] %(levelname)s: %(message)s",
    )
