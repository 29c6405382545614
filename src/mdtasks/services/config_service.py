"""Configuration service for loading mdtasks.yml."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..models import MdtasksConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading and caching application configuration."""

    CONFIG_FILE = "mdtasks.yml"

    def __init__(self, project_root: Path) -> None:
        """Initialize the config service.

        Args:
            project_root: Path to the directory holding mdtasks.yml
        """
        self.project_root = project_root
        self._config: MdtasksConfig | None = None
        self._config_error: str | None = None

    @property
    def config_path(self) -> Path:
        return self.project_root / self.CONFIG_FILE

    @property
    def has_config_error(self) -> bool:
        """Check if there was an error loading config."""
        return self._config_error is not None

    @property
    def config_error(self) -> str | None:
        """Get the config error message if any."""
        return self._config_error

    @property
    def task_root(self) -> Path:
        """Path of the tasks directory, under the project root."""
        return self.project_root / self.get_config().task_root

    def get_config(self) -> MdtasksConfig:
        """Get configuration, loading from file if not cached."""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def reload(self) -> None:
        """Clear cached configuration, forcing reload on next access."""
        self._config = None
        self._config_error = None

    def _load_config(self) -> MdtasksConfig:
        """Load configuration from file or return default."""
        config_path = self.config_path
        self._config_error = None

        if not config_path.exists():
            logger.debug("No %s found, using defaults", self.CONFIG_FILE)
            return MdtasksConfig.default()

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)

            if data is None:
                self._config_error = f"{self.CONFIG_FILE} is empty"
                logger.warning(self._config_error)
                return MdtasksConfig.default()

            if not isinstance(data, dict):
                self._config_error = f"{self.CONFIG_FILE} must contain a mapping"
                logger.warning(self._config_error)
                return MdtasksConfig.default()

            config = MdtasksConfig(**data)
            logger.info("Loaded %s (task_root=%s)", self.CONFIG_FILE, config.task_root)
            return config

        except yaml.YAMLError as e:
            self._config_error = f"Invalid YAML in {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return MdtasksConfig.default()

        except ValidationError as e:
            self._config_error = f"Error loading {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return MdtasksConfig.default()

        except OSError as e:
            self._config_error = f"Cannot read {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return MdtasksConfig.default()
