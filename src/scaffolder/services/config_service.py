"""Configuration service for loading scaffolder.yml."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..integrations import ScmIntegrations
from ..models import ScaffolderConfig, ScaffolderDefaults

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading and caching the scaffolder configuration.

    A missing file yields an empty configuration (no integrations). An
    unreadable or invalid file also yields the empty configuration, with
    the reason kept in ``config_error`` for the caller to report.
    """

    CONFIG_FILE = "scaffolder.yml"

    def __init__(self, config_path: Path) -> None:
        """Initialize the config service.

        Args:
            config_path: Path to scaffolder.yml, or to the directory holding it
        """
        if config_path.is_dir():
            config_path = config_path / self.CONFIG_FILE
        self.config_path = config_path
        self._config: ScaffolderConfig | None = None
        self._integrations: ScmIntegrations | None = None
        self._config_error: str | None = None

    @property
    def has_config_error(self) -> bool:
        """Check if there was an error loading config."""
        return self._config_error is not None

    @property
    def config_error(self) -> str | None:
        """Get the config error message if any."""
        return self._config_error

    def get_config(self) -> ScaffolderConfig:
        """Get configuration, loading from file if not cached."""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def get_integrations(self) -> ScmIntegrations:
        """Get the integration registry built from the configuration."""
        if self._integrations is None:
            self._integrations = ScmIntegrations.from_config(self.get_config().integrations)
        return self._integrations

    def get_defaults(self) -> ScaffolderDefaults:
        """Convenience method to get the ``scaffolder`` section."""
        return self.get_config().scaffolder

    def reload(self) -> None:
        """Clear cached configuration, forcing reload on next access."""
        self._config = None
        self._integrations = None
        self._config_error = None

    def _load_config(self) -> ScaffolderConfig:
        """Load configuration from file or return default."""
        self._config_error = None

        if not self.config_path.exists():
            logger.debug("No %s found, using defaults", self.config_path)
            return ScaffolderConfig.default()

        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f)

            if data is None:
                self._config_error = f"{self.config_path.name} is empty"
                logger.warning(self._config_error)
                return ScaffolderConfig.default()

            if not isinstance(data, dict):
                self._config_error = f"{self.config_path.name} must contain a mapping"
                logger.warning(self._config_error)
                return ScaffolderConfig.default()

            config = ScaffolderConfig(**data)
            logger.info(
                "Loaded %s with %d Bitbucket Server integration(s)",
                self.config_path.name,
                len(config.integrations.bitbucket_server),
            )
            return config

        except yaml.YAMLError as e:
            self._config_error = f"Invalid YAML in {self.config_path.name}: {e}"
            logger.warning(self._config_error)
            return ScaffolderConfig.default()

        except ValidationError as e:
            self._config_error = f"Invalid configuration in {self.config_path.name}: {e}"
            logger.warning(self._config_error)
            return ScaffolderConfig.default()

        except OSError as e:
            self._config_error = f"Error reading {self.config_path.name}: {e}"
            logger.warning(self._config_error)
            return ScaffolderConfig.default()
