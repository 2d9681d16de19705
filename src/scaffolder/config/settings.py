"""Application settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    config_path: Path = Field(
        default=Path("scaffolder.yml"),
        description="Path to scaffolder.yml holding integrations and defaults",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    http_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for SCM REST calls",
    )

    model_config = {
        "env_prefix": "SCAFFOLDER_",
    }
