"""Configuration models for scaffolder.yml."""

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_API_PATH = "/rest/api/1.0"


class BitbucketServerIntegrationConfig(BaseModel):
    """Connection details for one Bitbucket Server instance.

    Entries are keyed by ``host``. When ``apiBaseUrl`` is omitted it is
    derived from the host using the standard REST path.
    """

    host: str = Field(..., min_length=1)
    api_base_url: str = Field(default="", alias="apiBaseUrl")
    token: str | None = Field(default=None, description="Bearer token for the REST API")

    model_config = {
        "populate_by_name": True,
        "frozen": True,
    }

    @model_validator(mode="before")
    @classmethod
    def default_api_base_url(cls, data: Any) -> Any:
        """Fill in apiBaseUrl from the host when not configured."""
        if not isinstance(data, dict):
            return data
        if data.get("apiBaseUrl") or data.get("api_base_url"):
            return data
        host = data.get("host")
        if isinstance(host, str) and host.strip():
            return {**data, "apiBaseUrl": f"https://{host.strip()}{DEFAULT_API_PATH}"}
        return data

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Host must be a bare hostname, optionally with a port."""
        v = v.strip()
        if "://" in v or "/" in v:
            raise ValueError(f"host '{v}' must not contain a scheme or path")
        return v

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Strip trailing slashes so request paths join cleanly."""
        v = v.strip().rstrip("/")
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("apiBaseUrl must start with http:// or https://")
        return v

    @field_validator("token")
    @classmethod
    def empty_token_is_none(cls, v: str | None) -> str | None:
        """Treat a blank token as not configured."""
        if v is None or not v.strip():
            return None
        return v.strip()


class IntegrationsConfig(BaseModel):
    """All configured SCM integrations, grouped by provider."""

    bitbucket_server: list[BitbucketServerIntegrationConfig] = Field(
        default_factory=list, alias="bitbucketServer"
    )

    model_config = {"populate_by_name": True}

    @field_validator("bitbucket_server")
    @classmethod
    def validate_unique_hosts(
        cls, v: list[BitbucketServerIntegrationConfig]
    ) -> list[BitbucketServerIntegrationConfig]:
        """Hosts are lookup keys and must not repeat."""
        hosts = [entry.host for entry in v]
        if len(hosts) != len(set(hosts)):
            raise ValueError("Integration hosts must be unique")
        return v


class DefaultAuthorConfig(BaseModel):
    """Commit author used when a template run does not supply one."""

    name: str | None = None
    email: str | None = None


class ScaffolderDefaults(BaseModel):
    """The ``scaffolder`` section of the config file."""

    default_author: DefaultAuthorConfig = Field(
        default_factory=DefaultAuthorConfig, alias="defaultAuthor"
    )
    default_commit_message: str | None = Field(default=None, alias="defaultCommitMessage")

    model_config = {"populate_by_name": True}


class ScaffolderConfig(BaseModel):
    """Root configuration from scaffolder.yml."""

    version: int = 1
    integrations: IntegrationsConfig = Field(default_factory=IntegrationsConfig)
    scaffolder: ScaffolderDefaults = Field(default_factory=ScaffolderDefaults)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: int) -> int:
        """Only version 1 of the file format exists."""
        if v != 1:
            raise ValueError(f"Unsupported config version {v}")
        return v

    @classmethod
    def default(cls) -> "ScaffolderConfig":
        """Return an empty configuration with no integrations."""
        return cls()
