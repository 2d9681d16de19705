"""Data models."""

from .publish import (
    DEFAULT_BRANCH,
    TOKEN_AUTH_USERNAME,
    GitAuth,
    GitAuthorInfo,
    PublishInput,
    PublishRequest,
    RepositoryCreationResult,
    RepoVisibility,
    ResolvedCredential,
)
from .scaffolder_config import (
    BitbucketServerIntegrationConfig,
    DefaultAuthorConfig,
    IntegrationsConfig,
    ScaffolderConfig,
    ScaffolderDefaults,
)
from .target import TargetDescriptor

__all__ = [
    "DEFAULT_BRANCH",
    "TOKEN_AUTH_USERNAME",
    "BitbucketServerIntegrationConfig",
    "DefaultAuthorConfig",
    "GitAuth",
    "GitAuthorInfo",
    "IntegrationsConfig",
    "PublishInput",
    "PublishRequest",
    "RepoVisibility",
    "RepositoryCreationResult",
    "ResolvedCredential",
    "ScaffolderConfig",
    "ScaffolderDefaults",
    "TargetDescriptor",
]
