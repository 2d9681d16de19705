"""Provider-independent interface for creating remote repositories."""

from __future__ import annotations

from typing import Protocol

import httpx

from .bitbucket_server import BitbucketServerClient
from .integrations import ResolvedIntegration, ScmProvider
from .models import RepositoryCreationResult, ResolvedCredential


class RepositoryProvisioner(Protocol):
    """Interface for creating a repository on an SCM server.

    One implementation exists per ``ScmProvider``. Implementations talk
    to exactly one server and are closed after a single invocation.
    """

    def create_repository(
        self,
        project: str,
        repo: str,
        public: bool,
        description: str | None = None,
    ) -> RepositoryCreationResult:
        """Create the repository and return its clone and browse URLs."""
        ...

    def enable_lfs(self, project: str, repo: str) -> None:
        """Turn on large file storage for the repository."""
        ...

    def close(self) -> None:
        """Release network resources."""
        ...


def create_provisioner(
    integration: ResolvedIntegration,
    credential: ResolvedCredential,
    timeout: float = 30.0,
    transport: httpx.BaseTransport | None = None,
) -> RepositoryProvisioner:
    """Build the provisioner for the integration's provider."""
    if integration.provider is ScmProvider.BITBUCKET_SERVER:
        return BitbucketServerClient(
            host=integration.host,
            api_base_url=integration.config.api_base_url,
            token=credential.token,
            timeout=timeout,
            transport=transport,
        )
    raise ValueError(f"No repository provisioner for provider {integration.provider.value}")
