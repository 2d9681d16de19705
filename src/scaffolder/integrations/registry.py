"""Registry of configured SCM integrations."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType

from ..errors import ConfigurationError
from ..models import BitbucketServerIntegrationConfig, IntegrationsConfig
from .providers import ScmProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedIntegration:
    """An integration entry together with the provider it belongs to."""

    provider: ScmProvider
    config: BitbucketServerIntegrationConfig

    @property
    def host(self) -> str:
        return self.config.host


class ScmIntegrations:
    """Read-only lookup of integration entries by exact host.

    Built once from configuration and handed to actions at construction
    time; nothing mutates it afterwards, so concurrent invocations can
    share one instance.
    """

    def __init__(self, entries: Iterable[ResolvedIntegration] = ()) -> None:
        by_host: dict[str, ResolvedIntegration] = {}
        for entry in entries:
            if entry.host in by_host:
                raise ValueError(f"Duplicate integration host: {entry.host}")
            by_host[entry.host] = entry
        self._by_host = MappingProxyType(by_host)

    @classmethod
    def from_config(cls, config: IntegrationsConfig) -> ScmIntegrations:
        """Build the registry from the ``integrations`` config section."""
        entries = [
            ResolvedIntegration(provider=ScmProvider.BITBUCKET_SERVER, config=entry)
            for entry in config.bitbucket_server
        ]
        logger.debug("Loaded %d integration(s)", len(entries))
        return cls(entries)

    @property
    def hosts(self) -> list[str]:
        """Configured hosts in configuration order."""
        return list(self._by_host)

    def by_host(self, host: str) -> ResolvedIntegration | None:
        """Get the entry whose host equals ``host`` exactly."""
        return self._by_host.get(host)

    def resolve(self, host: str, provider: ScmProvider | None = None) -> ResolvedIntegration:
        """
        Get the entry for ``host``, optionally restricted to one provider.

        Raises:
            ConfigurationError: If no entry matches.
        """
        entry = self.by_host(host)
        if entry is None or (provider is not None and entry.provider is not provider):
            raise ConfigurationError(
                f"No matching integration configuration for host {host}, "
                "please check your integrations config"
            )
        return entry

    def __len__(self) -> int:
        return len(self._by_host)
