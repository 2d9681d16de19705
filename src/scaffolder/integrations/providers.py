"""Supported SCM provider variants."""

from enum import Enum


class ScmProvider(str, Enum):
    """Closed set of SCM providers an integration entry can belong to.

    The value matches the key used under ``integrations`` in
    scaffolder.yml.
    """

    BITBUCKET_SERVER = "bitbucketServer"

    @property
    def required_target_fields(self) -> tuple[str, ...]:
        """Query parameters a repo URL must carry for this provider."""
        if self is ScmProvider.BITBUCKET_SERVER:
            # Repositories live inside a project
            return ("project", "repo")
        raise ValueError(f"Unknown SCM provider: {self.value}")
