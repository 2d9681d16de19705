"""Parsed repository location."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TargetDescriptor:
    """Which repository to create, and on which host.

    Produced from a ``repoUrl`` such as
    ``bitbucket.mycompany.com?project=PRJ&repo=my-service``.
    """

    host: str
    repo: str
    project: str | None = None
    owner: str | None = None

    def __str__(self) -> str:
        scope = self.project or self.owner
        return f"{self.host}/{scope}/{self.repo}" if scope else f"{self.host}/{self.repo}"
