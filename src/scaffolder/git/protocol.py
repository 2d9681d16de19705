"""Interface of the local git collaborator."""

import logging
from pathlib import Path
from typing import Protocol

from ..models import GitAuth, GitAuthorInfo


class GitPusherProtocol(Protocol):
    """Turns a prepared directory into the first commit of a remote repository.

    Implementations initialize a repository in ``dir``, commit all of its
    content on ``default_branch`` and push it to ``remote_url``. Failures
    raise; implementations do not retry.
    """

    def init_repo_and_push(
        self,
        *,
        dir: Path,
        remote_url: str,
        default_branch: str,
        auth: GitAuth,
        logger: logging.Logger,
        git_author_info: GitAuthorInfo,
        commit_message: str | None = None,
    ) -> None:
        """Initialize, commit and push ``dir``.

        Args:
            dir: Directory holding the rendered template
            remote_url: HTTP(S) clone URL of the empty remote repository
            default_branch: Branch to create and push
            auth: Username/password for the push
            logger: Logger for progress lines
            git_author_info: Commit author; ``None`` members use defaults
            commit_message: Commit message; ``None`` uses the default
        """
        ...
