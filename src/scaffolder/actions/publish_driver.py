"""Hand-off from a created remote repository to the local git push."""

import logging
from pathlib import Path
from typing import Any

from ..git import GitPusherProtocol
from ..models import (
    TOKEN_AUTH_USERNAME,
    GitAuth,
    GitAuthorInfo,
    PublishInput,
    PublishRequest,
    RepositoryCreationResult,
    ResolvedCredential,
    ScaffolderDefaults,
)


def build_publish_request(
    source_dir: Path,
    params: PublishInput,
    created: RepositoryCreationResult,
    credential: ResolvedCredential,
    defaults: ScaffolderDefaults,
) -> PublishRequest:
    """
    Assemble the complete push request before any git command runs.

    Input values win over configured defaults for author and commit
    message. Author members left as ``None`` and a ``None`` commit
    message fall through to the git collaborator's own defaults.
    """
    return PublishRequest(
        workspace_path=source_dir,
        remote_url=created.clone_url,
        default_branch=params.default_branch,
        auth=GitAuth(username=TOKEN_AUTH_USERNAME, password=credential.token),
        author=GitAuthorInfo(
            name=params.git_author_name or defaults.default_author.name,
            email=params.git_author_email or defaults.default_author.email,
        ),
        commit_message=params.git_commit_message or defaults.default_commit_message,
    )


def publish_workspace(
    git: GitPusherProtocol, request: PublishRequest, logger: logging.Logger
) -> None:
    """Push the workspace once. Collaborator errors propagate unchanged."""
    kwargs: dict[str, Any] = {
        "dir": request.workspace_path,
        "remote_url": request.remote_url,
        "default_branch": request.default_branch,
        "auth": request.auth,
        "logger": logger,
        "git_author_info": request.author,
    }
    if request.commit_message:
        kwargs["commit_message"] = request.commit_message
    git.init_repo_and_push(**kwargs)
