"""Git collaborator backed by the ``git`` executable."""

from __future__ import annotations

import base64
import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path

from ..errors import PushError
from ..models import GitAuth, GitAuthorInfo

DEFAULT_AUTHOR_NAME = "Scaffolder"
DEFAULT_AUTHOR_EMAIL = "scaffolder@localhost"
DEFAULT_COMMIT_MESSAGE = "initial commit"


def _basic_auth_header(auth: GitAuth) -> str:
    credentials = f"{auth.username}:{auth.password}".encode()
    return f"Authorization: Basic {base64.b64encode(credentials).decode('ascii')}"


class ShellGitClient:
    """Runs ``git init/add/commit/push`` in a subprocess.

    Credentials are passed per command as an ``http.extraHeader`` so they
    never end up in the repository's ``.git/config`` or in the remote URL.
    """

    def __init__(self, git_executable: str = "git", timeout: float = 300.0) -> None:
        self._git_executable = git_executable
        self._timeout = timeout

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
        """Initialize ``dir`` as a repository and push it to ``remote_url``."""
        if not dir.is_dir():
            raise PushError(f"Workspace directory does not exist: {dir}")

        author_name = git_author_info.name or DEFAULT_AUTHOR_NAME
        author_email = git_author_info.email or DEFAULT_AUTHOR_EMAIL
        message = commit_message or DEFAULT_COMMIT_MESSAGE

        logger.info("Initializing git repository in %s on branch %s", dir, default_branch)
        self._run(["init", "--quiet"], dir, logger)
        self._run(["symbolic-ref", "HEAD", f"refs/heads/{default_branch}"], dir, logger)
        self._run(["add", "--all"], dir, logger)
        self._run(
            [
                "-c",
                f"user.name={author_name}",
                "-c",
                f"user.email={author_email}",
                "commit",
                "--quiet",
                "-m",
                message,
            ],
            dir,
            logger,
        )
        self._run(["remote", "add", "origin", remote_url], dir, logger)

        logger.info("Pushing %s to %s", default_branch, remote_url)
        self._run(
            [
                "-c",
                f"http.extraHeader={_basic_auth_header(auth)}",
                "push",
                "origin",
                f"refs/heads/{default_branch}:refs/heads/{default_branch}",
            ],
            dir,
            logger,
            display_args=["push", "origin", default_branch],
        )
        logger.info("Push to %s completed", remote_url)

    def _run(
        self,
        args: Sequence[str],
        cwd: Path,
        logger: logging.Logger,
        display_args: Sequence[str] | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run one git command, raising PushError on failure.

        ``display_args`` replaces ``args`` in logs and error messages when
        the real arguments carry credentials.
        """
        command = [self._git_executable, *args]
        display = " ".join([self._git_executable, *(display_args or args)])
        # Never block on an interactive credential prompt
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}

        logger.debug("Running %s in %s", display, cwd)
        try:
            return subprocess.run(
                command,
                cwd=str(cwd),
                env=env,
                check=True,
                text=True,
                capture_output=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as e:
            raise PushError(f"Git executable '{self._git_executable}' was not found in PATH") from e
        except subprocess.TimeoutExpired as e:
            raise PushError(f"Git command timed out after {self._timeout}s: {display}") from e
        except subprocess.CalledProcessError as e:
            details = (e.stderr or "").strip() or (e.stdout or "").strip() or "No command output"
            logger.error("git command failed (%d): %s", e.returncode, display)
            raise PushError(f"Git command failed ({e.returncode}): {display}\n{details}") from e
