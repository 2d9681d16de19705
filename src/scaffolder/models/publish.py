"""Input, intermediate and result models for publish actions."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_BRANCH = "master"
TOKEN_AUTH_USERNAME = "x-token-auth"

RepoVisibility = Literal["private", "public"]


class PublishInput(BaseModel):
    """Input fields of a publish action invocation.

    Keys follow the template parameter names (``repoUrl``,
    ``enableLFS``, ...); snake_case names are accepted as well.
    """

    repo_url: str = Field(..., alias="repoUrl", min_length=1)
    repo_visibility: RepoVisibility = Field(default="private", alias="repoVisibility")
    default_branch: str = Field(default=DEFAULT_BRANCH, alias="defaultBranch")
    enable_lfs: bool = Field(default=False, alias="enableLFS")
    token: str | None = None
    description: str | None = None
    source_path: str | None = Field(default=None, alias="sourcePath")
    git_commit_message: str | None = Field(default=None, alias="gitCommitMessage")
    git_author_name: str | None = Field(default=None, alias="gitAuthorName")
    git_author_email: str | None = Field(default=None, alias="gitAuthorEmail")

    model_config = {
        "populate_by_name": True,
        "frozen": True,
    }

    @field_validator("default_branch")
    @classmethod
    def validate_default_branch(cls, v: str) -> str:
        """An empty branch falls back to the default."""
        v = v.strip()
        if not v:
            return DEFAULT_BRANCH
        if v.startswith("-") or " " in v:
            raise ValueError(f"Invalid branch name '{v}'")
        return v

    @field_validator("token", "description", "git_commit_message", "git_author_name", "git_author_email")
    @classmethod
    def blank_is_none(cls, v: str | None) -> str | None:
        """Blank optional strings are treated as not supplied."""
        if v is None or not v.strip():
            return None
        return v

    @property
    def is_public(self) -> bool:
        """Whether the repository should be created as public."""
        return self.repo_visibility == "public"


@dataclass(frozen=True)
class ResolvedCredential:
    """Token chosen for one invocation. Never persisted."""

    token: str

    def __repr__(self) -> str:
        return "ResolvedCredential(token='***')"


@dataclass(frozen=True)
class RepositoryCreationResult:
    """URLs advertised by the server for a newly created repository."""

    clone_url: str
    browse_url: str


@dataclass(frozen=True)
class GitAuth:
    """HTTP credentials used for the push."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"GitAuth(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class GitAuthorInfo:
    """Commit author. ``None`` members use the git collaborator's defaults."""

    name: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class PublishRequest:
    """Everything the git collaborator needs for the initial push."""

    workspace_path: Path
    remote_url: str
    default_branch: str
    auth: GitAuth
    author: GitAuthorInfo
    commit_message: str | None = None
