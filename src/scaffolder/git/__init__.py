"""Local git collaborator."""

from .protocol import GitPusherProtocol
from .shell import ShellGitClient

__all__ = [
    "GitPusherProtocol",
    "ShellGitClient",
]
