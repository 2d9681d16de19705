"""Small helpers shared by actions and the CLI."""

from .paths import resolve_safe_child_path
from .repo_url import parse_repo_url

__all__ = [
    "parse_repo_url",
    "resolve_safe_child_path",
]
