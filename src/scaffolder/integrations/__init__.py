"""SCM integration registry and credential selection."""

from .credentials import select_credential
from .providers import ScmProvider
from .registry import ResolvedIntegration, ScmIntegrations

__all__ = [
    "ResolvedIntegration",
    "ScmIntegrations",
    "ScmProvider",
    "select_credential",
]
