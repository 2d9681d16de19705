"""Template actions."""

from ..git import GitPusherProtocol
from ..integrations import ScmIntegrations
from ..models import ScaffolderDefaults
from .context import ActionContext, TemplateAction
from .publish_bitbucket_server import PublishBitbucketServerAction, PublishStage
from .registry import ActionRegistry


def create_builtin_actions(
    integrations: ScmIntegrations,
    defaults: ScaffolderDefaults | None = None,
    git: GitPusherProtocol | None = None,
    http_timeout: float = 30.0,
) -> ActionRegistry:
    """Build a registry holding the built-in publish actions."""
    registry = ActionRegistry()
    registry.register(
        PublishBitbucketServerAction(
            integrations, defaults=defaults, git=git, http_timeout=http_timeout
        )
    )
    return registry


__all__ = [
    "ActionContext",
    "ActionRegistry",
    "PublishBitbucketServerAction",
    "PublishStage",
    "TemplateAction",
    "create_builtin_actions",
]
