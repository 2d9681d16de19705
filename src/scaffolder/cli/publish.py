"""Publish command: create a Bitbucket Server repository from a workspace."""

import logging
from pathlib import Path
from typing import Any

from ..actions import ActionContext, create_builtin_actions
from ..errors import ScaffolderError
from ..git import GitPusherProtocol
from ..services import ConfigService
from .output import OutputCollector, error, header, info, success

logger = logging.getLogger(__name__)

PUBLISH_ACTION_ID = "publish:bitbucketServer"


def run_publish(
    config_path: Path,
    workspace: Path,
    values: dict[str, Any],
    http_timeout: float = 30.0,
    git: GitPusherProtocol | None = None,
) -> int:
    """Run ``publish:bitbucketServer`` once against a local workspace.

    Args:
        config_path: Path to scaffolder.yml
        workspace: Directory holding the content to push
        values: Action input (``repoUrl``, ``repoVisibility``, ...)
        http_timeout: Timeout in seconds for REST calls
        git: Git collaborator override (defaults to the shell git client)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    config_service = ConfigService(config_path)
    config = config_service.get_config()
    if config_service.has_config_error:
        error(config_service.config_error or "Invalid configuration")
        return 1

    if not workspace.is_dir():
        error(f"Workspace directory not found: {workspace}")
        return 1

    actions = create_builtin_actions(
        config_service.get_integrations(),
        defaults=config.scaffolder,
        git=git,
        http_timeout=http_timeout,
    )
    action = actions.get(PUBLISH_ACTION_ID)
    if action is None:
        available = ", ".join(a.id for a in actions.list_actions())
        error(f"Template action {PUBLISH_ACTION_ID} is not registered (available: {available})")
        return 1

    outputs = OutputCollector()
    ctx = ActionContext(
        input=values,
        workspace_path=workspace,
        output=outputs,
        logger=logging.getLogger("scaffolder.actions.publish"),
    )

    header(f"Publishing {workspace} to {values.get('repoUrl')}...")
    try:
        action.handler(ctx)
    except ScaffolderError as e:
        stage = f" ({e.stage})" if e.stage else ""
        error(f"Publish failed{stage}: {e}")
        logger.debug("Publish failed", exc_info=True)
        return 1

    success("Repository created and pushed")
    if "repoContentsUrl" in outputs.values:
        info(f"Browse it at {outputs.values['repoContentsUrl']}")
    return 0
