"""Registry of template actions available to the task runner."""

import logging

from .context import TemplateAction

logger = logging.getLogger(__name__)


class ActionRegistry:
    """Maps action ids (e.g. ``publish:bitbucketServer``) to actions."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._actions: dict[str, TemplateAction] = {}

    def register(self, action: TemplateAction) -> None:
        """Register an action under its id.

        Raises:
            ValueError: If an action with the same id is already registered
        """
        if action.id in self._actions:
            raise ValueError(f"Template action with ID '{action.id}' has already been registered")
        self._actions[action.id] = action
        logger.debug("Registered template action %s", action.id)

    def get(self, action_id: str) -> TemplateAction | None:
        """Get an action by id."""
        return self._actions.get(action_id)

    def list_actions(self) -> list[TemplateAction]:
        """All registered actions, in registration order."""
        return list(self._actions.values())

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._actions
