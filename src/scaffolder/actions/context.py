"""Execution context handed to template actions."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

OutputSink = Callable[[str, Any], None]


def _default_logger() -> logging.Logger:
    return logging.getLogger("scaffolder.actions")


@dataclass
class ActionContext:
    """Per-invocation context supplied by the task runner.

    Attributes:
        input: Raw input values from the template step
        workspace_path: Directory containing the rendered template
        output: Sink receiving named outputs; may be called several times
        logger: Logger for progress lines visible in the task log
        secrets: Secret values provided with the task (e.g. a user token)
    """

    input: Mapping[str, Any]
    workspace_path: Path | str
    output: OutputSink
    logger: logging.Logger = field(default_factory=_default_logger)
    secrets: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Task runners hand over the workspace as a plain string
        self.workspace_path = Path(self.workspace_path)


class TemplateAction(Protocol):
    """A pluggable unit the task runner can execute by id."""

    id: str
    description: str

    def handler(self, ctx: ActionContext) -> None:
        """Run the action, reporting results through ``ctx.output``."""
        ...
