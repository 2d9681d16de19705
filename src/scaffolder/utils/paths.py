"""Workspace path helpers."""

from pathlib import Path

from ..errors import InvalidInputError


def resolve_safe_child_path(base: Path | str, child: str | None) -> Path:
    """
    Join ``child`` onto ``base`` without allowing it to escape.

    Used for a template's ``sourcePath`` so that only content inside the
    workspace can ever be pushed.

    Raises:
        InvalidInputError: If ``child`` resolves outside ``base``.
    """
    base = Path(base)
    if not child:
        return base

    target = (base / child).resolve()
    try:
        target.relative_to(base.resolve())
    except ValueError as err:
        raise InvalidInputError(
            f"Relative path is not allowed to refer to a directory outside its parent: {child}"
        ) from err
    return target
