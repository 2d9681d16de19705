"""Parsing of template ``repoUrl`` values."""

from urllib.parse import parse_qs, urlsplit

from ..errors import InvalidInputError
from ..integrations.providers import ScmProvider
from ..models import TargetDescriptor


def _first(params: dict[str, list[str]], key: str) -> str | None:
    """Return the first non-blank value of a query parameter."""
    for value in params.get(key, []):
        if value.strip():
            return value.strip()
    return None


def parse_repo_url(repo_url: str, provider: ScmProvider) -> TargetDescriptor:
    """
    Parse a repo URL into a target descriptor.

    The format is ``host?key=value&...``, for example
    ``bitbucket.mycompany.com?project=PRJ&repo=my-service``. Every field
    the provider requires is checked, and all missing fields are reported
    together in a fixed order.

    Raises:
        InvalidInputError: If the host or a required field is missing.
    """
    try:
        parts = urlsplit(f"https://{repo_url.strip()}")
    except ValueError as e:
        raise InvalidInputError(f"Invalid repo URL passed to publisher: {repo_url}, {e}") from e
    host = parts.netloc
    params = parse_qs(parts.query)

    fields = {
        "project": _first(params, "project"),
        "repo": _first(params, "repo"),
        "owner": _first(params, "owner") or _first(params, "workspace"),
    }

    missing: list[str] = []
    if not host:
        missing.append("host")
    for name in provider.required_target_fields:
        if not fields[name]:
            missing.append(name)
    if not fields["repo"] and "repo" not in missing:
        missing.append("repo")

    if missing:
        details = ", ".join(f"missing {name}" for name in missing)
        raise InvalidInputError(f"Invalid repo URL passed to publisher: {repo_url}, {details}")

    return TargetDescriptor(
        host=host,
        repo=fields["repo"],  # type: ignore[arg-type]
        project=fields["project"],
        owner=fields["owner"],
    )
