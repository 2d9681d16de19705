"""Bitbucket Server REST API client."""

from __future__ import annotations

import logging
import time
from typing import Any
from urllib.parse import quote

import httpx

from ..errors import RemoteError
from ..models import RepositoryCreationResult
from ..models.scaffolder_config import DEFAULT_API_PATH

logger = logging.getLogger(__name__)

LFS_ADMIN_PATH = "/rest/git-lfs/admin"


def _segment(value: str) -> str:
    """Quote a value for use as one URL path segment."""
    return quote(value, safe="")


def _first_href(links: Any, predicate: Any = None) -> str | None:
    """Return the href of the first link dict matching ``predicate``."""
    if not isinstance(links, list):
        return None
    for link in links:
        if not isinstance(link, dict):
            continue
        if predicate is not None and not predicate(link):
            continue
        href = link.get("href")
        if isinstance(href, str) and href.strip():
            return href.strip()
    return None


class BitbucketServerClient:
    """Client for the Bitbucket Server repository and LFS admin APIs.

    Every request carries the token as a bearer credential. Non-success
    responses and transport failures surface as ``RemoteError``; nothing
    is retried.
    """

    def __init__(
        self,
        host: str,
        api_base_url: str,
        token: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            host: Server host as configured in the integration entry
            api_base_url: Base URL of the REST API, e.g. https://host/rest/api/1.0
            token: Bearer token for the REST API
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.host = host
        self.api_base_url = api_base_url.rstrip("/")
        self._client = httpx.Client(
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> BitbucketServerClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def lfs_admin_url(self) -> str:
        """Base URL of the git-lfs admin API.

        It sits next to the core REST API, so it is derived from the API
        base URL when that uses the standard path, and from the host
        otherwise.
        """
        if self.api_base_url.endswith(DEFAULT_API_PATH):
            return self.api_base_url[: -len(DEFAULT_API_PATH)] + LFS_ADMIN_PATH
        return f"https://{self.host}{LFS_ADMIN_PATH}"

    def create_repository(
        self,
        project: str,
        repo: str,
        public: bool,
        description: str | None = None,
    ) -> RepositoryCreationResult:
        """Create a repository inside a project.

        Args:
            project: Project key
            repo: Repository name
            public: Whether the repository is publicly readable
            description: Optional repository description

        Returns:
            Clone (http) and browse URLs advertised by the server

        Raises:
            RemoteError: The server rejected the request, could not be
                reached, or returned a payload without the expected links
        """
        url = f"{self.api_base_url}/projects/{_segment(project)}/repos"
        body: dict[str, Any] = {"name": repo, "public": public}
        if description:
            body["description"] = description

        response = self._request("POST", url, f"create {project}/{repo}", json=body)
        if not response.is_success:
            raise RemoteError(
                f"Unable to create repository {project}/{repo} on {self.host}, "
                f"{response.status_code} {response.reason_phrase}, {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteError(
                f"Invalid JSON received when creating repository {project}/{repo}: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        return self._parse_creation_result(payload, project, repo)

    def enable_lfs(self, project: str, repo: str) -> None:
        """Enable git LFS on an existing repository.

        Raises:
            RemoteError: The server did not answer with a 2xx status
        """
        url = f"{self.lfs_admin_url}/projects/{_segment(project)}/repos/{_segment(repo)}/enabled"
        response = self._request("PUT", url, f"enable LFS {project}/{repo}")
        if not response.is_success:
            raise RemoteError(
                f"Failed to enable LFS in the repository {project}/{repo} on {self.host}, "
                f"{response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
                body=response.text,
            )

    def _request(self, method: str, url: str, op_name: str, **kwargs: Any) -> httpx.Response:
        """Send one request, logging timing and translating transport errors."""
        logger.debug("%s %s", method, url)
        start_time = time.monotonic()
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("Bitbucket %s failed after %.0fms: %s", op_name, elapsed_ms, e)
            raise RemoteError(f"Request to {self.host} failed ({op_name}): {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000
        if response.is_success:
            logger.info("Bitbucket %s: %d (%.0fms)", op_name, response.status_code, elapsed_ms)
        else:
            logger.error("Bitbucket %s: HTTP %d (%.0fms)", op_name, response.status_code, elapsed_ms)
        return response

    def _parse_creation_result(
        self, payload: Any, project: str, repo: str
    ) -> RepositoryCreationResult:
        """Pick the browse and http clone URLs out of a creation response."""
        links = payload.get("links") if isinstance(payload, dict) else None
        if not isinstance(links, dict):
            raise RemoteError(f"Repository {project}/{repo} was created but the response has no links")

        browse_url = _first_href(links.get("self"))
        if browse_url is None:
            raise RemoteError(f"Repository {project}/{repo} was created but no self link was returned")

        clone_url = _first_href(links.get("clone"), lambda link: link.get("name") == "http")
        if clone_url is None:
            raise RemoteError(
                f"Repository {project}/{repo} was created but no http clone link was returned"
            )

        return RepositoryCreationResult(clone_url=clone_url, browse_url=browse_url)
