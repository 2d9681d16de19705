"""The ``publish:bitbucketServer`` template action."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import closing
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

from ..errors import InvalidInputError, ScaffolderError
from ..git import GitPusherProtocol, ShellGitClient
from ..integrations import ScmIntegrations, ScmProvider, select_credential
from ..models import PublishInput, ScaffolderDefaults
from ..provisioning import create_provisioner
from ..utils import parse_repo_url, resolve_safe_child_path
from .context import ActionContext
from .publish_driver import build_publish_request, publish_workspace

logger = logging.getLogger(__name__)

SECRET_TOKEN_KEY = "token"


class PublishStage(str, Enum):
    """Stages of a publish invocation, in execution order."""

    PARSING = "parsing"
    RESOLVING = "resolving"
    AUTHENTICATING = "authenticating"
    CREATING = "creating"
    ENABLING_LFS = "enabling_lfs"
    PUSHING = "pushing"
    EMITTING = "emitting"
    DONE = "done"
    FAILED = "failed"


def _format_validation_error(error: ValidationError) -> str:
    """Flatten pydantic errors into one line per field."""
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "input"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)


class PublishBitbucketServerAction:
    """Create a repository on Bitbucket Server and push the workspace to it.

    Runs strictly in order: parse ``repoUrl``, resolve the integration
    for its host, pick a token, create the repository, optionally enable
    LFS, push, then emit ``remoteUrl`` and ``repoContentsUrl``.

    The first failure aborts the invocation. Nothing is retried and
    nothing is rolled back: a repository created before a later stage
    fails (LFS or push) stays on the server.
    """

    id = "publish:bitbucketServer"
    description = (
        "Initializes a git repository of the content in the workspace, "
        "and publishes it to Bitbucket Server."
    )

    def __init__(
        self,
        integrations: ScmIntegrations,
        defaults: ScaffolderDefaults | None = None,
        git: GitPusherProtocol | None = None,
        http_timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the action.

        Args:
            integrations: Registry of configured integrations
            defaults: Configured default author and commit message
            git: Git collaborator (defaults to the shell git client)
            http_timeout: Timeout in seconds for REST calls
            transport: Optional httpx transport for REST calls (used by tests)
        """
        self.integrations = integrations
        self.defaults = defaults or ScaffolderDefaults()
        self.git = git or ShellGitClient()
        self._http_timeout = http_timeout
        self._transport = transport

    def handler(self, ctx: ActionContext) -> None:
        """Run one publish. Raises the first error encountered."""
        log = ctx.logger
        stage = PublishStage.PARSING

        def enter(next_stage: PublishStage) -> PublishStage:
            log.debug("publish:bitbucketServer stage %s -> %s", stage.value, next_stage.value)
            return next_stage

        try:
            params = self._parse_input(ctx.input)
            target = parse_repo_url(params.repo_url, ScmProvider.BITBUCKET_SERVER)
            source_dir = resolve_safe_child_path(ctx.workspace_path, params.source_path)

            stage = enter(PublishStage.RESOLVING)
            integration = self.integrations.resolve(target.host, ScmProvider.BITBUCKET_SERVER)

            stage = enter(PublishStage.AUTHENTICATING)
            credential = select_credential(
                params.token or ctx.secrets.get(SECRET_TOKEN_KEY), integration
            )

            stage = enter(PublishStage.CREATING)
            project = target.project or ""
            with closing(
                create_provisioner(
                    integration,
                    credential,
                    timeout=self._http_timeout,
                    transport=self._transport,
                )
            ) as provisioner:
                log.info(
                    "Creating %s repository %s on %s",
                    params.repo_visibility,
                    f"{project}/{target.repo}",
                    target.host,
                )
                created = provisioner.create_repository(
                    project,
                    target.repo,
                    public=params.is_public,
                    description=params.description,
                )

                if params.enable_lfs:
                    stage = enter(PublishStage.ENABLING_LFS)
                    log.info("Enabling LFS for %s/%s", project, target.repo)
                    provisioner.enable_lfs(project, target.repo)

            stage = enter(PublishStage.PUSHING)
            request = build_publish_request(source_dir, params, created, credential, self.defaults)
            publish_workspace(self.git, request, log)

            stage = enter(PublishStage.EMITTING)
            ctx.output("remoteUrl", created.clone_url)
            ctx.output("repoContentsUrl", created.browse_url)

            stage = enter(PublishStage.DONE)
        except Exception as e:
            if isinstance(e, ScaffolderError):
                e.stage = stage.value
            log.error("publish:bitbucketServer failed while %s: %s", stage.value, e)
            enter(PublishStage.FAILED)
            raise

    @staticmethod
    def _parse_input(raw: Mapping[str, Any] | PublishInput) -> PublishInput:
        """Validate raw template input."""
        if isinstance(raw, PublishInput):
            return raw
        try:
            return PublishInput.model_validate(dict(raw))
        except ValidationError as e:
            raise InvalidInputError(
                f"Invalid input to publish:bitbucketServer: {_format_validation_error(e)}"
            ) from e
