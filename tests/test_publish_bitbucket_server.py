"""Tests for the publish:bitbucketServer action."""

import json
import logging
from pathlib import Path
from unittest.mock import MagicMock, call, patch

import httpx
import pytest

from scaffolder.actions import ActionContext, PublishBitbucketServerAction
from scaffolder.errors import (
    AuthenticationError,
    ConfigurationError,
    InvalidInputError,
    PushError,
    RemoteError,
)
from scaffolder.git import ShellGitClient
from scaffolder.integrations import ScmIntegrations
from scaffolder.models import (
    GitAuth,
    GitAuthorInfo,
    IntegrationsConfig,
    ScaffolderDefaults,
)

CREATE_URL = "https://hosted.bitbucket.com/rest/api/1.0/projects/project/repos"
LFS_URL = "https://hosted.bitbucket.com/rest/git-lfs/admin/projects/project/repos/repo/enabled"
CLONE_URL = "https://bitbucket.mycompany.com/scm/project/repo"
BROWSE_URL = "https://bitbucket.mycompany.com/projects/project/repos/repo"

REPO_CREATION_RESPONSE = {
    "links": {
        "self": [{"href": BROWSE_URL}],
        "clone": [{"name": "http", "href": CLONE_URL}],
    }
}


class FakeServer:
    """Routes requests for an httpx.MockTransport and records them."""

    def __init__(
        self,
        create_status: int = 201,
        create_body: object = REPO_CREATION_RESPONSE,
        lfs_status: int = 204,
    ):
        self.create_status = create_status
        self.create_body = create_body
        self.lfs_status = lfs_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "POST" and path.endswith("/rest/api/1.0/projects/project/repos"):
            return httpx.Response(self.create_status, json=self.create_body)
        if request.method == "PUT" and path.endswith(
            "/rest/git-lfs/admin/projects/project/repos/repo/enabled"
        ):
            return httpx.Response(self.lfs_status)
        return httpx.Response(404, text="no route")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def requests_to(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]


@pytest.fixture
def integrations() -> ScmIntegrations:
    """Registry with one host holding a token and one without."""
    config = IntegrationsConfig.model_validate(
        {
            "bitbucketServer": [
                {
                    "host": "hosted.bitbucket.com",
                    "token": "thing",
                    "apiBaseUrl": "https://hosted.bitbucket.com/rest/api/1.0",
                },
                {"host": "notoken.bitbucket.com"},
            ]
        }
    )
    return ScmIntegrations.from_config(config)


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def git() -> MagicMock:
    return MagicMock()


@pytest.fixture
def action(integrations, server, git) -> PublishBitbucketServerAction:
    return PublishBitbucketServerAction(integrations, git=git, transport=server.transport)


def make_context(**input_overrides) -> ActionContext:
    values = {
        "repoUrl": "hosted.bitbucket.com?project=project&repo=repo",
        "repoVisibility": "private",
    }
    values.update(input_overrides)
    return ActionContext(
        input=values,
        workspace_path=Path("wsp"),
        output=MagicMock(),
        logger=logging.getLogger("test.publish"),
    )


class TestInputValidation:
    """Tests for malformed repo URLs and inputs."""

    def test_missing_project(self, action, server):
        """repoUrl without project fails before any request."""
        with pytest.raises(InvalidInputError, match="missing project"):
            action.handler(make_context(repoUrl="hosted.bitbucket.com?repo=repo"))
        assert server.requests == []

    def test_missing_repo(self, action):
        """repoUrl without repo fails."""
        with pytest.raises(InvalidInputError, match="missing repo"):
            action.handler(make_context(repoUrl="hosted.bitbucket.com?project=project"))

    def test_missing_both_reports_both(self, action):
        """repoUrl without project and repo names both."""
        with pytest.raises(InvalidInputError) as exc_info:
            action.handler(make_context(repoUrl="hosted.bitbucket.com"))
        assert "missing project, missing repo" in str(exc_info.value)

    def test_error_records_parsing_stage(self, action):
        """Parse failures are tagged with the parsing stage."""
        with pytest.raises(InvalidInputError) as exc_info:
            action.handler(make_context(repoUrl="hosted.bitbucket.com?repo=repo"))
        assert exc_info.value.stage == "parsing"

    def test_invalid_visibility(self, action):
        """Unknown visibility is invalid input."""
        with pytest.raises(InvalidInputError, match="repoVisibility"):
            action.handler(make_context(repoVisibility="internal"))

    def test_source_path_outside_workspace(self, action, server, git):
        """sourcePath escaping the workspace fails before the repository is created."""
        with pytest.raises(InvalidInputError, match="outside its parent"):
            action.handler(make_context(sourcePath="../elsewhere"))
        assert server.requests == []
        git.init_repo_and_push.assert_not_called()


class TestIntegrationAndCredentials:
    """Tests for integration lookup and token selection."""

    def test_no_integration_for_host(self, action):
        """Unknown host fails with a configuration error."""
        ctx = make_context(repoUrl="missing.com?project=project&repo=repo")
        with pytest.raises(ConfigurationError, match="No matching integration configuration"):
            action.handler(ctx)

    def test_subdomain_does_not_match(self, action):
        """Host matching is exact."""
        ctx = make_context(repoUrl="sub.hosted.bitbucket.com?project=project&repo=repo")
        with pytest.raises(ConfigurationError):
            action.handler(ctx)

    def test_no_token_anywhere(self, action):
        """Integration without token and no input token fails."""
        ctx = make_context(repoUrl="notoken.bitbucket.com?project=project&repo=repo")
        with pytest.raises(
            AuthenticationError,
            match="Authorization has not been provided for notoken.bitbucket.com",
        ) as exc_info:
            action.handler(ctx)
        assert exc_info.value.stage == "authenticating"

    def test_input_token_used_when_integration_has_none(self, action, server):
        """A token supplied with the input authenticates the creation call."""
        ctx = make_context(
            repoUrl="notoken.bitbucket.com?project=project&repo=repo",
            token="user-token",
        )
        action.handler(ctx)

        (create,) = server.requests_to("POST")
        assert str(create.url) == "https://notoken.bitbucket.com/rest/api/1.0/projects/project/repos"
        assert create.headers["Authorization"] == "Bearer user-token"
        assert json.loads(create.content) == {"public": False, "name": "repo"}

    def test_input_token_wins_over_integration_token(self, action, server, git):
        """The per-call token takes precedence over the stored one."""
        action.handler(make_context(token="override"))

        (create,) = server.requests_to("POST")
        assert create.headers["Authorization"] == "Bearer override"
        assert git.init_repo_and_push.call_args.kwargs["auth"] == GitAuth(
            username="x-token-auth", password="override"
        )

    def test_secret_token_used_when_input_has_none(self, integrations, server, git):
        """A token in the secret store stands in for the input token."""
        action = PublishBitbucketServerAction(integrations, git=git, transport=server.transport)
        ctx = make_context(repoUrl="notoken.bitbucket.com?project=project&repo=repo")
        ctx.secrets = {"token": "secret-token"}

        action.handler(ctx)

        (create,) = server.requests_to("POST")
        assert create.headers["Authorization"] == "Bearer secret-token"


class TestRepositoryCreation:
    """Tests for the creation request and its response handling."""

    def test_calls_create_api(self, action, server):
        """Creation call hits the project endpoint with bearer auth and body."""
        action.handler(make_context())

        (create,) = server.requests_to("POST")
        assert str(create.url) == CREATE_URL
        assert create.headers["Authorization"] == "Bearer thing"
        assert json.loads(create.content) == {"public": False, "name": "repo"}

    def test_public_visibility(self, action, server):
        """public visibility sets public=true."""
        action.handler(make_context(repoVisibility="public"))

        (create,) = server.requests_to("POST")
        assert json.loads(create.content)["public"] is True

    def test_description_included(self, action, server):
        """A description is sent with the creation body."""
        action.handler(make_context(description="My service"))

        (create,) = server.requests_to("POST")
        assert json.loads(create.content)["description"] == "My service"

    def test_creation_failure_aborts(self, integrations, git):
        """A non-2xx creation response fails with status and body, no push."""
        server = FakeServer(create_status=409, create_body={"errors": ["exists"]})
        action = PublishBitbucketServerAction(integrations, git=git, transport=server.transport)
        ctx = make_context()

        with pytest.raises(RemoteError) as exc_info:
            action.handler(ctx)

        assert exc_info.value.status_code == 409
        assert "exists" in str(exc_info.value)
        assert exc_info.value.stage == "creating"
        git.init_repo_and_push.assert_not_called()
        ctx.output.assert_not_called()
        assert len(server.requests_to("POST")) == 1

    def test_missing_http_clone_link(self, integrations, git):
        """A response without an http clone link is a remote error, not a crash."""
        body = {
            "links": {
                "self": [{"href": BROWSE_URL}],
                "clone": [{"name": "ssh", "href": "ssh://git@bitbucket.mycompany.com/project/repo.git"}],
            }
        }
        server = FakeServer(create_body=body)
        action = PublishBitbucketServerAction(integrations, git=git, transport=server.transport)

        with pytest.raises(RemoteError, match="no http clone link"):
            action.handler(make_context())
        git.init_repo_and_push.assert_not_called()

    def test_transport_failure(self, integrations, git):
        """A connection failure surfaces as a remote error."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        action = PublishBitbucketServerAction(
            integrations, git=git, transport=httpx.MockTransport(refuse)
        )
        with pytest.raises(RemoteError, match="connection refused"):
            action.handler(make_context())


class TestLfs:
    """Tests for enabling LFS on hosted Bitbucket."""

    def test_enables_lfs_when_requested(self, action, server):
        """LFS toggle is called with the same bearer token."""
        action.handler(make_context(enableLFS=True))

        (put,) = server.requests_to("PUT")
        assert str(put.url) == LFS_URL
        assert put.headers["Authorization"] == "Bearer thing"

    def test_lfs_not_called_by_default(self, action, server):
        """No LFS call unless requested."""
        action.handler(make_context())
        assert server.requests_to("PUT") == []

    def test_lfs_failure_aborts_before_push(self, integrations, git):
        """Failed LFS toggle fails the action; no push, no outputs."""
        server = FakeServer(lfs_status=500)
        action = PublishBitbucketServerAction(integrations, git=git, transport=server.transport)
        ctx = make_context(enableLFS=True)

        with pytest.raises(RemoteError, match="Failed to enable LFS") as exc_info:
            action.handler(ctx)

        assert exc_info.value.stage == "enabling_lfs"
        git.init_repo_and_push.assert_not_called()
        ctx.output.assert_not_called()
        # The repository is left in place: no delete request was made
        assert [r.method for r in server.requests] == ["POST", "PUT"]

    def test_lfs_runs_before_push(self, integrations):
        """LFS is finalized before the push starts."""
        order: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            order.append(request.method)
            if request.method == "POST":
                return httpx.Response(201, json=REPO_CREATION_RESPONSE)
            return httpx.Response(204)

        git = MagicMock()
        git.init_repo_and_push.side_effect = lambda **kwargs: order.append("push")
        action = PublishBitbucketServerAction(
            integrations, git=git, transport=httpx.MockTransport(handler)
        )

        action.handler(make_context(enableLFS=True))

        assert order == ["POST", "PUT", "push"]


class TestPush:
    """Tests for the hand-off to the git collaborator."""

    def test_push_with_defaults(self, action, git):
        """Push uses the clone URL, master and the token auth."""
        ctx = make_context()
        action.handler(ctx)

        git.init_repo_and_push.assert_called_once_with(
            dir=Path("wsp"),
            remote_url=CLONE_URL,
            default_branch="master",
            auth=GitAuth(username="x-token-auth", password="thing"),
            logger=ctx.logger,
            git_author_info=GitAuthorInfo(),
        )

    def test_push_with_default_branch(self, action, git):
        """defaultBranch input is passed through."""
        action.handler(make_context(defaultBranch="main"))

        assert git.init_repo_and_push.call_args.kwargs["default_branch"] == "main"

    def test_push_with_configured_default_author(self, integrations, server, git):
        """Configured default author reaches the collaborator."""
        defaults = ScaffolderDefaults.model_validate(
            {"defaultAuthor": {"name": "Test", "email": "example@example.com"}}
        )
        action = PublishBitbucketServerAction(
            integrations, defaults=defaults, git=git, transport=server.transport
        )

        action.handler(make_context())

        kwargs = git.init_repo_and_push.call_args.kwargs
        assert kwargs["git_author_info"] == GitAuthorInfo(name="Test", email="example@example.com")
        assert "commit_message" not in kwargs

    def test_push_with_configured_commit_message(self, integrations, server, git):
        """Configured default commit message reaches the collaborator."""
        defaults = ScaffolderDefaults.model_validate({"defaultCommitMessage": "Test commit message"})
        action = PublishBitbucketServerAction(
            integrations, defaults=defaults, git=git, transport=server.transport
        )

        action.handler(make_context())

        kwargs = git.init_repo_and_push.call_args.kwargs
        assert kwargs["commit_message"] == "Test commit message"
        assert kwargs["git_author_info"] == GitAuthorInfo(name=None, email=None)

    def test_input_overrides_configured_defaults(self, integrations, server, git):
        """Author and message from the input win over configuration."""
        defaults = ScaffolderDefaults.model_validate(
            {
                "defaultAuthor": {"name": "Config", "email": "config@example.com"},
                "defaultCommitMessage": "from config",
            }
        )
        action = PublishBitbucketServerAction(
            integrations, defaults=defaults, git=git, transport=server.transport
        )

        action.handler(
            make_context(
                gitAuthorName="Input",
                gitAuthorEmail="input@example.com",
                gitCommitMessage="from input",
            )
        )

        kwargs = git.init_repo_and_push.call_args.kwargs
        assert kwargs["git_author_info"] == GitAuthorInfo(name="Input", email="input@example.com")
        assert kwargs["commit_message"] == "from input"

    def test_push_source_path(self, action, git, tmp_path):
        """sourcePath selects a subdirectory of the workspace."""
        (tmp_path / "app").mkdir()
        ctx = make_context(sourcePath="app")
        ctx.workspace_path = tmp_path

        action.handler(ctx)

        assert git.init_repo_and_push.call_args.kwargs["dir"] == (tmp_path / "app").resolve()

    def test_string_workspace_with_shell_git(self, integrations, server, tmp_path):
        """A workspace given as a string is pushed by the shell git client."""
        action = PublishBitbucketServerAction(
            integrations, git=ShellGitClient(), transport=server.transport
        )
        ctx = ActionContext(
            input={"repoUrl": "hosted.bitbucket.com?project=project&repo=repo"},
            workspace_path=str(tmp_path),
            output=MagicMock(),
        )

        with patch("subprocess.run", return_value=MagicMock()) as mock_run:
            action.handler(ctx)

        assert ctx.workspace_path == tmp_path
        assert mock_run.call_args_list[0].kwargs["cwd"] == str(tmp_path)
        assert mock_run.call_args.args[0][-3:] == [
            "push",
            "origin",
            "refs/heads/master:refs/heads/master",
        ]
        ctx.output.assert_any_call("remoteUrl", CLONE_URL)

    def test_string_workspace_with_source_path(self, integrations, server, git, tmp_path):
        """sourcePath joins onto a string workspace."""
        (tmp_path / "app").mkdir()
        action = PublishBitbucketServerAction(integrations, git=git, transport=server.transport)
        ctx = ActionContext(
            input={
                "repoUrl": "hosted.bitbucket.com?project=project&repo=repo",
                "sourcePath": "app",
            },
            workspace_path=str(tmp_path),
            output=MagicMock(),
        )

        action.handler(ctx)

        assert git.init_repo_and_push.call_args.kwargs["dir"] == (tmp_path / "app").resolve()

    def test_push_error_propagates_unchanged(self, action, git):
        """Errors from the collaborator are re-raised as-is."""
        failure = PushError("remote rejected")
        git.init_repo_and_push.side_effect = failure
        ctx = make_context()

        with pytest.raises(PushError) as exc_info:
            action.handler(ctx)

        assert exc_info.value is failure
        assert exc_info.value.stage == "pushing"
        ctx.output.assert_not_called()

    def test_interrupt_propagates_without_outputs(self, action, git):
        """Cancellation during the push aborts without emitting outputs."""
        git.init_repo_and_push.side_effect = KeyboardInterrupt()
        ctx = make_context()

        with pytest.raises(KeyboardInterrupt):
            action.handler(ctx)
        ctx.output.assert_not_called()


class TestOutputs:
    """Tests for emitted outputs."""

    def test_outputs_urls(self, action):
        """Both outputs are emitted once with the server's URLs."""
        ctx = make_context()
        action.handler(ctx)

        assert ctx.output.call_args_list == [
            call("remoteUrl", CLONE_URL),
            call("repoContentsUrl", BROWSE_URL),
        ]

    def test_outputs_with_default_branch(self, action):
        """Outputs do not depend on the branch."""
        ctx = make_context(defaultBranch="main")
        action.handler(ctx)

        ctx.output.assert_any_call("remoteUrl", CLONE_URL)
        ctx.output.assert_any_call("repoContentsUrl", BROWSE_URL)
        assert ctx.output.call_count == 2

    def test_first_http_clone_link_wins(self, integrations, git):
        """With several clone links the first http one is used."""
        body = {
            "links": {
                "self": [{"href": BROWSE_URL}, {"href": "https://other/self"}],
                "clone": [
                    {"name": "ssh", "href": "ssh://git@bitbucket.mycompany.com:7999/project/repo.git"},
                    {"name": "http", "href": CLONE_URL},
                    {"name": "http", "href": "https://mirror/scm/project/repo"},
                ],
            }
        }
        server = FakeServer(create_body=body)
        action = PublishBitbucketServerAction(integrations, git=git, transport=server.transport)
        ctx = make_context()

        action.handler(ctx)

        ctx.output.assert_any_call("remoteUrl", CLONE_URL)
        ctx.output.assert_any_call("repoContentsUrl", BROWSE_URL)

    def test_repeated_invocations_are_independent(self, action, server):
        """The same input twice creates twice; nothing is deduplicated."""
        first = make_context()
        second = make_context()

        action.handler(first)
        action.handler(second)

        assert len(server.requests_to("POST")) == 2
        assert first.output.call_count == 2
        assert second.output.call_count == 2
