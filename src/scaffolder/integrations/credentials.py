"""Selection of the token used for one publish."""

from ..errors import AuthenticationError
from ..models import ResolvedCredential
from .registry import ResolvedIntegration


def select_credential(token: str | None, integration: ResolvedIntegration) -> ResolvedCredential:
    """
    Choose the token for an invocation.

    A token passed with the invocation wins over the one stored in the
    integration config, so a user login token can stand in for a
    service token without reconfiguring the integration.

    Raises:
        AuthenticationError: If neither source provides a token.
    """
    chosen = token or integration.config.token
    if not chosen:
        raise AuthenticationError(
            f"Authorization has not been provided for {integration.host}. "
            "Please add either token to the Integrations config or a user login auth token"
        )
    return ResolvedCredential(token=chosen)
