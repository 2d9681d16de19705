"""Bitbucket Server API access."""

from .client import BitbucketServerClient

__all__ = ["BitbucketServerClient"]
