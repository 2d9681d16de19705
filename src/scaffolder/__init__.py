"""Publish scaffolded template workspaces to Bitbucket Server."""

__version__ = "0.1.0"
