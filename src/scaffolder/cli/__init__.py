"""Command implementations for the scaffolder CLI."""
