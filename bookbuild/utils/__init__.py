"""Shared utilities."""

from .logging import configure_from_cli, setup_logging

__all__ = ["configure_from_cli", "setup_logging"]
