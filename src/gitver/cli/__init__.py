"""CLI module."""

from gitver.cli.main import cli

__all__ = ["cli"]
