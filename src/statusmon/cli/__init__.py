"""Command line interface for statusmon."""

from .main import cli

__all__ = ["cli"]
