"""Command line utilities for KartLab."""

from kartlab.cli.app import main, run_cli

__all__ = ["main", "run_cli"]
