"""Logging utilities for KartLab."""

from kartlab.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
