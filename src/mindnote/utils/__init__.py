"""Shared utilities."""

from .logging import LOG_FILE_NAME, log_dir_for, setup_logging

__all__ = ["LOG_FILE_NAME", "log_dir_for", "setup_logging"]
