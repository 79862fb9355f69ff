"""Utility modules for gitlogjson."""

from gitlogjson.utils.config import Config
from gitlogjson.utils.logging import setup_logger

__all__ = ["Config", "setup_logger"]
