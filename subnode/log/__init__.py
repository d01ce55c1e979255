"""
Logging module for the subnode manager.
This module provides the console and audit-file logging setup.
"""

from .setup import setup_logging

__all__ = ["setup_logging"]
