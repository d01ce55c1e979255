"""
Local package for the subnode manager.

This package provides the effective configuration through the
`app_settings` singleton, along with the supervisor and console packages.
"""

from .config import effective_settings as app_settings

__all__ = ["app_settings"]
