import logging
from pathlib import Path
from typing import Any, Dict

import subnode.settings as default_settings

log = logging.getLogger(__name__)


class MergedSettings:
    """
    Merges the default settings with explicit keyword overrides.

    This class provides a unified, attribute-based access point for all
    manager configuration. It follows a clear precedence:
    1. Base values from `settings.py` (which already applied `.env` overrides).
    2. Keyword overrides passed to the constructor, for settings that exist.
    """

    def __init__(self, **overrides: Any) -> None:
        """Initializes the settings object by loading defaults and overrides."""
        self._load_defaults()
        self._apply_overrides(overrides)

    def _load_defaults(self) -> None:
        """
        Loads all uppercase attributes from the settings.py module as defaults.
        """
        for key in dir(default_settings):
            if key.isupper():
                setattr(self, key, getattr(default_settings, key))

    def _apply_overrides(self, overrides: Dict[str, Any]) -> None:
        """
        Applies keyword overrides on top of the defaults.

        Unknown keys are ignored so a typo cannot silently introduce a new
        setting that nothing reads.
        """
        for key, value in overrides.items():
            if not hasattr(self, key):
                log.warning(f"Override setting '{key}' not found in default settings. Ignoring.")
                continue

            # Coerce path strings back to Path objects if necessary
            if isinstance(getattr(self, key), Path) and isinstance(value, str):
                value = Path(value)
            setattr(self, key, value)
            log.debug(f"Overridden setting: {key} = {value}")

    def get(self, item: str, default: Any = None) -> Any:
        """Provides dictionary-like access to settings with a default value."""
        return getattr(self, item, default)


# Create a singleton instance to be imported by other modules
effective_settings = MergedSettings()
