"""Holder for the live runtime configuration."""

import logging
from dataclasses import replace

from starcounter.config import CONFIG_KEY, StarConfig, settings
from starcounter.services.store import KeyValueStore, get_store

logger = logging.getLogger(__name__)


class ConfigHolder:
    """Owns the current StarConfig and persists updates.

    Consumers read ``current`` on every operation instead of keeping their
    own copy, so a saved update applies to the next fetch or cache access.
    """

    def __init__(self, store: KeyValueStore, defaults: StarConfig | None = None):
        self.store = store
        self.defaults = defaults or StarConfig.from_settings(settings)
        saved = store.get(CONFIG_KEY)
        if isinstance(saved, dict):
            try:
                self._current = StarConfig.from_dict(saved, self.defaults)
            except (TypeError, ValueError) as e:
                logger.warning(f"Saved configuration is invalid, using defaults: {e}")
                self._current = self.defaults
        else:
            self._current = self.defaults

    @property
    def current(self) -> StarConfig:
        return self._current

    def update(self, **changes) -> StarConfig:
        """Apply a partial update and return the new configuration.

        Raises ValueError (or TypeError for unknown fields) without touching
        the live configuration when the result would be invalid.
        """
        new_config = replace(self._current, **changes)
        self.store.set(CONFIG_KEY, new_config.to_dict())
        self._current = new_config
        logger.info(f"Configuration updated: {sorted(changes)}")
        return new_config


# Global holder instance
_holder: ConfigHolder | None = None


def get_config_holder() -> ConfigHolder:
    """Get the global configuration holder."""
    global _holder
    if _holder is None:
        _holder = ConfigHolder(get_store())
    return _holder
