"""Theme preference state.

The chosen theme lives in a key-value storage (the browser's localStorage)
under ``site-theme``. ThemePreference is the single process-scoped holder of
the resolved value: it must be initialized with a storage before use.
"""

import logging
from enum import Enum
from typing import Dict, MutableMapping, Optional

from app.client.events import EventSource, Subscription

logger = logging.getLogger(__name__)

THEME_KEY = "site-theme"


class Theme(str, Enum):
    AUTO = "auto"
    LIGHT = "light"
    DARK = "dark"
    HIGH_CONTRAST = "high-contrast"


THEME_LABELS: Dict[Theme, str] = {
    Theme.AUTO: "端末に従う",
    Theme.LIGHT: "ライト",
    Theme.DARK: "ダーク",
    Theme.HIGH_CONTRAST: "ハイコントラスト",
}


class ThemePreference:
    """Process-scoped theme state with explicit initialization."""

    def __init__(self):
        self._storage: Optional[MutableMapping[str, str]] = None
        self._current: Theme = Theme.AUTO
        self._applied: Optional[str] = None

    @property
    def initialized(self) -> bool:
        return self._storage is not None

    def initialize(self, storage: MutableMapping[str, str]) -> Theme:
        """Bind a storage, read the stored theme and apply it.

        Unknown stored values fall back to ``auto``.
        """
        self._storage = storage
        stored = storage.get(THEME_KEY) or Theme.AUTO.value
        try:
            self._current = Theme(stored)
        except ValueError:
            logger.warning(f"Ignoring unknown stored theme {stored!r}")
            self._current = Theme.AUTO
        self.apply()
        return self._current

    @property
    def current(self) -> Theme:
        return self._current

    @property
    def applied_attribute(self) -> Optional[str]:
        """Value of the root ``data-theme`` attribute, None when following the OS."""
        return self._applied

    def set_theme(self, theme: str) -> Theme:
        if self._storage is None:
            raise RuntimeError("ThemePreference.initialize() must be called first")
        self._current = Theme(theme)
        self._storage[THEME_KEY] = self._current.value
        self.apply()
        return self._current

    def apply(self) -> Optional[str]:
        self._applied = None if self._current is Theme.AUTO else self._current.value
        return self._applied

    def watch_color_scheme(self, color_scheme_changes: EventSource) -> Subscription:
        """Re-apply on OS colour-scheme changes while following the OS."""
        def on_change(*_):
            if self._current is Theme.AUTO:
                self.apply()

        return color_scheme_changes.subscribe(on_change)


theme_preference = ThemePreference()
