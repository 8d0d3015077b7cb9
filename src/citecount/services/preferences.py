"""
Preference lookups.

The resolver reads the NASA ADS token and the Semantic Scholar delay
override through a ``PreferenceStore`` on every request, never caching
them, so a changed preference takes effect on the next lookup.
"""

from typing import Any, Protocol

from citecount.config import CitecountSettings, get_settings

# Preference key -> settings attribute
PREFERENCE_FIELDS = {
    'nasaadsApiKey': 'nasaads_api_key',
    'semanticscholarDelay': 'semanticscholar_delay_seconds',
    'autoretrieve': 'autoretrieve',
}


class PreferenceStore(Protocol):
    """Read-only, process-wide preference lookup."""

    def get(self, key: str) -> Any: ...


class SettingsPreferenceStore:
    """Preferences backed by ``CitecountSettings`` (environment / .env)."""

    def __init__(self, settings: CitecountSettings | None = None) -> None:
        self._settings = settings

    @property
    def settings(self) -> CitecountSettings:
        return self._settings or get_settings()

    def get(self, key: str) -> Any:
        attribute = PREFERENCE_FIELDS.get(key)
        if attribute is None:
            return None
        return getattr(self.settings, attribute)


class DictPreferenceStore:
    """Preferences held in a plain dictionary."""

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self.values = dict(values or {})

    def get(self, key: str) -> Any:
        return self.values.get(key)
