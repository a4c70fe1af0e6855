"""
Optional durable storage for table sort/search preferences.

Preferences are keyed by table identity. When no writable location is
available the dashboard falls back to a store that accepts and forgets
writes, so missing persistence never becomes an error.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

_PROBE_KEY = "__storage_test__"


class PreferenceStore(Protocol):
    """Key/value capability for per-table preferences."""

    def get(self, key: str) -> dict[str, Any] | None: ...

    def set(self, key: str, value: dict[str, Any]) -> None: ...

    def remove(self, key: str) -> None: ...


class NullPreferenceStore:
    """In-memory no-op store used when persistence is unavailable."""

    def get(self, key: str) -> dict[str, Any] | None:
        return None

    def set(self, key: str, value: dict[str, Any]) -> None:
        return None

    def remove(self, key: str) -> None:
        return None


class JsonFilePreferenceStore:
    """Preferences persisted as one JSON object keyed by table identity."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: dict[str, dict[str, Any]] = self._read()

    def _read(self) -> dict[str, dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, e)
            return {}
        return raw if isinstance(raw, dict) else {}

    def _write(self) -> None:
        self.path.write_text(json.dumps(self._data, indent=2, sort_keys=True), encoding="utf-8")

    def get(self, key: str) -> dict[str, Any] | None:
        value = self._data.get(key)
        return dict(value) if isinstance(value, dict) else None

    def set(self, key: str, value: dict[str, Any]) -> None:
        self._data[key] = dict(value)
        self._write()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._write()


def storage_available(path: Path) -> bool:
    """Probe whether ``path`` can be written, without disturbing existing data."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        probe = path.with_name(path.name + ".probe")
        probe.write_text(_PROBE_KEY, encoding="utf-8")
        probe.unlink()
    except OSError:
        return False
    return True


def open_preference_store(path: Path | None) -> PreferenceStore:
    """Return a file-backed store when possible, otherwise a no-op store."""
    if path is None:
        return NullPreferenceStore()
    if not storage_available(path):
        logger.info("Preferences location %s is not writable; preferences will not persist", path)
        return NullPreferenceStore()
    return JsonFilePreferenceStore(path)
