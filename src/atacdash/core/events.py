"""
In-process publish/subscribe channel shared by all views of a session.

Listeners register under a ``(kind, namespace)`` key, normally the chart or
legend identifier. Registering again under the same key replaces the old
listener, so a view that re-renders rebinds instead of accumulating handlers
bound to a previous render's data.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """The three event kinds carried by the bus."""

    SELECTION_CHANGED = "selection_changed"
    ITEM_HOVERED = "item_hovered"
    SAMPLE_HOVERED = "sample_hovered"


@dataclass(frozen=True)
class SelectionChanged:
    """Selection state changed; listeners re-read the state they need."""


@dataclass(frozen=True)
class ItemHovered:
    """An experiment's plot element was entered (id) or left (None)."""

    experiment_id: str | None


@dataclass(frozen=True)
class SampleHovered:
    """A legend entry was entered (sample) or left (None) in ``source`` chart."""

    sample_id: str | None
    source: str | None = None


Event = SelectionChanged | ItemHovered | SampleHovered
Listener = Callable[[Any], None]

_EVENT_KINDS: dict[type, EventKind] = {
    SelectionChanged: EventKind.SELECTION_CHANGED,
    ItemHovered: EventKind.ITEM_HOVERED,
    SampleHovered: EventKind.SAMPLE_HOVERED,
}


class EventBus:
    """Synchronous dispatcher; listeners run in registration order."""

    def __init__(self) -> None:
        self._listeners: dict[EventKind, dict[str, Listener]] = {kind: {} for kind in EventKind}
        self.emitted: dict[EventKind, int] = {kind: 0 for kind in EventKind}

    def on(self, kind: EventKind | str, namespace: str, listener: Listener) -> None:
        """Register ``listener`` for ``kind``, replacing any under the same namespace."""
        listeners = self._listeners[EventKind(kind)]
        # Re-registration moves the listener to the end, matching a fresh bind.
        listeners.pop(namespace, None)
        listeners[namespace] = listener

    def off(self, kind: EventKind | str, namespace: str) -> None:
        self._listeners[EventKind(kind)].pop(namespace, None)

    def off_namespace(self, namespace: str) -> None:
        """Remove every listener registered under ``namespace``."""
        for listeners in self._listeners.values():
            listeners.pop(namespace, None)

    def clear(self) -> None:
        for listeners in self._listeners.values():
            listeners.clear()

    def listeners(self, kind: EventKind | str) -> list[str]:
        """Namespaces subscribed to ``kind``."""
        return list(self._listeners[EventKind(kind)])

    def emit(self, event: Event) -> None:
        """Deliver ``event`` to every listener of its kind."""
        kind = _EVENT_KINDS[type(event)]
        self.emitted[kind] += 1
        # Snapshot: a listener may rebind listeners while we iterate.
        for namespace, listener in list(self._listeners[kind].items()):
            logger.debug("Dispatching %s to %s", kind.value, namespace)
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %s failed for %s", namespace, kind.value)
