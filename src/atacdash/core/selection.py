"""
Per-sample visibility flags: the single source of truth for "is this sample shown".
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from atacdash.core.events import EventBus, SelectionChanged
from atacdash.core.exceptions import UnknownSampleError


class SelectionState:
    """
    Visibility flag for every sample in the loaded dataset.

    The set of samples is fixed at construction; every entry starts visible.
    Each mutating call publishes exactly one ``SelectionChanged`` event, even
    when it changes many entries.
    """

    def __init__(self, sample_ids: Iterable[str], bus: EventBus | None = None) -> None:
        self._visible: dict[str, bool] = {sample: True for sample in sorted(set(sample_ids))}
        self._bus = bus

    def __getitem__(self, sample_id: str) -> bool:
        try:
            return self._visible[sample_id]
        except KeyError:
            raise UnknownSampleError(sample_id, list(self._visible)) from None

    def __contains__(self, sample_id: object) -> bool:
        return sample_id in self._visible

    def __iter__(self) -> Iterator[str]:
        return iter(self._visible)

    def __len__(self) -> int:
        return len(self._visible)

    def is_visible(self, sample_id: str) -> bool:
        """Visibility of a sample; samples outside the dataset are never shown."""
        return self._visible.get(sample_id, False)

    def as_dict(self) -> dict[str, bool]:
        return dict(self._visible)

    @property
    def hidden(self) -> list[str]:
        return [sample for sample, visible in self._visible.items() if not visible]

    def toggle(self, sample_id: str) -> bool:
        """Flip one sample's visibility and return the new value."""
        if sample_id not in self._visible:
            raise UnknownSampleError(sample_id, list(self._visible))
        self._visible[sample_id] = not self._visible[sample_id]
        self._changed()
        return self._visible[sample_id]

    def select_all(self) -> None:
        self._set_all(True)

    def deselect_all(self) -> None:
        self._set_all(False)

    def _set_all(self, visible: bool) -> None:
        for sample_id in self._visible:
            self._visible[sample_id] = visible
        self._changed()

    def _changed(self) -> None:
        if self._bus is not None:
            self._bus.emit(SelectionChanged())
