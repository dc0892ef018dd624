"""Interest badge selection state.

The search form lets travellers toggle interest badges; the selected keys are
posted as one comma-separated field. ``InterestSelection`` owns that state:
mutations go through ``select``/``deselect``/``toggle`` and the serialised
form is always derived from the current set, never tracked separately.
"""
from __future__ import annotations

from typing import Dict, Iterable, List


class InterestSelection:
    def __init__(self, keys: Iterable[str] = ()) -> None:
        # dict keeps insertion order, which is the order badges were picked
        self._selected: Dict[str, None] = {}
        for key in keys:
            self.select(key)

    @classmethod
    def from_serialized(cls, text: str | None) -> "InterestSelection":
        if not text:
            return cls()
        return cls(text.split(","))

    @staticmethod
    def _normalise(key: str) -> str:
        return key.strip().lower()

    def select(self, key: str) -> bool:
        """Add ``key``; return True when the selection changed."""
        clean = self._normalise(key)
        if not clean or clean in self._selected:
            return False
        self._selected[clean] = None
        return True

    def deselect(self, key: str) -> bool:
        clean = self._normalise(key)
        if clean not in self._selected:
            return False
        del self._selected[clean]
        return True

    def toggle(self, key: str) -> bool:
        """Flip ``key`` and return whether it is selected afterwards."""
        if self.is_selected(key):
            self.deselect(key)
            return False
        return self.select(key)

    def is_selected(self, key: str) -> bool:
        return self._normalise(key) in self._selected

    @property
    def selected(self) -> List[str]:
        return list(self._selected)

    @property
    def serialized(self) -> str:
        return ",".join(self._selected)

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.is_selected(key)

    def __repr__(self) -> str:
        return f"InterestSelection({self.selected!r})"
