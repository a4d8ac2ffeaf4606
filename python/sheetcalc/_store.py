"""CellStore: raw text content of every populated cell."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from sheetcalc._utils import canonical_key

logger = logging.getLogger(__name__)


class CellStore:
    """Mapping of canonical cell key (``"B4"``) to raw content.

    Unpopulated cells are absent; writing ``""`` removes a cell.  Every
    mutation bumps :attr:`revision` so callers can tell when cached display
    values are stale.
    """

    __slots__ = ("_cells", "_revision")

    def __init__(self, cells: Mapping[str, str] | None = None) -> None:
        self._cells: dict[str, str] = {}
        self._revision = 0
        if cells:
            for key, raw in cells.items():
                self.set(key, raw)

    @property
    def revision(self) -> int:
        return self._revision

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, key: str) -> str:
        """Raw content of *key*, or ``""`` when the cell is empty."""
        return self._cells.get(canonical_key(key), "")

    def set(self, key: str, raw: str) -> None:
        """Replace the raw content of one cell."""
        if not isinstance(raw, str):
            raise TypeError(f"Raw cell content must be str, got {type(raw).__name__}")
        ref = canonical_key(key)
        if raw:
            self._cells[ref] = raw
        elif ref in self._cells:
            del self._cells[ref]
        else:
            return
        self._revision += 1
        logger.debug("Set %s (revision %d)", ref, self._revision)

    def snapshot(self) -> dict[str, str]:
        """Copy of the current contents, safe to evaluate while edits continue."""
        return dict(self._cells)

    def __getitem__(self, key: str) -> str:
        return self.get(key)

    def __setitem__(self, key: str, raw: str) -> None:
        self.set(key, raw)

    def __delitem__(self, key: str) -> None:
        ref = canonical_key(key)
        if ref not in self._cells:
            raise KeyError(ref)
        self.set(ref, "")

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        try:
            return canonical_key(key) in self._cells
        except ValueError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"<CellStore cells={len(self._cells)} revision={self._revision}>"
