"""Per-render ledger of type expansion state.

Each type name is UNSEEN, IN_PROGRESS (an ancestor is expanding it) or
FINISHED with the expansion that was produced for it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class EntryState(Enum):
    UNSEEN = "unseen"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class LedgerEntry:
    state: EntryState
    output: Any = None


_UNSEEN = LedgerEntry(EntryState.UNSEEN)
_IN_PROGRESS = LedgerEntry(EntryState.IN_PROGRESS)


class Ledger:
    """Tracks which type names are being expanded and caches finished expansions."""

    def __init__(self):
        self._entries: Dict[str, LedgerEntry] = {}

    def lookup(self, type_name: str) -> LedgerEntry:
        return self._entries.get(type_name, _UNSEEN)

    def begin(self, type_name: str) -> None:
        """Mark a type as being expanded by the current path."""
        if self.lookup(type_name).state is not EntryState.UNSEEN:
            raise RuntimeError(f"Type '{type_name}' was already entered in this ledger")
        self._entries[type_name] = _IN_PROGRESS

    def finish(self, type_name: str, output: Any) -> None:
        """Record the finished expansion of a type."""
        if self.lookup(type_name).state is not EntryState.IN_PROGRESS:
            raise RuntimeError(f"Type '{type_name}' was finished without being entered")
        self._entries[type_name] = LedgerEntry(EntryState.FINISHED, output)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._entries
