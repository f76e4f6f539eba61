"""Member graph model and the per-render ledger."""

from .schemas import MemberNode, TypeKind
from .ledger import EntryState, Ledger, LedgerEntry

__all__ = [
    "MemberNode",
    "TypeKind",
    "EntryState",
    "Ledger",
    "LedgerEntry",
]
