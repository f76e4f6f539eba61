"""Locating the type under a source position or a module path."""

from .position import SourcePosition, find_name_at
from .resolver import TargetLocator, is_type_like

__all__ = [
    "SourcePosition",
    "find_name_at",
    "TargetLocator",
    "is_type_like",
]
