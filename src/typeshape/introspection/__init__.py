"""Member graph construction from Python type metadata."""

from .schemas import BuildOptions
from .builder import MemberGraphBuilder
from .kinds import classify, type_display_name

__all__ = [
    "BuildOptions",
    "MemberGraphBuilder",
    "classify",
    "type_display_name",
]
