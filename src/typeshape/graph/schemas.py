"""Data models for the member graph.

A MemberNode says "member `name` has type `type_name`, and that type has
members `children`". The graph is a finite tree of nodes, but grouped by
type name it may be cyclic.
"""

from enum import Enum
from typing import Iterator, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class TypeKind(str, Enum):
    """Coarse classification of a member type (display only)."""

    CLASS = "Class"
    STRUCT = "Struct"
    INTERFACE = "Interface"
    ENUM = "Enum"
    PRIMITIVE = "Primitive"
    COLLECTION = "Collection"
    OTHER = "Other"


class MemberNode(BaseModel):
    """One named member and the shape of its type."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Member identifier; the root uses its type's short name")
    type_name: str = Field(description="Canonical type name, the identity key for cycle detection")
    type_kind: TypeKind = Field(TypeKind.OTHER, description="Type classification")
    children: Optional[Tuple["MemberNode", ...]] = Field(
        None,
        description="Members of the type in declaration order; None when not expanded"
    )

    @property
    def is_expanded(self) -> bool:
        """Whether the builder enumerated this type's members."""
        return self.children is not None

    def iter_children(self) -> Iterator["MemberNode"]:
        """Yield children in declaration order; absent and empty are the same."""
        if self.children:
            yield from self.children

    def count_nodes(self) -> int:
        """Count this node and every descendant node."""
        count = 0
        pending = [self]
        while pending:
            node = pending.pop()
            count += 1
            pending.extend(node.iter_children())
        return count


# Enable forward references for recursive models
MemberNode.model_rebuild()
