"""Output sinks for the cycle-safe renderer.

A sink decides what a rendered node looks like. The renderer asks it for:

- ``expansion(node, child_outputs)``: the block of members of a type. Called
  once per distinct type name per render; the result is cached and reused for
  every later member of that type.
- ``member(node, expansion)``: a node's own output around an expansion.
- ``placeholder(node)``: the output for a member whose type is already being
  expanded by an ancestor.
- ``finalize(output)``: the root output turned into the final string.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from typeshape.graph.schemas import MemberNode, TypeKind
from typeshape.rendering.schemas import RenderOptions


class Sink(ABC):
    """Formatting strategy consumed by CycleSafeRenderer."""

    @abstractmethod
    def expansion(self, node: MemberNode, child_outputs: Sequence[Any]) -> Any:
        """Combine the outputs of a type's members into its expansion."""

    @abstractmethod
    def member(self, node: MemberNode, expansion: Any) -> Any:
        """Render a node given the (possibly cached) expansion of its type."""

    @abstractmethod
    def placeholder(self, node: MemberNode) -> Any:
        """Render a node whose type is already in progress higher up."""

    @abstractmethod
    def finalize(self, output: Any) -> str:
        """Turn the root node's output into the final string."""


# Outline output is a list of (relative depth, text) pairs so a cached
# expansion can be re-indented under any parent.
OutlineLines = List[Tuple[int, str]]


class TextOutlineSink(Sink):
    """Indented outline, one `<type_name> (<type_kind>) <name>` line per node."""

    CYCLE_TAG = "cycle"

    def __init__(self, options: Optional[RenderOptions] = None):
        self.options = options or RenderOptions()

    def expansion(self, node: MemberNode, child_outputs: Sequence[OutlineLines]) -> OutlineLines:
        return [(depth + 1, text) for lines in child_outputs for depth, text in lines]

    def member(self, node: MemberNode, expansion: OutlineLines) -> OutlineLines:
        return [(0, self._format_line(node.type_name, node.type_kind.value, node.name))] + expansion

    def placeholder(self, node: MemberNode) -> OutlineLines:
        if not self.options.cycle_marker:
            return []
        return [(0, self._format_line(node.type_name, self.CYCLE_TAG, node.name))]

    def finalize(self, output: OutlineLines) -> str:
        indent = " " * self.options.indent_size
        return "".join(f"{indent * depth}{text}\n" for depth, text in output)

    @staticmethod
    def _format_line(type_name: str, tag: str, name: str) -> str:
        return f"{type_name} ({tag}) {name}".rstrip()


class StructuredDocumentSink(Sink):
    """JSON document isomorphic to the node tree."""

    def __init__(self, options: Optional[RenderOptions] = None):
        self.options = options or RenderOptions()

    def expansion(self, node: MemberNode, child_outputs: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return list(child_outputs)

    def member(self, node: MemberNode, expansion: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "name": node.name,
            "typeName": node.type_name,
            "typeKind": node.type_kind.value,
            "children": expansion,
        }

    def placeholder(self, node: MemberNode) -> Dict[str, Any]:
        # Stub: reference not expanded here
        return {"typeName": node.type_name}

    def finalize(self, output: Dict[str, Any]) -> str:
        if self.options.pretty_json:
            return json.dumps(output, indent=2, ensure_ascii=False)
        return json.dumps(output, separators=(",", ":"), ensure_ascii=False)


def parse_document(text: str) -> MemberNode:
    """
    Read a structured document back into a member graph.

    Cycle stubs (objects without a "children" key) become unexpanded nodes
    with an empty name and kind Other, since the stub does not carry them.

    Raises:
        ValueError: If the text is not a document produced by StructuredDocumentSink.
    """
    return _node_from_dict(json.loads(text))


def _node_from_dict(data: Any) -> MemberNode:
    if not isinstance(data, dict) or "typeName" not in data:
        raise ValueError(f"Expected a member object with 'typeName', got: {data!r}")

    if "children" not in data:
        return MemberNode(name="", type_name=data["typeName"], type_kind=TypeKind.OTHER)
    if not isinstance(data["children"], list):
        raise ValueError(f"Expected 'children' to be a list, got: {data['children']!r}")

    return MemberNode(
        name=data.get("name", ""),
        type_name=data["typeName"],
        type_kind=TypeKind(data.get("typeKind", TypeKind.OTHER.value)),
        children=tuple(_node_from_dict(child) for child in data["children"]),
    )
