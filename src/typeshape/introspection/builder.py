"""Builds member graphs from Python type metadata.

Enumerates the members of a type (pydantic fields, dataclass fields,
NamedTuple fields, class annotations and annotated properties) and resolves
each member's declared type, recursively.
"""

import dataclasses
import functools
import inspect
import typing
from typing import Any, Dict, List, Optional, Set, Tuple, get_args

from pydantic import BaseModel

from typeshape.graph.schemas import MemberNode, TypeKind
from typeshape.logging_config import logger
from .kinds import (
    classify,
    element_slots,
    is_class_var,
    is_namedtuple,
    is_union,
    short_name,
    type_display_name,
    unwrap,
)
from .schemas import BuildOptions


# Classes whose own attributes are never reported as members
LIBRARY_MODULES = ("builtins", "typing", "typing_extensions", "abc", "enum", "pydantic")

Member = Tuple[str, Any]


@dataclasses.dataclass
class _BuildState:
    """Per-build bookkeeping shared by every node of one graph."""

    # type name -> children of its first full expansion
    expansions: Dict[str, Tuple[MemberNode, ...]] = dataclasses.field(default_factory=dict)
    # nodes left unexpanded by max_depth, by identity
    truncated: Dict[int, MemberNode] = dataclasses.field(default_factory=dict)


class MemberGraphBuilder:
    """Turns a Python type into a MemberNode graph."""

    def __init__(self, options: Optional[BuildOptions] = None):
        self.options = options or BuildOptions()

    def build(self, tp: Any, name: Optional[str] = None) -> MemberNode:
        """
        Build the member graph of a type.

        A member whose type is already being expanded by one of its ancestors
        is emitted unexpanded (children=None), which keeps the graph finite.
        A type cut off by max_depth in one place still carries the members it
        was given anywhere else in the graph, so every expanded occurrence of
        a type has the same children.

        Args:
            tp: Class or type annotation to describe
            name: Root member name (defaults to the type's short name)

        Returns:
            Root MemberNode
        """
        state = _BuildState()
        root = self._build_node(name or short_name(tp), tp, (), 0, state)

        if state.truncated:
            root = self._fill_truncated(root, state)

        logger.debug(f"Built member graph for {root.type_name}: {root.count_nodes()} nodes")
        return root

    def _fill_truncated(self, root: MemberNode, state: "_BuildState") -> MemberNode:
        """
        Replace depth-truncated nodes with their type's expansion from elsewhere.

        A type being filled is not filled again below itself; that occurrence
        stays unexpanded, as a cycle.
        """
        filled: Dict[str, Tuple[MemberNode, ...]] = {}
        in_progress: Set[str] = set()

        def fill(node: MemberNode) -> MemberNode:
            type_name = node.type_name
            if type_name not in state.expansions:
                return node
            if node.children is None and id(node) not in state.truncated:
                return node
            if type_name in in_progress:
                return MemberNode(name=node.name, type_name=type_name, type_kind=node.type_kind)

            if type_name not in filled:
                in_progress.add(type_name)
                filled[type_name] = tuple(fill(child) for child in state.expansions[type_name])
                in_progress.discard(type_name)
            return MemberNode(
                name=node.name, type_name=type_name, type_kind=node.type_kind, children=filled[type_name]
            )

        filled_root = fill(root)
        logger.debug(f"Filled {len(state.truncated)} depth-truncated members of {root.type_name}")
        return filled_root

    def _build_node(
        self, name: str, tp: Any, path: Tuple[str, ...], depth: int, state: "_BuildState"
    ) -> MemberNode:
        tp = unwrap(tp)
        type_name = type_display_name(tp)
        kind = classify(tp)

        if type_name in path:
            return MemberNode(name=name, type_name=type_name, type_kind=kind)

        if type_name in state.expansions:
            return MemberNode(name=name, type_name=type_name, type_kind=kind, children=state.expansions[type_name])

        if self.options.max_depth is not None and depth >= self.options.max_depth:
            logger.debug(f"Max depth {self.options.max_depth} reached at {name}: {type_name}")
            node = MemberNode(name=name, type_name=type_name, type_kind=kind)
            state.truncated[id(node)] = node
            return node

        members = self._members(tp, kind)
        if members is None:
            return MemberNode(name=name, type_name=type_name, type_kind=kind)

        inner_path = path + (type_name,)
        children = tuple(
            self._build_node(member_name, member_type, inner_path, depth + 1, state)
            for member_name, member_type in members
        )
        state.expansions[type_name] = children
        return MemberNode(name=name, type_name=type_name, type_kind=kind, children=children)

    def _members(self, tp: Any, kind: TypeKind) -> Optional[List[Member]]:
        """Members of a type, or None when the kind is never expanded."""
        if kind in (TypeKind.PRIMITIVE, TypeKind.ENUM):
            return None
        if kind is TypeKind.COLLECTION:
            return element_slots(tp)
        if kind is TypeKind.OTHER:
            if is_union(tp):
                return [("variant", arg) for arg in get_args(tp)]
            return None

        cls = typing.get_origin(tp) or tp
        if not isinstance(cls, type):
            return None
        return self._class_members(cls)

    def _class_members(self, cls: type) -> List[Member]:
        if issubclass(cls, BaseModel):
            # Pydantic has already resolved the annotations
            members = [(name, field.annotation) for name, field in cls.model_fields.items()]
        elif dataclasses.is_dataclass(cls):
            hints = self._resolve_hints(cls)
            members = [(f.name, hints.get(f.name, f.type)) for f in dataclasses.fields(cls)]
        elif is_namedtuple(cls):
            hints = self._resolve_hints(cls)
            members = [(name, hints.get(name, typing.Any)) for name in cls._fields]
        else:
            members = list(self._resolve_hints(cls).items())

        members = [
            (name, member_type)
            for name, member_type in members
            if not is_class_var(member_type) and self._is_visible(name)
        ]

        if self.options.include_properties:
            known = {name for name, _ in members}
            members.extend(
                (name, member_type)
                for name, member_type in self._property_members(cls).items()
                if name not in known and self._is_visible(name)
            )

        return members

    def _is_visible(self, name: str) -> bool:
        return self.options.include_private or not name.startswith("_")

    def _resolve_hints(self, cls: type) -> Dict[str, Any]:
        """
        Resolved annotations of a class and its bases.

        Falls back to the raw annotations when forward references cannot be
        resolved; unresolved names then show up as Other members.
        """
        try:
            return typing.get_type_hints(cls)
        except (NameError, TypeError, AttributeError) as e:
            logger.warning(f"Could not resolve annotations of {type_display_name(cls)}: {e}. Using raw annotations.")

        raw: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            raw.update(inspect.get_annotations(klass))
        return raw

    def _property_members(self, cls: type) -> Dict[str, Any]:
        """Annotated properties and cached properties, base classes first."""
        found: Dict[str, Any] = {}

        for klass in reversed(cls.__mro__):
            if klass.__module__.split(".")[0] in LIBRARY_MODULES:
                continue
            for attr_name, attr in vars(klass).items():
                if isinstance(attr, property):
                    getter = attr.fget
                elif isinstance(attr, functools.cached_property):
                    getter = attr.func
                else:
                    continue
                if getter is None:
                    continue

                try:
                    return_type = typing.get_type_hints(getter).get("return")
                except (NameError, TypeError) as e:
                    logger.debug(f"Unresolved return type of {klass.__qualname__}.{attr_name}: {e}")
                    return_type = getattr(getter, "__annotations__", {}).get("return")

                if return_type is not None:
                    found[attr_name] = return_type

        return found
