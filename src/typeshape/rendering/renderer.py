"""Cycle-safe rendering of member graphs.

Walks a MemberNode tree depth-first in declaration order. A fresh Ledger keyed
by type name decides, for every node, whether to expand its type, reuse the
cached expansion, or emit a cycle placeholder. Each type is expanded at most
once per render, so rendering always terminates.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from typeshape.exceptions import MalformedGraphError
from typeshape.graph.ledger import EntryState, Ledger
from typeshape.graph.schemas import MemberNode
from typeshape.logging_config import logger
from typeshape.rendering.sinks import Sink


@dataclass
class _Frame:
    """A node whose type is being expanded, with the outputs of its members so far."""

    node: MemberNode
    children: Iterator[MemberNode]
    outputs: List[Any] = field(default_factory=list)


@dataclass
class RenderStats:
    """Counters for one render call."""

    expanded: int = 0
    reused: int = 0
    cycles: int = 0
    max_depth: int = 0


class CycleSafeRenderer:
    """Renders a member graph into a sink without re-expanding types."""

    def __init__(self):
        self.last_stats: Optional[RenderStats] = None

    def render(self, root: MemberNode, sink: Sink) -> str:
        """
        Render the graph rooted at `root` through `sink`.

        Args:
            root: Root node of a fully built member graph
            sink: Output formatting strategy

        Returns:
            The sink's final string

        Raises:
            ValueError: If root is None.
            MalformedGraphError: If a node has an empty type name.
        """
        if root is None:
            raise ValueError("render() requires a root MemberNode")

        ledger = Ledger()
        stats = RenderStats()
        stack: List[_Frame] = []
        result: List[Any] = []

        def emit(output: Any) -> None:
            if stack:
                stack[-1].outputs.append(output)
            else:
                result.append(output)

        def enter(node: MemberNode) -> None:
            self._check_node(node)
            stats.max_depth = max(stats.max_depth, len(stack))
            entry = ledger.lookup(node.type_name)

            if entry.state is EntryState.FINISHED:
                stats.reused += 1
                emit(sink.member(node, entry.output))
            elif entry.state is EntryState.IN_PROGRESS:
                # An ancestor is expanding this type: truncate, cache nothing
                stats.cycles += 1
                emit(sink.placeholder(node))
            else:
                ledger.begin(node.type_name)
                stack.append(_Frame(node, node.iter_children()))

        enter(root)
        while stack:
            frame = stack[-1]
            child = next(frame.children, None)
            if child is not None:
                enter(child)
                continue

            stack.pop()
            expansion = sink.expansion(frame.node, frame.outputs)
            ledger.finish(frame.node.type_name, expansion)
            stats.expanded += 1
            emit(sink.member(frame.node, expansion))

        self.last_stats = stats
        logger.debug(
            f"Rendered {root.type_name} with {type(sink).__name__}: "
            f"{stats.expanded} types expanded, {stats.reused} reused, "
            f"{stats.cycles} cycles truncated, depth {stats.max_depth}"
        )
        return sink.finalize(result[0])

    @staticmethod
    def _check_node(node: MemberNode) -> None:
        if node is None:
            raise MalformedGraphError("<missing>", "child entry is None")
        if not node.type_name:
            raise MalformedGraphError(node.name or "<root>", "member has an empty type name")
