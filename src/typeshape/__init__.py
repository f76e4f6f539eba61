"""
typeshape - member hierarchy outlines for Python types

Renders every field and property of a type, recursively, as an indented
outline and as a JSON document, terminating on cyclic type graphs.
"""

__version__ = "0.3.0"

# Core exports
from typeshape.graph import MemberNode, TypeKind
from typeshape.rendering import (
    CycleSafeRenderer,
    MemberGraphFormatter,
    RenderOptions,
    StructuredDocumentSink,
    TextOutlineSink,
    parse_document,
)
from typeshape.introspection import BuildOptions, MemberGraphBuilder
from typeshape.locator import TargetLocator
from typeshape.command import ShowTypeCommand

__all__ = [
    "__version__",
    "MemberNode",
    "TypeKind",
    "CycleSafeRenderer",
    "MemberGraphFormatter",
    "RenderOptions",
    "StructuredDocumentSink",
    "TextOutlineSink",
    "parse_document",
    "BuildOptions",
    "MemberGraphBuilder",
    "TargetLocator",
    "ShowTypeCommand",
]
