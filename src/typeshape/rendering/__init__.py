"""Cycle-safe rendering of member graphs into outlines and JSON documents."""

from .schemas import RenderOptions
from .renderer import CycleSafeRenderer, RenderStats
from .sinks import Sink, TextOutlineSink, StructuredDocumentSink, parse_document
from .formatter import MemberGraphFormatter

__all__ = [
    "RenderOptions",
    "CycleSafeRenderer",
    "RenderStats",
    "Sink",
    "TextOutlineSink",
    "StructuredDocumentSink",
    "parse_document",
    "MemberGraphFormatter",
]
