"""Output formatting for member graphs (outline vs JSON vs both)."""

from typing import Optional

from typeshape.graph.schemas import MemberNode
from .renderer import CycleSafeRenderer
from .schemas import OutputFormat, RenderOptions
from .sinks import StructuredDocumentSink, TextOutlineSink


class MemberGraphFormatter:
    """Formats a member graph in the requested output formats."""

    def __init__(self, options: Optional[RenderOptions] = None, renderer: Optional[CycleSafeRenderer] = None):
        self.options = options or RenderOptions()
        self.renderer = renderer or CycleSafeRenderer()

    def format_as_outline(self, root: MemberNode) -> str:
        return self.renderer.render(root, TextOutlineSink(self.options))

    def format_as_document(self, root: MemberNode) -> str:
        return self.renderer.render(root, StructuredDocumentSink(self.options))

    def format(self, root: MemberNode, output_format: Optional[OutputFormat] = None) -> str:
        """
        Render the graph in one or both formats.

        Each rendering runs with its own ledger. With "both", the outline and
        the document are separated by a single blank line.
        """
        output_format = output_format or self.options.output_format

        if output_format == "text":
            return self.format_as_outline(root)
        if output_format == "json":
            return self.format_as_document(root)

        outline = self.format_as_outline(root)
        document = self.format_as_document(root)
        return f"{outline.rstrip()}\n\n{document}"
