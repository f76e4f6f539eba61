"""The "show type" command: locate a type, build its graph, render, present.

Each execute() call owns its member graph and its render ledgers; nothing is
shared between concurrent invocations.
"""

from typing import Optional, Protocol

from typeshape.introspection import MemberGraphBuilder
from typeshape.locator import TargetLocator
from typeshape.logging_config import logger
from typeshape.rendering import MemberGraphFormatter


NOT_A_TYPE_MESSAGE = "Invoke this command on a type name."


class Presenter(Protocol):
    def show(self, message: str, title: str = ...) -> None:
        ...


class ShowTypeCommand:
    """Orchestrates one "serialize this type" request."""

    def __init__(
        self,
        locator: TargetLocator,
        builder: MemberGraphBuilder,
        formatter: MemberGraphFormatter,
        presenter: Presenter,
    ):
        self.locator = locator
        self.builder = builder
        self.formatter = formatter
        self.presenter = presenter

    async def execute(self, target: str) -> Optional[str]:
        """
        Render the type a target points at and present it.

        Resolution is awaited and can be cancelled by the caller; building and
        rendering then run to completion synchronously.

        Returns:
            The presented message, or None when the target is not a type

        Raises:
            TargetResolutionError: If the target cannot be located or loaded.
        """
        resolved = await self.locator.resolve_async(target)
        if resolved is None:
            self.presenter.show(NOT_A_TYPE_MESSAGE)
            return None

        root = self.builder.build(resolved)
        message = self.formatter.format(root)
        logger.info(f"Rendered {root.type_name} ({root.count_nodes()} nodes)")
        self.presenter.show(message)
        return message
