import asyncio
import typer
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from typeshape import __version__
from typeshape.cli.config import CLIConfig
from typeshape.cli.output import ConsolePresenter, RecordingPresenter
from typeshape.command import ShowTypeCommand
from typeshape.exceptions import ConfigError, TargetResolutionError, TypeShapeError
from typeshape.introspection import BuildOptions, MemberGraphBuilder
from typeshape.locator import TargetLocator
from typeshape.logging_config import logger, setup_logging
from typeshape.rendering import MemberGraphFormatter, RenderOptions, parse_document
from typeshape.user_config import UserConfig

app = typer.Typer(help="Render the member hierarchy of a Python type.")
err_console = Console(stderr=True)

EXIT_NOT_A_TYPE = 1
EXIT_ERROR = 2


@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: panels and colors (also via TYPESHAPE_HUMAN_MODE env var)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr."),
):
    """
    typeshape: outline and JSON views of a type's members.

    Machine mode is the default (plain output). Use --human/-H for panels.
    """
    CLIConfig.set_machine_mode(False if human else None)
    if verbose:
        setup_logging(level="DEBUG", suppress_console=False, force=True)
    elif CLIConfig.is_machine_mode():
        setup_logging(suppress_console=True, force=True)


def _fail(message: str, code: int = EXIT_ERROR) -> None:
    err_console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=code)


@app.command()
def show(
    target: str = typer.Argument(..., help="'package.module:QualName' or 'path/to/file.py:LINE[:COL]'."),
    output_format: Optional[str] = typer.Option(None, "--format", "-f", help="both, text or json."),
    pretty: Optional[bool] = typer.Option(None, "--pretty/--compact", help="Indent the JSON document."),
    cycle_marker: Optional[bool] = typer.Option(
        None, "--cycle-marker/--no-cycle-marker", help="Show cyclic members as '<type> (cycle) <name>'."
    ),
    indent: Optional[int] = typer.Option(None, "--indent", help="Spaces per outline level."),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", help="Stop expanding member types below this depth."),
    unlimited_depth: bool = typer.Option(
        False, "--unlimited-depth", help="Expand member types at any depth (overrides --max-depth)."
    ),
    include_private: Optional[bool] = typer.Option(
        None, "--include-private/--public-only", help="Include members starting with '_'."
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the result to a file.", dir_okay=False),
):
    """
    Show the member outline and JSON document of a type.

    Examples:
      typeshape show myapp.models:Order
      typeshape show src/myapp/models.py:42:15 --format text
      typeshape show myapp.models:Order --compact -o order.json --format json
    """
    config = UserConfig()
    try:
        render_options = RenderOptions.from_config(
            config,
            output_format=output_format,
            pretty_json=pretty,
            cycle_marker=cycle_marker,
            indent_size=indent,
        )
        build_options = BuildOptions.from_config(config, max_depth=max_depth, include_private=include_private)
        if unlimited_depth:
            build_options = build_options.model_copy(update={"max_depth": None})
    except ConfigError as e:
        _fail(str(e))

    presenter = RecordingPresenter() if output else ConsolePresenter()
    command = ShowTypeCommand(
        locator=TargetLocator(),
        builder=MemberGraphBuilder(build_options),
        formatter=MemberGraphFormatter(render_options),
        presenter=presenter,
    )

    try:
        message = asyncio.run(command.execute(target))
    except TargetResolutionError as e:
        _fail(str(e))
    except TypeShapeError as e:
        logger.error(f"Rendering failed: {e}")
        _fail(str(e))

    if message is None:
        if output:
            _fail(presenter.messages[-1][1], code=EXIT_NOT_A_TYPE)
        raise typer.Exit(code=EXIT_NOT_A_TYPE)

    if output:
        output.write_text(message + "\n", encoding="utf-8")
        typer.echo(f"Wrote {output}")


@app.command()
def outline(
    document: Path = typer.Argument(..., help="JSON document produced by 'show --format json'.", exists=True, dir_okay=False),
    cycle_marker: Optional[bool] = typer.Option(None, "--cycle-marker/--no-cycle-marker"),
    indent: Optional[int] = typer.Option(None, "--indent", help="Spaces per outline level."),
):
    """
    Print the text outline of a saved JSON document.
    """
    try:
        options = RenderOptions.from_config(UserConfig(), cycle_marker=cycle_marker, indent_size=indent)
    except ConfigError as e:
        _fail(str(e))

    try:
        root = parse_document(document.read_text(encoding="utf-8"))
    except ValueError as e:
        _fail(f"Not a typeshape document: {e}")

    try:
        rendered = MemberGraphFormatter(options).format_as_outline(root)
    except TypeShapeError as e:
        logger.error(f"Rendering {document} failed: {e}")
        _fail(str(e))

    ConsolePresenter().show(rendered.rstrip("\n"))


@app.command()
def version():
    """
    Prints the current version of typeshape.
    """
    typer.echo(f"typeshape v{__version__}")


if __name__ == "__main__":
    app()
