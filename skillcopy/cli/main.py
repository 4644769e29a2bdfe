"""CLI entry point for skillcopy."""

from typing import Annotated, Optional

import typer
from rich.console import Console

from skillcopy import __version__
from skillcopy.cli.copy import COPY_CONTEXT_SETTINGS, copy_command

app = typer.Typer(
    name="skillcopy",
    help="Copy installed agent skills between projects by reinstalling them from their sources.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"skillcopy {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = None,
) -> None:
    """Copy installed agent skills between projects."""


app.command("copy", context_settings=COPY_CONTEXT_SETTINGS)(copy_command)


if __name__ == "__main__":
    app()
