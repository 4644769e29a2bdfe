"""Copy subcommand for skillcopy."""

from typing import Annotated, List, Optional

import typer
from rich.console import Console

from skillcopy.copier import parse_copy_options, run_copy
from skillcopy.exceptions import SkillCopyError

console = Console()

# --skill takes a variable number of values, so it is left in the argument
# list for parse_copy_options instead of being declared as a typer option.
COPY_CONTEXT_SETTINGS = {"allow_extra_args": True, "ignore_unknown_options": True}


def copy_command(
    args: Annotated[
        Optional[List[str]],
        typer.Argument(
            help="SOURCE_DIR TARGET_DIR, optionally followed by --skill/-s NAME ...",
            metavar="SOURCE_DIR TARGET_DIR",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Reinstall skills that already exist in the target.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip the confirmation prompt.",
        ),
    ] = False,
) -> None:
    """Copy skills from one project to another by reinstalling them from their sources.

    Each skill installed in SOURCE_DIR is traced back to where it came from
    (the global skill lock file, or a registry search) and installed fresh
    into TARGET_DIR for the same agents.

    Use --skill/-s to copy only skills whose names match one of the given
    filters.

    Examples:
      skillcopy copy ../old-project .
      skillcopy copy ../old-project . --skill code-review test-gen
      skillcopy copy ../old-project . -s review --yes --force
    """
    try:
        options = parse_copy_options(args or [])
    except SkillCopyError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    options.force = options.force or force
    options.yes = options.yes or yes

    try:
        exit_code = run_copy(options)
    except SkillCopyError as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print("[red]Copy failed[/red]")
        raise typer.Exit(1)

    raise typer.Exit(exit_code)
