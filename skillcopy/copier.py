"""Copy installed skills from one project to another.

Skills are not file-copied. Each one is traced back to the source it was
originally installed from and installed fresh into the target project for
the same agents.
"""

import random
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

import typer
from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner

from skillcopy.agents import agent_display_names
from skillcopy.config import Settings, load_settings
from skillcopy.discovery import InstalledSkill, list_installed_skills
from skillcopy.exceptions import NoSkillsFoundError, PathNotFoundError, UsageError, error_message
from skillcopy.filtering import filter_skills
from skillcopy.installer import AddOptions, AddResult, run_add
from skillcopy.resolver import SkillToInstall, SourceResolver, resolve_skill_sources
from skillcopy.source import split_source

console = Console()

USAGE = "Usage: skillcopy copy SOURCE_DIR TARGET_DIR [--skill NAME ...] [--force] [--yes]"

TIPS = [
    "Copy only some skills: skillcopy copy SRC DST --skill NAME",
    "Reinstall skills already in the target: skillcopy copy SRC DST --force",
    "Skip the prompt in scripts: skillcopy copy SRC DST --yes",
]

AddFn = Callable[[str, AddOptions, Path], AddResult]
ConfirmFn = Callable[[str], bool]


@dataclass
class CopyOptions:
    """Parsed options for a copy run."""

    source: str
    target: str
    skills: list[str] = field(default_factory=list)
    force: bool = False
    yes: bool = False


@dataclass(frozen=True)
class FailedInstall:
    name: str
    error: str


@dataclass
class InstallResults:
    """Per-skill outcomes of a batch install; each skill lands in exactly one list."""

    success: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[FailedInstall] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        """Number of skills an install was actually attempted for."""
        return len(self.success) + len(self.failed)


def _plural(count: int, word: str = "skill") -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def parse_copy_options(args: Sequence[str]) -> CopyOptions:
    """
    Parse copy arguments.

    `--skill`/`-s` consumes every following token that doesn't start with
    "-", and may be repeated. Options can appear anywhere.

    Raises:
        UsageError: If fewer than two positional arguments are given
    """
    skills: list[str] = []
    positional: list[str] = []
    force = False
    yes = False

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("--skill", "-s"):
            i += 1
            while i < len(args) and args[i] and not args[i].startswith("-"):
                skills.append(args[i])
                i += 1
            continue
        if arg.startswith("--skill="):
            skills.append(arg[len("--skill="):])
        elif arg == "--force":
            force = True
        elif arg in ("--yes", "-y"):
            yes = True
        elif arg and not arg.startswith("-"):
            positional.append(arg)
        i += 1

    if len(positional) < 2:
        raise UsageError(USAGE)

    return CopyOptions(
        source=positional[0],
        target=positional[1],
        skills=skills,
        force=force,
        yes=yes,
    )


def validate_paths(source: str, target: str) -> tuple[Path, Path]:
    """Resolve both directories to absolute paths and check they exist.

    Raises:
        PathNotFoundError: If either directory is missing
    """
    source_path = Path(source).expanduser().resolve()
    target_path = Path(target).expanduser().resolve()

    if not source_path.is_dir():
        raise PathNotFoundError(f"Source directory does not exist: {source_path}")
    if not target_path.is_dir():
        raise PathNotFoundError(f"Target directory does not exist: {target_path}")

    return source_path, target_path


def get_installed_skills_from_source(source_dir: Path) -> list[InstalledSkill]:
    """List project-level skills in the source project.

    Raises:
        NoSkillsFoundError: If the project has no installed skills
    """
    installed = list_installed_skills(source_dir, global_install=False)
    if not installed:
        raise NoSkillsFoundError(f"No skills found in source directory: {source_dir}")
    return installed


@contextmanager
def status_spinner(text: str):
    """Show a transient spinner while work is in progress."""
    with Live(Spinner("dots", text=text), console=console, transient=True):
        yield


def _prompt_confirm(message: str) -> bool:
    try:
        return typer.confirm(message, default=False)
    except typer.Abort:
        return False


def confirm_copy(
    skills: Sequence[SkillToInstall],
    target_dir: Path,
    skip_confirm: bool,
    confirm: ConfirmFn = _prompt_confirm,
) -> bool:
    """Print the copy summary and ask for confirmation.

    Returns True without prompting when skip_confirm is set. Anything other
    than an explicit yes is a decline.
    """
    console.print()
    console.print("[bold]Copy Summary:[/bold]")
    console.print(f"  Skills to install: {len(skills)}")
    console.print(f"  Target directory: {target_dir}")
    console.print()
    console.print("[bold]Skills:[/bold]")
    for skill in skills:
        console.print(f"  - [cyan]{skill.name}[/cyan]")
        console.print(f"    [dim]Source:[/dim] {skill.source}")
        console.print(f"    [dim]Agents:[/dim] {agent_display_names(list(skill.agents))}")
    console.print()

    if skip_confirm:
        return True

    return confirm("Continue with installation?") is True


def install_skills_in_target(
    skills: Sequence[SkillToInstall],
    target_dir: Path,
    force: bool = False,
    add: AddFn = run_add,
    lock_path: Path | None = None,
) -> InstallResults:
    """Install each skill into the target from its original source, in order.

    The target directory is passed down to the installer, so the process
    working directory is never changed. Without force, a skill that is
    already installed in the target for all of its agents is skipped.
    A failing skill is recorded and the batch moves on.
    """
    results = InstallResults()
    already_installed = {
        skill.name: set(skill.agents) for skill in list_installed_skills(target_dir)
    }

    for skill in skills:
        if not force and set(skill.agents) <= already_installed.get(skill.name, set()):
            results.skipped.append(skill.name)
            console.print(
                f"[yellow]⊘[/yellow] {skill.name} already installed "
                "[dim](use --force to reinstall)[/dim]"
            )
            continue

        repo_source, skill_filter = split_source(skill.source, skill.name)
        console.print(
            f"[dim]Installing[/dim] [cyan]{skill.name}[/cyan] [dim]from[/dim] {skill.source}..."
        )

        try:
            with status_spinner(f"Installing {skill.name}..."):
                outcome = add(
                    repo_source,
                    AddOptions(
                        agents=list(skill.agents),
                        skills=[skill_filter],
                        yes=True,
                        lock_path=lock_path,
                    ),
                    target_dir,
                )
        except Exception as e:
            message = error_message(e)
            results.failed.append(FailedInstall(name=skill.name, error=message))
            console.print(f"[red]✗[/red] {skill.name} failed: [dim]{message}[/dim]")
            continue

        results.success.append(skill.name)
        console.print(f"[green]✓[/green] {skill.name} installed")
        for warning in outcome.warnings:
            console.print(f"[yellow]  {warning}[/yellow]")

    return results


def print_results(results: InstallResults) -> None:
    """Print the success, skipped and failed buckets."""
    console.print()
    if results.success:
        console.print(f"[green]Successfully installed {_plural(len(results.success))}[/green]")
        for name in results.success:
            console.print(f"  [green]✓[/green] {name}")

    if results.skipped:
        console.print(f"[yellow]Skipped {_plural(len(results.skipped))}[/yellow]")
        for name in results.skipped:
            console.print(f"  [yellow]⊘[/yellow] {name}")

    if results.failed:
        console.print(f"[red]Failed to install {_plural(len(results.failed))}[/red]")
        for failure in results.failed:
            console.print(f"  [red]✗[/red] {failure.name}: [dim]{failure.error}[/dim]")
    console.print()


def run_copy(
    options: CopyOptions,
    resolver: SourceResolver | None = None,
    add: AddFn = run_add,
    confirm: ConfirmFn = _prompt_confirm,
    settings: Settings | None = None,
) -> int:
    """Run the copy flow and return the process exit status.

    Returns:
        0 on full or partial success, a declined confirmation, an empty
        filter match, or when every skill was skipped; 1 when no skill could
        be resolved or every attempted install failed.

    Raises:
        PathNotFoundError: If the source or target directory is missing
        NoSkillsFoundError: If the source project has no installed skills
    """
    if settings is None:
        settings = load_settings()
    if resolver is None:
        resolver = SourceResolver.from_settings(settings)

    source_dir, target_dir = validate_paths(options.source, options.target)

    with status_spinner("Discovering skills in source project..."):
        installed = get_installed_skills_from_source(source_dir)
    console.print(f"Found [green]{_plural(len(installed))}[/green]")

    selected = filter_skills(installed, options.skills)
    if not selected:
        console.print("[yellow]No skills found matching filter.[/yellow]")
        if options.skills:
            console.print(f"[dim]  Filter: {', '.join(options.skills)}[/dim]")
            console.print("[dim]  Available skills:[/dim]")
            for skill in installed:
                console.print(f"[dim]    - {skill.name}[/dim]")
        console.print("[yellow]No skills to install[/yellow]")
        return 0

    if options.skills:
        console.print(f"Selected {_plural(len(selected))} matching filter")

    console.print()
    console.print("[bold]Resolving skill sources...[/bold]")
    to_install, _resolutions = resolve_skill_sources(selected, resolver)

    if not to_install:
        console.print()
        console.print("[red]No skills could be resolved to original sources[/red]")
        console.print(
            "[dim]  Skills must be in the global lock file or available on the registry[/dim]"
        )
        return 1

    if not confirm_copy(to_install, target_dir, options.yes, confirm):
        console.print("[yellow]Installation cancelled[/yellow]")
        return 0

    results = install_skills_in_target(
        to_install,
        target_dir,
        force=options.force,
        add=add,
        lock_path=settings.lock_path,
    )
    print_results(results)

    if results.attempted == 0 or not results.failed:
        console.print("[green]Done![/green]")
    elif results.success:
        console.print("[yellow]Completed with some failures[/yellow]")
    else:
        console.print("[red]All installations failed[/red]")
        return 1

    console.print(f"[dim]{random.choice(TIPS)}[/dim]")
    return 0

