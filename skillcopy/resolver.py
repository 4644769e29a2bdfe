"""Resolve installed skills back to the source they were installed from.

Resolution order for a skill name:

1. The global lock file. An entry with a sourceUrl wins immediately.
2. A registry text search. An exact (case-insensitive) name match is
   preferred; otherwise the first result is taken as a fuzzy match.

Failures never abort the batch: a lock file that can't be read falls through
to the registry, and a failed search resolves to ERROR for that skill only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from rich.console import Console

from skillcopy.config import Settings, load_settings
from skillcopy.discovery import InstalledSkill
from skillcopy.exceptions import LockFileError, error_message
from skillcopy.lock import SkillLock, read_skill_lock
from skillcopy.registry import RegistrySkill, search_skills

console = Console()

LockReader = Callable[[], SkillLock]
SearchFn = Callable[[str], list[RegistrySkill]]


class ResolutionStatus(Enum):
    """How (or whether) a skill's source was determined."""

    LOCK_FILE = "lock_file"
    REGISTRY_EXACT = "registry_exact"
    REGISTRY_FUZZY = "registry_fuzzy"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one skill name."""

    name: str
    status: ResolutionStatus
    source: str | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.source is not None


@dataclass(frozen=True)
class SkillToInstall:
    """A resolved, installable skill.

    Attributes:
        name: Skill name in the source project
        source: Lock file URL, or "repo@skill" from a registry match
        agents: Agent identifiers to install for, taken from the source project
    """

    name: str
    source: str
    agents: tuple[str, ...]


class SourceResolver:
    """Resolves skill names using a lock reader and a registry search function."""

    def __init__(self, lock_reader: LockReader, search: SearchFn):
        self._lock_reader = lock_reader
        self._search = search
        self._lock: SkillLock | None = None
        self._lock_error: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SourceResolver":
        """Build a resolver backed by the configured lock file and registry."""
        if settings is None:
            settings = load_settings()

        def lock_reader() -> SkillLock:
            return read_skill_lock(settings.lock_path)

        def search(query: str) -> list[RegistrySkill]:
            return search_skills(query, base_url=settings.registry_url, timeout=settings.timeout)

        return cls(lock_reader, search)

    def _load_lock(self) -> SkillLock | None:
        """Read the lock once; remember a failure instead of retrying it per skill."""
        if self._lock is None and self._lock_error is None:
            try:
                self._lock = self._lock_reader()
            except LockFileError as e:
                self._lock_error = error_message(e)
                console.print(f"[dim]  Lock file unavailable: {self._lock_error}[/dim]")
        return self._lock

    def resolve(self, name: str) -> Resolution:
        """Resolve a single skill name to its install source."""
        lock = self._load_lock()
        if lock is not None:
            entry = lock.get(name)
            if entry is not None and entry.source_url:
                console.print(f"[dim]  Found in lock file: {entry.source or entry.source_url}[/dim]")
                return Resolution(name, ResolutionStatus.LOCK_FILE, source=entry.source_url)

        console.print(f'[dim]  Searching registry for "{name}"...[/dim]')
        try:
            results = self._search(name)
        except Exception as e:
            # Any search failure only loses this skill
            return Resolution(name, ResolutionStatus.ERROR, error=error_message(e))

        exact = next(
            (r for r in results if r.name.lower() == name.lower() and r.source),
            None,
        )
        if exact is not None:
            console.print(f"[dim]  Found on registry: {exact.source}[/dim]")
            return Resolution(
                name, ResolutionStatus.REGISTRY_EXACT, source=f"{exact.source}@{exact.name}"
            )

        if results:
            fuzzy = results[0]
            source = f"{fuzzy.source}@{fuzzy.name}"
            console.print(f"[yellow]  Fuzzy match found: {source}[/yellow]")
            return Resolution(name, ResolutionStatus.REGISTRY_FUZZY, source=source)

        return Resolution(name, ResolutionStatus.NOT_FOUND)


def find_skill_source(name: str, resolver: SourceResolver | None = None) -> str | None:
    """Find a skill's source, or None when it can't be determined."""
    if resolver is None:
        resolver = SourceResolver.from_settings()
    return resolver.resolve(name).source


def resolve_skill_sources(
    skills: Sequence[InstalledSkill],
    resolver: SourceResolver,
) -> tuple[list[SkillToInstall], list[Resolution]]:
    """Resolve each skill in order.

    Returns:
        Tuple of (installable skills, every resolution including misses)
    """
    resolved: list[SkillToInstall] = []
    resolutions: list[Resolution] = []

    for skill in skills:
        console.print(f"[cyan]Resolving {skill.name}...[/cyan]")
        resolution = resolver.resolve(skill.name)
        resolutions.append(resolution)

        if resolution.source is not None:
            resolved.append(
                SkillToInstall(name=skill.name, source=resolution.source, agents=tuple(skill.agents))
            )
            console.print(f"[green]✓ {skill.name} resolved[/green]")
        elif resolution.status is ResolutionStatus.ERROR:
            console.print(
                f"[yellow]⊘ {skill.name} - Source lookup failed: {resolution.error} (skipping)[/yellow]"
            )
        else:
            console.print(f"[yellow]⊘ {skill.name} - Cannot find original source (skipping)[/yellow]")

    return resolved, resolutions
