"""Add-skill installer.

Installs skills from a source (GitHub repo, git URL, or local directory) into
a project for a set of agents. The project directory is always passed in
explicitly; nothing here depends on the process working directory.
"""

import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from skillcopy.agents import get_agent
from skillcopy.config import DEFAULT_TIMEOUT
from skillcopy.exceptions import InstallError, LockFileError, SkillNotFoundError
from skillcopy.fetcher import fetched_source
from skillcopy.lock import record_install
from skillcopy.skill_md import SKILL_MARKER, is_skill_dir, parse_skill_md
from skillcopy.source import ParsedSource, parse_source

# Directories searched first, in priority order, relative to the source root
SKILL_SEARCH_PATHS = ("skills", ".claude/skills", ".agents/skills", ".")
SKIP_DIRS = {".git", "node_modules", "__pycache__", ".venv"}
MAX_SEARCH_DEPTH = 5
ALL_SKILLS = "*"

SAFE_NAME_PATTERN = re.compile(r"[^a-zA-Z0-9._-]+")


@dataclass(frozen=True)
class SourceSkill:
    """A skill found inside a fetched source."""

    name: str
    path: Path


@dataclass
class AddOptions:
    """Options for an add run.

    Attributes:
        agents: Agent identifiers to install for
        skills: Skill names to install; "*" installs every skill in the source
        yes: Replace existing copies without asking; otherwise an existing copy is an error
        global_install: Install into the agents' global skills directories
        lock_path: Lock file to record remote installs in, None to skip recording
        timeout: Network timeout in seconds
    """

    agents: Sequence[str]
    skills: Sequence[str] = field(default_factory=list)
    yes: bool = False
    global_install: bool = False
    lock_path: Path | None = None
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class AddResult:
    """Result of an add run."""

    installed: list[str] = field(default_factory=list)
    paths: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def safe_dir_name(name: str) -> str:
    """Turn a skill name into a directory name with no path separators."""
    cleaned = SAFE_NAME_PATTERN.sub("-", name).strip(".-")
    if not cleaned:
        raise InstallError(f"Invalid skill name: '{name}'")
    return cleaned


def discover_source_skills(root: Path) -> list[SourceSkill]:
    """Find skill directories in a fetched source.

    The conventional locations are checked first; anything else containing a
    SKILL.md is found by a bounded recursive walk. Names are unique, first
    found wins.
    """
    skills: list[SourceSkill] = []
    seen: set[str] = set()

    def add(path: Path) -> None:
        name = parse_skill_md(path).name
        if name not in seen:
            seen.add(name)
            skills.append(SourceSkill(name=name, path=path))

    if is_skill_dir(root):
        add(root)

    for search_path in SKILL_SEARCH_PATHS:
        search_root = root if search_path == "." else root / search_path
        if not search_root.is_dir():
            continue
        for child in sorted(search_root.iterdir()):
            if is_skill_dir(child):
                add(child)

    def walk(directory: Path, depth: int) -> None:
        if depth > MAX_SEARCH_DEPTH:
            return
        for child in sorted(directory.iterdir()):
            if not child.is_dir() or child.is_symlink() or child.name in SKIP_DIRS:
                continue
            if (child / SKILL_MARKER).is_file():
                add(child)
            else:
                walk(child, depth + 1)

    walk(root, 1)
    return skills


def select_skills(available: Sequence[SourceSkill], requested: Sequence[str]) -> list[SourceSkill]:
    """Select skills matching requested names by frontmatter or directory name.

    Raises:
        SkillNotFoundError: If a requested name matches nothing
    """
    if not requested or ALL_SKILLS in requested:
        if not available:
            raise SkillNotFoundError("No skills found in source")
        return list(available)

    selected: list[SourceSkill] = []
    for wanted in requested:
        lowered = wanted.lower()
        match = next(
            (
                s
                for s in available
                if s.name.lower() == lowered or s.path.name.lower() == lowered
            ),
            None,
        )
        if match is None:
            names = ", ".join(s.name for s in available) or "none"
            raise SkillNotFoundError(f"Skill '{wanted}' not found in source. Available: {names}")
        if match not in selected:
            selected.append(match)
    return selected


def copy_skill(skill_dir: Path, dest: Path, overwrite: bool = True) -> Path:
    """Copy a skill directory to dest, replacing an existing copy when overwrite is set."""
    if not overwrite and (dest.exists() or dest.is_symlink()):
        raise InstallError(f"Skill already exists at {dest}")
    try:
        if dest.exists() or dest.is_symlink():
            if dest.is_dir() and not dest.is_symlink():
                shutil.rmtree(dest)
            else:
                dest.unlink()
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(skill_dir, dest, ignore=shutil.ignore_patterns(*SKIP_DIRS))
    except OSError as e:
        raise InstallError(f"Failed to install skill to {dest}: {e}")
    return dest


def _record(source: ParsedSource, root: Path, skill: SourceSkill, lock_path: Path) -> None:
    try:
        skill_path = (skill.path / SKILL_MARKER).relative_to(root).as_posix()
    except ValueError:
        skill_path = SKILL_MARKER
    if source.subpath:
        skill_path = f"{source.subpath.strip('/')}/{skill_path}"
    record_install(
        lock_path,
        skill.name,
        source=source.display,
        source_type=source.kind,
        source_url=source.url,
        skill_path=skill_path,
    )


def run_add(source: str, options: AddOptions, cwd: Path) -> AddResult:
    """Install skills from a source into a project.

    Args:
        source: Install-from identifier (see skillcopy.source)
        options: Agents, skill names and flags
        cwd: Project directory to install into

    Returns:
        AddResult with the installed skill names and paths

    Raises:
        SourceParseError: If the source identifier is invalid
        RepoNotFoundError: If the source doesn't exist
        SkillNotFoundError: If a requested skill isn't in the source
        InstallError: If no agents were given or copying fails
        UnknownAgentError: If an agent identifier is unknown
    """
    if not options.agents:
        raise InstallError("No agents specified to install for")
    agents = [get_agent(name) for name in options.agents]
    parsed = parse_source(source, cwd)

    result = AddResult()
    with fetched_source(parsed, timeout=options.timeout) as root:
        selected = select_skills(discover_source_skills(root), options.skills)

        for skill in selected:
            dir_name = safe_dir_name(skill.name)
            for agent in agents:
                skills_dir = (
                    agent.get_global_skills_dir()
                    if options.global_install
                    else agent.get_skills_dir(cwd)
                )
                dest = skills_dir / dir_name
                result.paths.append(copy_skill(skill.path, dest, overwrite=options.yes))
            result.installed.append(skill.name)

            if options.lock_path is not None and parsed.kind != "local":
                try:
                    _record(parsed, root, skill, options.lock_path)
                except LockFileError as e:
                    result.warnings.append(f"{skill.name} installed but not recorded: {e}")

    return result
