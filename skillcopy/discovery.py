"""Installed skill discovery.

Scans every known agent's skills directory in a project and groups the
results by skill name, so that a skill installed for both Claude Code and
Cursor is reported once with both agents.
"""

from dataclasses import dataclass, field
from pathlib import Path

from skillcopy.agents import AGENTS
from skillcopy.skill_md import is_skill_dir, parse_skill_md


@dataclass(frozen=True)
class InstalledSkill:
    """A skill found in a project.

    Attributes:
        name: Skill name from SKILL.md (or its directory name)
        agents: Agent identifiers the skill is installed for, in table order
        path: Directory of the first copy found
    """

    name: str
    agents: tuple[str, ...] = field(default_factory=tuple)
    path: Path | None = None


def list_installed_skills(cwd: Path, global_install: bool = False) -> list[InstalledSkill]:
    """List skills installed in a project.

    Args:
        cwd: Project root to scan
        global_install: Scan the agents' global skills directories instead

    Returns:
        Installed skills sorted by name, or an empty list
    """
    agents_by_name: dict[str, list[str]] = {}
    paths: dict[str, Path] = {}

    for agent in AGENTS.values():
        skills_dir = agent.get_global_skills_dir() if global_install else agent.get_skills_dir(cwd)
        if not skills_dir.is_dir():
            continue

        for child in sorted(skills_dir.iterdir()):
            if not is_skill_dir(child):
                continue
            name = parse_skill_md(child).name
            agent_names = agents_by_name.setdefault(name, [])
            if agent.name not in agent_names:
                agent_names.append(agent.name)
            paths.setdefault(name, child)

    return [
        InstalledSkill(name=name, agents=tuple(agents_by_name[name]), path=paths[name])
        for name in sorted(agents_by_name)
    ]

