"""Skill name filtering."""

import re
from typing import Sequence

from skillcopy.discovery import InstalledSkill


def normalize_filter(value: str) -> str:
    """Lowercase a filter and collapse whitespace runs to hyphens.

    Examples:
        >>> normalize_filter("My Skill")
        'my-skill'
    """
    return re.sub(r"\s+", "-", value.lower())


def matches_filter(skill_name: str, skill_filter: str) -> bool:
    """Check containment in either direction between a skill name and a filter."""
    normalized_filter = normalize_filter(skill_filter)
    normalized_skill = skill_name.lower()
    return normalized_filter in normalized_skill or normalized_skill in normalized_filter


def filter_skills(
    installed_skills: Sequence[InstalledSkill],
    skill_filters: Sequence[str] | None = None,
) -> list[InstalledSkill]:
    """Keep the skills matching any of the filters, preserving order.

    No filters returns every skill.
    """
    if not skill_filters:
        return list(installed_skills)

    return [
        skill
        for skill in installed_skills
        if any(matches_filter(skill.name, f) for f in skill_filters)
    ]
