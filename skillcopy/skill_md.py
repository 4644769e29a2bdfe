"""SKILL.md frontmatter parsing."""

from dataclasses import dataclass
from pathlib import Path

SKILL_MARKER = "SKILL.md"


@dataclass
class SkillMetadata:
    """Metadata parsed from a SKILL.md file."""

    name: str
    description: str = ""


def _extract_frontmatter(content: str) -> str | None:
    """Return the frontmatter block without delimiters, or None if absent."""
    if not content.startswith("---"):
        return None
    parts = content.split("---", 2)
    if len(parts) < 3:
        return None
    return parts[1]


def _parse_simple_yaml_value(frontmatter: str, key: str) -> str | None:
    """Parse a simple key: value from YAML frontmatter.

    Handles basic cases like:
    - name: my-skill
    - name: "my-skill"
    - name: 'my-skill'
    """
    prefix = f"{key}:"
    for line in frontmatter.split("\n"):
        line = line.strip()
        if not line.startswith(prefix):
            continue
        value = line[len(prefix):].strip()
        if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
            value = value[1:-1]
        return value
    return None


def is_skill_dir(path: Path) -> bool:
    """Check if a path is a directory containing SKILL.md."""
    return path.is_dir() and (path / SKILL_MARKER).is_file()


def parse_skill_md(skill_dir: Path) -> SkillMetadata:
    """Parse the SKILL.md inside a skill directory.

    The directory name is used when the frontmatter is missing or has no
    name. Unreadable files are treated the same way.
    """
    try:
        content = (skill_dir / SKILL_MARKER).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return SkillMetadata(name=skill_dir.name)

    frontmatter = _extract_frontmatter(content)
    if frontmatter is None:
        return SkillMetadata(name=skill_dir.name)

    name = _parse_simple_yaml_value(frontmatter, "name") or skill_dir.name
    description = _parse_simple_yaml_value(frontmatter, "description") or ""
    return SkillMetadata(name=name, description=description)
