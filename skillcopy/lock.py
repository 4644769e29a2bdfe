"""Global skill lock file.

The lock file records where each globally tracked skill was installed from:

    {
      "version": 3,
      "skills": {
        "code-review": {
          "source": "acme/skills",
          "sourceType": "github",
          "sourceUrl": "https://github.com/acme/skills.git",
          "skillPath": "skills/code-review/SKILL.md",
          "skillFolderHash": "",
          "installedAt": "2025-01-01T00:00:00+00:00",
          "updatedAt": "2025-01-01T00:00:00+00:00"
        }
      }
    }
"""

import json
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from skillcopy.exceptions import LockFileError

LOCK_VERSION = 3


@dataclass
class SkillLockEntry:
    """A single skill's record in the lock file."""

    source: str
    source_type: str = ""
    source_url: str = ""
    skill_path: str = ""
    skill_folder_hash: str = ""
    installed_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "SkillLockEntry":
        """Create an entry from its JSON object."""
        if not isinstance(data, dict):
            raise LockFileError(
                f"Lock entry '{name}' must be an object, got {type(data).__name__}"
            )
        return cls(
            source=str(data.get("source") or ""),
            source_type=str(data.get("sourceType") or ""),
            source_url=str(data.get("sourceUrl") or ""),
            skill_path=str(data.get("skillPath") or ""),
            skill_folder_hash=str(data.get("skillFolderHash") or ""),
            installed_at=str(data.get("installedAt") or ""),
            updated_at=str(data.get("updatedAt") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "source": self.source,
            "sourceType": self.source_type,
            "sourceUrl": self.source_url,
            "skillPath": self.skill_path,
            "skillFolderHash": self.skill_folder_hash,
            "installedAt": self.installed_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class SkillLock:
    """Parsed lock file contents."""

    version: int = LOCK_VERSION
    skills: dict[str, SkillLockEntry] = field(default_factory=dict)

    def get(self, name: str) -> SkillLockEntry | None:
        """Look up a skill by name."""
        return self.skills.get(name)


def read_skill_lock(path: Path) -> SkillLock:
    """Read the lock file.

    A missing file is an empty lock, not an error.

    Raises:
        LockFileError: If the file can't be read, isn't JSON, or has the wrong shape
    """
    if not path.exists():
        return SkillLock()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise LockFileError(f"Failed to read lock file {path}: {e}")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LockFileError(f"Failed to parse lock file {path}: {e}")

    if not isinstance(data, dict):
        raise LockFileError(f"Lock file {path} must contain a JSON object")

    skills_data = data.get("skills", {})
    if not isinstance(skills_data, dict):
        raise LockFileError(f"'skills' in lock file {path} must be an object")

    version = data.get("version", LOCK_VERSION)
    lock = SkillLock(version=version if isinstance(version, int) else LOCK_VERSION)
    for name, entry in skills_data.items():
        # A malformed entry only loses its own lookup
        if isinstance(entry, dict):
            lock.skills[name] = SkillLockEntry.from_dict(name, entry)
    return lock


def write_skill_lock(lock: SkillLock, path: Path) -> None:
    """Write the lock file atomically."""
    data = {
        "version": lock.version,
        "skills": {name: entry.to_dict() for name, entry in lock.skills.items()},
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".skill-lock-", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_name, path)
    except OSError as e:
        raise LockFileError(f"Failed to write lock file {path}: {e}")


def record_install(
    path: Path,
    name: str,
    source: str,
    source_type: str,
    source_url: str,
    skill_path: str = "",
) -> SkillLockEntry:
    """Add or update a skill in the lock file.

    The original installedAt timestamp is kept when the skill is already tracked.
    """
    lock = read_skill_lock(path)
    now = datetime.now(timezone.utc).isoformat()
    existing = lock.get(name)

    entry = SkillLockEntry(
        source=source,
        source_type=source_type,
        source_url=source_url,
        skill_path=skill_path,
        installed_at=existing.installed_at if existing and existing.installed_at else now,
        updated_at=now,
    )
    lock.skills[name] = entry
    write_skill_lock(lock, path)
    return entry
