"""Test configuration and fixtures."""

import os
from pathlib import Path

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "e2e: end-to-end tests requiring network")
    config.addinivalue_line("markers", "network: tests that make real network requests")


@pytest.fixture(autouse=True)
def skip_e2e_in_ci(request):
    """Auto-skip E2E tests in CI based on SKIP_E2E env var."""
    if request.node.get_closest_marker("e2e"):
        if os.environ.get("SKIP_E2E", "").lower() in ("1", "true", "yes"):
            pytest.skip("E2E tests skipped in CI (SKIP_E2E=1)")


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path_factory, monkeypatch):
    """Keep tests away from the user's config and lock file."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("SKILLCOPY_CONFIG", str(home / "config.toml"))
    monkeypatch.setenv("SKILLCOPY_LOCK_PATH", str(home / ".skill-lock.json"))
    monkeypatch.delenv("SKILLCOPY_REGISTRY_URL", raising=False)
    return home


def write_skill(skill_dir: Path, name: str | None = None, body: str = "# Skill\n") -> Path:
    """Create a skill directory with a SKILL.md."""
    skill_dir.mkdir(parents=True, exist_ok=True)
    frontmatter = f"---\nname: {name}\ndescription: Test skill\n---\n\n" if name else ""
    (skill_dir / "SKILL.md").write_text(frontmatter + body)
    return skill_dir


@pytest.fixture
def make_skill():
    """Provide the write_skill helper to tests."""
    return write_skill


@pytest.fixture
def source_project(tmp_path: Path) -> Path:
    """A project with code-review (Claude Code + Cursor) and test-gen (Claude Code)."""
    project = tmp_path / "source"
    write_skill(project / ".claude" / "skills" / "code-review", "code-review")
    write_skill(project / ".cursor" / "skills" / "code-review", "code-review")
    write_skill(project / ".claude" / "skills" / "test-gen", "test-gen")
    return project


@pytest.fixture
def target_project(tmp_path: Path) -> Path:
    """An empty target project."""
    project = tmp_path / "target"
    project.mkdir()
    return project


@pytest.fixture
def skills_repo(tmp_path: Path) -> Path:
    """A local skills repository usable as an install source."""
    repo = tmp_path / "skills-repo"
    write_skill(repo / "skills" / "code-review", "code-review", "# Code review\n")
    write_skill(repo / "skills" / "test-gen", "test-gen", "# Test gen\n")
    return repo
