"""Tests for skillcopy.resolver."""

from unittest.mock import Mock

from skillcopy.discovery import InstalledSkill
from skillcopy.exceptions import LockFileError, RegistryError
from skillcopy.lock import SkillLock, SkillLockEntry, read_skill_lock
from skillcopy.registry import RegistrySkill, search_skills
from skillcopy.resolver import (
    ResolutionStatus,
    SkillToInstall,
    SourceResolver,
    find_skill_source,
    resolve_skill_sources,
)


def _lock(**entries: str) -> SkillLock:
    return SkillLock(skills={
        name: SkillLockEntry(source="acme/skills", source_url=url) for name, url in entries.items()
    })


class TestSourceResolver:
    """Tests for SourceResolver.resolve."""

    def test_lock_file_takes_precedence(self):
        """A lock entry wins and the registry is never called."""
        search = Mock(return_value=[RegistrySkill("code-review", "other/repo")])
        resolver = SourceResolver(lambda: _lock(**{"code-review": "https://example.com/pkg"}), search)

        resolution = resolver.resolve("code-review")

        assert resolution.status is ResolutionStatus.LOCK_FILE
        assert resolution.source == "https://example.com/pkg"
        search.assert_not_called()

    def test_lock_entry_without_url_falls_through(self):
        search = Mock(return_value=[RegistrySkill("code-review", "acme/skills")])
        resolver = SourceResolver(lambda: _lock(**{"code-review": ""}), search)

        assert resolver.resolve("code-review").source == "acme/skills@code-review"
        search.assert_called_once_with("code-review")

    def test_exact_match_preferred_over_first_result(self):
        search = Mock(return_value=[
            RegistrySkill("code-review-pro", "first/repo"),
            RegistrySkill("Code-Review", "exact/repo"),
        ])
        resolver = SourceResolver(SkillLock, search)

        resolution = resolver.resolve("code-review")

        assert resolution.status is ResolutionStatus.REGISTRY_EXACT
        assert resolution.source == "exact/repo@Code-Review"

    def test_fuzzy_fallback_to_first_result(self):
        search = Mock(return_value=[RegistrySkill("code-review-pro", "acme/skills")])
        resolver = SourceResolver(SkillLock, search)

        resolution = resolver.resolve("code-review")

        assert resolution.status is ResolutionStatus.REGISTRY_FUZZY
        assert resolution.source == "acme/skills@code-review-pro"

    def test_not_found(self):
        resolver = SourceResolver(SkillLock, Mock(return_value=[]))

        resolution = resolver.resolve("code-review")

        assert resolution.status is ResolutionStatus.NOT_FOUND
        assert resolution.found is False

    def test_search_error_is_typed(self):
        resolver = SourceResolver(SkillLock, Mock(side_effect=RegistryError("Network error: down")))

        resolution = resolver.resolve("code-review")

        assert resolution.status is ResolutionStatus.ERROR
        assert resolution.source is None
        assert resolution.error == "Network error: down"

    def test_lock_error_falls_through_to_search(self):
        def broken_lock():
            raise LockFileError("bad lock")

        search = Mock(return_value=[RegistrySkill("code-review", "acme/skills")])
        resolver = SourceResolver(broken_lock, search)

        assert resolver.resolve("code-review").source == "acme/skills@code-review"

    def test_unexpected_search_error_is_typed(self):
        resolver = SourceResolver(SkillLock, Mock(side_effect=TypeError("bad query")))

        resolution = resolver.resolve("code-review")

        assert resolution.status is ResolutionStatus.ERROR
        assert resolution.error == "bad query"

    def test_bad_registry_url_does_not_abort(self):
        def search(query):
            return search_skills(query, base_url="http://exa\x00mple.com")

        resolution = SourceResolver(SkillLock, search).resolve("code-review")

        assert resolution.status is ResolutionStatus.ERROR
        assert "Invalid skills registry URL" in resolution.error

    def test_undecodable_lock_falls_through_to_search(self, tmp_path):
        path = tmp_path / "lock.json"
        path.write_bytes(b'{"skills": {"x": {"sourceUrl": "\xff\xfe"}}}')
        search = Mock(return_value=[RegistrySkill("x", "acme/skills")])

        resolver = SourceResolver(lambda: read_skill_lock(path), search)

        assert resolver.resolve("x").source == "acme/skills@x"

    def test_malformed_lock_entry_keeps_valid_entries(self, tmp_path):
        path = tmp_path / "lock.json"
        path.write_text(
            '{"skills": {"good": {"sourceUrl": "https://example.com/good"}, "bad": "oops"}}'
        )
        search = Mock(return_value=[RegistrySkill("good", "other/repo")])

        resolver = SourceResolver(lambda: read_skill_lock(path), search)

        assert resolver.resolve("good").source == "https://example.com/good"
        search.assert_not_called()

    def test_lock_read_once(self):
        reader = Mock(return_value=_lock(a="u1", b="u2"))
        resolver = SourceResolver(reader, Mock())

        resolver.resolve("a")
        resolver.resolve("b")

        assert reader.call_count == 1


class TestFindSkillSource:
    """Tests for the str-or-None wrapper."""

    def test_returns_source(self):
        resolver = SourceResolver(lambda: _lock(x="https://example.com/x"), Mock())
        assert find_skill_source("x", resolver) == "https://example.com/x"

    def test_returns_none_on_failure(self):
        resolver = SourceResolver(SkillLock, Mock(side_effect=RegistryError("down")))
        assert find_skill_source("x", resolver) is None

    def test_default_resolver_uses_settings(self, isolated_settings, monkeypatch):
        (isolated_settings / ".skill-lock.json").write_text(
            '{"version": 3, "skills": {"x": {"source": "a/b", "sourceUrl": "https://example.com/x"}}}'
        )
        assert find_skill_source("x") == "https://example.com/x"


class TestResolveSkillSources:
    """Tests for resolve_skill_sources."""

    def test_failure_for_one_skill_does_not_stop_others(self):
        def search(name):
            if name == "broken":
                raise RegistryError("down")
            if name == "missing":
                return []
            return [RegistrySkill(name, "acme/skills")]

        skills = [
            InstalledSkill("broken", ("claude-code",)),
            InstalledSkill("missing", ("claude-code",)),
            InstalledSkill("good", ("claude-code", "cursor")),
        ]

        resolved, resolutions = resolve_skill_sources(skills, SourceResolver(SkillLock, search))

        assert resolved == [SkillToInstall("good", "acme/skills@good", ("claude-code", "cursor"))]
        assert [r.status for r in resolutions] == [
            ResolutionStatus.ERROR,
            ResolutionStatus.NOT_FOUND,
            ResolutionStatus.REGISTRY_EXACT,
        ]
