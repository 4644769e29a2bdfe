"""Tests for skillcopy.config."""

from pathlib import Path

import pytest

from skillcopy.config import DEFAULT_REGISTRY_URL, DEFAULT_TIMEOUT, load_settings
from skillcopy.exceptions import ConfigParseError


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults_without_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("SKILLCOPY_LOCK_PATH")
        settings = load_settings(tmp_path / "missing.toml")

        assert settings.registry_url == DEFAULT_REGISTRY_URL
        assert settings.timeout == DEFAULT_TIMEOUT
        assert settings.lock_path == Path.home() / ".agents" / ".skill-lock.json"

    def test_reads_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("SKILLCOPY_LOCK_PATH")
        config = tmp_path / "config.toml"
        config.write_text(
            '[registry]\nurl = "https://registry.example.com/"\ntimeout = 5\n'
            '[lock]\npath = "/tmp/lock.json"\n'
        )

        settings = load_settings(config)

        assert settings.registry_url == "https://registry.example.com"
        assert settings.timeout == 5.0
        assert settings.lock_path == Path("/tmp/lock.json")

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch):
        config = tmp_path / "config.toml"
        config.write_text('[registry]\nurl = "https://file.example.com"\n')
        monkeypatch.setenv("SKILLCOPY_REGISTRY_URL", "https://env.example.com")
        monkeypatch.setenv("SKILLCOPY_LOCK_PATH", str(tmp_path / "env-lock.json"))

        settings = load_settings(config)

        assert settings.registry_url == "https://env.example.com"
        assert settings.lock_path == tmp_path / "env-lock.json"

    def test_uses_config_env_path(self, tmp_path: Path, monkeypatch):
        config = tmp_path / "other.toml"
        config.write_text("[registry]\ntimeout = 12.5\n")
        monkeypatch.setenv("SKILLCOPY_CONFIG", str(config))

        assert load_settings().timeout == 12.5

    def test_invalid_toml(self, tmp_path: Path):
        config = tmp_path / "config.toml"
        config.write_text("[registry\n")

        with pytest.raises(ConfigParseError, match="Failed to parse"):
            load_settings(config)

    def test_wrong_types(self, tmp_path: Path):
        config = tmp_path / "config.toml"
        config.write_text('[registry]\ntimeout = "soon"\n')

        with pytest.raises(ConfigParseError, match="registry.timeout"):
            load_settings(config)

    def test_table_must_be_table(self, tmp_path: Path):
        config = tmp_path / "config.toml"
        config.write_text('registry = "https://x"\n')

        with pytest.raises(ConfigParseError, match=r"\[registry\]"):
            load_settings(config)
