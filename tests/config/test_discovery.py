"""Tests for config file discovery."""

from pathlib import Path

import pytest

from ppdctl.config.discovery import CONFIG_ENV_VAR, CONFIG_FILENAME, find_config, search_dirs


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[store]\nfirst_id = 3\n")
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        child = tmp_path / "a" / "b" / "c"
        child.mkdir(parents=True)
        assert find_config(child) == config_file.resolve()

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("")
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))
        assert find_config(tmp_path) == config_file

    def test_env_var_pointing_nowhere(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None

    def test_empty_env_var_falls_back_to_walk(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, "")
        assert find_config(tmp_path) == config_file.resolve()

    def test_nearest_file_wins(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        inner = tmp_path / "project"
        inner.mkdir()
        (inner / CONFIG_FILENAME).write_text("")
        assert find_config(inner / ".") == (inner / CONFIG_FILENAME).resolve()


class TestSearchDirs:
    def test_starts_at_resolved_dir_and_ends_at_root(self, tmp_path: Path) -> None:
        dirs = list(search_dirs(tmp_path))
        assert dirs[0] == tmp_path.resolve()
        assert dirs[1] == tmp_path.resolve().parent
        assert dirs[-1] == Path(tmp_path.resolve().anchor)
