# tests/unit/config/test_settings.py - v2
"""Tests for config/settings.py - typed Settings, config file loading, validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from msatrigger.config.settings import (
    ConfigurationError,
    Settings,
    find_config_file,
    load_settings,
)


def _write_cfg(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestSettingsDefaults:
    def test_defaults(self):
        s = Settings(_env_file=None, output_directory="/nas/out")
        assert s.repeat_run_matches == "_RPT"
        assert s.token_file == "MSAComplete.txt"
        assert s.failure_token_file == "MSAFailure.txt"
        assert s.source_trim == "Transfer"
        assert s.sld_starts_with == "Exploris"
        assert s.postblank_matches == "PostBlank"
        assert s.ignore_postblank is True
        assert s.remove_files is False
        assert s.remove_directories is False
        assert s.preserve_sld is True
        assert s.overwrite_older is False
        assert s.min_raw_files_to_move_again == 100_000
        assert s.debug is False

    def test_frozen(self):
        s = Settings(_env_file=None, output_directory="/nas/out")
        with pytest.raises(Exception):
            s.output_directory = "/elsewhere"  # type: ignore[misc]


class TestConfigFile:
    def test_historical_keys(self, tmp_path: Path):
        cfg = _write_cfg(tmp_path / "MassSpecTrigger.cfg", (
            "# trigger config\n"
            'Output_Directory="/nas/out"\n'
            "Source_Trim=Incoming\n"
            "Remove_Files=True\n"
            "Preserve_SLD=false\n"
            "Min_Raw_Files_To_Move_Again=5000\n"
            "SLD_Starts_With='Astral'\n"
        ))
        s = load_settings(cfg)
        assert s.output_directory == "/nas/out"
        assert s.source_trim == "Incoming"
        assert s.remove_files is True
        assert s.preserve_sld is False
        assert s.min_raw_files_to_move_again == 5000
        assert s.sld_starts_with == "Astral"

    def test_missing_output_directory(self, tmp_path: Path):
        cfg = _write_cfg(tmp_path / "msatrigger.cfg", "Source_Trim=Transfer\n")
        with pytest.raises(ConfigurationError, match="output_directory"):
            load_settings(cfg)

    def test_bad_int(self, tmp_path: Path):
        cfg = _write_cfg(tmp_path / "msatrigger.cfg", (
            "Output_Directory=/nas/out\n"
            "Min_Raw_Files_To_Move_Again=lots\n"
        ))
        with pytest.raises(ConfigurationError, match="min_raw_files_to_move_again"):
            load_settings(cfg)

    def test_environment_does_not_override_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ):
        cfg = _write_cfg(tmp_path / "msatrigger.cfg", (
            "Output_Directory=/nas/out\n"
            "Remove_Files=false\n"
        ))
        monkeypatch.setenv("REMOVE_FILES", "true")
        monkeypatch.setenv("REMOVE_DIRECTORIES", "true")
        monkeypatch.setenv("LOG_FILE", "/tmp/elsewhere.log")
        s = load_settings(cfg)
        assert s.remove_files is False
        assert s.remove_directories is False
        assert s.log_file == ""

    def test_quoted_windows_path_kept_literally(self, tmp_path: Path):
        cfg = _write_cfg(tmp_path / "msatrigger.cfg", (
            'Output_Directory="D:\\new\\transfer"\n'
            "Source_Trim='C:\\Xcalibur\\data'\n"
        ))
        s = load_settings(cfg)
        assert s.output_directory == r"D:\new\transfer"
        assert s.source_trim == r"C:\Xcalibur\data"

    def test_overrides_win(self, tmp_path: Path):
        cfg = _write_cfg(tmp_path / "msatrigger.cfg", "Output_Directory=/nas/out\n")
        s = load_settings(cfg, debug=True)
        assert s.debug is True
        assert s.effective_log_level == "DEBUG"


class TestSettingsValidation:
    def test_negative_min_size(self):
        with pytest.raises(ConfigurationError, match="min_raw_files_to_move_again"):
            load_settings(None, output_directory="/nas/out", min_raw_files_to_move_again=-1)

    def test_empty_output_directory(self):
        with pytest.raises(ConfigurationError, match="Output_Directory"):
            load_settings(None, output_directory="  ")

    def test_command_backend_requires_command(self):
        with pytest.raises(ConfigurationError, match="NOTIFICATION_COMMAND"):
            Settings(_env_file=None, output_directory="/o", notification_backend="command")

    def test_unparsable_notification_command(self):
        with pytest.raises(ConfigurationError, match="NOTIFICATION_COMMAND cannot be parsed"):
            Settings(
                _env_file=None, output_directory="/o",
                notification_backend="command", notification_command='notify-send "unterminated',
            )

    def test_marker_names_must_differ(self):
        with pytest.raises(ConfigurationError, match="TOKEN_FILE"):
            Settings(
                _env_file=None, output_directory="/o",
                token_file="marker.txt", failure_token_file="MARKER.txt",
            )

    def test_blank_prefix_falls_back(self):
        s = Settings(_env_file=None, output_directory="/o", sld_starts_with="")
        assert s.sld_starts_with == "Exploris"


class TestSettingsHelpers:
    def test_ignore_pattern(self):
        s = Settings(_env_file=None, output_directory="/o")
        assert s.ignore_pattern == "PostBlank"

    def test_ignore_pattern_disabled(self):
        s = Settings(_env_file=None, output_directory="/o", ignore_postblank=False)
        assert s.ignore_pattern is None

    @pytest.mark.parametrize("preserve,remove_dirs,expected", [
        (True, True, False),
        (True, False, False),
        (False, True, True),
        (False, False, False),
    ])
    def test_remove_directories_effective(self, preserve: bool, remove_dirs: bool, expected: bool):
        s = Settings(
            _env_file=None, output_directory="/o",
            preserve_sld=preserve, remove_directories=remove_dirs,
        )
        assert s.remove_directories_effective is expected

    def test_suffixes(self):
        s = Settings(
            _env_file=None, output_directory="/o",
            manifest_extension="SLD", payload_extension="RAW",
        )
        assert s.manifest_suffix == ".sld"
        assert s.payload_suffix == ".raw"


class TestFindConfigFile:
    def test_explicit(self, tmp_path: Path):
        cfg = _write_cfg(tmp_path / "custom.cfg", "Output_Directory=/o\n")
        assert find_config_file(cfg) == cfg

    def test_explicit_missing(self, tmp_path: Path):
        assert find_config_file(tmp_path / "nope.cfg") is None

    def test_cwd_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        _write_cfg(tmp_path / "MassSpecTrigger.cfg", "Output_Directory=/o\n")
        found = find_config_file()
        assert found is not None
        assert found.name == "MassSpecTrigger.cfg"

    def test_none_found(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        assert find_config_file() is None
