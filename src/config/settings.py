# src/config/settings.py - v3
"""Typed configuration loaded from the trigger config file via pydantic-settings.

The config file uses the historical ``Key=value`` layout (``#`` comments,
optional quotes), read literally by ``CfgFileSettingsSource``. Keys match
field names case-insensitively, so ``Output_Directory`` fills
``output_directory``. Only init arguments and that file feed the settings;
process environment variables are never consulted.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Literal

from pydantic import ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from msatrigger.config.cfg_source import CfgFileSettingsSource

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAMES = ("msatrigger.cfg", "MassSpecTrigger.cfg")
USER_CONFIG_PATH = Path("~/.msatrigger/msatrigger.cfg")

DEFAULT_MANIFEST_PREFIX = "Exploris"


class ConfigurationError(Exception):
    """Raised when configuration is missing or internally inconsistent."""


class Settings(BaseSettings):
    """Trigger settings, built once per invocation and never mutated."""

    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    # === Destination ===
    output_directory: str
    source_trim: str = "Transfer"
    repeat_run_matches: str = "_RPT"

    # === Marker files ===
    token_file: str = "MSAComplete.txt"
    failure_token_file: str = "MSAFailure.txt"

    # === Manifest ===
    sld_starts_with: str = DEFAULT_MANIFEST_PREFIX
    manifest_extension: str = "sld"
    manifest_decoder: str = "csv"

    # === Ledger ===
    ledger_file: str = "RawFilesAcquired.txt"
    payload_extension: str = ".raw"
    postblank_matches: str = "PostBlank"
    ignore_postblank: bool = True

    # === Source cleanup / copy policy ===
    remove_files: bool = False
    remove_directories: bool = False
    preserve_sld: bool = True
    overwrite_older: bool = False
    min_raw_files_to_move_again: int = 100_000

    # === Notifications ===
    notification_backend: Literal["log", "command", "none"] = "log"
    notification_command: str = ""

    # === Logging ===
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: str = ""
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Sources ---

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # ``_env_file`` names the cfg file; it is parsed literally, not as dotenv.
        cfg_file = getattr(dotenv_settings, "env_file", None)
        if isinstance(cfg_file, (list, tuple)):
            cfg_file = cfg_file[0] if cfg_file else None
        return (
            init_settings,
            CfgFileSettingsSource(settings_cls, Path(cfg_file) if cfg_file else None),
        )

    # --- Validators ---

    @field_validator("output_directory")
    @classmethod
    def validate_output_directory(cls, v: str) -> str:  # noqa: N805
        if not v.strip():
            raise ValueError("Output_Directory must not be empty")
        return v.strip()

    @field_validator("min_raw_files_to_move_again")
    @classmethod
    def validate_min_size(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("min_raw_files_to_move_again must be >= 0")
        return v

    @field_validator("sld_starts_with")
    @classmethod
    def default_blank_prefix(cls, v: str) -> str:  # noqa: N805
        if not v.strip():
            logger.warning(
                'Config key "SLD_Starts_With" not set, using default value: "%s"',
                DEFAULT_MANIFEST_PREFIX,
            )
            return DEFAULT_MANIFEST_PREFIX
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: object) -> object:  # noqa: N805
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        errors: list[str] = []

        if self.notification_backend == "command":
            try:
                argv = shlex.split(self.notification_command)
            except ValueError as exc:
                errors.append(f"NOTIFICATION_COMMAND cannot be parsed: {exc}")
            else:
                if not argv:
                    errors.append(
                        "NOTIFICATION_BACKEND=command requires NOTIFICATION_COMMAND"
                    )

        if self.token_file.strip().lower() == self.failure_token_file.strip().lower():
            errors.append("TOKEN_FILE and FAILURE_TOKEN_FILE must differ")

        if not self.payload_extension.strip(". "):
            errors.append("PAYLOAD_EXTENSION must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def output_root(self) -> Path:
        return Path(self.output_directory).expanduser()

    @property
    def ignore_pattern(self) -> str | None:
        """Substring marking files that are never tracked, or None when disabled."""
        if not self.ignore_postblank or not self.postblank_matches.strip():
            return None
        return self.postblank_matches

    @property
    def remove_directories_effective(self) -> bool:
        """Preserving the manifest always wins over removing directories."""
        return self.remove_directories and not self.preserve_sld

    @property
    def manifest_suffix(self) -> str:
        return "." + self.manifest_extension.strip().lstrip(".").lower()

    @property
    def payload_suffix(self) -> str:
        return "." + self.payload_extension.strip().lstrip(".").lower()

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


def find_config_file(explicit: Path | None = None) -> Path | None:
    """Locate the config file to read.

    Args:
        explicit: Path given on the command line; used as-is when set.

    Returns:
        The first existing candidate, or None when no file was found.
    """
    if explicit is not None:
        return explicit if explicit.is_file() else None

    candidates = [Path.cwd() / name for name in DEFAULT_CONFIG_FILENAMES]
    candidates.append(USER_CONFIG_PATH.expanduser())
    for candidate in candidates:
        if candidate.is_file():
            return candidate

    logger.warning("Failed to open any configuration file after trying:")
    for candidate in candidates:
        logger.warning('  - "%s"', candidate.resolve())
    return None


def load_settings(config_file: Path | None = None, **overrides: object) -> Settings:
    """Load settings from a config file with optional overrides.

    Args:
        config_file: Path to the ``Key=value`` config file (None = defaults and overrides only).
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If a required key is missing or a value is invalid.
    """
    try:
        return Settings(_env_file=config_file, **overrides)  # type: ignore[call-arg]
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read configuration file {config_file}: {exc}") from exc
    except ValidationError as exc:
        problems = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "config"
            if err["type"] == "missing":
                problems.append(f'Missing key "{field}" in configuration file')
            else:
                problems.append(f"{field}: {err['msg']}")
        source = config_file if config_file is not None else "no configuration file"
        raise ConfigurationError(
            f"Invalid configuration ({source}): " + "; ".join(problems)
        ) from exc
