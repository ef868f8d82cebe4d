"""Configuration for the quiz shell.

The config file is optional. Each of its tables is overlaid on the
matching defaults below; unknown tables and keys are rejected so typos
surface immediately.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigError

__all__ = [
    "StorageConfig",
    "ShellSettings",
    "LoggingConfig",
    "ShellConfig",
    "load_config",
    "build_config",
]


_DEFAULTS: Mapping[str, Mapping[str, Any]] = {
    "storage": {
        "path": None,
        "seed": True,
    },
    "shell": {
        "prompt": "quiz > ",
        "authors": ["Andrés Moreno Miguel"],
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class StorageConfig:
    path: Path | None
    seed: bool


@dataclass(frozen=True)
class ShellSettings:
    prompt: str
    authors: tuple[str, ...]


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class ShellConfig:
    storage: StorageConfig
    shell: ShellSettings
    logging: LoggingConfig

    def store_path(self, default: Path) -> Path:
        """Return the configured store path or ``default``."""

        return self.storage.path if self.storage.path is not None else default


def load_config(path: Path | None) -> ShellConfig:
    """Load ``path`` (when given) on top of the defaults."""

    if path is None:
        return build_config({})
    try:
        with path.open("rb") as handle:
            tree = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse config TOML: {exc}") from exc
    return build_config(tree)


def build_config(override: Mapping[str, Any]) -> ShellConfig:
    unknown = sorted(set(override) - set(_DEFAULTS))
    if unknown:
        raise ConfigError(f"Unknown configuration key '{unknown[0]}'.")
    storage = _section(override, "storage")
    shell = _section(override, "shell")
    logging_section = _section(override, "logging")
    return ShellConfig(
        storage=StorageConfig(
            path=_optional_path(storage["path"], field="storage.path"),
            seed=_require_bool(storage["seed"], field="storage.seed"),
        ),
        shell=ShellSettings(
            prompt=_require_string(shell["prompt"], field="shell.prompt"),
            authors=_require_string_list(
                shell["authors"], field="shell.authors"
            ),
        ),
        logging=LoggingConfig(
            level=_require_level(logging_section["level"]),
            verbose=_require_bool(
                logging_section["verbose"], field="logging.verbose"
            ),
        ),
    )


def _optional_path(value: Any, *, field: str) -> Path | None:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string when set.")
    return Path(value.strip()).expanduser()


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{field}' must be a boolean.")
    return value


def _require_string(value: Any, *, field: str) -> str:
    # Prompts may end in whitespace, so only reject blank strings.
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string.")
    return value


def _require_string_list(value: Any, *, field: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(
        isinstance(item, str) and item.strip() for item in value
    ):
        raise ConfigError(f"'{field}' must be a list of non-empty strings.")
    return tuple(item.strip() for item in value)


def _require_level(value: Any) -> str:
    if not isinstance(value, str) or value.upper() not in _LEVELS:
        raise ConfigError(
            "logging.level must be one of "
            "DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    return value.upper()


def _section(override: Mapping[str, Any], name: str) -> dict[str, Any]:
    """Return the ``[name]`` table with missing keys taken from defaults."""

    values = override.get(name, {})
    if not isinstance(values, Mapping):
        raise ConfigError(
            f"Expected table for '{name}', found {type(values).__name__}."
        )
    defaults = _DEFAULTS[name]
    for key in values:
        if key not in defaults:
            raise ConfigError(
                f"Unknown configuration key '{name}.{key}' in [{name}]."
            )
    return {**defaults, **values}
