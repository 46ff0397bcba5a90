"""Global configuration data structures, loading and saving.

Provides immutable global config data loaded from ~/.arborist/config.toml at
the CLI entry point. The file is optional; a missing file means defaults.
"""

import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomlkit

from arborist.core.errors import ConfigError

DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Loaded once at CLI entry point and stored in ArboristContext.
    """

    random_identity: bool = False
    verbose: bool = False
    max_attempts: int = DEFAULT_MAX_ATTEMPTS


def default_config_path() -> Path:
    return Path.home() / ".arborist" / "config.toml"


class ConfigStore(ABC):
    """Access to the persisted global configuration."""

    @abstractmethod
    def exists(self) -> bool:
        """Check whether a config file is present."""
        ...

    @abstractmethod
    def load(self) -> GlobalConfig:
        """Load the config, or defaults if none is stored.

        Raises:
            ConfigError: If the stored config is malformed
        """
        ...

    @abstractmethod
    def save(self, config: GlobalConfig) -> None:
        """Persist the config, keeping unrelated content of an existing file."""
        ...

    @abstractmethod
    def location(self) -> Path:
        """Where the config lives, for messages."""
        ...


class RealConfigStore(ConfigStore):
    """Config stored as TOML on disk."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path if path is not None else default_config_path()

    def exists(self) -> bool:
        return self._path.exists()

    def location(self) -> Path:
        return self._path

    def load(self) -> GlobalConfig:
        """Load global config from the TOML file.

        Example config:
          random_identity = false
          verbose = false
          max_attempts = 3
        """
        if not self._path.exists():
            return GlobalConfig()

        try:
            data = tomllib.loads(self._path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {self._path}: {e}") from e

        return parse_config(data, source=self._path)

    def save(self, config: GlobalConfig) -> None:
        """Save config, preserving formatting and comments of an existing file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)

        if self._path.exists():
            with self._path.open("r", encoding="utf-8") as f:
                doc = tomlkit.load(f)
        else:
            doc = tomlkit.document()
            doc.add(tomlkit.comment("Global arborist configuration"))

        doc["random_identity"] = config.random_identity
        doc["verbose"] = config.verbose
        doc["max_attempts"] = config.max_attempts

        with self._path.open("w", encoding="utf-8") as f:
            tomlkit.dump(doc, f)


class FakeConfigStore(ConfigStore):
    """In-memory config store for tests."""

    def __init__(self, config: GlobalConfig | None = None) -> None:
        self._config = config
        self._saved: list[GlobalConfig] = []

    def exists(self) -> bool:
        return self._config is not None

    def location(self) -> Path:
        return Path("/fake/.arborist/config.toml")

    def load(self) -> GlobalConfig:
        return self._config if self._config is not None else GlobalConfig()

    def save(self, config: GlobalConfig) -> None:
        self._config = config
        self._saved.append(config)

    @property
    def saved_configs(self) -> list[GlobalConfig]:
        """Configs passed to save(), for test assertions."""
        return self._saved.copy()


def parse_config(data: dict[str, Any], *, source: Path) -> GlobalConfig:
    """Build a GlobalConfig from parsed TOML, validating value types."""
    random_identity = _read_bool(data, "random_identity", False, source)
    verbose = _read_bool(data, "verbose", False, source)

    max_attempts = data.get("max_attempts", DEFAULT_MAX_ATTEMPTS)
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise ConfigError(f"'max_attempts' in {source} must be a positive integer")

    return GlobalConfig(
        random_identity=random_identity, verbose=verbose, max_attempts=max_attempts
    )


def _read_bool(data: dict[str, Any], key: str, default: bool, source: Path) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' in {source} must be true or false")
    return value
