"""Configuration loading and management."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

COLD_START_POLICIES = ("seed", "reset")

DEFAULT_STORE_PATH = ".timestamps/plugin-data/timestamps.json"


@dataclass
class StoreConfig:
    path: Path = field(default_factory=lambda: Path(DEFAULT_STORE_PATH))


@dataclass
class WatcherConfig:
    interval_seconds: float = 2
    patterns: list[str] = field(default_factory=lambda: ["**/*.md"])


@dataclass
class Config:
    vault_path: Path = field(default_factory=Path.cwd)
    store: StoreConfig = field(default_factory=StoreConfig)
    watcher: WatcherConfig = field(default_factory=WatcherConfig)
    cold_start: str = "seed"
    log_dir: Path | None = None

    @property
    def store_path(self) -> Path:
        """Absolute location of the timestamp store."""
        if self.store.path.is_absolute():
            return self.store.path
        return self.vault_path / self.store.path


def expand_env_var(value: str) -> str:
    """Expand environment variables in string (e.g. ${VAR})."""
    if value.startswith("${") and value.endswith("}"):
        env_var = value[2:-1]
        return os.environ.get(env_var, value)
    return value


def expand_path(path_str: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expandvars(os.path.expanduser(path_str)))


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from YAML file."""
    if config_path is None:
        # Look for config in standard locations
        search_paths = [
            Path.cwd() / "line-timestamps.yaml",
            Path.home() / ".config" / "line-timestamps" / "config.yaml",
            Path("/etc/line-timestamps/config.yaml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = path
                break

    if config_path is None or not config_path.exists():
        return Config()

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    store_data = data.get("store", {})
    store = StoreConfig(path=expand_path(store_data.get("path", DEFAULT_STORE_PATH)))

    watcher_data = data.get("watcher", {})
    patterns = watcher_data.get("patterns", ["**/*.md"])
    if isinstance(patterns, str):
        patterns = [patterns]
    watcher = WatcherConfig(
        interval_seconds=watcher_data.get("interval_seconds", 2),
        patterns=list(patterns),
    )
    if watcher.interval_seconds <= 0:
        raise ValueError(f"watcher.interval_seconds must be positive, got {watcher.interval_seconds}")

    cold_start = expand_env_var(str(data.get("cold_start", "seed"))).lower()
    if cold_start not in COLD_START_POLICIES:
        raise ValueError(f"Invalid cold_start policy: {cold_start!r} (expected one of {COLD_START_POLICIES})")

    vault_path = expand_path(expand_env_var(str(data.get("vault_path", "."))))
    log_dir = data.get("log_dir")

    return Config(
        vault_path=vault_path,
        store=store,
        watcher=watcher,
        cold_start=cold_start,
        log_dir=expand_path(log_dir) if log_dir else None,
    )
