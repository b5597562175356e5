"""Application settings read from an optional YAML file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from desafio200.core.storage import DEFAULT_STORAGE_DIR

BACKENDS = ("file", "qsettings", "memory")
DEFAULT_CONFIG_PATH = DEFAULT_STORAGE_DIR / "config.yaml"


@dataclass(frozen=True)
class AppConfig:
    storage_dir: Path = field(default_factory=lambda: DEFAULT_STORAGE_DIR)
    backend: str = "file"
    log_level: str = "INFO"


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load settings from ``path`` (default ~/.desafio200/config.yaml).

    A missing file yields the defaults. Unknown keys are ignored.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return AppConfig()

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"{config_path.name}: invalid YAML: {e}") from e
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"{config_path.name}: expected a mapping at the top level")

    defaults = AppConfig()

    storage_dir = raw.get("storage_dir", defaults.storage_dir)
    if not isinstance(storage_dir, (str, Path)) or not str(storage_dir).strip():
        raise ValueError(f"{config_path.name}: 'storage_dir' must be a path")
    storage_dir = Path(storage_dir).expanduser()
    if not storage_dir.is_absolute():
        # relative paths are taken from the config file's directory
        storage_dir = config_path.parent / storage_dir

    backend = raw.get("backend", defaults.backend)
    if backend not in BACKENDS:
        raise ValueError(f"{config_path.name}: 'backend' must be one of {', '.join(BACKENDS)}")

    log_level = str(raw.get("log_level", defaults.log_level)).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"{config_path.name}: unknown 'log_level' {log_level!r}")

    return AppConfig(storage_dir=storage_dir, backend=backend, log_level=log_level)
