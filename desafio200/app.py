"""Wiring for the savings challenge: logging, storage backend and the store."""

import logging
from typing import Optional

from desafio200.config import AppConfig, load_config
from desafio200.core.storage import (
    FileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    QSettingsKeyValueStore,
    StatePersistence,
)
from desafio200.core.store import DepositStore


def configure_logging(level: str = "INFO") -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_backend(config: AppConfig) -> KeyValueStore:
    """Build the key-value backend named in ``config``."""
    if config.backend == "memory":
        return MemoryKeyValueStore()
    if config.backend == "qsettings":
        return QSettingsKeyValueStore(config.storage_dir / "desafio200.ini")
    return FileKeyValueStore(config.storage_dir)


def create_store(config: Optional[AppConfig] = None) -> DepositStore:
    """Build the store the UI talks to and hydrate it from durable storage."""
    if config is None:
        config = load_config()
    backend = create_backend(config)
    store = DepositStore(StatePersistence(backend))
    store.init_from_storage()
    logging.info(
        "Store ready: backend=%s, %d/200 deposits completed",
        config.backend,
        store.completed_count,
    )
    return store


def run(config: Optional[AppConfig] = None) -> DepositStore:
    """Set up logging and return a hydrated store for the UI layer."""
    if config is None:
        config = load_config()
    configure_logging(config.log_level)
    return create_store(config)
