"""Config loading utilities for scopeid."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from scopeid.core.errors import ConfigurationError
from scopeid.core.models import GeneratorConfig
from scopeid.stores.base import OptimisticDataStore
from scopeid.stores.file import FileDataStore
from scopeid.stores.memory import MemoryDataStore

logger = logging.getLogger(__name__)


def load_config(path: Path) -> dict[str, Any]:
    """Load a YAML config file as a dict.

    Returns empty dict if the file doesn't exist.
    """
    if not path.exists():
        logger.debug("No config found at %s; using defaults", path)
        return {}

    logger.info("Loading config from %s", path)
    with path.open() as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        logger.warning("%s did not contain a mapping; using empty dict", path.name)
        return {}

    return data


def make_generator_config(data: dict[str, Any]) -> GeneratorConfig:
    """Build a GeneratorConfig from loaded config values.

    Only fields present in *data* override the defaults defined in
    :class:`GeneratorConfig`. Invalid values raise :class:`ConfigurationError`.
    """
    valid_fields = GeneratorConfig.model_fields
    filtered = {k: v for k, v in data.items() if k in valid_fields}

    if dropped := set(data) - set(filtered):
        logger.warning("Ignoring unknown config keys: %s", sorted(dropped))

    try:
        return GeneratorConfig(**filtered)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid generator configuration: {exc}") from exc


def build_store(config: GeneratorConfig, base_dir: Path | None = None) -> OptimisticDataStore:
    """Instantiate the store described by ``config.store``.

    A relative ``data_dir`` is resolved against *base_dir* (default: cwd).
    """
    store_config = config.store
    if store_config.kind == "memory":
        return MemoryDataStore(initial_value=store_config.initial_value)

    data_dir = Path(store_config.data_dir)
    if not data_dir.is_absolute():
        data_dir = (base_dir or Path.cwd()) / data_dir
    return FileDataStore(data_dir, initial_value=store_config.initial_value)
