"""Configuration loading for the ingestion driver."""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from pathlib import Path

from typelit.models import IngestConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/ingest_config.json")


def load_ingest_config(config_path: Path | None = None) -> IngestConfig:
    """Load ingestion configuration from JSON, falling back to defaults.

    Reads from ``config/ingest_config.json`` when *config_path* is ``None``.
    If the file does not exist, returns an ``IngestConfig`` with defaults.
    Keys that are not ``IngestConfig`` fields are ignored with a warning.

    Args:
        config_path: Optional explicit path to ingest_config.json.

    Returns:
        IngestConfig populated from the file over defaults.

    Raises:
        ValueError: If the file is not a JSON object.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    data: dict = {}
    if config_path.exists():
        with open(config_path) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{config_path}: expected a JSON object")

    field_names = {f.name for f in fields(IngestConfig)}
    unknown = sorted(set(data) - field_names)
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", config_path, ", ".join(unknown))

    kwargs = {k: v for k, v in data.items() if k in field_names}
    return IngestConfig(**kwargs)
