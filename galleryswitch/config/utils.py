# -*- coding: utf-8 -*-
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..constant import CONFIG_FILE, WORKING_DIR
from .config import Config

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """Return the default config.json path."""
    return WORKING_DIR / CONFIG_FILE


def load_config(path: Optional[Path] = None) -> Config:
    """Load config.json; a missing or broken file yields the defaults."""
    if path is None:
        path = get_config_path()
    if not path.is_file():
        return Config()
    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
        if not isinstance(raw, dict):
            return Config()
        return Config.model_validate(raw)
    except (OSError, ValueError, ValidationError):
        logger.warning("Ignoring invalid config file %s", path)
        return Config()


def save_config(config: Config, path: Optional[Path] = None) -> None:
    """Write *config* to config.json."""
    if path is None:
        path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(
            config.model_dump(mode="json", by_alias=True, exclude_none=True),
            fh,
            indent=2,
            ensure_ascii=False,
        )
