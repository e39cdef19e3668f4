# -*- coding: utf-8 -*-
"""galleryswitch's own settings (config.json under the working dir)."""

from .config import Config, DefaultMarketplace
from .utils import get_config_path, load_config, save_config

__all__ = [
    "Config",
    "DefaultMarketplace",
    "get_config_path",
    "load_config",
    "save_config",
]
