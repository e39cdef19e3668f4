# -*- coding: utf-8 -*-
import os
from pathlib import Path

WORKING_DIR = (
    Path(os.environ.get("GALLERYSWITCH_WORKING_DIR", "~/.galleryswitch"))
    .expanduser()
    .resolve()
)

CONFIG_FILE = os.environ.get("GALLERYSWITCH_CONFIG_FILE", "config.json")

# Name of the editor whose gallery is being switched, e.g. "Cursor" or
# "Visual Studio Code - Insiders".
APP_NAME_ENV = "GALLERYSWITCH_APP_NAME"
DEFAULT_APP_NAME = "Visual Studio Code"

# When set, used instead of the platform-resolved product.json directory.
PRODUCT_DIR_ENV = "GALLERYSWITCH_PRODUCT_DIR"

PRODUCT_JSON_NAME = "product.json"
BACKUP_PREFIX = f"{PRODUCT_JSON_NAME}.bak-"

# Env key for app log level (used by CLI and app load).
LOG_LEVEL_ENV = "GALLERYSWITCH_LOG_LEVEL"

# When True, expose /docs, /redoc, /openapi.json
# (dev only; keep False in prod).
DOCS_ENABLED = os.environ.get(
    "GALLERYSWITCH_OPENAPI_DOCS",
    "false",
).lower() in (
    "true",
    "1",
    "yes",
)

HTTP_TIMEOUT = float(os.environ.get("GALLERYSWITCH_HTTP_TIMEOUT", "30"))
HTTP_USER_AGENT = "Marketplace-Switcher-Extension"

# Downloaded .vsix packages land here before being handed to the editor.
VSIX_DOWNLOAD_DIRNAME = "marketplace-switcher"
