# -*- coding: utf-8 -*-
"""Reading and writing the editor's gallery configuration (product.json)."""

from __future__ import annotations

import json
import logging
import os
import shutil
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from ..constant import BACKUP_PREFIX, PRODUCT_DIR_ENV, PRODUCT_JSON_NAME
from ..errors import HostEnvironmentError, NoBackupError
from .models import (
    FORK_GALLERY_ID,
    GalleryDescriptor,
    HostIdentity,
    ProviderId,
)

logger = logging.getLogger(__name__)

# Fork fields where an existing non-empty value beats the descriptor's.
_FORK_KEEP_IF_SET = ("resourceUrlTemplate", "controlUrl")
# Fork fields where any existing value (even "") beats the descriptor's.
_FORK_KEEP_IF_PRESENT = ("recommendationsUrl", "nlsBaseUrl", "publisherUrl")

# ---------------------------------------------------------------------------
# JSON file path
# ---------------------------------------------------------------------------


def get_product_json_dir(
    host: HostIdentity,
    *,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """Return the per-user directory holding the editor's product.json.

    ``GALLERYSWITCH_PRODUCT_DIR`` wins over the platform default.
    """
    env = os.environ if environ is None else environ
    platform = sys.platform if platform is None else platform

    override = env.get(PRODUCT_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()

    folder = host.support_folder
    if platform == "darwin":
        home = env.get("HOME")
        if not home:
            raise HostEnvironmentError("HOME is not set on macOS")
        return Path(home) / "Library" / "Application Support" / folder
    if platform == "win32":
        appdata = env.get("APPDATA")
        if not appdata:
            raise HostEnvironmentError("APPDATA is not set on Windows")
        return Path(appdata) / folder
    if platform.startswith("linux"):
        home = env.get("HOME")
        if not home:
            raise HostEnvironmentError("HOME is not set on Linux")
        return Path(home) / ".config" / folder
    raise HostEnvironmentError(f"Unsupported platform: {platform}")


def get_product_json_path(host: HostIdentity) -> Path:
    """Return the product.json path for *host*."""
    return get_product_json_dir(host) / PRODUCT_JSON_NAME


def backup_timestamp(now: Optional[datetime] = None) -> str:
    """Filesystem-safe ISO-8601 UTC timestamp that sorts chronologically.

    Example: ``2024-05-01T09:30:12.345Z`` → ``2024-05-01T09-30-12-345Z``
    """
    now = now or datetime.now(timezone.utc)
    now = now.astimezone(timezone.utc)
    millis = now.microsecond // 1000
    iso = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{millis:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def find_latest_backup(directory: Path) -> Optional[Path]:
    """Return the newest ``product.json.bak-*`` in *directory*, if any."""
    try:
        names = [
            entry.name
            for entry in directory.iterdir()
            if entry.name.startswith(BACKUP_PREFIX)
        ]
    except OSError:
        return None
    if not names:
        return None
    return directory / max(names, key=_backup_sort_key)


def _backup_sort_key(name: str) -> Tuple[str, int]:
    # "<prefix><timestamp>[-<n>]"; timestamps sort lexicographically.
    stamp, _, counter = name[len(BACKUP_PREFIX) :].partition("Z-")
    if counter.isdigit():
        return stamp + "Z", int(counter)
    return name[len(BACKUP_PREFIX) :], 0


def unique_backup_path(directory: Path, ts: str) -> Path:
    """Backup path for *ts*; adds "-1", "-2", ... if the name is taken."""
    backup = directory / f"{BACKUP_PREFIX}{ts}"
    counter = 1
    while backup.exists():
        backup = directory / f"{BACKUP_PREFIX}{ts}-{counter}"
        counter += 1
    return backup


# ---------------------------------------------------------------------------
# Merge policy
# ---------------------------------------------------------------------------


def merge_gallery(
    existing: Any,
    descriptor: GalleryDescriptor,
    target_provider: ProviderId,
    host: HostIdentity,
) -> Dict[str, Any]:
    """Compute the new ``extensionsGallery`` value.

    Only when switching to the fork gallery from inside the fork editor is
    the existing object kept and overlaid.  Every other switch builds the
    object from scratch with just ``serviceUrl``, ``itemUrl`` and
    ``cacheUrl``: any leftover fork field (``galleryId`` in particular)
    makes the fork editor ignore ``serviceUrl`` in favour of its own
    hardcoded marketplace.
    """
    if target_provider != ProviderId.CURSOR or not host.is_fork_host:
        return descriptor.to_gallery_dict()

    current: Dict[str, Any] = existing if isinstance(existing, dict) else {}
    defaults = descriptor.extension_fields
    merged: Dict[str, Any] = {
        **current,
        **descriptor.to_gallery_dict(include_extension_fields=True),
    }
    merged["galleryId"] = FORK_GALLERY_ID

    for key in _FORK_KEEP_IF_SET:
        value = current.get(key) or defaults.get(key)
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value

    for key in _FORK_KEEP_IF_PRESENT:
        value = current.get(key)
        if value is None:
            value = defaults.get(key)
        merged[key] = "" if value is None else value

    return merged


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class GalleryConfigStore:
    """Crash-safe mutation of ``extensionsGallery`` inside product.json.

    Every other top-level key of the document belongs to the editor and
    is carried through untouched.
    """

    def __init__(
        self,
        host: HostIdentity,
        path: Optional[Path] = None,
    ) -> None:
        self.host = host
        self.path = Path(path) if path else get_product_json_path(host)

    @property
    def directory(self) -> Path:
        return self.path.parent

    def read_config(self) -> Dict[str, Any]:
        """Load product.json; missing or malformed content reads as ``{}``."""
        if not self.path.is_file():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except (OSError, ValueError):
            logger.debug(
                "Ignoring unreadable %s",
                self.path,
                exc_info=True,
            )
            return {}
        if not isinstance(raw, dict):
            return {}
        return raw

    def write_gallery(
        self,
        descriptor: GalleryDescriptor,
        target_provider: ProviderId,
    ) -> Dict[str, Any]:
        """Merge *descriptor* into product.json and persist it.

        Returns the document that was written.
        """
        data = self.read_config()
        data["extensionsGallery"] = merge_gallery(
            data.get("extensionsGallery"),
            descriptor,
            target_provider,
            self.host,
        )
        self._write_atomic(data)
        logger.info(
            "Switched gallery to %s in %s",
            target_provider.value,
            self.path,
        )
        return data

    def ensure_exists(self) -> Path:
        """Create product.json from the current document if it is missing."""
        if not self.path.exists():
            self._write_atomic(self.read_config())
        return self.path

    def find_latest_backup(self) -> Optional[Path]:
        return find_latest_backup(self.directory)

    def restore_from_latest_backup(self) -> Path:
        """Copy the newest backup over product.json.

        Returns the backup used.  Raises :class:`NoBackupError` when the
        directory holds no backup.
        """
        latest = self.find_latest_backup()
        if latest is None:
            raise NoBackupError(f"No {PRODUCT_JSON_NAME} backup found.")
        shutil.copyfile(latest, self.path)
        logger.info("Restored %s from %s", self.path, latest.name)
        return latest

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def _write_atomic(self, data: Dict[str, Any]) -> None:
        directory = self.directory
        directory.mkdir(parents=True, exist_ok=True)
        ts = backup_timestamp()

        if self.path.exists():
            backup = unique_backup_path(directory, ts)
            try:
                shutil.copy2(self.path, backup)
            except OSError:
                logger.warning(
                    "Failed to back up %s",
                    self.path,
                    exc_info=True,
                )

        # Same directory as the target so the rename stays on one volume.
        tmp = directory / f".product-{os.getpid()}-{ts}.json.tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        finally:
            if tmp.exists():
                try:
                    tmp.unlink()
                except OSError:
                    logger.debug("Could not remove %s", tmp)
