# -*- coding: utf-8 -*-
"""Download a .vsix package and hand it to the editor's CLI."""

from __future__ import annotations

import logging
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Optional

import httpx

from ..constant import VSIX_DOWNLOAD_DIRNAME
from ..providers.models import HostIdentity
from .base import make_client

logger = logging.getLogger(__name__)


class InstallError(Exception):
    """Downloading or installing a .vsix package failed."""


def default_download_dir() -> Path:
    return Path(tempfile.gettempdir()) / VSIX_DOWNLOAD_DIRNAME


def download_vsix(
    vsix_url: str,
    *,
    client: Optional[httpx.Client] = None,
    dest_dir: Optional[Path] = None,
) -> Path:
    """Stream *vsix_url* to ``<dest_dir>/ext-<ms>.vsix`` and return the path.

    A partial file is removed when the download fails.
    """
    dest_dir = dest_dir or default_download_dir()
    dest_dir.mkdir(parents=True, exist_ok=True)
    vsix_path = dest_dir / f"ext-{int(time.time() * 1000)}.vsix"

    own_client = client is None
    client = client or make_client()
    try:
        with client.stream("GET", vsix_url) as resp:
            if resp.status_code != 200:
                raise InstallError(
                    f"HTTP {resp.status_code}: Failed to download VSIX",
                )
            with open(vsix_path, "wb") as fh:
                for chunk in resp.iter_bytes():
                    fh.write(chunk)
    except httpx.HTTPError as exc:
        vsix_path.unlink(missing_ok=True)
        raise InstallError(
            f"Network error downloading VSIX: {exc}",
        ) from exc
    except InstallError:
        vsix_path.unlink(missing_ok=True)
        raise
    finally:
        if own_client:
            client.close()

    logger.info("Downloaded %s to %s", vsix_url, vsix_path)
    return vsix_path


def install_vsix(
    vsix_path: Path,
    host: HostIdentity,
    *,
    editor_binary: Optional[str] = None,
) -> None:
    """Run ``<editor> --install-extension <vsix_path>``."""
    binary = editor_binary or host.cli_binary
    try:
        subprocess.run(
            [binary, "--install-extension", str(vsix_path)],
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as exc:
        raise InstallError(f"Editor CLI not found: {binary}") from exc
    except subprocess.CalledProcessError as exc:
        raise InstallError(
            f"CLI failed: {(exc.stderr or '').strip() or exc}",
        ) from exc
    logger.info("Installed %s with %s", vsix_path.name, binary)


def install_vsix_from_url(
    vsix_url: str,
    host: HostIdentity,
    *,
    editor_binary: Optional[str] = None,
    client: Optional[httpx.Client] = None,
    dest_dir: Optional[Path] = None,
) -> Path:
    """Download then install; returns the downloaded package path."""
    vsix_path = download_vsix(vsix_url, client=client, dest_dir=dest_dir)
    install_vsix(vsix_path, host, editor_binary=editor_binary)
    return vsix_path
