# -*- coding: utf-8 -*-
"""Work out which gallery provider is currently active."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from .models import FORK_GALLERY_ID, HostIdentity, ProviderId
from .registry import SERVICE_URL_MARKERS

logger = logging.getLogger(__name__)

_PREFERENCE_IDS = {
    ProviderId.OPENVSX.value: ProviderId.OPENVSX,
    ProviderId.MS.value: ProviderId.MS,
    ProviderId.CURSOR.value: ProviderId.CURSOR,
}

_LABELS = {
    ProviderId.OPENVSX: "Open VSX",
    ProviderId.MS: "Microsoft",
    ProviderId.CURSOR: "Cursor",
    ProviderId.CUSTOM: "Custom",
}

_FORK_HOST_LABELS = {
    ProviderId.OPENVSX: "Open VSX",
    ProviderId.MS: "VS Marketplace",
    ProviderId.CURSOR: "Cursor",
}


def detect(config: Mapping[str, Any]) -> ProviderId:
    """Classify the provider configured in a product.json document.

    A fork ``galleryId`` is checked before the URL because the fork editor
    ignores ``serviceUrl`` when it is present.  URLs are matched by
    substring so that path and query differences between API versions do
    not matter.
    """
    gallery = config.get("extensionsGallery")
    if not isinstance(gallery, Mapping):
        return ProviderId.UNKNOWN
    service_url = gallery.get("serviceUrl")
    if not isinstance(service_url, str) or not service_url:
        return ProviderId.UNKNOWN

    # NOTE: a stray galleryId next to a non-fork serviceUrl is still
    # reported as the fork gallery.
    if gallery.get("galleryId") == FORK_GALLERY_ID:
        return ProviderId.CURSOR

    for marker, provider_id in SERVICE_URL_MARKERS:
        if marker in service_url:
            return provider_id
    if service_url.startswith("http"):
        return ProviderId.CUSTOM
    return ProviderId.UNKNOWN


def detect_from_preference(value: Optional[str]) -> ProviderId:
    """Classify the fork editor's own default-marketplace preference."""
    return _PREFERENCE_IDS.get(value or "", ProviderId.UNKNOWN)


def status_label(provider_id: ProviderId, host: HostIdentity) -> str:
    """Human label for the status line, e.g. ``Market: Open VSX``."""
    if host.is_fork_host:
        label = _FORK_HOST_LABELS.get(provider_id)
        return f"Marketplace: {label}" if label else "Marketplace"
    label = _LABELS.get(provider_id)
    return f"Market: {label}" if label else "Market"


class GalleryStateDetector:
    """Re-derives the active provider on demand; nothing is cached.

    Inside the fork editor product.json may be ignored, so the separately
    stored default-marketplace preference is read instead.
    """

    def __init__(
        self,
        host: HostIdentity,
        read_config: Callable[[], Mapping[str, Any]],
        read_preference: Callable[[], Optional[str]],
    ) -> None:
        self.host = host
        self._read_config = read_config
        self._read_preference = read_preference

    def current(self) -> ProviderId:
        if self.host.is_fork_host:
            provider_id = detect_from_preference(self._read_preference())
        else:
            provider_id = detect(self._read_config())
        logger.debug("Detected gallery provider: %s", provider_id.value)
        return provider_id
