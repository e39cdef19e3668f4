# -*- coding: utf-8 -*-
"""Built-in gallery definitions and registry."""

from __future__ import annotations

from typing import List, Optional

from ..errors import InvalidEndpointError
from .models import (
    FORK_GALLERY_ID,
    GalleryDescriptor,
    ProviderDefinition,
    ProviderId,
    is_probably_url,
)

# ---------------------------------------------------------------------------
# Known endpoints
# ---------------------------------------------------------------------------

OPENVSX_GALLERY = GalleryDescriptor(
    serviceUrl="https://open-vsx.org/vscode/gallery",
    itemUrl="https://open-vsx.org/vscode/item",
)

MS_GALLERY = GalleryDescriptor(
    serviceUrl="https://marketplace.visualstudio.com/_apis/public/gallery",
    itemUrl="https://marketplace.visualstudio.com/items",
    cacheUrl="https://vscode.blob.core.windows.net/gallery/index",
)

CURSOR_GALLERY = GalleryDescriptor(
    serviceUrl="https://marketplace.cursorapi.com/_apis/public/gallery",
    itemUrl="https://marketplace.cursorapi.com/items",
    extensionFields={
        "galleryId": FORK_GALLERY_ID,
        "resourceUrlTemplate": (
            "https://marketplace.cursorapi.com"
            "/{publisher}/{name}/{version}/{path}"
        ),
        "controlUrl": "https://api2.cursor.sh/extensions-control",
        "recommendationsUrl": "",
        "nlsBaseUrl": "",
        "publisherUrl": "",
    },
)

# Substrings of ``serviceUrl`` that identify each built-in provider, in
# the order they are checked.
SERVICE_URL_MARKERS = (
    ("open-vsx.org", ProviderId.OPENVSX),
    ("marketplace.visualstudio.com", ProviderId.MS),
    ("marketplace.cursorapi.com", ProviderId.CURSOR),
)

# ---------------------------------------------------------------------------
# Provider definitions
# ---------------------------------------------------------------------------

PROVIDER_OPENVSX = ProviderDefinition(
    id=ProviderId.OPENVSX,
    name="Open VSX",
    gallery=OPENVSX_GALLERY,
    searchable=True,
)

PROVIDER_MS = ProviderDefinition(
    id=ProviderId.MS,
    name="Microsoft",
    gallery=MS_GALLERY,
    searchable=True,
)

PROVIDER_CURSOR = ProviderDefinition(
    id=ProviderId.CURSOR,
    name="Cursor",
    gallery=CURSOR_GALLERY,
)

PROVIDER_CUSTOM = ProviderDefinition(
    id=ProviderId.CUSTOM,
    name="Custom",
)

# Registry: provider_id -> ProviderDefinition
PROVIDERS: dict[ProviderId, ProviderDefinition] = {
    PROVIDER_OPENVSX.id: PROVIDER_OPENVSX,
    PROVIDER_MS.id: PROVIDER_MS,
    PROVIDER_CURSOR.id: PROVIDER_CURSOR,
    PROVIDER_CUSTOM.id: PROVIDER_CUSTOM,
}


def get_provider(provider_id: str) -> Optional[ProviderDefinition]:
    """Return a provider definition by id, or None if not found."""
    try:
        return PROVIDERS.get(ProviderId(provider_id))
    except ValueError:
        return None


def list_providers() -> List[ProviderDefinition]:
    """Return all registered provider definitions."""
    return list(PROVIDERS.values())


def build_custom_descriptor(
    service_url: Optional[str],
    item_url: Optional[str],
    cache_url: Optional[str] = None,
) -> GalleryDescriptor:
    """Validate user-supplied endpoints and build a custom descriptor.

    ``service_url`` and ``item_url`` must be absolute http(s) URLs.  A
    ``cache_url`` that is not a URL is dropped rather than rejected.
    """
    service_url = (service_url or "").strip()
    item_url = (item_url or "").strip()
    cache_url = (cache_url or "").strip()
    if not is_probably_url(service_url):
        raise InvalidEndpointError(
            "Invalid serviceUrl. Must start with http(s)://",
        )
    if not is_probably_url(item_url):
        raise InvalidEndpointError(
            "Invalid itemUrl. Must start with http(s)://",
        )
    return GalleryDescriptor(
        serviceUrl=service_url,
        itemUrl=item_url,
        cacheUrl=cache_url if is_probably_url(cache_url) else None,
    )
