# -*- coding: utf-8 -*-
"""Registry search and direct .vsix install for Open VSX and Microsoft."""

from typing import Optional

import httpx

from .base import Marketplace, MarketplaceError, split_extension_id
from .installer import (
    InstallError,
    download_vsix,
    install_vsix,
    install_vsix_from_url,
)
from .models import MarketplaceExtension
from .ms import MSMarketplace
from .openvsx import OpenVSXMarketplace

# provider id -> Marketplace class
MARKETPLACES = {
    OpenVSXMarketplace.id: OpenVSXMarketplace,
    MSMarketplace.id: MSMarketplace,
}


def get_marketplace(
    marketplace_id: str,
    client: Optional[httpx.Client] = None,
) -> Marketplace:
    """Return a client for *marketplace_id* (``openvsx`` or ``ms``)."""
    cls = MARKETPLACES.get(marketplace_id)
    if cls is None:
        raise MarketplaceError(
            f"No search backend for marketplace '{marketplace_id}'. "
            "Use the built-in Extensions view, or switch to openvsx/ms.",
        )
    return cls(client)


__all__ = [
    "InstallError",
    "MARKETPLACES",
    "Marketplace",
    "MarketplaceError",
    "MarketplaceExtension",
    "MSMarketplace",
    "OpenVSXMarketplace",
    "download_vsix",
    "get_marketplace",
    "install_vsix",
    "install_vsix_from_url",
    "split_extension_id",
]
