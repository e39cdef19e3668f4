# -*- coding: utf-8 -*-
"""Open VSX registry client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .base import Marketplace, MarketplaceError, split_extension_id
from .models import MarketplaceExtension

logger = logging.getLogger(__name__)

OPENVSX_API = "https://open-vsx.org/api"


def _extension_from_json(ext: Dict[str, Any]) -> MarketplaceExtension:
    namespace = ext.get("namespace") or ""
    name = ext.get("name") or ""
    return MarketplaceExtension(
        id=f"{namespace}.{name}",
        publisher=namespace,
        name=name,
        display_name=ext.get("displayName") or name,
        description=ext.get("description") or "",
        version=ext.get("version") or "",
    )


class OpenVSXMarketplace(Marketplace):
    id = "openvsx"
    label = "Open VSX"

    def _extension_url(self, publisher: str, name: str) -> str:
        return (
            f"{OPENVSX_API}/{quote(publisher, safe='')}"
            f"/{quote(name, safe='')}"
        )

    def search_extensions(self, query: str) -> List[MarketplaceExtension]:
        url = (
            f"{OPENVSX_API}/-/search?size=50&sortBy=relevance"
            f"&query={quote(query, safe='')}"
        )
        try:
            data = self._request_json("GET", url)
        except MarketplaceError as exc:
            raise MarketplaceError(
                f"Failed to search {self.label}: {exc}",
                status_code=exc.status_code,
            ) from exc
        extensions = data.get("extensions") if isinstance(data, dict) else None
        if not isinstance(extensions, list):
            logger.debug("No extensions list in %s response", self.label)
            return []
        return [
            _extension_from_json(ext)
            for ext in extensions
            if isinstance(ext, dict)
        ]

    def get_extension_by_id(
        self,
        extension_id: str,
    ) -> Optional[MarketplaceExtension]:
        try:
            publisher, name = split_extension_id(extension_id)
            ext = self._request_json(
                "GET",
                self._extension_url(publisher, name),
            )
        except MarketplaceError as exc:
            if exc.status_code == 404:
                return None
            raise MarketplaceError(
                f"Failed to get extension from {self.label}: {exc}",
                status_code=exc.status_code,
            ) from exc
        if not isinstance(ext, dict) or not ext.get("namespace"):
            return None
        if not ext.get("name"):
            return None
        return _extension_from_json(ext)

    def get_vsix_url(self, ext: MarketplaceExtension) -> str:
        try:
            data = self._request_json(
                "GET",
                self._extension_url(ext.publisher, ext.name),
            )
            files = data.get("files") if isinstance(data, dict) else None
            if isinstance(files, dict) and files.get("download"):
                return files["download"]

            version = ext.version or (
                data.get("version") if isinstance(data, dict) else ""
            )
            if not version:
                raise MarketplaceError("Extension version not found")
        except MarketplaceError as exc:
            raise MarketplaceError(
                f"Failed to get VSIX URL from {self.label}: {exc}",
                status_code=exc.status_code,
            ) from exc
        publisher = quote(ext.publisher, safe="")
        name = quote(ext.name, safe="")
        version = quote(version, safe="")
        return (
            f"{OPENVSX_API}/{publisher}/{name}/{version}"
            f"/file/{name}-{version}.vsix"
        )
