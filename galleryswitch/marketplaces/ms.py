# -*- coding: utf-8 -*-
"""Visual Studio Marketplace client (extensionquery API)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .base import Marketplace, MarketplaceError, split_extension_id
from .models import MarketplaceExtension

logger = logging.getLogger(__name__)

MS_QUERY_URL = (
    "https://marketplace.visualstudio.com/_apis/public/gallery/"
    "extensionquery?api-version=3.0-preview.1"
)

# filterType 7 = search text / extension name
_FILTER_SEARCH_TEXT = 7
# IncludeFiles | ExcludeNonValidated | IncludeInstallationTargets
_QUERY_FLAGS = 98
_VSIX_ASSET_TYPE = "Microsoft.VisualStudio.Services.VSIXPackage"


def _latest_version(ext: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    versions = ext.get("versions")
    if not isinstance(versions, list) or not versions:
        return None
    return versions[0]


def _publisher_name(ext: Dict[str, Any]) -> str:
    publisher = ext.get("publisher")
    if isinstance(publisher, dict):
        return publisher.get("publisherName") or ""
    return ""


def _extension_from_json(
    ext: Dict[str, Any],
) -> Optional[MarketplaceExtension]:
    publisher = _publisher_name(ext)
    name = ext.get("extensionName") or ""
    latest = _latest_version(ext)
    if not publisher or not name or latest is None:
        return None
    display_name = ext.get("displayName") or ""
    return MarketplaceExtension(
        id=f"{publisher}.{name}",
        publisher=publisher,
        name=name,
        display_name=display_name or name,
        description=ext.get("shortDescription") or display_name,
        version=latest.get("version") or "",
    )


def _find_vsix_source(entries: Any) -> Optional[str]:
    if not isinstance(entries, list):
        return None
    for entry in entries:
        if (
            isinstance(entry, dict)
            and entry.get("assetType") == _VSIX_ASSET_TYPE
            and entry.get("source")
        ):
            return entry["source"]
    return None


class MSMarketplace(Marketplace):
    id = "ms"
    label = "VS Marketplace"

    def _query_extensions(self, value: str) -> List[Dict[str, Any]]:
        body = {
            "filters": [
                {
                    "criteria": [
                        {"filterType": _FILTER_SEARCH_TEXT, "value": value},
                    ],
                },
            ],
            "flags": _QUERY_FLAGS,
        }
        data = self._request_json("POST", MS_QUERY_URL, json_body=body)
        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list) or not results:
            return []
        first = results[0]
        if not isinstance(first, dict):
            return []
        extensions = first.get("extensions")
        return extensions if isinstance(extensions, list) else []

    def _find_exact(
        self,
        publisher: str,
        name: str,
    ) -> Optional[Dict[str, Any]]:
        for ext in self._query_extensions(f"{publisher}.{name}"):
            if (
                isinstance(ext, dict)
                and _publisher_name(ext) == publisher
                and ext.get("extensionName") == name
            ):
                return ext
        return None

    def search_extensions(self, query: str) -> List[MarketplaceExtension]:
        try:
            raw = self._query_extensions(query)
        except MarketplaceError as exc:
            raise MarketplaceError(
                f"Failed to search {self.label}: {exc}",
                status_code=exc.status_code,
            ) from exc
        result = []
        for ext in raw:
            if not isinstance(ext, dict):
                continue
            parsed = _extension_from_json(ext)
            if parsed is not None:
                result.append(parsed)
        return result

    def get_extension_by_id(
        self,
        extension_id: str,
    ) -> Optional[MarketplaceExtension]:
        try:
            publisher, name = split_extension_id(extension_id)
            ext = self._find_exact(publisher, name)
        except MarketplaceError as exc:
            raise MarketplaceError(
                f"Failed to get extension from {self.label}: {exc}",
                status_code=exc.status_code,
            ) from exc
        if ext is None:
            return None
        return _extension_from_json(ext)

    def get_vsix_url(self, ext: MarketplaceExtension) -> str:
        try:
            found = self._find_exact(ext.publisher, ext.name)
            latest = _latest_version(found) if found else None
            if latest is None:
                raise MarketplaceError(
                    f"Extension {ext.id} version information not found",
                )
            source = _find_vsix_source(
                latest.get("files"),
            ) or _find_vsix_source(latest.get("assets"))
            if not source:
                raise MarketplaceError(
                    f"VSIX package not found for extension {ext.id}",
                )
        except MarketplaceError as exc:
            raise MarketplaceError(
                f"Failed to get VSIX URL from {self.label}: {exc}",
                status_code=exc.status_code,
            ) from exc
        logger.debug("Resolved %s to %s", ext.id, source)
        return source
