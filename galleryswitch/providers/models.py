# -*- coding: utf-8 -*-
"""Pydantic data models for galleries, providers and the host editor."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_URL_RE = re.compile(r"^https?://", re.IGNORECASE)

# Value of ``galleryId`` that marks a gallery as the fork's own.
FORK_GALLERY_ID = "cursor"

# Keys only the fork gallery carries.  Their presence makes the fork
# editor ignore ``serviceUrl``, so they are never written for any other
# provider.
FORK_EXTENSION_FIELDS = (
    "galleryId",
    "resourceUrlTemplate",
    "controlUrl",
    "recommendationsUrl",
    "nlsBaseUrl",
    "publisherUrl",
)


def is_probably_url(value: Optional[str]) -> bool:
    """Return True for strings starting with ``http://`` or ``https://``."""
    return bool(value) and bool(_URL_RE.match(value))


class ProviderId(str, Enum):
    """Known gallery providers.

    ``UNKNOWN`` is only ever produced by detection and never persisted.
    """

    OPENVSX = "openvsx"
    MS = "ms"
    CURSOR = "cursor"
    CUSTOM = "custom"
    UNKNOWN = "unknown"


class GalleryDescriptor(BaseModel):
    """The ``extensionsGallery`` payload for one provider."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    service_url: str = Field(
        ...,
        alias="serviceUrl",
        description="Gallery query API",
    )
    item_url: str = Field(
        ...,
        alias="itemUrl",
        description="Item page URL template",
    )
    cache_url: Optional[str] = Field(
        default=None,
        alias="cacheUrl",
        description="Optional CDN index URL",
    )
    extension_fields: Dict[str, str] = Field(
        default_factory=dict,
        alias="extensionFields",
        description="Fork-only keys (see FORK_EXTENSION_FIELDS)",
    )

    @field_validator("service_url", "item_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        if not is_probably_url(value):
            raise ValueError(
                f"Invalid URL {value!r}. Must start with http(s)://",
            )
        return value

    @field_validator("extension_fields")
    @classmethod
    def _check_extension_keys(cls, value: Dict[str, str]) -> Dict[str, str]:
        unknown = sorted(set(value) - set(FORK_EXTENSION_FIELDS))
        if unknown:
            raise ValueError(
                f"Unsupported gallery fields: {', '.join(unknown)}",
            )
        return value

    def to_gallery_dict(
        self,
        *,
        include_extension_fields: bool = False,
    ) -> Dict[str, Any]:
        """Render the on-disk ``extensionsGallery`` object."""
        out: Dict[str, Any] = {
            "serviceUrl": self.service_url,
            "itemUrl": self.item_url,
        }
        if self.cache_url:
            out["cacheUrl"] = self.cache_url
        if include_extension_fields:
            out.update(self.extension_fields)
        return out


class ProviderDefinition(BaseModel):
    """Static definition of a gallery provider (built-in or custom)."""

    id: ProviderId = Field(..., description="Provider identifier")
    name: str = Field(..., description="Human-readable provider name")
    gallery: Optional[GalleryDescriptor] = Field(
        default=None,
        description="Built-in descriptor; None for custom endpoints",
    )
    searchable: bool = Field(
        default=False,
        description="Whether galleryswitch can search this registry",
    )


class HostIdentity(BaseModel):
    """The editor whose gallery is switched, derived from its app name."""

    app_name: str = Field(default="", description="Editor application name")

    @property
    def is_fork_host(self) -> bool:
        return "cursor" in self.app_name.lower()

    @property
    def support_folder(self) -> str:
        """Per-user support folder name used by this editor build."""
        name = self.app_name
        if self.is_fork_host:
            return "Cursor"
        if "Codium" in name:
            if "Insiders" in name:
                return "VSCodium - Insiders"
            return "VSCodium"
        if "Code - OSS" in name:
            return "Code - OSS"
        if "Insiders" in name:
            return "Code - Insiders"
        return "Code"

    @property
    def cli_binary(self) -> str:
        """Command line launcher that accepts ``--install-extension``."""
        return {
            "Cursor": "cursor",
            "VSCodium": "codium",
            "VSCodium - Insiders": "codium-insiders",
            "Code - OSS": "code-oss",
            "Code - Insiders": "code-insiders",
        }.get(self.support_folder, "code")


class ProviderInfo(BaseModel):
    """Provider info returned by the API (definition + active flag)."""

    id: ProviderId
    name: str
    searchable: bool = False
    active: bool = Field(
        default=False,
        description="Whether this provider is currently detected",
    )


class GalleryStatus(BaseModel):
    """Currently detected gallery, as shown to the user."""

    provider: ProviderId
    label: str
    app_name: str
    config_path: str
    service_url: str = ""
    providers: List[ProviderInfo] = Field(default_factory=list)
