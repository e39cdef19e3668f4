# -*- coding: utf-8 -*-
"""Shared HTTP plumbing for registry clients."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

import httpx

from ..constant import HTTP_TIMEOUT, HTTP_USER_AGENT
from .models import MarketplaceExtension

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    """A registry request failed or returned something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def make_client() -> httpx.Client:
    return httpx.Client(
        timeout=HTTP_TIMEOUT,
        follow_redirects=True,
        headers={
            "User-Agent": HTTP_USER_AGENT,
            "Accept": "application/json",
        },
    )


def split_extension_id(extension_id: str) -> Tuple[str, str]:
    """Split ``publisher.name``; anything else raises MarketplaceError."""
    parts = extension_id.split(".")
    if len(parts) != 2 or not all(parts):
        raise MarketplaceError(
            'Invalid extension ID format. Expected "publisher.name"',
        )
    return parts[0], parts[1]


class Marketplace(ABC):
    """A registry that can be searched and downloaded from."""

    id: str = ""
    label: str = ""

    def __init__(self, client: Optional[httpx.Client] = None) -> None:
        self._client = client or make_client()

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Marketplace":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request_json(
        self,
        method: str,
        url: str,
        *,
        json_body: Any = None,
    ) -> Any:
        logger.debug("%s %s", method, url)
        try:
            resp = self._client.request(method, url, json=json_body)
        except httpx.HTTPError as exc:
            raise MarketplaceError(f"Network error: {exc}") from exc
        if not resp.is_success:
            raise MarketplaceError(
                f"HTTP {resp.status_code}: "
                f"{resp.reason_phrase or 'Request failed'}",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise MarketplaceError(f"Invalid JSON from {url}") from exc

    @abstractmethod
    def search_extensions(self, query: str) -> List[MarketplaceExtension]:
        """Free-text search."""

    @abstractmethod
    def get_extension_by_id(
        self,
        extension_id: str,
    ) -> Optional[MarketplaceExtension]:
        """Look up ``publisher.name``; None when the registry has no match."""

    @abstractmethod
    def get_vsix_url(self, ext: MarketplaceExtension) -> str:
        """Absolute URL of the latest .vsix package for *ext*."""
