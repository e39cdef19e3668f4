# -*- coding: utf-8 -*-
"""API routes for the editor's extension gallery."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path
from pydantic import BaseModel, Field

from ...errors import (
    GallerySwitchError,
    InvalidEndpointError,
    NoBackupError,
    UnsupportedSwitchError,
)
from ...providers import (
    GalleryStatus,
    GallerySwitcher,
    ProviderId,
    ProviderInfo,
    build_custom_descriptor,
    get_provider,
)

router = APIRouter(prefix="/gallery", tags=["gallery"])


# ---------------------------------------------------------------------------
# Request / response schemas
# ---------------------------------------------------------------------------


class CustomGalleryRequest(BaseModel):
    """Request body for switching to a custom gallery."""

    service_url: str = Field(..., description="Gallery query API URL")
    item_url: str = Field(..., description="Item page URL")
    cache_url: Optional[str] = Field(
        default=None,
        description="Optional CDN index URL",
    )


class RestoreResponse(BaseModel):
    backup: str = Field(..., description="Backup file that was restored")
    status: GalleryStatus


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_switcher() -> GallerySwitcher:
    """Switcher for the editor named by ``GALLERYSWITCH_APP_NAME``."""
    try:
        return GallerySwitcher.from_env()
    except GallerySwitchError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=GalleryStatus,
    summary="Get the active gallery",
)
async def get_status(
    switcher: GallerySwitcher = Depends(get_switcher),
) -> GalleryStatus:
    """Return the currently detected gallery provider."""
    return switcher.status()


@router.get(
    "/providers",
    response_model=List[ProviderInfo],
    summary="List all gallery providers",
)
async def list_all_providers(
    switcher: GallerySwitcher = Depends(get_switcher),
) -> List[ProviderInfo]:
    return switcher.status().providers


@router.put(
    "/{provider_id}",
    response_model=GalleryStatus,
    summary="Switch gallery",
    description="Write the provider's gallery into product.json. "
    "The custom provider takes its URLs from the request body.",
)
async def switch_gallery(
    provider_id: str = Path(..., description="Provider identifier"),
    body: Optional[CustomGalleryRequest] = Body(
        default=None,
        description="Custom gallery endpoints",
    ),
    switcher: GallerySwitcher = Depends(get_switcher),
) -> GalleryStatus:
    provider = get_provider(provider_id)
    if provider is None or provider.id == ProviderId.UNKNOWN:
        raise HTTPException(
            status_code=404,
            detail=f"Provider '{provider_id}' not found",
        )

    try:
        descriptor = None
        if provider.id == ProviderId.CUSTOM and body is not None:
            descriptor = build_custom_descriptor(
                body.service_url,
                body.item_url,
                body.cache_url,
            )
        switcher.switch(provider.id, descriptor)
    except (InvalidEndpointError, UnsupportedSwitchError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except OSError as exc:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to write product.json: {exc}",
        ) from exc
    return switcher.status()


@router.post(
    "/restore",
    response_model=RestoreResponse,
    summary="Restore product.json from the latest backup",
)
async def restore_gallery(
    switcher: GallerySwitcher = Depends(get_switcher),
) -> RestoreResponse:
    try:
        backup = switcher.restore()
    except NoBackupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except OSError as exc:
        raise HTTPException(
            status_code=500,
            detail=f"Revert failed: {exc}",
        ) from exc
    return RestoreResponse(backup=backup.name, status=switcher.status())
