# -*- coding: utf-8 -*-
"""Gallery providers — models, registry, product.json store + detection."""

from .detector import (
    GalleryStateDetector,
    detect,
    detect_from_preference,
    status_label,
)
from .models import (
    FORK_EXTENSION_FIELDS,
    FORK_GALLERY_ID,
    GalleryDescriptor,
    GalleryStatus,
    HostIdentity,
    ProviderDefinition,
    ProviderId,
    ProviderInfo,
    is_probably_url,
)
from .registry import (
    CURSOR_GALLERY,
    MS_GALLERY,
    OPENVSX_GALLERY,
    PROVIDERS,
    build_custom_descriptor,
    get_provider,
    list_providers,
)
from .service import GallerySwitcher, host_from_env
from .store import (
    GalleryConfigStore,
    find_latest_backup,
    get_product_json_dir,
    get_product_json_path,
    merge_gallery,
)

__all__ = [
    # detector
    "GalleryStateDetector",
    "detect",
    "detect_from_preference",
    "status_label",
    # models
    "FORK_EXTENSION_FIELDS",
    "FORK_GALLERY_ID",
    "GalleryDescriptor",
    "GalleryStatus",
    "HostIdentity",
    "ProviderDefinition",
    "ProviderId",
    "ProviderInfo",
    "is_probably_url",
    # registry
    "CURSOR_GALLERY",
    "MS_GALLERY",
    "OPENVSX_GALLERY",
    "PROVIDERS",
    "build_custom_descriptor",
    "get_provider",
    "list_providers",
    # service
    "GallerySwitcher",
    "host_from_env",
    # store
    "GalleryConfigStore",
    "find_latest_backup",
    "get_product_json_dir",
    "get_product_json_path",
    "merge_gallery",
]
