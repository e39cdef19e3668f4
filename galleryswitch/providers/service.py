# -*- coding: utf-8 -*-
"""Switch orchestration: store + preference + detector + listeners."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, List, Optional

from ..config import load_config, save_config
from ..constant import APP_NAME_ENV, DEFAULT_APP_NAME
from ..errors import InvalidEndpointError, UnsupportedSwitchError
from .detector import GalleryStateDetector, status_label
from .models import (
    GalleryDescriptor,
    GalleryStatus,
    HostIdentity,
    ProviderId,
    ProviderInfo,
)
from .registry import PROVIDERS, list_providers
from .store import GalleryConfigStore

logger = logging.getLogger(__name__)

StatusListener = Callable[[ProviderId], None]


def host_from_env(app_name: Optional[str] = None) -> HostIdentity:
    """Build the host identity from *app_name* or the environment."""
    name = app_name or os.environ.get(APP_NAME_ENV) or DEFAULT_APP_NAME
    return HostIdentity(app_name=name)


class GallerySwitcher:
    """Entry point used by the CLI and the HTTP API.

    Listeners registered with :meth:`subscribe` receive the re-detected
    provider after every switch or restore.
    """

    def __init__(
        self,
        store: GalleryConfigStore,
        config_path: Optional[Path] = None,
    ) -> None:
        self.store = store
        self.host = store.host
        self.config_path = config_path
        self.detector = GalleryStateDetector(
            self.host,
            read_config=store.read_config,
            read_preference=self.get_default_marketplace,
        )
        self._listeners: List[StatusListener] = []

    @classmethod
    def from_env(
        cls,
        app_name: Optional[str] = None,
        *,
        product_json: Optional[Path] = None,
        config_path: Optional[Path] = None,
    ) -> "GallerySwitcher":
        host = host_from_env(app_name)
        return cls(
            GalleryConfigStore(host, product_json),
            config_path=config_path,
        )

    # -----------------------------------------------------------------------
    # Listeners
    # -----------------------------------------------------------------------

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register *listener*; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> ProviderId:
        provider_id = self.detector.current()
        for listener in list(self._listeners):
            listener(provider_id)
        return provider_id

    # -----------------------------------------------------------------------
    # Fork editor preference
    # -----------------------------------------------------------------------

    def get_default_marketplace(self) -> str:
        return load_config(self.config_path).default_marketplace

    def set_default_marketplace(self, provider_id: ProviderId) -> None:
        config = load_config(self.config_path)
        config.default_marketplace = provider_id.value
        save_config(config, self.config_path)
        logger.info("Default marketplace set to %s", provider_id.value)

    # -----------------------------------------------------------------------
    # Actions
    # -----------------------------------------------------------------------

    def switch(
        self,
        provider_id: ProviderId,
        descriptor: Optional[GalleryDescriptor] = None,
    ) -> ProviderId:
        """Point the editor at *provider_id*; returns the detected provider.

        ``custom`` needs a *descriptor*; built-in providers use their own.
        """
        if provider_id == ProviderId.UNKNOWN:
            raise UnsupportedSwitchError("Cannot switch to an unknown gallery")
        if provider_id == ProviderId.CUSTOM:
            if self.host.is_fork_host:
                raise UnsupportedSwitchError(
                    "Custom marketplace endpoints are not supported in "
                    "Cursor. Use Open VSX or VS Marketplace instead.",
                )
            if descriptor is None:
                raise InvalidEndpointError(
                    "A custom gallery needs serviceUrl and itemUrl",
                )
        else:
            descriptor = PROVIDERS[provider_id].gallery

        # Preference is saved only after product.json is written.
        self.store.write_gallery(descriptor, provider_id)
        if self.host.is_fork_host:
            self.set_default_marketplace(provider_id)
        return self._notify()

    def restore(self) -> Path:
        """Restore product.json from its newest backup."""
        backup = self.store.restore_from_latest_backup()
        self._notify()
        return backup

    def ensure_config_file(self) -> Path:
        return self.store.ensure_exists()

    def status(self) -> GalleryStatus:
        provider_id = self.detector.current()
        gallery = self.store.read_config().get("extensionsGallery")
        service_url = ""
        if isinstance(gallery, dict):
            service_url = str(gallery.get("serviceUrl") or "")
        return GalleryStatus(
            provider=provider_id,
            label=status_label(provider_id, self.host),
            app_name=self.host.app_name,
            config_path=str(self.store.path),
            service_url=service_url,
            providers=[
                ProviderInfo(
                    id=defn.id,
                    name=defn.name,
                    searchable=defn.searchable,
                    active=defn.id == provider_id,
                )
                for defn in list_providers()
            ],
        )
