# -*- coding: utf-8 -*-
"""Exceptions raised by galleryswitch."""


class GallerySwitchError(Exception):
    """Base class for gallery switching failures."""


class HostEnvironmentError(GallerySwitchError):
    """The platform or its per-user directories cannot be resolved."""


class InvalidEndpointError(GallerySwitchError, ValueError):
    """A custom gallery URL is not an absolute http(s) URL."""


class UnsupportedSwitchError(GallerySwitchError):
    """The requested switch is not possible on this host."""


class NoBackupError(GallerySwitchError):
    """There is no product.json backup to restore from."""
