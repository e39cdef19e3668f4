# -*- coding: utf-8 -*-
from pathlib import Path

import pytest

from galleryswitch.providers import (
    GalleryConfigStore,
    GallerySwitcher,
    HostIdentity,
)


@pytest.fixture
def vscode_host() -> HostIdentity:
    return HostIdentity(app_name="Visual Studio Code")


@pytest.fixture
def fork_host() -> HostIdentity:
    return HostIdentity(app_name="Cursor")


@pytest.fixture
def product_json(tmp_path: Path) -> Path:
    return tmp_path / "Code" / "product.json"


@pytest.fixture
def store(vscode_host, product_json) -> GalleryConfigStore:
    return GalleryConfigStore(vscode_host, product_json)


@pytest.fixture
def fork_store(fork_host, product_json) -> GalleryConfigStore:
    return GalleryConfigStore(fork_host, product_json)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "galleryswitch" / "config.json"


@pytest.fixture
def switcher(store, config_path) -> GallerySwitcher:
    return GallerySwitcher(store, config_path=config_path)


@pytest.fixture
def fork_switcher(fork_store, config_path) -> GallerySwitcher:
    return GallerySwitcher(fork_store, config_path=config_path)
