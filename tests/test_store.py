# -*- coding: utf-8 -*-
"""Tests for product.json read / merge / atomic write / backups."""

import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from galleryswitch.errors import HostEnvironmentError, NoBackupError
from galleryswitch.providers import (
    CURSOR_GALLERY,
    FORK_EXTENSION_FIELDS,
    MS_GALLERY,
    OPENVSX_GALLERY,
    GalleryDescriptor,
    HostIdentity,
    ProviderId,
    build_custom_descriptor,
    find_latest_backup,
    get_product_json_dir,
    merge_gallery,
)
from galleryswitch.providers import store as store_module
from galleryswitch.providers.store import backup_timestamp

from tests.utils import read_json, write_json


def _backups(directory: Path):
    return sorted(p.name for p in directory.glob("product.json.bak-*"))


# ---------------------------------------------------------------------------
# read_config
# ---------------------------------------------------------------------------


def test_read_missing_file_returns_empty(store):
    assert store.read_config() == {}


def test_read_malformed_json_returns_empty(store, product_json):
    product_json.parent.mkdir(parents=True)
    product_json.write_text("not json{", encoding="utf-8")
    assert store.read_config() == {}


@pytest.mark.parametrize("content", ["[1, 2]", '"text"', "null", "42"])
def test_read_non_object_returns_empty(store, product_json, content):
    product_json.parent.mkdir(parents=True)
    product_json.write_text(content, encoding="utf-8")
    assert store.read_config() == {}


# ---------------------------------------------------------------------------
# write_gallery
# ---------------------------------------------------------------------------


def test_write_community_from_empty(store, product_json):
    write_json(product_json, {})
    store.write_gallery(OPENVSX_GALLERY, ProviderId.OPENVSX)

    assert read_json(product_json) == {
        "extensionsGallery": {
            "serviceUrl": "https://open-vsx.org/vscode/gallery",
            "itemUrl": "https://open-vsx.org/vscode/item",
        },
    }


def test_write_creates_directory(store, product_json):
    assert not product_json.parent.exists()
    store.write_gallery(MS_GALLERY, ProviderId.MS)
    assert read_json(product_json)["extensionsGallery"] == {
        "serviceUrl": (
            "https://marketplace.visualstudio.com/_apis/public/gallery"
        ),
        "itemUrl": "https://marketplace.visualstudio.com/items",
        "cacheUrl": "https://vscode.blob.core.windows.net/gallery/index",
    }


def test_write_preserves_unrelated_keys(store, product_json):
    original = {
        "nameShort": "Code",
        "quality": "stable",
        "nested": {"a": [1, 2, {"b": None}]},
        "extensionsGallery": {"serviceUrl": "https://old.example/api"},
    }
    write_json(product_json, original)

    store.write_gallery(OPENVSX_GALLERY, ProviderId.OPENVSX)
    data = store.read_config()

    for key in ("nameShort", "quality", "nested"):
        assert data[key] == original[key]
    assert data["extensionsGallery"] == OPENVSX_GALLERY.to_gallery_dict()


def test_write_is_idempotent(store, product_json):
    store.write_gallery(MS_GALLERY, ProviderId.MS)
    first = product_json.read_text(encoding="utf-8")
    store.write_gallery(MS_GALLERY, ProviderId.MS)
    second = product_json.read_text(encoding="utf-8")

    assert first == second
    assert len(_backups(product_json.parent)) >= 1


def test_round_trip_matches_merge_policy(store, vscode_host):
    custom = build_custom_descriptor(
        "https://example.com/api",
        "https://example.com/item",
        "https://example.com/cache",
    )
    expected = merge_gallery({}, custom, ProviderId.CUSTOM, vscode_host)
    store.write_gallery(custom, ProviderId.CUSTOM)
    assert store.read_config()["extensionsGallery"] == expected


@pytest.mark.parametrize(
    "descriptor,provider_id",
    [
        (OPENVSX_GALLERY, ProviderId.OPENVSX),
        (MS_GALLERY, ProviderId.MS),
        (CURSOR_GALLERY, ProviderId.CURSOR),
    ],
)
def test_non_fork_host_never_writes_fork_fields(
    store,
    product_json,
    descriptor,
    provider_id,
):
    write_json(
        product_json,
        {"extensionsGallery": dict(CURSOR_GALLERY.extension_fields)},
    )
    store.write_gallery(descriptor, provider_id)
    gallery = read_json(product_json)["extensionsGallery"]
    assert not set(FORK_EXTENSION_FIELDS) & set(gallery)


@pytest.mark.parametrize(
    "descriptor,provider_id",
    [
        (OPENVSX_GALLERY, ProviderId.OPENVSX),
        (MS_GALLERY, ProviderId.MS),
    ],
)
def test_fork_host_drops_fork_fields_for_other_galleries(
    fork_store,
    product_json,
    descriptor,
    provider_id,
):
    write_json(
        product_json,
        {
            "extensionsGallery": CURSOR_GALLERY.to_gallery_dict(
                include_extension_fields=True,
            ),
        },
    )
    fork_store.write_gallery(descriptor, provider_id)
    gallery = read_json(product_json)["extensionsGallery"]
    assert gallery == descriptor.to_gallery_dict()


def test_fork_host_keeps_customized_resource_template(
    fork_store,
    product_json,
):
    write_json(
        product_json,
        {
            "extensionsGallery": {
                "galleryId": "cursor",
                "resourceUrlTemplate": "X",
                "controlUrl": "https://control.example/",
                "nlsBaseUrl": "https://nls.example/",
                "somethingElse": "kept",
            },
        },
    )
    fork_store.write_gallery(CURSOR_GALLERY, ProviderId.CURSOR)
    gallery = read_json(product_json)["extensionsGallery"]

    assert gallery["resourceUrlTemplate"] == "X"
    assert gallery["controlUrl"] == "https://control.example/"
    assert gallery["nlsBaseUrl"] == "https://nls.example/"
    assert gallery["recommendationsUrl"] == ""
    assert gallery["publisherUrl"] == ""
    assert gallery["somethingElse"] == "kept"
    assert gallery["galleryId"] == "cursor"
    assert gallery["serviceUrl"] == CURSOR_GALLERY.service_url


def test_fork_host_blank_template_does_not_clobber(fork_store, product_json):
    write_json(
        product_json,
        {
            "extensionsGallery": {
                "galleryId": "vendor-fork-sentinel",
                "resourceUrlTemplate": "X",
            },
        },
    )
    blank = GalleryDescriptor(
        serviceUrl=CURSOR_GALLERY.service_url,
        itemUrl=CURSOR_GALLERY.item_url,
        extensionFields={
            **CURSOR_GALLERY.extension_fields,
            "resourceUrlTemplate": "",
        },
    )
    fork_store.write_gallery(blank, ProviderId.CURSOR)
    gallery = read_json(product_json)["extensionsGallery"]

    assert gallery["resourceUrlTemplate"] == "X"
    assert gallery["galleryId"] == "cursor"


def test_fork_host_fills_defaults_when_nothing_exists(fork_store):
    fork_store.write_gallery(CURSOR_GALLERY, ProviderId.CURSOR)
    gallery = fork_store.read_config()["extensionsGallery"]
    assert gallery == CURSOR_GALLERY.to_gallery_dict(
        include_extension_fields=True,
    )


# ---------------------------------------------------------------------------
# Backups and atomic write
# ---------------------------------------------------------------------------


def test_first_write_creates_no_backup(store, product_json):
    store.write_gallery(OPENVSX_GALLERY, ProviderId.OPENVSX)
    assert _backups(product_json.parent) == []


def test_write_backs_up_previous_content(store, product_json):
    write_json(product_json, {"marker": 1})
    store.write_gallery(OPENVSX_GALLERY, ProviderId.OPENVSX)

    backups = _backups(product_json.parent)
    assert len(backups) == 1
    assert read_json(product_json.parent / backups[0]) == {"marker": 1}


def test_backup_failure_does_not_abort_write(
    store,
    product_json,
    monkeypatch,
    caplog,
):
    write_json(product_json, {"marker": 1})

    def boom(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(store_module.shutil, "copy2", boom)
    with caplog.at_level(logging.WARNING):
        store.write_gallery(OPENVSX_GALLERY, ProviderId.OPENVSX)

    assert read_json(product_json)["extensionsGallery"]["serviceUrl"] == (
        OPENVSX_GALLERY.service_url
    )
    assert read_json(product_json)["marker"] == 1
    assert "Failed to back up" in caplog.text


def test_rename_failure_propagates_and_cleans_temp(
    store,
    product_json,
    monkeypatch,
):
    write_json(product_json, {"marker": 1})

    def boom(src, dst):
        raise OSError("rename failed")

    monkeypatch.setattr(store_module.os, "replace", boom)
    with pytest.raises(OSError, match="rename failed"):
        store.write_gallery(OPENVSX_GALLERY, ProviderId.OPENVSX)
    monkeypatch.undo()

    assert read_json(product_json) == {"marker": 1}
    assert list(product_json.parent.glob("*.tmp")) == []


def test_successful_write_leaves_no_temp_file(store, product_json):
    store.write_gallery(OPENVSX_GALLERY, ProviderId.OPENVSX)
    store.write_gallery(MS_GALLERY, ProviderId.MS)
    assert list(product_json.parent.glob("*.tmp")) == []


def test_backup_timestamp_is_filesystem_safe():
    ts = backup_timestamp(
        datetime(2024, 5, 1, 9, 30, 12, 345678, tzinfo=timezone.utc),
    )
    assert ts == "2024-05-01T09-30-12-345Z"
    assert ":" not in ts and "." not in ts


def test_find_latest_backup_ignores_listing_order(tmp_path):
    stamps = [
        datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        datetime(2024, 11, 2, 3, 4, 5, tzinfo=timezone.utc),
        datetime(2024, 11, 2, 13, 4, 5, 1000, tzinfo=timezone.utc),
    ]
    # Create newest first so creation order differs from time order.
    for stamp in reversed(stamps):
        name = f"product.json.bak-{backup_timestamp(stamp)}"
        (tmp_path / name).write_text("{}", encoding="utf-8")
    (tmp_path / "product.json").write_text("{}", encoding="utf-8")
    (tmp_path / "unrelated.bak-9999").write_text("{}", encoding="utf-8")

    latest = find_latest_backup(tmp_path)
    assert latest == tmp_path / (
        f"product.json.bak-{backup_timestamp(stamps[-1])}"
    )


def test_same_millisecond_writes_keep_every_backup(
    store,
    product_json,
    monkeypatch,
):
    monkeypatch.setattr(
        store_module,
        "backup_timestamp",
        lambda now=None: "2024-05-01T09-30-12-345Z",
    )
    write_json(product_json, {"marker": 1})
    store.write_gallery(OPENVSX_GALLERY, ProviderId.OPENVSX)
    store.write_gallery(MS_GALLERY, ProviderId.MS)
    store.write_gallery(CURSOR_GALLERY, ProviderId.CURSOR)

    assert sorted(_backups(product_json.parent)) == [
        "product.json.bak-2024-05-01T09-30-12-345Z",
        "product.json.bak-2024-05-01T09-30-12-345Z-1",
        "product.json.bak-2024-05-01T09-30-12-345Z-2",
    ]
    first = product_json.parent / "product.json.bak-2024-05-01T09-30-12-345Z"
    assert read_json(first) == {"marker": 1}
    latest = read_json(store.find_latest_backup())
    assert latest["extensionsGallery"]["serviceUrl"] == (
        MS_GALLERY.service_url
    )


def test_find_latest_backup_orders_counters_numerically(tmp_path):
    base = "product.json.bak-2024-05-01T09-30-12-345Z"
    for suffix in ["", "-2", "-10", "-9"]:
        (tmp_path / f"{base}{suffix}").write_text("{}", encoding="utf-8")
    (tmp_path / "product.json.bak-2024-05-01T09-30-12-344Z-99").write_text(
        "{}",
        encoding="utf-8",
    )
    assert find_latest_backup(tmp_path) == tmp_path / f"{base}-10"


def test_find_latest_backup_none(tmp_path):
    assert find_latest_backup(tmp_path) is None
    assert find_latest_backup(tmp_path / "missing") is None


def test_restore_from_latest_backup(store, product_json):
    directory = product_json.parent
    prefix = "product.json.bak-2024-0"
    write_json(directory / f"{prefix}1-01T00-00-00-000Z", {"v": 1})
    write_json(directory / f"{prefix}6-01T00-00-00-000Z", {"v": 2})
    write_json(product_json, {"v": 3})

    used = store.restore_from_latest_backup()

    assert used.name == "product.json.bak-2024-06-01T00-00-00-000Z"
    assert read_json(product_json) == {"v": 2}


def test_restore_without_backup_raises(store, product_json):
    write_json(product_json, {"v": 3})
    with pytest.raises(NoBackupError):
        store.restore_from_latest_backup()
    assert read_json(product_json) == {"v": 3}


def test_ensure_exists_creates_empty_document(store, product_json):
    assert store.ensure_exists() == product_json
    assert read_json(product_json) == {}


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "app_name,folder",
    [
        ("Visual Studio Code", "Code"),
        ("Visual Studio Code - Insiders", "Code - Insiders"),
        ("VSCodium", "VSCodium"),
        ("VSCodium - Insiders", "VSCodium - Insiders"),
        ("Code - OSS", "Code - OSS"),
        ("Cursor", "Cursor"),
    ],
)
def test_linux_dir_uses_support_folder(app_name, folder):
    path = get_product_json_dir(
        HostIdentity(app_name=app_name),
        platform="linux",
        environ={"HOME": "/home/me"},
    )
    assert path == Path("/home/me") / ".config" / folder


def test_macos_dir(vscode_host):
    path = get_product_json_dir(
        vscode_host,
        platform="darwin",
        environ={"HOME": "/Users/me"},
    )
    assert path == Path("/Users/me/Library/Application Support/Code")


def test_windows_dir(vscode_host):
    path = get_product_json_dir(
        vscode_host,
        platform="win32",
        environ={"APPDATA": "/appdata"},
    )
    assert path == Path("/appdata") / "Code"


@pytest.mark.parametrize("platform", ["linux", "darwin", "win32"])
def test_missing_home_is_an_environment_error(vscode_host, platform):
    with pytest.raises(HostEnvironmentError):
        get_product_json_dir(vscode_host, platform=platform, environ={})


def test_unsupported_platform(vscode_host):
    with pytest.raises(HostEnvironmentError, match="Unsupported platform"):
        get_product_json_dir(
            vscode_host,
            platform="sunos5",
            environ={"HOME": "/home/me"},
        )


def test_product_dir_override(vscode_host, tmp_path):
    path = get_product_json_dir(
        vscode_host,
        platform="sunos5",
        environ={"GALLERYSWITCH_PRODUCT_DIR": str(tmp_path)},
    )
    assert path == tmp_path
