# -*- coding: utf-8 -*-
import pytest
from fastapi.testclient import TestClient

from galleryswitch.app._app import create_app
from galleryswitch.app.routers.gallery import get_switcher

from tests.utils import read_json


@pytest.fixture
def client(switcher):
    app = create_app()
    app.dependency_overrides[get_switcher] = lambda: switcher
    with TestClient(app) as test_client:
        yield test_client


def test_status_unknown(client):
    resp = client.get("/api/gallery")
    assert resp.status_code == 200
    assert resp.json()["provider"] == "unknown"
    assert resp.json()["label"] == "Market"


def test_list_providers(client):
    resp = client.get("/api/gallery/providers")
    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()] == [
        "openvsx",
        "ms",
        "cursor",
        "custom",
    ]


def test_switch_builtin(client, product_json):
    resp = client.put("/api/gallery/openvsx")
    assert resp.status_code == 200
    assert resp.json()["provider"] == "openvsx"
    assert read_json(product_json)["extensionsGallery"]["itemUrl"] == (
        "https://open-vsx.org/vscode/item"
    )


def test_switch_custom(client, product_json):
    resp = client.put(
        "/api/gallery/custom",
        json={
            "service_url": "https://example.com/api",
            "item_url": "https://example.com/item",
        },
    )
    assert resp.status_code == 200
    assert resp.json()["provider"] == "custom"


def test_switch_custom_invalid_url(client, product_json):
    resp = client.put(
        "/api/gallery/custom",
        json={
            "service_url": "ftp://example.com",
            "item_url": "https://example.com/item",
        },
    )
    assert resp.status_code == 400
    assert "serviceUrl" in resp.json()["detail"]
    assert not product_json.exists()


def test_switch_custom_without_body(client):
    resp = client.put("/api/gallery/custom")
    assert resp.status_code == 400


@pytest.mark.parametrize("provider_id", ["nope", "unknown"])
def test_switch_unknown_provider(client, provider_id):
    resp = client.put(f"/api/gallery/{provider_id}")
    assert resp.status_code == 404


def test_restore(client, product_json):
    client.put("/api/gallery/openvsx")
    client.put("/api/gallery/ms")

    resp = client.post("/api/gallery/restore")

    assert resp.status_code == 200
    assert resp.json()["backup"].startswith("product.json.bak-")
    assert resp.json()["status"]["provider"] == "openvsx"


def test_restore_without_backup(client):
    resp = client.post("/api/gallery/restore")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No product.json backup found."
