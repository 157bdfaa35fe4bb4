import pytest
from fastapi.testclient import TestClient

from tunnelkeeper.web import FALLBACK_HTML, create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture
def assets(tmp_path):
    (tmp_path / "index.html").write_text("<h1>Coral Station</h1>", encoding="utf-8")
    (tmp_path / "bg.png").write_bytes(PNG_BYTES)
    return tmp_path


def test_serves_background_image(assets):
    client = TestClient(create_app(assets))

    response = client.get("/bg.png")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content == PNG_BYTES


@pytest.mark.parametrize("path", ["/", "/index.html", "/some/other/page"])
def test_every_other_path_serves_index(assets, path):
    client = TestClient(create_app(assets))

    response = client.get(path)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "charset=utf-8" in response.headers["content-type"]
    assert response.text == "<h1>Coral Station</h1>"


def test_missing_assets_fall_back(tmp_path):
    client = TestClient(create_app(tmp_path))

    assert client.get("/").text == FALLBACK_HTML
    image = client.get("/bg.png")
    assert image.status_code == 200
    assert image.text == FALLBACK_HTML


@pytest.mark.parametrize("method", ["HEAD", "POST", "PUT", "DELETE", "OPTIONS"])
def test_any_method_gets_landing_page(assets, method):
    client = TestClient(create_app(assets))

    response = client.request(method, "/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")


def test_head_background_image(assets):
    client = TestClient(create_app(assets))

    response = client.head("/bg.png")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"


def test_post_background_image_falls_through_to_index(assets):
    client = TestClient(create_app(assets))

    response = client.post("/bg.png")

    assert response.status_code == 200
    assert response.text == "<h1>Coral Station</h1>"
