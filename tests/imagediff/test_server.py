from __future__ import annotations

import base64
import io

import pytest
from PIL import Image, ImageDraw

from imagediff.server import create_app
from imagediff.settings import Settings

from tests.imagediff.pixels import make_solid_image, png_bytes


@pytest.fixture
def client():
    app = create_app(Settings())
    app.config["TESTING"] = True
    return app.test_client()


def _upload(data: bytes, name: str = "image.png", mimetype: str = "image/png"):
    return (io.BytesIO(data), name, mimetype)


def _pair():
    before = make_solid_image(10, 10, (255, 255, 255, 255))
    after = make_solid_image(10, 10, (255, 255, 255, 255))
    ImageDraw.Draw(after).rectangle((2, 2, 3, 3), fill=(0, 0, 0, 255))
    return png_bytes(before), png_bytes(after)


class TestCompareEndpoint:
    def test_compare(self, client):
        before, after = _pair()
        resp = client.post(
            "/api/compare",
            data={"image1": _upload(before), "image2": _upload(after), "diffMask": "true"},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["mismatchedPixels"] == 4
        assert body["totalPixels"] == 100
        assert body["differenceRatio"] == 0.04
        assert body["width"] == 10
        assert body["height"] == 10

        prefix = "data:image/png;base64,"
        assert body["diffImage"].startswith(prefix)
        png = base64.b64decode(body["diffImage"][len(prefix) :])
        with Image.open(io.BytesIO(png)) as diff:
            assert diff.getpixel((2, 2)) == (255, 0, 0, 255)
            assert diff.getpixel((9, 9)) == (0, 0, 0, 0)

    def test_form_colors(self, client):
        before, after = _pair()
        resp = client.post(
            "/api/compare",
            data={
                "image1": _upload(before),
                "image2": _upload(after),
                "diffColor": "0,0,255",
                "threshold": "0.2",
            },
            content_type="multipart/form-data",
        )
        assert resp.status_code == 200
        png = base64.b64decode(resp.get_json()["diffImage"].split(",", 1)[1])
        with Image.open(io.BytesIO(png)) as diff:
            assert diff.getpixel((3, 3)) == (0, 0, 255, 255)

    def test_missing_image(self, client):
        before, _ = _pair()
        resp = client.post(
            "/api/compare",
            data={"image1": _upload(before)},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Both images are required"}

    def test_rejects_non_png(self, client):
        before, after = _pair()
        resp = client.post(
            "/api/compare",
            data={"image1": _upload(before), "image2": _upload(after, "a.jpg", "image/jpeg")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Only PNG files are allowed"}

    def test_dimension_mismatch(self, client):
        before, _ = _pair()
        small = png_bytes(make_solid_image(4, 4, (0, 0, 0, 255)))
        resp = client.post(
            "/api/compare",
            data={"image1": _upload(before), "image2": _upload(small)},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert "10x10" in resp.get_json()["error"]

    @pytest.mark.parametrize(
        "field,value", [("threshold", "abc"), ("diffColor", "1,2"), ("aaColor", "0,0,300")]
    )
    def test_invalid_option(self, client, field, value):
        before, after = _pair()
        resp = client.post(
            "/api/compare",
            data={"image1": _upload(before), "image2": _upload(after), field: value},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400

    def test_corrupt_png(self, client):
        _, after = _pair()
        resp = client.post(
            "/api/compare",
            data={"image1": _upload(b"not really a png"), "image2": _upload(after)},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400

    def test_oversized_png(self, client, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
        before, after = _pair()
        resp = client.post(
            "/api/compare",
            data={"image1": _upload(before), "image2": _upload(after)},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert "Failed to parse image" in resp.get_json()["error"]

    def test_jpeg_sent_as_png(self, client):
        _, after = _pair()
        buf = io.BytesIO()
        Image.new("RGB", (10, 10), (255, 255, 255)).save(buf, format="JPEG")
        resp = client.post(
            "/api/compare",
            data={"image1": _upload(buf.getvalue()), "image2": _upload(after)},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Expected a PNG image, got JPEG"}

    def test_upload_too_large(self):
        app = create_app(Settings(max_upload_bytes=64))
        before, after = _pair()
        resp = app.test_client().post(
            "/api/compare",
            data={"image1": _upload(before), "image2": _upload(after)},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 413


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.host == "127.0.0.1"
        assert settings.port == 3001
        assert settings.log_level is None

    def test_from_env(self):
        settings = Settings.from_env(
            {
                "IMAGEDIFF_HOST": "0.0.0.0",
                "IMAGEDIFF_PORT": "8080",
                "IMAGEDIFF_MAX_UPLOAD_BYTES": "1024",
                "IMAGEDIFF_LOG": "debug",
            }
        )
        assert settings.host == "0.0.0.0"
        assert settings.port == 8080
        assert settings.max_upload_bytes == 1024
        assert settings.log_level == "DEBUG"

    def test_unknown_log_level_ignored(self):
        assert Settings.from_env({"IMAGEDIFF_LOG": "loud"}).log_level is None
