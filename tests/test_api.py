import io

import numpy as np
from fastapi.testclient import TestClient
from PIL import Image

from dye.main import app

client = TestClient(app)


class TestHealthEndpoint:
    def test_returns_200(self):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.3.0"
        assert data["color_mode"] in ("truecolor", "256")


class TestPaletteEndpoint:
    def test_returns_all_entries(self):
        response = client.get("/api/palette")
        assert response.status_code == 200
        entries = response.json()["palette"]
        assert len(entries) == 256
        assert [e["index"] for e in entries] == list(range(256))

    def test_entry_structure(self):
        entries = client.get("/api/palette").json()["palette"]
        assert entries[0] == {"index": 0, "hex": "#000000", "region": "standard"}
        assert entries[196] == {"index": 196, "hex": "#ff0000", "region": "extended"}
        assert entries[255] == {"index": 255, "hex": "#eeeeee", "region": "grey"}


class TestQuantizeEndpoint:
    def test_extended_color(self):
        response = client.get("/api/quantize", params={"r": 255, "g": 0, "b": 0})
        assert response.status_code == 200
        data = response.json()
        assert data["index"] == 196
        assert data["region"] == "extended"
        assert data["levels"] == [5, 0, 0]
        assert data["rgb"] == [255, 0, 0]
        assert data["hex"] == "#ff0000"
        assert data["foreground"] == "\x1b[38;5;196m"
        assert data["background"] == "\x1b[48;5;196m"

    def test_grey_color(self):
        data = client.get("/api/quantize", params={"r": 128, "g": 128, "b": 128}).json()
        assert data["index"] == 244
        assert data["region"] == "grey"
        assert data["levels"] == [12]

    def test_out_of_range_channel(self):
        response = client.get("/api/quantize", params={"r": 256, "g": 0, "b": 0})
        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "invalid_parameter"

    def test_missing_channel(self):
        response = client.get("/api/quantize", params={"r": 1, "g": 2})
        assert response.status_code == 422


class TestRenderEndpoint:
    def _make_test_image(self, color=(255, 0, 0), size=8) -> bytes:
        img = Image.fromarray(np.full((size, size, 3), color, dtype=np.uint8))
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    def test_renders_256_colors(self):
        response = client.post(
            "/api/render",
            files={"image": ("test.png", self._make_test_image(), "image/png")},
            data={"width": "4", "mode": "256"},
        )
        assert response.status_code == 200
        assert "\x1b[38;5;196m" in response.text
        assert response.headers["X-Dye-Mode"] == "256"
        assert len(response.text.split("\n")) == 2

    def test_renders_truecolor(self):
        response = client.post(
            "/api/render",
            files={"image": ("test.png", self._make_test_image((0, 0, 255)), "image/png")},
            data={"width": "4", "mode": "truecolor"},
        )
        assert response.status_code == 200
        assert "\x1b[48;2;0;0;255m" in response.text

    def test_invalid_width(self):
        for width in ("0", "100000"):
            response = client.post(
                "/api/render",
                files={"image": ("test.png", self._make_test_image(), "image/png")},
                data={"width": width},
            )
            assert response.status_code == 422
            assert response.json()["detail"]["error"] == "invalid_parameter"

    def test_invalid_mode(self):
        response = client.post(
            "/api/render",
            files={"image": ("test.png", self._make_test_image(), "image/png")},
            data={"mode": "16"},
        )
        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "invalid_parameter"

    def test_oversized_image(self):
        large_data = b"\x00" * (11 * 1024 * 1024)
        response = client.post(
            "/api/render",
            files={"image": ("test.png", large_data, "image/png")},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "image_too_large"

    def test_undecodable_image(self):
        response = client.post(
            "/api/render",
            files={"image": ("test.png", b"not an image", "image/png")},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_format"
