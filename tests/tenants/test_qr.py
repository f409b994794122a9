from __future__ import annotations

import io
from types import SimpleNamespace

import pytest
from PIL import Image

from src.inout.inout.core.exceptions import ValidationError
from src.inout.inout.tenants.qr import decode_qr_image, render_qr_png


def test_rendered_code_meets_minimum_size():
    png = render_qr_png("token", min_size=512)

    with Image.open(io.BytesIO(png)) as img:
        assert img.format == "PNG"
        assert min(img.size) >= 512


def test_upload_that_is_not_an_image_is_rejected():
    pytest.importorskip("pyzbar.pyzbar")

    with pytest.raises(ValidationError, match="not a readable image"):
        decode_qr_image(b"definitely not a png")


def test_binary_qr_content_is_rejected(monkeypatch):
    pyzbar = pytest.importorskip("pyzbar.pyzbar")
    monkeypatch.setattr(pyzbar, "decode", lambda img, symbols=None: [SimpleNamespace(data=b"\xff\xfe\x00\x81")])

    with pytest.raises(ValidationError, match="does not contain text"):
        decode_qr_image(render_qr_png("ignored", min_size=64))
