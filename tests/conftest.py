from __future__ import annotations

import base64
import io
import sys
from pathlib import Path

import pytest
from PIL import Image
from reportlab.pdfgen import canvas

# Ensure the repo root is importable when running tests without
# installing the package in editable mode.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from guestsign import create_app  # noqa: E402
from guestsign.storage import get_storage  # noqa: E402


def make_pdf(pages: int = 3, size=(612, 792)) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=size)
    for i in range(pages):
        c.drawString(72, 720, f"Contract page {i + 1}")
        c.showPage()
    c.save()
    return buf.getvalue()


def make_png(size=(1, 1), color=(0, 0, 0, 0), mode="RGBA") -> bytes:
    buf = io.BytesIO()
    Image.new(mode, size, color=color).save(buf, format="PNG")
    return buf.getvalue()


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
        "STORAGE_DIR": str(tmp_path / "storage"),
        "BASE_URL": "http://sign.test",
        "CALIBRATION_ENABLED": True,
        "SMTP_HOST": "smtp.test",
        "SMTP_USER": "admin@sign.test",
        "SMTP_PASS": "secret",
    })
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def document_id(app):
    return get_storage().save_original(make_pdf(pages=3))


@pytest.fixture
def png_bytes():
    return make_png()
