from __future__ import annotations

import io

import pytest
from PIL import Image
from PyPDF2 import PdfReader

from conftest import b64, make_pdf, make_png


def _upload(client, pdf=None, filename="contract.pdf"):
    return client.post(
        "/upload",
        data={"file": (io.BytesIO(pdf or make_pdf(pages=3)), filename)},
        content_type="multipart/form-data",
    )


def _create(client, document_id, **overrides):
    body = {
        "documentId": document_id,
        "page": 0,
        "rect": {"x": 100, "y": 200, "width": 150, "height": 60},
        "guestName": "Ann",
        "guestEmail": "ann@example.com",
    }
    body.update(overrides)
    return client.post("/sessions", json=body)


def test_upload_returns_document_id(client):
    resp = _upload(client)

    assert resp.status_code == 201
    assert resp.get_json()["pageCount"] == 3

    view = client.get(f"/documents/{resp.get_json()['documentId']}")
    assert view.status_code == 200
    assert view.mimetype == "application/pdf"
    assert view.data.startswith(b"%PDF")


def test_upload_rejects_non_pdf(client):
    resp = client.post(
        "/upload",
        data={"file": (io.BytesIO(b"hello"), "notes.txt", "text/plain")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Only PDF files are allowed"


def test_upload_rejects_unreadable_pdf(client):
    resp = _upload(client, pdf=b"%PDF-1.4 broken")

    assert resp.status_code == 400


def test_upload_is_size_capped(app, client):
    app.config["MAX_CONTENT_LENGTH"] = 512

    resp = _upload(client)

    assert resp.status_code == 413
    assert "10MB" in resp.get_json()["error"]


def test_upload_limit_is_enforced_on_file_size(tmp_path):
    from guestsign import create_app

    app = create_app({
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'upload.db'}",
        "STORAGE_DIR": str(tmp_path / "upload"),
        "MAX_PDF_SIZE_MB": 1,
    })
    client = app.test_client()

    # exactement 1MB passe l enveloppe multipart et arrive a la lecture du pdf
    at_limit = _upload(client, pdf=b"x" * 1024 ** 2)
    over_limit = _upload(client, pdf=b"x" * (1024 ** 2 + 1))

    assert app.config["MAX_CONTENT_LENGTH"] > 1024 ** 2
    assert at_limit.status_code == 400
    assert over_limit.status_code == 413
    assert over_limit.get_json()["error"] == "File too large. Maximum size is 1MB."


def test_unknown_document_is_404(client):
    assert client.get("/documents/00000000-0000-0000-0000-000000000000").status_code == 404
    assert client.get("/documents/..%2Fsecret").status_code == 404


def test_page_info(client, document_id):
    resp = client.get(f"/documents/{document_id}/pages/2")

    assert resp.get_json() == {"page": 2, "width": 612.0, "height": 792.0}
    assert client.get(f"/documents/{document_id}/pages/3").status_code == 404


def test_scenario_a_sign_and_confirm(client, document_id, png_bytes):
    created = _create(client, document_id)
    assert created.status_code == 201
    token = created.get_json()["token"]
    assert created.get_json()["publicUrl"] == f"http://sign.test/sign/{token}"

    guest_view = client.get(f"/sessions/by-token/{token}").get_json()
    assert guest_view["status"] == "pending"
    assert set(guest_view) == {"id", "token", "guestName", "guestEmail", "status", "documentViewUrl", "page"}
    assert guest_view["documentViewUrl"] == f"/documents/{document_id}"

    signed = client.post(f"/sessions/by-token/{token}/sign", json={"imageBase64": b64(png_bytes)})
    assert signed.status_code == 200
    assert client.get(f"/sessions/by-token/{token}").get_json()["status"] == "signed"

    preview = client.get(signed.get_json()["signedDocumentUrl"])
    assert preview.status_code == 200
    assert len(PdfReader(io.BytesIO(preview.data)).pages) == 3

    confirmed = client.post(f"/sessions/by-token/{token}/confirm")
    assert confirmed.get_json() == {"status": "completed"}
    assert client.get(f"/sessions/by-token/{token}").get_json()["status"] == "completed"


def test_scenario_b_page_out_of_range(client, document_id):
    resp = _create(client, document_id, page=5)

    assert resp.status_code == 404
    assert "3 page(s)" in resp.get_json()["error"]


def test_scenario_c_sign_without_image(client, document_id):
    token = _create(client, document_id).get_json()["token"]

    for body in ({}, {"imageBase64": ""}):
        resp = client.post(f"/sessions/by-token/{token}/sign", json=body)
        assert resp.status_code == 400

    assert client.get(f"/sessions/by-token/{token}").get_json()["status"] == "pending"


def test_scenario_d_delete_signed_session(client, document_id, png_bytes):
    created = _create(client, document_id).get_json()
    token, session_id = created["token"], created["sessionId"]
    client.post(f"/sessions/by-token/{token}/sign", json={"imageBase64": b64(png_bytes)})

    assert client.delete(f"/admin/sessions/{session_id}").status_code == 200

    assert client.get(f"/sessions/by-token/{token}").status_code == 404
    assert client.get(f"/admin/sessions/{session_id}/signed-download").status_code == 404
    assert client.delete(f"/admin/sessions/{session_id}").status_code == 404


def test_confirm_before_sign_is_conflict(client, document_id):
    token = _create(client, document_id).get_json()["token"]

    resp = client.post(f"/sessions/by-token/{token}/confirm")

    assert resp.status_code == 409


def test_guest_lookup_failures_look_the_same(client, document_id):
    bad = [client.get("/sessions/by-token/doesnotexist"), client.get("/sessions/by-token/%ff%fe")]
    bad.append(client.post("/sessions/by-token/doesnotexist/confirm"))

    assert {r.status_code for r in bad} == {404}
    assert {r.get_json()["error"] for r in bad} == {"This signing link is invalid or has expired."}


def test_create_session_from_canvas_rect(client, document_id):
    resp = _create(
        client,
        document_id,
        rect=None,
        canvasRect={"x": 150, "y": 300, "width": 225, "height": 90},
        viewport={"width": 918, "height": 1188},
    )
    assert resp.status_code == 201

    sessions = client.get("/admin/sessions").get_json()
    assert sessions[0]["rect"]["y"] == pytest.approx(532)
    assert sessions[0]["rect"]["width"] == pytest.approx(150)


def test_create_session_with_unrendered_viewport(client, document_id):
    resp = _create(
        client,
        document_id,
        rect=None,
        canvasRect={"x": 1, "y": 1, "width": 10, "height": 10},
        viewport={"width": 0, "height": 0},
    )

    assert resp.status_code == 400


def test_create_session_validation(client, document_id):
    assert client.post("/sessions", data="nope").status_code == 400
    assert _create(client, document_id, rect={"x": 1, "y": 1, "width": 0, "height": 5}).status_code == 400
    assert _create(client, document_id, rect=None).status_code == 400
    assert _create(client, document_id, page=-1).status_code == 400


@pytest.mark.parametrize(
    "rect",
    [
        '{"x": 1, "y": 1, "width": Infinity, "height": 5}',
        '{"x": NaN, "y": 1, "width": 10, "height": 5}',
        '{"x": 1, "y": -Infinity, "width": 10, "height": 5}',
    ],
)
def test_create_session_rejects_non_finite_rect(client, document_id, rect):
    body = f'{{"documentId": "{document_id}", "page": 0, "rect": {rect}}}'

    resp = client.post("/sessions", data=body, content_type="application/json")

    assert resp.status_code == 400
    assert client.get("/admin/sessions").get_json() == []


def test_create_session_rejects_non_finite_viewport(client, document_id):
    body = (
        f'{{"documentId": "{document_id}", "page": 0,'
        ' "canvasRect": {"x": 1, "y": 1, "width": 10, "height": 10},'
        ' "viewport": {"width": Infinity, "height": 1188}}'
    )

    resp = client.post("/sessions", data=body, content_type="application/json")

    assert resp.status_code == 400


def test_sign_with_oversized_image(client, document_id, monkeypatch):
    token = _create(client, document_id).get_json()["token"]
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

    resp = client.post(
        f"/sessions/by-token/{token}/sign",
        json={"imageBase64": b64(make_png((10, 10), (0, 0, 0, 255)))},
    )

    assert resp.status_code == 400
    assert client.get(f"/sessions/by-token/{token}").get_json()["status"] == "pending"


def test_admin_download_pending_session(client, document_id):
    session_id = _create(client, document_id).get_json()["sessionId"]

    assert client.get(f"/admin/sessions/{session_id}/signed-preview").status_code == 400
    assert client.get("/admin/sessions/missing/signed-preview").status_code == 404


def test_admin_download_filename(client, document_id, png_bytes):
    created = _create(client, document_id).get_json()
    client.post(f"/sessions/by-token/{created['token']}/sign", json={"imageBase64": b64(png_bytes)})

    resp = client.get(f"/admin/sessions/{created['sessionId']}/signed-download")

    assert resp.status_code == 200
    assert 'filename=signed_Ann.pdf' in resp.headers["Content-Disposition"]
    assert resp.headers["Content-Disposition"].startswith("attachment")


def test_admin_list_exposes_full_records(client, document_id):
    _create(client, document_id)

    sessions = client.get("/admin/sessions").get_json()

    assert len(sessions) == 1
    assert sessions[0]["documentId"] == document_id
    assert sessions[0]["status"] == "pending"


def test_calibration_outline(client, document_id):
    resp = client.post(
        "/calibrate/test-stamp",
        json={"documentId": document_id, "page": 1, "rect": {"x": 10, "y": 10, "width": 50, "height": 20}},
    )

    assert resp.status_code == 200
    assert resp.mimetype == "application/pdf"
    assert len(PdfReader(io.BytesIO(resp.data)).pages) == 3


def test_calibration_with_image(client, document_id, png_bytes):
    resp = client.post(
        "/calibrate/test-stamp",
        json={
            "documentId": document_id,
            "page": 0,
            "rect": {"x": 10, "y": 10, "width": 50, "height": 20},
            "imageBase64": b64(png_bytes),
        },
    )

    assert resp.status_code == 200


def test_calibration_disabled_by_default(tmp_path):
    from guestsign import create_app

    app = create_app({
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'other.db'}",
        "STORAGE_DIR": str(tmp_path / "other"),
        "CALIBRATION_ENABLED": False,
    })

    resp = app.test_client().post("/calibrate/test-stamp", json={})

    assert resp.status_code == 404


def test_version(client):
    assert client.get("/version").get_json() == {"version": "0.1.0"}
