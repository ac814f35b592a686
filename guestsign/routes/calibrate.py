# guestsign/routes/calibrate.py
from io import BytesIO

from flask import Blueprint, request, send_file

from ..schemas import TestStampBody, parse_body
from ..signing import calibration_stamp, decode_image_payload

calibrate_bp = Blueprint("calibrate", __name__)


@calibrate_bp.route("/test-stamp", methods=["POST"])
def test_stamp():
    # cadre rouge (ou signature) a la position demandee, rien n est enregistre
    body = parse_body(TestStampBody, request.get_json(silent=True))
    image_bytes = decode_image_payload(body.image_base64) if body.image_base64 else None
    pdf = calibration_stamp(body.document_id, body.page, body.rect.to_rect(), image_bytes)
    return send_file(
        BytesIO(pdf),
        mimetype="application/pdf",
        download_name="test-signature.pdf",
    )
