# guestsign/routes/admin.py
from flask import Blueprint, jsonify, request, send_file

from ..email_utils import send_signing_link
from ..errors import NotFoundError, ValidationError
from ..lifecycle import SessionStatus
from ..schemas import SendEmailBody, parse_body
from ..signing import delete_session
from ..storage import get_storage
from ..store import get_store

admin_bp = Blueprint("admin", __name__)


def _signed_file(session_id):
    session = get_store().get(session_id)
    if session is None:
        raise NotFoundError("Session not found")
    if session.status == SessionStatus.PENDING.value:
        raise ValidationError("PDF is not signed yet")
    storage = get_storage()
    if not storage.has_signed(session.signed_document_ref):
        raise NotFoundError("Signed PDF not found")
    return session, storage.signed_path(session.signed_document_ref)


@admin_bp.route("/sessions", methods=["GET"])
def list_sessions():
    return jsonify([s.to_dict() for s in get_store().list()])


@admin_bp.route("/sessions/<session_id>", methods=["DELETE"])
def remove_session(session_id):
    # supprime la session et son pdf signe
    delete_session(session_id)
    return jsonify({"status": "deleted"})


@admin_bp.route("/sessions/<session_id>/signed-preview", methods=["GET"])
def signed_preview(session_id):
    _, path = _signed_file(session_id)
    return send_file(path, mimetype="application/pdf")


@admin_bp.route("/sessions/<session_id>/signed-download", methods=["GET"])
def signed_download(session_id):
    session, path = _signed_file(session_id)
    filename = f"signed_{session.guest_name or session.id}.pdf"
    return send_file(path, mimetype="application/pdf", as_attachment=True, download_name=filename)


@admin_bp.route("/send-email", methods=["POST"])
def send_email():
    body = parse_body(SendEmailBody, request.get_json(silent=True))
    send_signing_link(body.recipient_email, body.recipient_name, body.url)
    return jsonify({"status": "sent"})
