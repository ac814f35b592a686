# guestsign/routes/sessions.py
from flask import Blueprint, current_app, jsonify, request, url_for

from ..errors import NotFoundError, ValidationError
from ..schemas import CreateSessionBody, SignBody, parse_body
from ..signing import (
    confirm_session,
    create_session,
    decode_image_payload,
    find_by_token,
    placement_from_canvas,
    sign_session,
)

sessions_bp = Blueprint("sessions", __name__)

INVALID_LINK = "This signing link is invalid or has expired."


def _guest_session(token):
    # meme reponse pour un jeton inconnu ou malforme
    try:
        return find_by_token(token)
    except NotFoundError:
        raise NotFoundError(INVALID_LINK) from None


@sessions_bp.route("", methods=["POST"])
def new_session():
    body = parse_body(CreateSessionBody, request.get_json(silent=True))
    if body.rect is not None:
        placement = body.rect.to_rect()
    elif body.canvas_rect is not None and body.viewport is not None:
        placement = placement_from_canvas(
            body.document_id,
            body.page,
            body.canvas_rect.to_rect(),
            body.viewport.width,
            body.viewport.height,
        )
    else:
        raise ValidationError("Either rect or canvasRect with viewport is required")

    session = create_session(
        body.document_id,
        body.page,
        placement,
        guest_name=body.guest_name,
        guest_email=body.guest_email,
    )
    base_url = current_app.config["BASE_URL"].rstrip("/")
    return jsonify({
        "sessionId": session.id,
        "token": session.token,
        "publicUrl": f"{base_url}/sign/{session.token}",
    }), 201


@sessions_bp.route("/by-token/<token>", methods=["GET"])
def get_session(token):
    session = _guest_session(token)
    view_url = url_for("documents.view_document", document_id=session.source_document_id)
    return jsonify(session.public_dict(view_url))


@sessions_bp.route("/by-token/<token>/sign", methods=["POST"])
def sign(token):
    body = parse_body(SignBody, request.get_json(silent=True) or {})
    image_bytes = decode_image_payload(body.image_base64)
    _guest_session(token)
    session = sign_session(token, image_bytes)
    return jsonify({
        "signedDocumentUrl": url_for("admin.signed_preview", session_id=session.id),
        "sessionId": session.id,
    })


@sessions_bp.route("/by-token/<token>/confirm", methods=["POST"])
def confirm(token):
    _guest_session(token)
    session = confirm_session(token)
    return jsonify({"status": session.status})
