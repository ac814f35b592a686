# guestsign/signing.py
import base64
import binascii
import logging
import math
import threading

from .coords import Rect, Viewport, canvas_to_pdf_rect
from .errors import NotFoundError, PageNotFoundError, ValidationError
from .lifecycle import CONFIRM, SIGN, SessionStatus, next_status
from .models import SigningSession, new_session_id, new_token, utcnow
from .pdf_utils import page_count, page_size, stamp_outline, stamp_signature
from .storage import get_storage
from .store import get_store

logger = logging.getLogger(__name__)

# une seule ecriture a la fois sur le store
_write_lock = threading.Lock()


def decode_image_payload(payload) -> bytes:
    # la signature arrive en base64, avec ou sans prefixe data:
    if not payload or not payload.strip():
        raise ValidationError("Signature image is required")
    data = payload.strip()
    if data.startswith("data:"):
        data = data.split(",", 1)[1] if "," in data else ""
    try:
        image_bytes = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Signature image is not valid base64") from e
    if not image_bytes:
        raise ValidationError("Signature image is required")
    return image_bytes


def check_placement(rect: Rect):
    if not all(math.isfinite(v) for v in (rect.x, rect.y, rect.width, rect.height)):
        raise ValidationError("Placement values must be finite numbers")
    if rect.width <= 0 or rect.height <= 0:
        raise ValidationError("Placement width and height must be positive")


def placement_from_canvas(document_id, page, canvas_rect: Rect, canvas_width, canvas_height) -> Rect:
    page_w, page_h = page_size(get_storage().read_original(document_id), page)
    viewport = Viewport(canvas_width, canvas_height, page_w, page_h)
    return canvas_to_pdf_rect(canvas_rect.x, canvas_rect.y, canvas_rect.width, canvas_rect.height, viewport)


def create_session(document_id, page, placement: Rect, guest_name=None, guest_email=None) -> SigningSession:
    check_placement(placement)
    count = page_count(get_storage().read_original(document_id))
    if not 0 <= page < count:
        raise PageNotFoundError(page, count)

    now = utcnow()
    session = SigningSession(
        id=new_session_id(),
        token=new_token(),
        source_document_id=document_id,
        guest_name=guest_name or None,
        guest_email=guest_email or None,
        page=page,
        status=SessionStatus.PENDING.value,
        created_at=now,
        updated_at=now,
    )
    session.placement = placement
    with _write_lock:
        get_store().upsert(session)
    logger.info(f"Session {session.id} created for document {document_id} page {page}")
    return session


def find_by_token(token) -> SigningSession:
    session = get_store().get_by_token(token)
    if session is None:
        raise NotFoundError("Session not found")
    return session


def sign_session(token, image_bytes: bytes) -> SigningSession:
    if not image_bytes:
        raise ValidationError("Signature image is required")
    storage = get_storage()
    with _write_lock:
        session = find_by_token(token)
        # verification de la transition avant tout tamponnage
        status = next_status(session.status, SIGN)
        source = storage.read_original(session.source_document_id)
        stamped = stamp_signature(source, session.page, session.placement, image_bytes)
        session.signed_document_ref = storage.publish_signed(session.id, stamped)
        session.status = status.value
        session.touch()
        get_store().upsert(session)
    logger.info(f"Session {session.id} signed")
    return session


def confirm_session(token) -> SigningSession:
    with _write_lock:
        session = find_by_token(token)
        session.status = next_status(session.status, CONFIRM).value
        session.touch()
        get_store().upsert(session)
    logger.info(f"Session {session.id} completed")
    return session


def delete_session(session_id):
    with _write_lock:
        if not get_store().delete(session_id):
            raise NotFoundError("Session not found")
    logger.info(f"Session {session_id} deleted")


def calibration_stamp(document_id, page, rect: Rect, image_bytes=None) -> bytes:
    # tamponnage sans rien enregistrer, pour verifier les coordonnees a l oeil
    check_placement(rect)
    source = get_storage().read_original(document_id)
    if image_bytes:
        return stamp_signature(source, page, rect, image_bytes)
    return stamp_outline(source, page, rect)
