# guestsign/routes/upload.py
import logging

from flask import Blueprint, current_app, jsonify, request

from ..errors import ValidationError
from ..pdf_utils import page_count
from ..storage import get_storage

logger = logging.getLogger(__name__)

upload_bp = Blueprint("upload", __name__)


@upload_bp.route("", methods=["POST"])
def upload_pdf():
    # route pour l upload du pdf
    f = request.files.get("file")
    if not f or not f.filename:
        raise ValidationError("No file uploaded")
    if not (f.filename.lower().endswith(".pdf") or f.mimetype == "application/pdf"):
        raise ValidationError("Only PDF files are allowed")
    content = f.read()
    if len(content) > current_app.config["MAX_PDF_SIZE_MB"] * 1024 ** 2:
        return jsonify({"error": f"File too large. Maximum size is {current_app.config['MAX_PDF_SIZE_MB']}MB."}), 413

    # le pdf doit etre lisible avant d etre stocke
    pages = page_count(content)
    document_id = get_storage().save_original(content)
    logger.info(f"File uploaded: {f.filename} ({len(content)} bytes, {pages} page(s)) -> {document_id}")
    return jsonify({"documentId": document_id, "pageCount": pages}), 201
