# guestsign/routes/documents.py
from flask import Blueprint, jsonify, send_file

from ..errors import NotFoundError
from ..pdf_utils import page_size
from ..storage import get_storage

documents_bp = Blueprint("documents", __name__)


@documents_bp.route("/<document_id>", methods=["GET"])
def view_document(document_id):
    storage = get_storage()
    if not storage.has_original(document_id):
        raise NotFoundError("PDF not found")
    return send_file(
        storage.original_path(document_id),
        mimetype="application/pdf",
        download_name="contract.pdf",
    )


@documents_bp.route("/<document_id>/pages/<int:page>", methods=["GET"])
def page_info(document_id, page):
    # taille native de la page, utile au client pour construire son viewport
    width, height = page_size(get_storage().read_original(document_id), page)
    return jsonify({"page": page, "width": width, "height": height})
