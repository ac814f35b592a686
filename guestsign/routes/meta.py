# guestsign/routes/meta.py
from flask import Blueprint, jsonify

from .. import __version__

meta_bp = Blueprint("meta", __name__)


@meta_bp.route("/version", methods=["GET"])
def version():
    return jsonify({"version": __version__})
