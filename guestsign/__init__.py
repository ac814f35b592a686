# guestsign/__init__.py
import logging

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from werkzeug.exceptions import RequestEntityTooLarge

from config import settings

__version__ = "0.1.0"

# initialisation de la base de donnees
db = SQLAlchemy()

logger = logging.getLogger(__name__)

UPLOAD_OVERHEAD_MB = 1


def init_db(app):
    from . import models  # noqa: F401  enregistre les tables

    db.init_app(app)
    with app.app_context():
        db.create_all()


def init_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("guestsign").setLevel(level)
    log_file = app.config.get("LOG_FILE")
    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logging.getLogger("guestsign").addHandler(handler)


def register_error_handlers(app):
    from .errors import GuestSignError

    @app.errorhandler(GuestSignError)
    def handle_guestsign_error(e):
        if e.status_code >= 500:
            logger.error(f"{type(e).__name__}: {e.message}")
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        return jsonify({"error": f"File too large. Maximum size is {app.config['MAX_PDF_SIZE_MB']}MB."}), 413


def create_app(overrides=None):
    from .routes.admin import admin_bp
    from .routes.calibrate import calibrate_bp
    from .routes.documents import documents_bp
    from .routes.meta import meta_bp
    from .routes.sessions import sessions_bp
    from .routes.upload import upload_bp
    from .storage import DocumentStorage
    from .store import SessionStore

    app = Flask(__name__)
    # chargement de la configuration
    app.config.from_mapping(settings.model_dump())
    if overrides:
        app.config.update(overrides)
    # marge pour l enveloppe multipart, la limite exacte est verifiee dans la route upload
    app.config["MAX_CONTENT_LENGTH"] = (app.config["MAX_PDF_SIZE_MB"] + UPLOAD_OVERHEAD_MB) * 1024 ** 2
    init_logging(app)

    storage = DocumentStorage(app.config["STORAGE_DIR"])
    storage.init()
    app.extensions["guestsign.storage"] = storage
    app.extensions["guestsign.store"] = SessionStore(best_effort=app.config["BEST_EFFORT_PERSISTENCE"])

    # init db
    init_db(app)
    register_error_handlers(app)

    # enregistrement des blueprints
    app.register_blueprint(meta_bp)
    app.register_blueprint(upload_bp, url_prefix="/upload")
    app.register_blueprint(documents_bp, url_prefix="/documents")
    app.register_blueprint(sessions_bp, url_prefix="/sessions")
    app.register_blueprint(admin_bp, url_prefix="/admin")
    if app.config["CALIBRATION_ENABLED"]:
        app.register_blueprint(calibrate_bp, url_prefix="/calibrate")
        logger.warning("Calibration endpoint enabled")
    return app
