# guestsign/storage.py
import logging
import os
import re
import tempfile
import uuid

from flask import current_app

from .errors import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

_ID_RE = re.compile(r"^[0-9a-fA-F-]{36}$")


class DocumentStorage:
    # fichiers sur disque: original/<documentId>.pdf et signed/<sessionId>.pdf

    def __init__(self, root):
        self.root = os.path.abspath(root)
        self.original_dir = os.path.join(self.root, "original")
        self.signed_dir = os.path.join(self.root, "signed")

    def init(self):
        # creation des dossiers si besoin
        os.makedirs(self.original_dir, exist_ok=True)
        os.makedirs(self.signed_dir, exist_ok=True)

    @staticmethod
    def _check_id(blob_id):
        # evite toute traversee de chemin via un identifiant forge
        if not blob_id or not _ID_RE.match(blob_id):
            raise NotFoundError("Document not found")

    def _atomic_write(self, path, data: bytes):
        # ecriture dans un fichier temporaire du meme dossier puis rename atomique
        directory = os.path.dirname(path)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            logger.error(f"Write failed for {path}: {e}")
            raise PersistenceError(f"Could not write {os.path.basename(path)}") from e

    # documents sources

    def original_path(self, document_id):
        self._check_id(document_id)
        return os.path.join(self.original_dir, f"{document_id}.pdf")

    def has_original(self, document_id):
        try:
            return os.path.isfile(self.original_path(document_id))
        except NotFoundError:
            return False

    def save_original(self, data: bytes) -> str:
        document_id = str(uuid.uuid4())
        self._atomic_write(self.original_path(document_id), data)
        logger.info(f"Document {document_id} stored ({len(data)} bytes)")
        return document_id

    def read_original(self, document_id) -> bytes:
        path = self.original_path(document_id)
        if not os.path.isfile(path):
            raise NotFoundError("Document not found")
        with open(path, "rb") as f:
            return f.read()

    # documents signes

    def signed_path(self, ref):
        self._check_id(ref)
        return os.path.join(self.signed_dir, f"{ref}.pdf")

    def has_signed(self, ref):
        try:
            return bool(ref) and os.path.isfile(self.signed_path(ref))
        except NotFoundError:
            return False

    def publish_signed(self, session_id, data: bytes) -> str:
        # remplace l eventuel artefact precedent de la session
        self._atomic_write(self.signed_path(session_id), data)
        return session_id

    def remove_signed(self, ref):
        if not self.has_signed(ref):
            return False
        try:
            os.remove(self.signed_path(ref))
        except OSError as e:
            raise PersistenceError(f"Could not delete signed document {ref}") from e
        return True


def get_storage() -> DocumentStorage:
    return current_app.extensions["guestsign.storage"]
