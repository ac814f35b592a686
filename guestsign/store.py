# guestsign/store.py
import logging

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from . import db
from .errors import PersistenceError
from .models import SigningSession
from .storage import get_storage

logger = logging.getLogger(__name__)


class SessionStore:
    # sessions indexees par id, retrouvables par token (table signing_session,
    # id et token uniques par contrainte)
    def __init__(self, best_effort=False):
        self.best_effort = best_effort

    def get(self, session_id):
        if not session_id:
            return None
        return db.session.get(SigningSession, session_id)

    def get_by_token(self, token):
        if not token:
            return None
        return db.session.execute(
            db.select(SigningSession).filter_by(token=token)
        ).scalar_one_or_none()

    def list(self):
        return db.session.execute(
            db.select(SigningSession).order_by(SigningSession.created_at.desc())
        ).scalars().all()

    def upsert(self, session: SigningSession):
        db.session.add(session)
        self._commit(f"save session {session.id}")
        return session

    def delete(self, session_id) -> bool:
        session = self.get(session_id)
        if session is None:
            return False
        ref = session.signed_document_ref
        db.session.delete(session)
        # la session possede son artefact signe, supprime seulement si la ligne l est
        if self._commit(f"delete session {session_id}") and ref and get_storage().remove_signed(ref):
            logger.info(f"Signed document for session {session_id} removed")
        return True

    def _commit(self, action):
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to {action}: {e}")
            if not self.best_effort:
                raise PersistenceError(f"Failed to {action}") from e
            return False
        return True


def get_store() -> SessionStore:
    return current_app.extensions["guestsign.store"]
