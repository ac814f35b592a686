# guestsign/models.py
import secrets
import uuid
from datetime import datetime, timezone

from . import db
from .coords import Rect
from .lifecycle import SessionStatus


def utcnow():
    # datetime naif en UTC, sqlite ne conserve pas le fuseau
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_session_id():
    return str(uuid.uuid4())


def new_token():
    return secrets.token_urlsafe(32)


# modele pour une session de signature invitee
class SigningSession(db.Model):
    __tablename__ = "signing_session"

    id = db.Column(db.String(36), primary_key=True, default=new_session_id)
    token = db.Column(db.String(64), unique=True, index=True, nullable=False, default=new_token)
    source_document_id = db.Column(db.String(36), nullable=False)
    signed_document_ref = db.Column(db.String(256))
    guest_name = db.Column(db.String(256))
    guest_email = db.Column(db.String(256))
    page = db.Column(db.Integer, nullable=False, default=0)
    # rectangle de placement en espace pdf (origine bas-gauche)
    x = db.Column(db.Float, nullable=False)
    y = db.Column(db.Float, nullable=False)
    width = db.Column(db.Float, nullable=False)
    height = db.Column(db.Float, nullable=False)
    status = db.Column(db.String(16), nullable=False, default=SessionStatus.PENDING.value)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @property
    def placement(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    @placement.setter
    def placement(self, rect: Rect):
        self.x, self.y, self.width, self.height = rect.x, rect.y, rect.width, rect.height

    def touch(self):
        now = utcnow()
        if self.created_at and now < self.created_at:
            now = self.created_at
        self.updated_at = now

    def to_dict(self):
        return {
            "id": self.id,
            "token": self.token,
            "documentId": self.source_document_id,
            "signedDocumentRef": self.signed_document_ref,
            "guestName": self.guest_name,
            "guestEmail": self.guest_email,
            "page": self.page,
            "rect": self.placement.to_dict(),
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def public_dict(self, document_view_url: str):
        # projection pour l invite: aucun chemin interne
        return {
            "id": self.id,
            "token": self.token,
            "guestName": self.guest_name,
            "guestEmail": self.guest_email,
            "status": self.status,
            "documentViewUrl": document_view_url,
            "page": self.page,
        }

    def __repr__(self):
        return f"<SigningSession {self.id} {self.status}>"
