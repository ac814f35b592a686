# guestsign/lifecycle.py
from enum import Enum

from .errors import InvalidTransitionError


class SessionStatus(str, Enum):
    PENDING = "pending"
    SIGNED = "signed"
    COMPLETED = "completed"


SIGN = "sign"
CONFIRM = "confirm"

# (statut courant, evenement) -> statut suivant
TRANSITIONS = {
    (SessionStatus.PENDING, SIGN): SessionStatus.SIGNED,
    (SessionStatus.SIGNED, SIGN): SessionStatus.SIGNED,
    (SessionStatus.SIGNED, CONFIRM): SessionStatus.COMPLETED,
}


def next_status(status, event: str) -> SessionStatus:
    current = SessionStatus(status)
    try:
        return TRANSITIONS[(current, event)]
    except KeyError:
        raise InvalidTransitionError(current.value, event) from None
