from __future__ import annotations

import pytest

from guestsign.errors import InvalidTransitionError
from guestsign.lifecycle import CONFIRM, SIGN, TRANSITIONS, SessionStatus, next_status


def test_sign_then_confirm_reaches_completed():
    status = next_status("pending", SIGN)
    assert status is SessionStatus.SIGNED

    assert next_status(status, CONFIRM) is SessionStatus.COMPLETED


def test_sign_is_reentrant_while_signed():
    assert next_status(SessionStatus.SIGNED, SIGN) is SessionStatus.SIGNED


@pytest.mark.parametrize("status", ["pending", "completed"])
def test_confirm_requires_signed(status):
    with pytest.raises(InvalidTransitionError) as excinfo:
        next_status(status, CONFIRM)

    assert excinfo.value.status == status
    assert excinfo.value.event == CONFIRM


def test_completed_session_cannot_be_signed_again():
    with pytest.raises(InvalidTransitionError):
        next_status(SessionStatus.COMPLETED, SIGN)


def test_no_transition_goes_backwards():
    order = [SessionStatus.PENDING, SessionStatus.SIGNED, SessionStatus.COMPLETED]
    for status in order:
        for event in (SIGN, CONFIRM):
            if (status, event) in TRANSITIONS:
                assert order.index(next_status(status, event)) >= order.index(status)


def test_unknown_status_is_rejected():
    with pytest.raises(ValueError):
        next_status("rejected", SIGN)
