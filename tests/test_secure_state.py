import dataclasses

import pytest

from secure_app.models.domain.secure_state import SecureState


def test_defaults_are_all_false():
    state = SecureState()
    assert (state.secured, state.locked, state.paused) == (False, False, False)


def test_snapshot_is_immutable():
    state = SecureState()
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.locked = True


def test_copy_with_returns_new_snapshot():
    state = SecureState(secured=True)
    locked = state.copy_with(locked=True)

    assert locked is not state
    assert locked == SecureState(secured=True, locked=True)
    assert state == SecureState(secured=True)


def test_equality_is_structural():
    assert SecureState(True, True, False) == SecureState(secured=True, locked=True)
    assert SecureState(True, True, False) != SecureState(True, True, True)


@pytest.mark.parametrize(
    "secured, locked, hidden",
    [(False, False, False), (False, True, False), (True, False, False), (True, True, True)],
)
def test_content_hidden_requires_secured_and_locked(secured, locked, hidden):
    assert SecureState(secured=secured, locked=locked).content_hidden is hidden


def test_to_dict():
    assert SecureState(secured=True, paused=True).to_dict() == {
        "secured": True,
        "locked": False,
        "paused": True,
    }
