import pytest

from secure_app.models.domain.secure_state import SecureState
from secure_app.models.enums import AuthenticationStatus
from secure_app.models.events import EventType, StateChangedEvent
from secure_app.services.secure_controller import SecureController


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_default_controller_starts_unsecured_unlocked(controller):
    assert controller.value == SecureState()


def test_custom_starting_values():
    ctrl = SecureController(SecureState(secured=True, locked=True))
    assert ctrl.secured and ctrl.locked and not ctrl.paused


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def test_secure_and_unsecure_keep_lock_bit(locked_controller):
    locked_controller.unsecure()
    assert locked_controller.value == SecureState(secured=False, locked=True)

    locked_controller.secure()
    assert locked_controller.value == SecureState(secured=True, locked=True)


def test_open_is_unsecure(locked_controller):
    locked_controller.open()
    assert not locked_controller.secured
    assert locked_controller.locked


def test_lock_while_unsecured_records_bit(controller):
    controller.lock()
    assert controller.value == SecureState(secured=False, locked=True)
    assert not controller.value.content_hidden


def test_lock_if_secured(controller):
    controller.lock_if_secured()
    assert not controller.locked

    controller.secure()
    controller.lock_if_secured()
    assert controller.locked


def test_unlock_while_unsecured_is_accepted(controller):
    controller.unlock()
    assert controller.value == SecureState()


def test_lock_is_noop_when_already_locked(locked_controller):
    events = []
    locked_controller.add_listener(events.append)

    locked_controller.lock()

    assert events == []


@pytest.mark.parametrize("command", ["pause", "unpause"])
def test_pause_and_unpause_are_idempotent(controller, command):
    getattr(controller, command)()
    once = controller.value
    events = []
    controller.add_listener(events.append)

    getattr(controller, command)()

    assert controller.value == once
    assert events == []


def test_pause_then_unpause(controller):
    controller.pause()
    assert controller.paused
    controller.unpause()
    assert not controller.paused


def test_resumed_never_touches_lock(locked_controller):
    seen = []
    locked_controller.add_resume_listener(seen.append)

    locked_controller.resumed()
    locked_controller.resumed()

    assert locked_controller.locked
    assert locked_controller.resume_count == 2
    assert [e.resume_count for e in seen] == [1, 2]
    assert seen[0].type == EventType.RESUMED


# ---------------------------------------------------------------------------
# Listeners
# ---------------------------------------------------------------------------

def test_listener_receives_previous_and_current(controller):
    events = []
    controller.add_listener(events.append)

    controller.secure()

    assert len(events) == 1
    event = events[0]
    assert isinstance(event, StateChangedEvent)
    assert event.previous == SecureState()
    assert event.current == SecureState(secured=True)
    assert not event.lock_changed


def test_snapshot_committed_before_listeners_run(controller):
    observed = []
    controller.add_listener(lambda e: observed.append(controller.value == e.current))

    controller.lock()
    controller.secure()

    assert observed == [True, True]


def test_failing_listener_does_not_block_others(controller, log_records):
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    controller.add_listener(broken)
    controller.add_listener(seen.append)

    controller.secure()

    assert len(seen) == 1
    assert any("Listener failed" in r.message for r in log_records)


def test_listener_subscription_cancel(controller):
    events = []
    subscription = controller.add_listener(events.append)

    subscription.cancel()
    subscription.cancel()
    controller.secure()

    assert events == []
    assert not subscription.active


# ---------------------------------------------------------------------------
# Authentication outcomes
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_success_unlocks_and_emits_once(locked_controller, outcomes):
    received = outcomes(locked_controller)

    state = await locked_controller.send_authentication_event(AuthenticationStatus.SUCCESS)

    assert state.locked is False
    assert locked_controller.secured
    assert received == [AuthenticationStatus.SUCCESS]


@pytest.mark.asyncio
async def test_failed_keeps_lock(locked_controller, outcomes):
    received = outcomes(locked_controller)

    await locked_controller.send_authentication_event(AuthenticationStatus.FAILED)

    assert locked_controller.value == SecureState(secured=True, locked=True)
    assert received == [AuthenticationStatus.FAILED]


@pytest.mark.asyncio
async def test_logout_removes_protection(locked_controller, outcomes):
    received = outcomes(locked_controller)

    await locked_controller.send_authentication_event(AuthenticationStatus.LOGOUT)

    assert locked_controller.secured is False
    assert locked_controller.locked is False
    assert received == [AuthenticationStatus.LOGOUT]


@pytest.mark.asyncio
async def test_state_applied_before_outcome_handlers(locked_controller):
    seen = []
    locked_controller.subscribe_authentication(lambda e: seen.append(locked_controller.locked))

    await locked_controller.send_authentication_event(AuthenticationStatus.SUCCESS)

    assert seen == [False]


@pytest.mark.asyncio
async def test_no_replay_for_late_subscriber(locked_controller):
    await locked_controller.send_authentication_event(AuthenticationStatus.FAILED)

    received = []
    locked_controller.subscribe_authentication(lambda e: received.append(e.status))
    await locked_controller.send_authentication_event(AuthenticationStatus.SUCCESS)

    assert received == [AuthenticationStatus.SUCCESS]


@pytest.mark.asyncio
async def test_status_filter(locked_controller):
    failures = []
    locked_controller.subscribe_authentication(
        lambda e: failures.append(e.status), status=AuthenticationStatus.FAILED
    )

    await locked_controller.send_authentication_event(AuthenticationStatus.SUCCESS)
    await locked_controller.send_authentication_event(AuthenticationStatus.FAILED)

    assert failures == [AuthenticationStatus.FAILED]


@pytest.mark.asyncio
async def test_async_outcome_handler(locked_controller):
    received = []

    async def on_auth(event):
        received.append(event.status)

    locked_controller.subscribe_authentication(on_auth)
    await locked_controller.send_authentication_event(AuthenticationStatus.SUCCESS)

    assert received == [AuthenticationStatus.SUCCESS]


@pytest.mark.asyncio
async def test_close_releases_subscribers(locked_controller, outcomes):
    received = outcomes(locked_controller)
    listened = []
    locked_controller.add_listener(listened.append)

    locked_controller.close()
    assert locked_controller.closed
    assert locked_controller.authentication_subscriber_count == 0

    await locked_controller.send_authentication_event(AuthenticationStatus.SUCCESS)

    assert received == []
    assert listened == []
    assert not locked_controller.locked


def test_lock_never_set_without_secure_through_commands(controller):
    """Only a raw lock() produces locked while unsecured"""
    controller.lock_if_secured()
    controller.unlock()
    controller.pause()
    controller.unpause()
    controller.resumed()

    assert not (controller.locked and not controller.secured)
