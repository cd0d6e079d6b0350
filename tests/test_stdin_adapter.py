import asyncio
import io
from unittest.mock import MagicMock

import pytest

from secure_app.input.stdin_adapter import StdinLifecycleAdapter
from secure_app.models.domain.secure_state import SecureState
from secure_app.models.enums import LifecycleSignal
from secure_app.services.secure_controller import SecureController


def make_adapter(controller=None, stream=None):
    dispatcher = MagicMock()
    on_quit = MagicMock()
    adapter = StdinLifecycleAdapter(
        dispatcher, controller or SecureController(), on_quit=on_quit, stream=stream
    )
    return adapter, dispatcher, on_quit


def test_signal_commands_posted():
    adapter, dispatcher, _ = make_adapter()

    assert adapter.handle_command("pause\n")
    assert adapter.handle_command(" R ")
    assert adapter.handle_command("detach")

    assert [c.args[0] for c in dispatcher.post.call_args_list] == [
        LifecycleSignal.PAUSED,
        LifecycleSignal.RESUMED,
        LifecycleSignal.DETACHED,
    ]


def test_controller_commands():
    controller = SecureController()
    adapter, _, _ = make_adapter(controller)

    adapter.handle_command("lock")
    assert controller.value == SecureState()

    adapter.handle_command("secure")
    adapter.handle_command("lock")
    assert controller.value == SecureState(secured=True, locked=True)

    adapter.handle_command("unsecure")
    assert controller.value == SecureState(secured=False, locked=True)


def test_unknown_and_quit(log_records):
    adapter, _, _ = make_adapter()

    assert adapter.handle_command("")
    assert adapter.handle_command("dance")
    assert not adapter.handle_command("quit")
    assert any("Unknown command" in r.message for r in log_records)


@pytest.mark.asyncio
async def test_run_stops_on_quit():
    adapter, dispatcher, on_quit = make_adapter(stream=io.StringIO("pause\nquit\nresume\n"))

    await asyncio.wait_for(adapter.run(), timeout=2)

    dispatcher.post.assert_called_once_with(LifecycleSignal.PAUSED)
    on_quit.assert_called_once_with()


@pytest.mark.asyncio
async def test_run_stops_on_eof():
    adapter, dispatcher, on_quit = make_adapter(stream=io.StringIO("inactive\n"))

    await asyncio.wait_for(adapter.run(), timeout=2)

    dispatcher.post.assert_called_once_with(LifecycleSignal.INACTIVE)
    on_quit.assert_called_once_with()
