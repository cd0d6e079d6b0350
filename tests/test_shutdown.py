"""
Tests for ShutdownCoordinator and the tracked task cancellation handler.
"""

import asyncio

import pytest

from secure_app.lifecycle.handlers import TrackedTaskCancellationHandler
from secure_app.lifecycle.shutdown_coordinator import ShutdownCoordinator
from secure_app.lifecycle.task_registry import create_tracked_task, TaskCategory
from secure_app.lifecycle.lifecycle_dispatcher import LifecycleDispatcher
from secure_app.secure_application import SecureApplication


class RecordingHandler:
    def __init__(self, name, priority, order, error=None):
        self.name = name
        self._priority = priority
        self.order = order
        self.error = error

    @property
    def shutdown_priority(self):
        return self._priority

    async def shutdown(self):
        self.order.append(self.name)
        if self.error:
            raise self.error


@pytest.mark.asyncio
async def test_handlers_run_by_priority_and_survive_errors(log_records):
    order = []
    coordinator = ShutdownCoordinator()
    coordinator.register(RecordingHandler("low", 10, order))
    coordinator.register(RecordingHandler("high", 100, order, error=RuntimeError("boom")))
    coordinator.register(RecordingHandler("mid", 50, order))

    await coordinator.shutdown_all()

    assert order == ["high", "mid", "low"]
    assert any("Error shutting down" in r.message for r in log_records)


@pytest.mark.asyncio
async def test_slow_handler_times_out():
    class Slow:
        shutdown_priority = 1

        async def shutdown(self):
            await asyncio.sleep(10)

    order = []
    coordinator = ShutdownCoordinator(timeout_per_handler=0.05)
    coordinator.register(Slow())
    coordinator.register(RecordingHandler("after", 0, order))

    await coordinator.shutdown_all()

    assert order == ["after"]


def test_register_rejects_incomplete_handler():
    coordinator = ShutdownCoordinator()
    with pytest.raises(ValueError):
        coordinator.register(object())


@pytest.mark.asyncio
async def test_request_shutdown_keeps_first_reason():
    coordinator = ShutdownCoordinator()

    coordinator.request_shutdown("quit")
    coordinator.request_shutdown("SIGTERM")
    await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=1)

    assert coordinator.shutdown_requested
    assert coordinator.reason == "quit"


@pytest.mark.asyncio
async def test_tracked_tasks_cancelled():
    sleeper = create_tracked_task(asyncio.sleep(10), category=TaskCategory.NATIVE, description="sleep")
    keeper = create_tracked_task(asyncio.sleep(10), category=TaskCategory.INPUT, description="keep")
    handler = TrackedTaskCancellationHandler(exclude=[keeper])

    await handler.shutdown()

    assert sleeper.cancelled()
    assert not keeper.done()
    keeper.cancel()
    await asyncio.gather(keeper, return_exceptions=True)


@pytest.mark.asyncio
async def test_secure_application_as_shutdown_handler():
    app = SecureApplication()
    dispatcher = LifecycleDispatcher()
    app.start(dispatcher)
    coordinator = ShutdownCoordinator()
    coordinator.register(app)

    await coordinator.shutdown_all()

    assert coordinator.get_handler(SecureApplication) is app
    assert dispatcher.observer_count == 0
    assert app.controller.authentication_subscriber_count == 0
    assert not app.started
