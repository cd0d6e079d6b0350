"""
Lifecycle dispatcher - in-process ILifecycleSource

The host calls dispatch()/post() with LifecycleSignal values; every registered
observer gets the matching callback.
"""

import asyncio
import inspect
from typing import List

from secure_app.models.enums import LifecycleSignal
from secure_app.lifecycle.lifecycle_protocol import ILifecycleObserver
from secure_app.lifecycle.task_registry import create_tracked_task, TaskCategory
from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.LIFECYCLE)


class LifecycleDispatcher:
    """
    Fans lifecycle signals out to observers

    dispatch() awaits every observer, so a RESUMED that triggers an
    authentication prompt only returns once the prompt resolved. Hosts whose
    lifecycle callbacks must not block use post(), which runs the dispatch as
    a tracked task; signals posted meanwhile are delivered concurrently and
    the observers decide what to ignore.

    Example:
        dispatcher = LifecycleDispatcher()
        dispatcher.add_observer(coordinator)

        dispatcher.post(LifecycleSignal.PAUSED)
        await dispatcher.dispatch(LifecycleSignal.RESUMED)
    """

    def __init__(self) -> None:
        self._observers: List[ILifecycleObserver] = []
        self.last_signal: LifecycleSignal | None = None

    def add_observer(self, observer: ILifecycleObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)
            log.debug(f"Lifecycle observer added: {observer.__class__.__name__}")

    def remove_observer(self, observer: ILifecycleObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)
            log.debug(f"Lifecycle observer removed: {observer.__class__.__name__}")

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    async def dispatch(self, signal: LifecycleSignal) -> None:
        self.last_signal = signal
        log.debug(f"Lifecycle signal: {signal.name}", observers=len(self._observers))

        for observer in list(self._observers):
            try:
                if signal == LifecycleSignal.RESUMED:
                    result = observer.on_foreground()
                elif signal == LifecycleSignal.PAUSED:
                    result = observer.on_background()
                else:
                    result = observer.on_other(signal)

                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                log.error(
                    f"Lifecycle observer failed: {observer.__class__.__name__}",
                    signal=signal.name,
                    exception=e
                )

    def post(self, signal: LifecycleSignal) -> asyncio.Task:
        """Dispatch without waiting; returns the tracked dispatch task."""
        return create_tracked_task(
            self.dispatch(signal),
            category=TaskCategory.LIFECYCLE,
            description=f"Lifecycle dispatch: {signal.name}",
        )
