"""
Post-pass scheduler - "run after the current processing pass"

Callbacks queued during a pass run together, in FIFO order, on the next
iteration of the owning event loop: after the code that queued them (and
everything it awaited) has returned control. Callbacks queued while a pass is
running go into the following pass.
"""

import asyncio
import inspect
from typing import Any, Callable, List, Optional

from secure_app.lifecycle.task_registry import create_tracked_task, TaskCategory
from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.LIFECYCLE)


class PostPassScheduler:
    """
    Deferred callback queue bound to one asyncio event loop

    Example:
        scheduler = PostPassScheduler()
        scheduler.add_post_pass_callback(controller.unpause)
        await scheduler.drain()   # tests / teardown
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._callbacks: List[Callable[[], Any]] = []
        self._handle: Optional[asyncio.Handle] = None
        self._pass_count = 0

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    @property
    def pass_count(self) -> int:
        return self._pass_count

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def add_post_pass_callback(self, callback: Callable[[], Any]) -> None:
        """
        Queue callback for the next pass

        Sync callbacks run inline in the pass; a callback returning an
        awaitable gets it scheduled as a tracked task.
        """
        self._callbacks.append(callback)
        if self._handle is None:
            self._handle = self._get_loop().call_soon(self._run_pass)

    def _run_pass(self) -> None:
        self._handle = None
        callbacks, self._callbacks = self._callbacks, []
        self._pass_count += 1

        for callback in callbacks:
            name = getattr(callback, "__name__", repr(callback))
            try:
                result = callback()
            except Exception as e:
                log.error(f"Post-pass callback failed: {name}", exception=e)
                continue

            if inspect.isawaitable(result):
                create_tracked_task(
                    self._await(name, result),
                    category=TaskCategory.LIFECYCLE,
                    description=f"Post-pass: {name}",
                )

    async def _await(self, name: str, awaitable) -> None:
        try:
            await awaitable
        except Exception as e:
            log.error(f"Post-pass callback failed: {name}", exception=e)

    async def drain(self) -> None:
        """Yield to the loop until every queued pass has run."""
        while self._handle is not None or self._callbacks:
            await asyncio.sleep(0)

    def cancel(self) -> None:
        """Drop queued callbacks without running them."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._callbacks:
            log.debug("Dropped pending post-pass callbacks", count=len(self._callbacks))
        self._callbacks.clear()
