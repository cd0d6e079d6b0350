from __future__ import annotations
import asyncio
from typing import List, Optional

from secure_app.lifecycle.task_registry import TaskRegistry
from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class TrackedTaskCancellationHandler:
    """
    Shutdown handler for tasks created via create_tracked_task().

    Cancels and awaits everything still running in the TaskRegistry
    (overrunning outcome handlers, pending overlay removal, stdin reader).

    Priority: 10 (after the secure application released its subscriptions)
    """

    def __init__(self, exclude: Optional[List[asyncio.Task]] = None):
        self.exclude = exclude or []

    @property
    def shutdown_priority(self) -> int:
        return 10

    async def shutdown(self) -> None:
        tasks = TaskRegistry.instance().get_tasks_for_shutdown(exclude=self.exclude)
        current = asyncio.current_task()
        tasks = [t for t in tasks if t is not current]

        log.info(f"Cancelling {len(tasks)} background tasks...")
        for task in tasks:
            task.cancel()

        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        log.debug(TaskRegistry.instance().summary())
