"""
Task Registry
-------------

Tracks asyncio tasks spawned by the secure application: overrunning event
handlers, delayed native overlay removal, stdin lifecycle reader. Gives the
shutdown path a single place to find and cancel what is still running.

Features:
- Register tasks with metadata (category, description)
- Track completion state, cancellation, errors
- Introspection API for debugging and tests
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum, auto
from collections import deque
from typing import Any, Deque, Dict, List, Optional
from datetime import datetime, timezone

from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


# ---------------------------------------------------------------------------
# TASK CATEGORY ENUM
# ---------------------------------------------------------------------------

class TaskCategory(Enum):
    """Logical grouping of asynchronous tasks."""
    AUTH = auto()
    EVENTBUS = auto()
    NATIVE = auto()
    LIFECYCLE = auto()
    INPUT = auto()
    SYSTEM = auto()
    GENERAL = auto()


# ---------------------------------------------------------------------------
# TASK METADATA
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskInfo:
    """Immutable metadata captured at task creation time."""
    id: int
    category: TaskCategory
    description: str
    created_at: str  # ISO UTC string
    created_by: Optional[str] = None


@dataclass
class TaskRecord:
    """Internal structure tracking task state."""
    task: asyncio.Task
    info: TaskInfo
    cancelled: bool = False
    finished_with_error: Optional[BaseException] = None
    finished_return: Optional[Any] = None
    finished_at: Optional[str] = None


# ---------------------------------------------------------------------------
# TASK REGISTRY SINGLETON
# ---------------------------------------------------------------------------
class TaskRegistry:
    """
    Global registry for tasks created through create_tracked_task().

    Responsibilities:
    - Track tasks and metadata
    - Detect and log task failures
    - Expose active tasks to shutdown handlers

    Running tasks are kept until they finish; finished records go into a
    circular buffer of `history_limit` entries.
    """

    _instance: Optional["TaskRegistry"] = None

    def __init__(self, history_limit: int = 100) -> None:
        self._active: Dict[asyncio.Task, TaskRecord] = {}
        self._finished: Deque[TaskRecord] = deque(maxlen=history_limit)
        self._next_id: int = 1

    @classmethod
    def instance(cls) -> "TaskRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton (fresh registry per test / per event loop)."""
        cls._instance = None

    @property
    def history_limit(self) -> int:
        return self._finished.maxlen

    def register(
        self,
        task: asyncio.Task,
        category: TaskCategory,
        description: str,
        created_by: Optional[str] = None
    ) -> int:
        """Register a new task with metadata."""
        task_id = self._next_id
        self._next_id += 1

        info = TaskInfo(
            id=task_id,
            category=category,
            description=description,
            created_at=datetime.now(timezone.utc).isoformat(),
            created_by=created_by,
        )

        self._active[task] = TaskRecord(task=task, info=info)

        log.debug(
            f"[Task {task_id}] Registered ({category.name}) - {description}"
        )

        task.add_done_callback(self._on_task_done)

        return task_id

    def _on_task_done(self, task: asyncio.Task) -> None:
        record = self._active.pop(task, None)
        if record is None:
            return

        record.finished_at = datetime.now(timezone.utc).isoformat()
        self._finished.append(record)

        if task.cancelled():
            record.cancelled = True
            log.debug(f"[Task {record.info.id}] Cancelled")
            return

        exc = task.exception()
        if exc:
            record.finished_with_error = exc
            log.error(
                f"[Task {record.info.id}] FAILED: {exc}",
                description=record.info.description,
                error_type=type(exc).__name__,
            )
        else:
            record.finished_return = task.result()
            log.debug(f"[Task {record.info.id}] Completed successfully")

    # -----------------------------
    # Public API
    # -----------------------------

    def list_all(self) -> List[TaskRecord]:
        """Running tasks plus the retained finished history, oldest first."""
        return sorted(
            [*self._active.values(), *self._finished],
            key=lambda r: r.info.id,
        )

    def active(self, category: Optional[TaskCategory] = None) -> List[TaskRecord]:
        """Return only tasks that are still running (optionally of one category)."""
        return [
            r for r in self._active.values()
            if not r.task.done() and (category is None or r.info.category == category)
        ]

    def failed(self) -> List[TaskRecord]:
        return [r for r in self._finished if r.finished_with_error is not None]

    def cancelled(self) -> List[TaskRecord]:
        return [r for r in self._finished if r.cancelled]

    def summary(self) -> str:
        """Return human-readable summary for logs."""
        return (
            f"Tasks: total={self._next_id - 1}, running={len(self.active())}, "
            f"failed={len(self.failed())}, cancelled={len(self.cancelled())}"
        )

    def get_tasks_for_shutdown(
        self,
        exclude: Optional[List[asyncio.Task]] = None
    ) -> List[asyncio.Task]:
        """Return all tasks that should be cancelled during shutdown."""
        exclude = exclude or []
        tasks = [
            task for task in self._active
            if not task.done() and task not in exclude
        ]

        log.debug(f"Shutdown: {len(tasks)} tasks to cancel")
        return tasks


# ---------------------------------------------------------------------------
# Convenience wrapper function
# ---------------------------------------------------------------------------

def create_tracked_task(
    coro,
    *,
    category: TaskCategory,
    description: str,
    loop: Optional[asyncio.AbstractEventLoop] = None
) -> asyncio.Task:
    """
    Create and register a task in a single call.
    """
    loop = loop or asyncio.get_running_loop()
    task = loop.create_task(coro)

    TaskRegistry.instance().register(
        task=task,
        category=category,
        description=description
    )

    return task
