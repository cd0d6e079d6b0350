"""
Lifecycle subsystem
-------------------

Exports the public API for:
- host lifecycle protocols and the in-process dispatcher
- graceful shutdown
- task tracking & introspection

The secure lifecycle coordinator lives in
secure_app.lifecycle.secure_lifecycle_coordinator (it depends on services,
which depend on the task registry exported here).
"""

from .lifecycle_protocol import ILifecycleObserver, ILifecycleSource
from .lifecycle_dispatcher import LifecycleDispatcher
from .shutdown_coordinator import ShutdownCoordinator
from .task_registry import TaskRegistry, TaskCategory, TaskInfo, create_tracked_task
from .shutdown_protocol import IShutdownHandler

__all__ = [
    "ILifecycleObserver",
    "ILifecycleSource",
    "LifecycleDispatcher",
    "ShutdownCoordinator",
    "TaskRegistry",
    "TaskCategory",
    "TaskInfo",
    "create_tracked_task",
    "IShutdownHandler",
]
