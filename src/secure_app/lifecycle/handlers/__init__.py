from .task_cancellation_handler import TrackedTaskCancellationHandler

__all__ = [
    "TrackedTaskCancellationHandler",
]
