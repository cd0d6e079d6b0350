"""Input adapters driving the lifecycle from outside the host UI"""

from .stdin_adapter import StdinLifecycleAdapter

__all__ = ["StdinLifecycleAdapter"]
