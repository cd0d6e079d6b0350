"""Services layer"""

from .event_bus import EventBus, Subscription
from .post_pass_scheduler import PostPassScheduler
from .secure_controller import SecureController

__all__ = [
    "EventBus",
    "Subscription",
    "PostPassScheduler",
    "SecureController",
]
