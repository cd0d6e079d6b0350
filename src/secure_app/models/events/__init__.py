"""
Event system for the secure application

Authentication outcomes travel over the controller-owned EventBus; state
snapshots and resume notifications are delivered to controller listeners.
"""

# Event type, base class, and sources
from secure_app.models.events.types import EventType
from secure_app.models.events.base import Event
from secure_app.models.events.sources import EventSource

# Authentication outcome stream
from secure_app.models.events.authentication_events import AuthenticationEvent

# Controller observable
from secure_app.models.events.state_events import (
    StateChangedEvent,
    ResumedEvent,
)

__all__ = [
    # Type, base, and sources
    "EventType",
    "Event",
    "EventSource",

    # Authentication
    "AuthenticationEvent",

    # Controller
    "StateChangedEvent",
    "ResumedEvent",
]
