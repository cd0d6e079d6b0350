"""Authentication outcome events"""

from dataclasses import dataclass

from secure_app.models.events.base import Event
from secure_app.models.events.types import EventType
from secure_app.models.events.sources import EventSource
from secure_app.models.enums import AuthenticationStatus


@dataclass(init=False)
class AuthenticationEvent(Event):
    """Authentication outcome broadcast by the controller"""
    status: AuthenticationStatus

    def __init__(self, status: AuthenticationStatus, source: EventSource = EventSource.CONTROLLER):
        super().__init__(
            type=EventType.AUTHENTICATION,
            source=source,
        )
        self.status = status
