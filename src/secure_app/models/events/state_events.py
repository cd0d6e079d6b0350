"""Controller observable events (state snapshots, resume hook)"""

from dataclasses import dataclass

from secure_app.models.events.base import Event
from secure_app.models.events.types import EventType
from secure_app.models.events.sources import EventSource
from secure_app.models.domain.secure_state import SecureState


@dataclass(init=False)
class StateChangedEvent(Event):
    previous: SecureState
    current: SecureState

    def __init__(self, previous: SecureState, current: SecureState):
        super().__init__(
            type=EventType.STATE_CHANGED,
            source=EventSource.CONTROLLER,
        )
        self.previous = previous
        self.current = current

    @property
    def lock_changed(self) -> bool:
        return self.previous.locked != self.current.locked


@dataclass(init=False)
class ResumedEvent(Event):
    """Foreground reached with no authentication prompt outstanding"""
    resume_count: int
    state: SecureState

    def __init__(self, resume_count: int, state: SecureState):
        super().__init__(
            type=EventType.RESUMED,
            source=EventSource.CONTROLLER,
        )
        self.resume_count = resume_count
        self.state = state
