from enum import Enum, auto


class EventType(Enum):
    # Authentication outcome stream
    AUTHENTICATION = auto()

    # Controller observable
    STATE_CHANGED = auto()
    RESUMED = auto()
