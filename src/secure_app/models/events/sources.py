from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers for application events"""
    CONTROLLER = auto()     # SecureController transitions and outcomes
    HOST = auto()           # Direct calls from the host application
