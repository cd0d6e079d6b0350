"""
Enums for the secure application state machine
"""

from enum import Enum, auto


class AuthenticationStatus(Enum):
    """
    Outcome of an authentication check

    Transient value: broadcast on the authentication event stream, never stored
    in SecureState.
    """
    SUCCESS = auto()   # User may see protected content again
    FAILED = auto()    # Check failed, content stays locked
    LOGOUT = auto()    # Protection removed entirely (unsecure + unlock)


class LifecycleSignal(Enum):
    """
    Host process lifecycle transitions

    RESUMED and PAUSED drive the coordinator; everything else is passed
    through without touching controller state.
    """
    RESUMED = auto()   # Back in foreground
    INACTIVE = auto()  # Transitional (e.g. app switcher visible)
    PAUSED = auto()    # Moved to background
    DETACHED = auto()  # Host view detached, engine still running


class NativeOverlayMode(Enum):
    """Which native overlay bridge to build from config"""
    NONE = auto()      # No native overlay (headless hosts, tests)
    LOG = auto()       # Log overlay calls only (demo / development)


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    STATE = auto()       # SecureState transitions
    EVENT = auto()       # Event bus events and handling
    AUTH = auto()        # Authentication callback and outcomes
    LIFECYCLE = auto()   # Foreground/background handling
    NATIVE = auto()      # Native overlay bridge
    TASK = auto()        # Tracked asyncio tasks
    SHUTDOWN = auto()
    SYSTEM = auto()      # Startup, shutdown, errors

    GENERAL = auto()    # Default general category
