"""Native overlay bridge"""

from .overlay_interface import INativeOverlay
from .overlay_mock import NullNativeOverlay, LoggingNativeOverlay
from .overlay_factory import create_native_overlay

__all__ = [
    "INativeOverlay",
    "NullNativeOverlay",
    "LoggingNativeOverlay",
    "create_native_overlay",
]
