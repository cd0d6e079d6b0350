"""
Models package - Data models for the secure application
"""

from .enums import AuthenticationStatus, LifecycleSignal, NativeOverlayMode, LogLevel, LogCategory
from .domain.secure_state import SecureState

__all__ = [
    'AuthenticationStatus',
    'LifecycleSignal',
    'NativeOverlayMode',
    'LogLevel',
    'LogCategory',
    'SecureState',
]
