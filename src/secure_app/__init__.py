"""
secure_app - keeps application content hidden while the host is in the
background or has not passed an authentication check.

Public API:
    SecureApplication         host scope (controller + lifecycle coordinator)
    SecureController          owns SecureState, emits authentication outcomes
    SecureState               immutable secured/locked/paused snapshot
    AuthenticationStatus      SUCCESS | FAILED | LOGOUT
    LifecycleSignal           RESUMED | INACTIVE | PAUSED | DETACHED
    LifecycleDispatcher       in-process lifecycle source
"""

from secure_app.models.enums import AuthenticationStatus, LifecycleSignal
from secure_app.models.domain.secure_state import SecureState
from secure_app.models.config import SecureAppConfig
from secure_app.services import EventBus, Subscription, PostPassScheduler, SecureController
from secure_app.lifecycle import LifecycleDispatcher
from secure_app.lifecycle.secure_lifecycle_coordinator import SecureLifecycleCoordinator
from secure_app.secure_application import SecureApplication

__all__ = [
    "AuthenticationStatus",
    "LifecycleSignal",
    "SecureState",
    "SecureAppConfig",
    "EventBus",
    "Subscription",
    "PostPassScheduler",
    "SecureController",
    "LifecycleDispatcher",
    "SecureLifecycleCoordinator",
    "SecureApplication",
]
