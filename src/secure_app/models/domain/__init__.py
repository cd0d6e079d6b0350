"""Domain models"""

from .secure_state import SecureState

__all__ = ["SecureState"]
