"""Secure state domain model"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class SecureState:
    """
    Immutable snapshot of the protection state

    - secured: protection mode is active; when False, locking has no visible effect
    - locked: protected content must currently be hidden
    - paused: lifecycle-driven transitions are suspended (authentication in flight)

    `locked` is only meaningful while `secured` is True. Clearing `secured`
    never clears `locked`, so securing again restores the previous lock.

    Default values defined here are the starting point of every controller
    that is not given explicit starting values.
    """

    secured: bool = False
    locked: bool = False
    paused: bool = False

    def copy_with(self, **changes) -> "SecureState":
        """Return a new snapshot with the given fields replaced"""
        return replace(self, **changes)

    @property
    def content_hidden(self) -> bool:
        """True when a presentation layer must hide protected content"""
        return self.secured and self.locked

    def to_dict(self) -> dict:
        return {"secured": self.secured, "locked": self.locked, "paused": self.paused}
