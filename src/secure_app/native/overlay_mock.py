"""Native overlay bridges without a platform behind them"""

from typing import List

from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.NATIVE)


class NullNativeOverlay:
    """Headless host: overlay calls do nothing"""

    def lock(self) -> None:
        pass

    def unlock(self) -> None:
        pass


class LoggingNativeOverlay:
    """
    Logs overlay calls and remembers them

    Used by the demo entry point and by tests asserting when removal happened.
    """

    def __init__(self) -> None:
        self.calls: List[str] = []
        self.visible = False

    def lock(self) -> None:
        self.calls.append("lock")
        self.visible = True
        log.info("Native overlay shown")

    def unlock(self) -> None:
        self.calls.append("unlock")
        self.visible = False
        log.info("Native overlay removed")

    @property
    def unlock_count(self) -> int:
        return self.calls.count("unlock")
