import asyncio
import sys
import threading
from typing import Callable, Dict, Optional, TextIO

from secure_app.lifecycle.lifecycle_dispatcher import LifecycleDispatcher
from secure_app.models.enums import LifecycleSignal
from secure_app.services.secure_controller import SecureController
from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)

SIGNAL_COMMANDS: Dict[str, LifecycleSignal] = {
    "resume": LifecycleSignal.RESUMED,
    "r": LifecycleSignal.RESUMED,
    "pause": LifecycleSignal.PAUSED,
    "p": LifecycleSignal.PAUSED,
    "inactive": LifecycleSignal.INACTIVE,
    "detach": LifecycleSignal.DETACHED,
}


class StdinLifecycleAdapter:
    """
    Line-based terminal driver for the demo entry point

    Each line is one command:
    - resume | r, pause | p, inactive, detach  → lifecycle signal (posted, non-blocking)
    - lock, secure, unsecure                   → direct controller call
    - status                                   → print current state
    - quit | q (or EOF)                        → on_quit()

    Lines are read on a daemon thread so the event loop keeps running
    while waiting for input (an authentication prompt may be in flight).
    """

    def __init__(
        self,
        dispatcher: LifecycleDispatcher,
        controller: SecureController,
        on_quit: Optional[Callable[[], None]] = None,
        stream: Optional[TextIO] = None,
    ):
        self.dispatcher = dispatcher
        self.controller = controller
        self.on_quit = on_quit
        self.stream = stream or sys.stdin

    async def run(self) -> None:
        """Read commands until quit/EOF or cancellation"""
        loop = asyncio.get_running_loop()
        lines: asyncio.Queue = asyncio.Queue()

        def reader() -> None:
            for line in iter(self.stream.readline, ""):
                loop.call_soon_threadsafe(lines.put_nowait, line)
            loop.call_soon_threadsafe(lines.put_nowait, None)

        # Daemon thread: a blocked readline must not keep the process alive
        threading.Thread(target=reader, name="stdin-lifecycle", daemon=True).start()
        log.info("STDIN lifecycle adapter active (type 'quit' to exit)")

        while True:
            line = await lines.get()
            if line is None:
                log.info("STDIN closed")
                self._quit()
                return

            if not self.handle_command(line):
                self._quit()
                return

    def handle_command(self, line: str) -> bool:
        """Execute one command; returns False when the adapter should stop"""
        command = line.strip().lower()
        if not command:
            return True

        if command in ("quit", "q"):
            return False

        if command in SIGNAL_COMMANDS:
            self.dispatcher.post(SIGNAL_COMMANDS[command])
        elif command == "lock":
            self.controller.lock_if_secured()
        elif command == "secure":
            self.controller.secure()
        elif command == "unsecure":
            self.controller.unsecure()
        elif command == "status":
            log.info("Current state", **self.controller.value.to_dict())
        else:
            log.warn(f"Unknown command: {command}")
        return True

    def _quit(self) -> None:
        if self.on_quit is not None:
            self.on_quit()
