import threading
from dataclasses import dataclass, field
from typing import Optional, List

MAX_LOGS = 200


@dataclass
class StatusStore:
    running: bool = False
    game: Optional[str] = None
    last_error: Optional[str] = None
    logs: List[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def set_running(self, v: bool):
        self.running = v

    def log(self, msg: str):
        # written from the capture thread, the controller thread and API handlers
        with self._lock:
            self.logs.append(msg)
            if len(self.logs) > MAX_LOGS:
                self.logs = self.logs[-MAX_LOGS:]

    def error(self, msg: str):
        self.last_error = msg
        self.log(f"error {msg}")

    def tail(self, n: int = MAX_LOGS) -> List[str]:
        with self._lock:
            return list(self.logs[-n:])
