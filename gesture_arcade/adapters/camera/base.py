from abc import ABC, abstractmethod
from typing import Optional

from gesture_arcade.orchestrator.contracts import Frame


class CameraAdapter(ABC):
    @abstractmethod
    def open(self) -> None:
        """Acquire the device. Raises OpenError."""
        ...

    @abstractmethod
    def read_frame(self) -> Optional[Frame]:
        """Capture one frame. Returns None on end of stream or read failure."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the device. Safe to call more than once."""
        ...
