"""Mock camera: synthetic RGB frames for running without a webcam."""
import time
from typing import Optional

import numpy as np

from gesture_arcade.adapters.camera.base import CameraAdapter
from gesture_arcade.orchestrator.contracts import Frame


class MockCamera(CameraAdapter):
    def __init__(self, status_store, width: int = 224, height: int = 224,
                 fps: float = 15.0, max_frames: int | None = None, seed=None):
        self.status = status_store
        self.width = width
        self.height = height
        self.fps = fps
        self.max_frames = max_frames
        self._rng = np.random.default_rng(seed)
        self._opened = False
        self.frames_served = 0
        self.close_count = 0

    def open(self) -> None:
        if self._opened:
            return
        self._opened = True
        self.status.log(f"mock_camera: serving {self.width}x{self.height} @ {self.fps}fps")

    def read_frame(self) -> Optional[Frame]:
        if not self._opened:
            return None
        if self.max_frames is not None and self.frames_served >= self.max_frames:
            self.status.log("mock_camera: end of stream")
            return None
        if self.fps:
            time.sleep(1.0 / self.fps)
        pixels = self._rng.integers(0, 256, size=(self.height, self.width, 3), dtype=np.uint8)
        self.frames_served += 1
        return Frame(width=self.width, height=self.height, channels=3, buffer=pixels.tobytes())

    def close(self) -> None:
        if self._opened:
            self._opened = False
            self.close_count += 1
            self.status.log(f"mock_camera: closed after {self.frames_served} frames")
