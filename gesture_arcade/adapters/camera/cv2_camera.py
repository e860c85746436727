"""
OpenCV webcam capture adapter.
CAMERA_INDEX env var (default 0) selects the webcam device.
Frames are converted BGR -> RGB and resized to the model input size.
"""
import os
from typing import Optional

import cv2

from gesture_arcade.adapters.camera.base import CameraAdapter
from gesture_arcade.orchestrator.contracts import Frame
from gesture_arcade.orchestrator.errors import OpenError


class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None, width: int = 224, height: int = 224):
        self.status = status_store
        self._index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self.width = width
        self.height = height
        self._cap = None

    def open(self) -> None:
        if self._cap is not None and self._cap.isOpened():
            return
        cap = cv2.VideoCapture(self._index)
        if not cap.isOpened():
            cap.release()
            self.status.log(f"cv2_camera: failed to open device {self._index}")
            raise OpenError(f"camera device {self._index} can't be opened")
        self._cap = cap
        self.status.log(f"cv2_camera: opened device {self._index}")

    def read_frame(self) -> Optional[Frame]:
        if self._cap is None:
            return None
        ret, bgr = self._cap.read()
        if not ret or bgr is None:
            self.status.log("cv2_camera: frame capture failed")
            return None
        if bgr.shape[1] != self.width or bgr.shape[0] != self.height:
            bgr = cv2.resize(bgr, (self.width, self.height), interpolation=cv2.INTER_AREA)
        rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
        h, w = rgb.shape[:2]
        return Frame(width=w, height=h, channels=rgb.shape[2], buffer=rgb.tobytes())

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            self.status.log(f"cv2_camera: released device {self._index}")
