"""
OpenCV DNN model backend.

Looks for model.onnx, model.pb or model.tflite inside the model directory
(first match wins) and loads it with cv2.dnn.readNet. Teachable Machine
exports converted to ONNX keep the Keras NHWC input layout; frozen
TensorFlow graphs expect NCHW blobs, so the layout is configurable.
"""
import threading
from contextlib import contextmanager
from pathlib import Path

import cv2
import numpy as np

from gesture_arcade.adapters.vision.base import ModelBackend
from gesture_arcade.orchestrator.errors import InferenceError, LoadError

MODEL_FILES = ("model.onnx", "model.pb", "model.tflite")
LAYOUTS = ("nhwc", "nchw")


class CV2DnnBackend(ModelBackend):
    def __init__(self, status_store, input_layout: str = "nhwc"):
        if input_layout not in LAYOUTS:
            raise ValueError(f"input_layout must be one of {LAYOUTS}, got {input_layout!r}")
        self.status = status_store
        self.input_layout = input_layout
        self._net = None
        self._model_path: Path | None = None
        # cv2.dnn.Net keeps the last input internally; one forward pass at a time
        self._lock = threading.Lock()

    def load(self, model_dir: Path) -> None:
        model_dir = Path(model_dir)
        candidates = [model_dir / name for name in MODEL_FILES if (model_dir / name).is_file()]
        if not candidates:
            raise LoadError(f"no model file in {model_dir} (looked for {', '.join(MODEL_FILES)})")
        path = candidates[0]
        try:
            self._net = cv2.dnn.readNet(str(path))
        except cv2.error as e:
            raise LoadError(f"cv2.dnn failed to load {path.name}: {e}") from e
        if self._net is None or self._net.empty():
            raise LoadError(f"cv2.dnn loaded an empty network from {path.name}")
        self._model_path = path
        self.status.log(f"cv2_dnn: loaded {path.name} layout={self.input_layout}")

    @contextmanager
    def session(self, tensor: np.ndarray):
        if self._net is None:
            raise InferenceError("cv2_dnn: model not loaded")
        with self._lock:
            blob = tensor if self.input_layout == "nhwc" else tensor.transpose(0, 3, 1, 2)
            blob = np.ascontiguousarray(blob, dtype=np.float32)
            output = None
            try:
                self._net.setInput(blob)
                output = self._net.forward()
                yield np.asarray(output, dtype=np.float32).reshape(-1)
            except cv2.error as e:
                raise InferenceError(f"cv2_dnn: forward failed: {e}") from e
            finally:
                del blob, output

    def describe(self) -> dict:
        if self._net is None:
            return {"backend": "cv2_dnn", "loaded": False}
        return {
            "backend": "cv2_dnn",
            "loaded": True,
            "model": self._model_path.name if self._model_path else None,
            "input_layout": self.input_layout,
            "layers": len(self._net.getLayerNames()),
            "outputs": list(self._net.getUnconnectedOutLayersNames()),
        }
