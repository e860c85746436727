"""
TensorFlow Lite model backend (Teachable Machine "TensorFlow Lite" export).

Requires the tflite-runtime package: pip install "gesture-arcade[tflite]".
Quantized (uint8) models are fed 0-255 inputs and their outputs are
dequantized back to probabilities.
"""
import threading
from contextlib import contextmanager
from pathlib import Path

import numpy as np

from gesture_arcade.adapters.vision.base import ModelBackend
from gesture_arcade.orchestrator.errors import InferenceError, LoadError

MODEL_FILES = ("model.tflite", "model_unquant.tflite")


class TFLiteBackend(ModelBackend):
    def __init__(self, status_store, num_threads: int = 2):
        self.status = status_store
        self.num_threads = num_threads
        self._interp = None
        self._in = None
        self._out = None
        self._lock = threading.Lock()

    def load(self, model_dir: Path) -> None:
        try:
            from tflite_runtime.interpreter import Interpreter
        except ImportError as e:
            raise LoadError("tflite backend needs tflite-runtime: pip install tflite-runtime") from e

        model_dir = Path(model_dir)
        paths = [model_dir / name for name in MODEL_FILES if (model_dir / name).is_file()]
        if not paths:
            raise LoadError(f"no model file in {model_dir} (looked for {', '.join(MODEL_FILES)})")
        try:
            interp = Interpreter(model_path=str(paths[0]), num_threads=self.num_threads)
            interp.allocate_tensors()
        except (ValueError, RuntimeError) as e:
            raise LoadError(f"tflite failed to load {paths[0].name}: {e}") from e

        self._interp = interp
        self._in = interp.get_input_details()[0]
        self._out = interp.get_output_details()[0]
        self.status.log(
            f"tflite: loaded {paths[0].name} input={list(self._in['shape'])} "
            f"dtype={np.dtype(self._in['dtype']).name}"
        )

    @contextmanager
    def session(self, tensor: np.ndarray):
        if self._interp is None:
            raise InferenceError("tflite: model not loaded")
        with self._lock:
            x = self._quantize_input(tensor)
            y = None
            try:
                self._interp.set_tensor(self._in["index"], x)
                self._interp.invoke()
                # get_tensor returns a copy, safe to hand out
                y = self._dequantize_output(self._interp.get_tensor(self._out["index"]))
                yield y.reshape(-1)
            except (ValueError, RuntimeError) as e:
                raise InferenceError(f"tflite: invoke failed: {e}") from e
            finally:
                del x, y

    def _quantize_input(self, tensor: np.ndarray) -> np.ndarray:
        dtype = self._in["dtype"]
        if dtype == np.uint8:
            return np.clip(np.rint(tensor * 255.0), 0, 255).astype(np.uint8)
        return tensor.astype(dtype, copy=False)

    def _dequantize_output(self, raw: np.ndarray) -> np.ndarray:
        if self._out["dtype"] != np.uint8:
            return raw.astype(np.float32)
        scale, zero_point = self._out.get("quantization", (0.0, 0))
        if not scale:
            return raw.astype(np.float32) / 255.0
        return (raw.astype(np.float32) - zero_point) * scale

    def describe(self) -> dict:
        if self._interp is None:
            return {"backend": "tflite", "loaded": False}
        return {
            "backend": "tflite",
            "loaded": True,
            "input_shape": [int(v) for v in self._in["shape"]],
            "input_dtype": np.dtype(self._in["dtype"]).name,
            "output_shape": [int(v) for v in self._out["shape"]],
        }
