import numpy as np

from gesture_arcade.orchestrator.contracts import Frame
from gesture_arcade.orchestrator.errors import PreprocessError


def normalize(frame: Frame) -> np.ndarray:
    """Frame bytes -> float32 tensor of shape (1, h, w, c), each value byte / 255."""
    w, h, c = frame.width, frame.height, frame.channels
    if w <= 0 or h <= 0 or c <= 0:
        raise PreprocessError(f"invalid frame shape {w}x{h}x{c}")
    expected = w * h * c
    if len(frame.buffer) != expected:
        raise PreprocessError(
            f"frame buffer has {len(frame.buffer)} bytes, expected {expected} ({w}x{h}x{c})"
        )
    pixels = np.frombuffer(frame.buffer, dtype=np.uint8)
    return (pixels.astype(np.float32) / 255.0).reshape(1, h, w, c)
