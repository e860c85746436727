"""Mock model backend: replays fixed score vectors, or random ones, for running without a model."""
import itertools
from contextlib import contextmanager
from pathlib import Path

import numpy as np

from gesture_arcade.adapters.vision.base import ModelBackend

# Used when MODEL_BACKEND=mock and the model dir has no labels.txt
MOCK_LABELS = [
    "0 thumbsup", "1 thumbsdown", "2 stop",
    "3 rock", "4 paper", "5 scissors",
    "6 1", "7 2", "8 3", "9 4",
]


class MockBackend(ModelBackend):
    def __init__(self, status_store, vectors=None, num_classes: int = len(MOCK_LABELS), seed=None):
        self.status = status_store
        self.num_classes = num_classes
        self._vectors = itertools.cycle([np.asarray(v, dtype=np.float32) for v in vectors]) if vectors else None
        self._rng = np.random.default_rng(seed)
        self.calls = 0
        self.open_sessions = 0

    def load(self, model_dir: Path) -> None:
        self.status.log(f"mock_backend: ignoring model dir {model_dir}")

    @contextmanager
    def session(self, tensor: np.ndarray):
        self.calls += 1
        self.open_sessions += 1
        try:
            if self._vectors is not None:
                yield next(self._vectors).copy()
            else:
                yield self._rng.dirichlet(np.ones(self.num_classes)).astype(np.float32)
        finally:
            self.open_sessions -= 1

    def describe(self) -> dict:
        return {"backend": "mock", "loaded": True, "num_classes": self.num_classes}
