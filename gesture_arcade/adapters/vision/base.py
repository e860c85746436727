from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from pathlib import Path

import numpy as np


class ModelBackend(ABC):
    """Loaded classifier. One instance per process, shared read-only by classify calls."""

    @abstractmethod
    def load(self, model_dir: Path) -> None:
        """Load the model from model_dir. Raises LoadError."""
        ...

    @abstractmethod
    def session(self, tensor: np.ndarray) -> AbstractContextManager[np.ndarray]:
        """Run one inference. Yields the flat output vector.

        Input/output buffers belong to the session and are released when the
        with-block exits, whether or not it raised. Raises InferenceError.
        """
        ...

    def describe(self) -> dict:
        return {}
