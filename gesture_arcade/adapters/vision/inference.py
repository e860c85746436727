"""
Inference step: tensor -> (label, confidence).

The backend yields one probability vector per call, ordered like the label
file. The winning class is the first index holding the maximum score, so a
tie between classes always resolves to the lower index.
"""
from pathlib import Path

import numpy as np

from gesture_arcade.adapters.vision.base import ModelBackend
from gesture_arcade.adapters.vision.labels import LABELS_FILE, load_labels
from gesture_arcade.orchestrator.contracts import ClassificationResult
from gesture_arcade.orchestrator.errors import InferenceError


class InferenceEngine:
    def __init__(self, backend: ModelBackend, labels: list[str], status_store=None):
        self.backend = backend
        self.labels = list(labels)
        self.status = status_store

    def classify(self, tensor: np.ndarray) -> ClassificationResult:
        if not self.labels:
            raise InferenceError("label list is empty")

        try:
            with self.backend.session(tensor) as output:
                scores = np.array(output, dtype=np.float32).reshape(-1)
        except InferenceError:
            raise
        except Exception as e:
            raise InferenceError(f"backend failure: {type(e).__name__}: {e}") from e

        if scores.size != len(self.labels):
            raise InferenceError(
                f"model returned {scores.size} scores for {len(self.labels)} labels"
            )
        if not np.all(np.isfinite(scores)):
            raise InferenceError("model returned non-finite scores")

        # np.argmax returns the first occurrence of the maximum
        idx = int(np.argmax(scores))
        confidence = float(np.clip(scores[idx], 0.0, 1.0))
        return ClassificationResult(label=self.labels[idx], confidence=confidence)


def load_engine(model_dir: Path, backend: ModelBackend, status_store=None,
                labels: list[str] | None = None) -> InferenceEngine:
    """Load labels + model from model_dir. Raises LoadError."""
    model_dir = Path(model_dir)
    if labels is None:
        labels = load_labels(model_dir / LABELS_FILE)
    backend.load(model_dir)
    if status_store is not None:
        status_store.log(f"inference: {type(backend).__name__} ready, {len(labels)} labels {labels}")
    return InferenceEngine(backend, labels, status_store)
