import threading
from typing import Optional
from gesture_arcade.orchestrator.contracts import ClassificationResult, LatestResult


class ResultPublisher:
    """Latest-result slot: one writer (capture loop), any number of readers.

    The slot holds one immutable LatestResult that is replaced whole on
    every publish, so a reader gets either the old snapshot or the new one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._latest = LatestResult()

    def publish(self, result: ClassificationResult) -> int:
        with self._lock:
            self._latest = LatestResult(result=result, sequence=self._latest.sequence + 1)
            return self._latest.sequence

    def snapshot(self) -> LatestResult:
        with self._lock:
            return self._latest

    def read_latest(self) -> Optional[ClassificationResult]:
        return self.snapshot().result
