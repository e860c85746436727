"""Shared fixtures: fake camera and fake model backend that record resource use."""

import threading
import time
from contextlib import contextmanager

import numpy as np
import pytest

from gesture_arcade.adapters.camera.base import CameraAdapter
from gesture_arcade.adapters.vision.base import ModelBackend
from gesture_arcade.orchestrator.contracts import Frame
from gesture_arcade.orchestrator.errors import OpenError
from gesture_arcade.orchestrator.publisher import ResultPublisher
from gesture_arcade.services.status_store import StatusStore


class FakeBackend(ModelBackend):
    """Returns scripted output vectors; counts session acquire/release."""

    def __init__(self, vectors=None, error: Exception | None = None):
        self.vectors = list(vectors or [[0.1, 0.7, 0.2]])
        self.error = error
        self.calls = 0
        self.acquired = 0
        self.released = 0
        self.loaded_from = None

    def load(self, model_dir):
        self.loaded_from = model_dir

    @contextmanager
    def session(self, tensor):
        self.acquired += 1
        try:
            vector = self.vectors[min(self.calls, len(self.vectors) - 1)]
            self.calls += 1
            if self.error is not None:
                raise self.error
            yield np.asarray(vector, dtype=np.float32)
        finally:
            self.released += 1


class FakeCamera(CameraAdapter):
    """Serves the given frames (None entries = end of stream), or endless frames."""

    def __init__(self, frames=None, endless: bool = False, read_delay: float = 0.0,
                 fail_open: bool = False, read_error: Exception | None = None):
        self.frames = list(frames or [])
        self.endless = endless
        self.read_delay = read_delay
        self.fail_open = fail_open
        self.read_error = read_error
        self.opened = False
        self.open_count = 0
        self.close_count = 0
        self.reads = 0

    def open(self):
        if self.fail_open:
            raise OpenError("fake camera can't be opened")
        self.opened = True
        self.open_count += 1

    def read_frame(self):
        self.reads += 1
        if self.read_delay:
            time.sleep(self.read_delay)
        if self.read_error is not None:
            raise self.read_error
        if self.frames:
            return self.frames.pop(0)
        if self.endless:
            return make_frame()
        return None

    def close(self):
        self.close_count += 1
        self.opened = False


def make_frame(width: int = 2, height: int = 2, channels: int = 3, fill: int = 255) -> Frame:
    return Frame(width=width, height=height, channels=channels,
                 buffer=bytes([fill]) * (width * height * channels))


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def publisher():
    return ResultPublisher()


@pytest.fixture
def fake_backend():
    return FakeBackend


@pytest.fixture
def fake_camera():
    return FakeCamera


@pytest.fixture
def frame_factory():
    return make_frame


def wait_until(predicate, timeout: float = 2.0, poll: float = 0.01) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(poll)
    return predicate()


@pytest.fixture
def wait_for():
    return wait_until


@pytest.fixture
def run_in_thread():
    threads = []

    def _start(target, *args):
        t = threading.Thread(target=target, args=args, daemon=True)
        t.start()
        threads.append(t)
        return t

    yield _start
    for t in threads:
        t.join(timeout=2.0)
