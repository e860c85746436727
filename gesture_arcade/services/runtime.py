"""
Process wiring: one camera, one model, two worker threads.

  capture thread     CaptureLoop.run(cancel)       camera -> model -> publisher
  controller thread  GameController.run(game_stop) publisher -> game state

`cancel` is the shutdown signal shared by both threads. Switching games only
stops the controller thread (game_stop) and leaves capture running.
"""
import threading

from gesture_arcade.adapters.vision.inference import load_engine
from gesture_arcade.adapters.vision.labels import LABELS_FILE
from gesture_arcade.adapters.vision.preprocess import normalize
from gesture_arcade.games.catalog import create_game
from gesture_arcade.orchestrator.capture_loop import CaptureLoop
from gesture_arcade.orchestrator.controller import GameController
from gesture_arcade.orchestrator.publisher import ResultPublisher
from gesture_arcade.services.config import Settings
from gesture_arcade.services.status_store import StatusStore

JOIN_TIMEOUT_S = 5.0


def build_backend(settings: Settings, status: StatusStore):
    if settings.model_backend == "tflite":
        from gesture_arcade.adapters.vision.tflite_backend import TFLiteBackend
        return TFLiteBackend(status)
    if settings.model_backend == "mock":
        from gesture_arcade.adapters.vision.mock_backend import MockBackend
        return MockBackend(status)
    from gesture_arcade.adapters.vision.cv2_dnn_backend import CV2DnnBackend
    return CV2DnnBackend(status, input_layout=settings.model_layout)


def build_camera(settings: Settings, status: StatusStore):
    if settings.camera == "mock":
        from gesture_arcade.adapters.camera.mock_camera import MockCamera
        return MockCamera(status, width=settings.frame_width, height=settings.frame_height)
    from gesture_arcade.adapters.camera.cv2_camera import CV2Camera
    return CV2Camera(status, index=settings.camera_index,
                     width=settings.frame_width, height=settings.frame_height)


class Runtime:
    def __init__(self, settings: Settings, status: StatusStore | None = None,
                 camera=None, backend=None):
        self.settings = settings
        self.status = status or StatusStore()
        self.camera = camera or build_camera(settings, self.status)
        self.backend = backend or build_backend(settings, self.status)
        self.publisher = ResultPublisher()
        self.engine = None
        self.capture_loop = None
        self.controller = None
        self.cancel = threading.Event()
        self._game_stop = threading.Event()
        self._capture_thread = None
        self._controller_thread = None
        self._lock = threading.Lock()

    # ── Startup ─────────────────────────────────────────────────────────────

    def load(self) -> None:
        """Load labels + model. Raises LoadError."""
        labels = None
        if self.settings.model_backend == "mock" and not (self.settings.model_dir / LABELS_FILE).is_file():
            from gesture_arcade.adapters.vision.mock_backend import MOCK_LABELS
            labels = MOCK_LABELS
        self.engine = load_engine(self.settings.model_dir, self.backend, self.status, labels=labels)

    def start(self) -> None:
        """Open the camera and start both threads. Raises LoadError / OpenError / ValueError."""
        with self._lock:
            if self.running:
                raise RuntimeError("runtime already started")
            if self.engine is None:
                self.load()
            game = create_game(self.settings.game, passcode=self.settings.passcode)
            self.camera.open()
            self.cancel.clear()
            try:
                self.capture_loop = CaptureLoop(self.camera, self.engine, self.publisher, self.status)
                self._capture_thread = threading.Thread(
                    target=self.capture_loop.run, args=(self.cancel,), name="capture", daemon=True)
                self._capture_thread.start()
                self._start_game(game.name, game)
            except Exception:
                self._abort_start()
                raise
            self.status.set_running(True)
            self.status.log("runtime: started")

    def _abort_start(self) -> None:
        self.cancel.set()
        self._stop_game()
        if self._capture_thread is not None:
            # the capture loop closes the camera on its way out
            self._capture_thread.join(JOIN_TIMEOUT_S)
            self._capture_thread = None
        else:
            self.camera.close()
        self.status.error("runtime: start aborted")

    # ── Games ───────────────────────────────────────────────────────────────

    def switch_game(self, name: str, passcode: str | None = None) -> None:
        """Replace the running game. Raises ValueError for an unknown name."""
        with self._lock:
            game = create_game(name, passcode=passcode or self.settings.passcode)
            self._stop_game()
            self._start_game(name, game)

    def reset_game(self) -> None:
        with self._lock:
            if self.controller is None:
                return
            self.controller.reset()
            if self.running and not self.controller_alive:
                # terminal games stop their thread; restart it for the new round
                self._spawn_controller()

    def _start_game(self, name: str, game=None) -> None:
        game = game or create_game(name, passcode=self.settings.passcode)
        self.controller = GameController(game, self.publisher, self.status,
                                         interval=self.settings.tick_seconds)
        self.status.game = game.name
        self._spawn_controller()

    def _spawn_controller(self) -> None:
        self._game_stop = threading.Event()
        self._controller_thread = threading.Thread(
            target=self.controller.run, args=(self._game_stop,), name="controller", daemon=True)
        self._controller_thread.start()

    def _stop_game(self) -> None:
        self._game_stop.set()
        if self._controller_thread is not None:
            self._controller_thread.join(JOIN_TIMEOUT_S)
            self._controller_thread = None

    # ── Shutdown ────────────────────────────────────────────────────────────

    def stop(self) -> None:
        """Signal cancel and wait for both threads. The current frame finishes first."""
        with self._lock:
            self.cancel.set()
            self._stop_game()
            if self._capture_thread is not None:
                self._capture_thread.join(JOIN_TIMEOUT_S)
                if self._capture_thread.is_alive():
                    self.status.log("runtime: capture thread still busy after cancel")
                self._capture_thread = None
            self.status.set_running(False)
            self.status.log("runtime: stopped")

    # ── Readers ─────────────────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._capture_thread is not None and self._capture_thread.is_alive()

    @property
    def controller_alive(self) -> bool:
        return self._controller_thread is not None and self._controller_thread.is_alive()

    def classify_frame(self, frame):
        """One-off classification outside the capture loop. Does not publish."""
        if self.engine is None:
            raise RuntimeError("model not loaded")
        return self.engine.classify(normalize(frame))
