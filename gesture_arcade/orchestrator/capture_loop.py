import threading

from gesture_arcade.adapters.vision.preprocess import normalize
from gesture_arcade.orchestrator.errors import InferenceError, OpenError, PreprocessError

# Per-frame failures can repeat every frame; only log every Nth one
SKIP_LOG_EVERY = 50


class CaptureLoop:
    """Sole writer of the ResultPublisher.

    camera -> normalize -> classify -> publish, once per frame, until the
    cancel event is set or the camera stops delivering frames. The camera is
    owned by this loop and closed on every exit path.
    """

    def __init__(self, camera, engine, publisher, status_store):
        self.camera = camera
        self.engine = engine
        self.publisher = publisher
        self.status = status_store
        self.frames = 0
        self.skipped = 0
        # set when the camera failed, as opposed to end of stream or cancel
        self.failure = None

    def run(self, cancel: threading.Event) -> None:
        try:
            try:
                self.camera.open()
            except OpenError as e:
                self.failure = str(e)
                self.status.error(f"capture: {e}")
                return

            self.status.log("capture: started")
            while not cancel.is_set():
                try:
                    frame = self.camera.read_frame()
                except Exception as e:
                    self.failure = f"camera read raised {type(e).__name__}: {e}"
                    self.status.error(f"capture: {self.failure}")
                    break
                if frame is None:
                    self.status.log("capture: cannot capture the frame, stopping")
                    break
                self.frames += 1
                self._process(frame)
                # frame goes out of scope here; nothing keeps it past this pass
                del frame
        finally:
            self.camera.close()
            self.status.log(f"capture: stopped frames={self.frames} skipped={self.skipped}")

    def _process(self, frame) -> None:
        try:
            tensor = normalize(frame)
            result = self.engine.classify(tensor)
        except (PreprocessError, InferenceError) as e:
            self._skip(str(e))
            return
        except Exception as e:
            self._skip(f"unexpected {type(e).__name__}: {e}")
            return
        self.publisher.publish(result)

    def _skip(self, reason: str) -> None:
        self.skipped += 1
        if self.skipped == 1 or self.skipped % SKIP_LOG_EVERY == 0:
            self.status.log(f"capture: skipped frame #{self.skipped}: {reason}")
