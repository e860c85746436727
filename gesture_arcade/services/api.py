"""
HTTP status/control surface for a Runtime.

Read-only views of the latest classification and game status for a display
client, plus game switching and shutdown. Rendering is left to the client.
"""
import base64
import binascii

from fastapi import FastAPI

from gesture_arcade.orchestrator import errors
from gesture_arcade.orchestrator.contracts import Frame
from gesture_arcade.orchestrator.errors import InferenceError, PreprocessError
from gesture_arcade.services.models import (
    StatusResponse, RecognizeOut,
    GameStartRequest, GameResponse,
    ClassifyFrameRequest, ClassifyFrameResponse,
)
from gesture_arcade.services.runtime import Runtime


def _recognized(result) -> RecognizeOut | None:
    return RecognizeOut(label=result.label, confidence=result.confidence) if result else None


def create_app(runtime: Runtime) -> FastAPI:
    app = FastAPI(title="gesture-arcade")
    status = runtime.status

    @app.get("/status", response_model=StatusResponse)
    def get_status():
        snap = runtime.publisher.snapshot()
        ctrl = runtime.controller
        loop = runtime.capture_loop
        return StatusResponse(
            running=runtime.running,
            game=status.game,
            status_text=ctrl.status_text if ctrl else None,
            finished=ctrl.finished if ctrl else False,
            vocabulary=sorted(ctrl.game.vocabulary) if ctrl else [],
            sequence=snap.sequence,
            recognized=_recognized(snap.result),
            frames=loop.frames if loop else 0,
            skipped=loop.skipped if loop else 0,
            last_error=status.last_error,
            logs=status.tail(),
        )

    @app.get("/health")
    def health():
        checks = {
            "api": True,
            "capture_alive": runtime.running,
            "controller_alive": runtime.controller_alive,
            "camera": type(runtime.camera).__name__,
            "model": runtime.backend.describe(),
            "labels": runtime.engine.labels if runtime.engine else [],
        }
        checks["all_ok"] = checks["capture_alive"] and checks["model"].get("loaded", False)
        return checks

    @app.post("/game/start", response_model=GameResponse)
    def game_start(req: GameStartRequest):
        if not runtime.running:
            return GameResponse(ok=False, error_code=errors.ERR_NOT_RUNNING, error="capture is not running")
        try:
            runtime.switch_game(req.game, passcode=req.passcode)
        except ValueError as e:
            status.log(f"GAME_START rejected: {e}")
            return GameResponse(ok=False, game=req.game, error_code=errors.ERR_BAD_GAME, error=str(e))
        status.log(f"GAME_START {req.game}")
        return GameResponse(ok=True, game=req.game, status_text=runtime.controller.status_text)

    @app.post("/game/reset", response_model=GameResponse)
    def game_reset():
        if runtime.controller is None:
            return GameResponse(ok=False, error_code=errors.ERR_NOT_RUNNING, error="no game running")
        runtime.reset_game()
        return GameResponse(ok=True, game=status.game, status_text=runtime.controller.status_text)

    @app.post("/stop")
    def stop():
        status.log("STOP")
        runtime.stop()
        return {"ok": True}

    @app.post("/classify_frame", response_model=ClassifyFrameResponse)
    def classify_frame(req: ClassifyFrameRequest):
        try:
            buffer = base64.b64decode(req.image, validate=True)
        except (binascii.Error, ValueError) as e:
            status.log(f"CLASSIFY_FRAME decode error: {e}")
            return ClassifyFrameResponse(ok=False, error_code=errors.ERR_BAD_FRAME, error="base64 decode failed")

        frame = Frame(width=req.width, height=req.height, channels=req.channels, buffer=buffer)
        try:
            result = runtime.classify_frame(frame)
        except PreprocessError as e:
            status.log(f"CLASSIFY_FRAME bad frame: {e}")
            return ClassifyFrameResponse(ok=False, error_code=errors.ERR_BAD_FRAME, error=str(e))
        except (InferenceError, RuntimeError) as e:
            status.log(f"CLASSIFY_FRAME error: {e}")
            return ClassifyFrameResponse(ok=False, error_code=errors.ERR_UNKNOWN, error=str(e))
        status.log(f"CLASSIFY_FRAME result: {result.label} ({result.confidence:.2f})")
        return ClassifyFrameResponse(ok=True, recognized=_recognized(result))

    return app
