"""
Runtime settings, read from environment variables (and .env via python-dotenv).

  MODEL_DIR       model directory holding the model file + labels.txt (default: model)
  MODEL_BACKEND   cv2 | tflite | mock                                  (default: cv2)
  MODEL_LAYOUT    nhwc | nchw, input layout for the cv2 backend        (default: nhwc)
  CAMERA          cv2 | mock                                           (default: cv2)
  CAMERA_INDEX    webcam device index                                  (default: 0)
  FRAME_WIDTH / FRAME_HEIGHT   model input size                        (default: 224)
  GAME            binary_search | rps | passcode | caption             (default: caption)
  TICK_SECONDS    override the game's tick interval
  PASSCODE        4-digit code for the passcode game                   (default: 1234)
  API_HOST / API_PORT                                                  (default: 127.0.0.1:8000)
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from gesture_arcade.adapters.vision.cv2_dnn_backend import LAYOUTS
from gesture_arcade.games.catalog import GAMES

BACKENDS = ("cv2", "tflite", "mock")
CAMERAS = ("cv2", "mock")


@dataclass
class Settings:
    model_dir: Path = Path("model")
    model_backend: str = "cv2"
    model_layout: str = "nhwc"
    camera: str = "cv2"
    camera_index: int = 0
    frame_width: int = 224
    frame_height: int = 224
    game: str = "caption"
    tick_seconds: Optional[float] = None
    passcode: str = "1234"
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    def __post_init__(self):
        self.model_dir = Path(self.model_dir)
        if self.model_backend not in BACKENDS:
            raise ValueError(f"MODEL_BACKEND must be one of {BACKENDS}, got {self.model_backend!r}")
        if self.camera not in CAMERAS:
            raise ValueError(f"CAMERA must be one of {CAMERAS}, got {self.camera!r}")
        if self.model_layout not in LAYOUTS:
            raise ValueError(f"MODEL_LAYOUT must be one of {LAYOUTS}, got {self.model_layout!r}")
        if self.game not in GAMES:
            raise ValueError(f"GAME must be one of {sorted(GAMES)}, got {self.game!r}")
        if self.frame_width <= 0 or self.frame_height <= 0:
            raise ValueError(f"frame size must be positive, got {self.frame_width}x{self.frame_height}")

    @classmethod
    def from_env(cls, env_file: str | None = ".env") -> "Settings":
        if env_file:
            load_dotenv(dotenv_path=env_file, override=False)
        tick = os.getenv("TICK_SECONDS")
        return cls(
            model_dir=Path(os.getenv("MODEL_DIR", "model")),
            model_backend=os.getenv("MODEL_BACKEND", "cv2").lower(),
            model_layout=os.getenv("MODEL_LAYOUT", "nhwc").lower(),
            camera=os.getenv("CAMERA", "cv2").lower(),
            camera_index=int(os.getenv("CAMERA_INDEX", "0")),
            frame_width=int(os.getenv("FRAME_WIDTH", "224")),
            frame_height=int(os.getenv("FRAME_HEIGHT", "224")),
            game=os.getenv("GAME", "caption"),
            tick_seconds=float(tick) if tick else None,
            passcode=os.getenv("PASSCODE", "1234"),
            api_host=os.getenv("API_HOST", "127.0.0.1"),
            api_port=int(os.getenv("API_PORT", "8000")),
        )
