from pydantic import BaseModel
from typing import Literal, Optional

GameName = Literal["binary_search", "rps", "passcode", "caption"]


class RecognizeOut(BaseModel):
    label: str
    confidence: float


class StatusResponse(BaseModel):
    running: bool
    game: Optional[str] = None
    status_text: Optional[str] = None
    finished: bool = False
    vocabulary: list[str] = []            # empty: any label
    sequence: int = 0                     # bumps once per published classification
    recognized: Optional[RecognizeOut] = None
    frames: int = 0
    skipped: int = 0
    last_error: Optional[str] = None
    logs: list[str]


class GameStartRequest(BaseModel):
    game: GameName
    passcode: Optional[str] = None        # passcode game only, 4 digits


class GameResponse(BaseModel):
    ok: bool
    game: Optional[str] = None
    status_text: Optional[str] = None
    error_code: Optional[str] = None
    error: Optional[str] = None


class ClassifyFrameRequest(BaseModel):
    width: int
    height: int
    channels: int = 3
    image: str                            # base64 raw RGB bytes, row-major


class ClassifyFrameResponse(BaseModel):
    ok: bool
    recognized: Optional[RecognizeOut] = None
    error_code: Optional[str] = None
    error: Optional[str] = None
