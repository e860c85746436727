from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Frame:
    width: int
    height: int
    channels: int
    buffer: bytes              # row-major, channel-interleaved pixel bytes


@dataclass(frozen=True)
class ClassificationResult:
    label: str                 # e.g. "0 thumbsup" | "rock"
    confidence: float


@dataclass(frozen=True)
class LatestResult:
    result: Optional[ClassificationResult] = None
    # 0 = nothing published yet; +1 per publish
    sequence: int = 0
