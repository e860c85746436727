from dataclasses import dataclass
from typing import Optional

from gesture_arcade.orchestrator.contracts import ClassificationResult
from gesture_arcade.orchestrator.controller import Game

WAITING = "Waiting for camera..."


@dataclass(frozen=True)
class CaptionState:
    text: str = WAITING


class LiveCaption(Game):
    """No game: shows the current label and score once a second."""

    name = "caption"
    interval = 1.0
    act_on_repeats = True

    def initial_state(self) -> CaptionState:
        return CaptionState()

    def transition(self, state: CaptionState, result: ClassificationResult, now: float):
        return CaptionState(text=f"{result.label} - {result.confidence:.2f}")

    def render(self, state: CaptionState, result: Optional[ClassificationResult]) -> str:
        return state.text
