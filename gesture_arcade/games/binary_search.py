"""Number guessing by binary search: thumbs up = higher, thumbs down = lower, stop = done."""
from dataclasses import dataclass, replace
from typing import Optional

from gesture_arcade.adapters.vision.labels import label_word
from gesture_arcade.orchestrator.contracts import ClassificationResult
from gesture_arcade.orchestrator.controller import Game

THUMBS_UP = "thumbsup"
THUMBS_DOWN = "thumbsdown"
STOP = "stop"

PROMPT = "Think of a number between 1 and 100:"


@dataclass(frozen=True)
class BinarySearchState:
    low: int = 0
    high: int = 100
    guess: int = 50
    done: bool = False
    last_input: Optional[str] = None


def binary_search_step(state: BinarySearchState, word: str) -> Optional[BinarySearchState]:
    """Apply one answer. Returns None for an unrecognized word."""
    if word == THUMBS_UP:
        low, high = state.guess, state.high
    elif word == THUMBS_DOWN:
        low, high = state.low, state.guess
    elif word == STOP:
        return replace(state, done=True, last_input=STOP)
    else:
        return None
    return BinarySearchState(low=low, high=high, guess=(low + high) // 2, last_input=word)


class BinarySearch(Game):
    name = "binary_search"
    interval = 3.0
    vocabulary = frozenset({THUMBS_UP, THUMBS_DOWN, STOP})

    def __init__(self, low: int = 0, high: int = 100):
        if low > high:
            raise ValueError(f"low {low} > high {high}")
        self.low = low
        self.high = high

    def initial_state(self) -> BinarySearchState:
        return BinarySearchState(low=self.low, high=self.high, guess=(self.low + self.high) // 2)

    def transition(self, state: BinarySearchState, result: ClassificationResult, now: float):
        if state.done:
            return state
        nxt = binary_search_step(state, label_word(result.label))
        return state if nxt is None else nxt

    def render(self, state: BinarySearchState, result: Optional[ClassificationResult]) -> str:
        if state.done:
            return f"Your number is {state.guess}!"
        if result is None:
            return PROMPT
        return f"Guess: {state.guess} - {result.label} - {result.confidence:.2f}"

    def is_terminal(self, state: BinarySearchState) -> bool:
        return state.done
