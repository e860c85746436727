"""Four-digit passcode entered one digit gesture per tick."""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from gesture_arcade.adapters.vision.labels import label_word
from gesture_arcade.orchestrator.contracts import ClassificationResult
from gesture_arcade.orchestrator.controller import Game

CODE_LENGTH = 4
DIGITS = frozenset("0123456789")


class Outcome(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"


@dataclass(frozen=True)
class PasscodeState:
    expected: str = "1234"
    entered: tuple[str, ...] = ()
    outcome: Optional[Outcome] = None


def check_passcode(entered, expected: str) -> bool:
    # compared as strings: "0042" must not match 42
    return "".join(entered) == expected


def enter_digit(state: PasscodeState, digit: str) -> PasscodeState:
    if state.outcome is not None or digit not in DIGITS:
        return state
    entered = state.entered + (digit,)
    if len(entered) < CODE_LENGTH:
        return replace(state, entered=entered)
    outcome = Outcome.GRANTED if check_passcode(entered, state.expected) else Outcome.DENIED
    return replace(state, entered=entered, outcome=outcome)


class PasscodeUnlock(Game):
    name = "passcode"
    interval = 3.0
    vocabulary = DIGITS

    def __init__(self, expected: str = "1234"):
        if len(expected) != CODE_LENGTH or not set(expected) <= DIGITS:
            raise ValueError(f"passcode must be {CODE_LENGTH} digits, got {expected!r}")
        self.expected = expected

    def initial_state(self) -> PasscodeState:
        return PasscodeState(expected=self.expected)

    def transition(self, state: PasscodeState, result: ClassificationResult, now: float):
        return enter_digit(state, label_word(result.label))

    def render(self, state: PasscodeState, result: Optional[ClassificationResult]) -> str:
        if state.outcome is Outcome.GRANTED:
            return "Access Granted!"
        if state.outcome is Outcome.DENIED:
            return "Incorrect PIN"
        slots = "*" * len(state.entered) + "_" * (CODE_LENGTH - len(state.entered))
        if result is None:
            return f"Enter your PIN: {slots}"
        return f"Enter your PIN: {slots} - User: {result.label} - {result.confidence:.2f}"

    def is_terminal(self, state: PasscodeState) -> bool:
        return state.outcome is not None
