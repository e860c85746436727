"""
Rock-paper-scissors against a random computer choice.

A round starts when the camera sees rock, paper or scissors while the game
is waiting for a choice. The round then stays locked for reveal_delay
(RESOLVING) and shows the outcome for cooldown seconds (COOLDOWN) before
accepting the next choice, so one held gesture is not scored repeatedly.
"""
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from gesture_arcade.adapters.vision.labels import label_word
from gesture_arcade.orchestrator.contracts import ClassificationResult
from gesture_arcade.orchestrator.controller import Game

ROCK, PAPER, SCISSORS = "rock", "paper", "scissors"
OPTIONS = (ROCK, PAPER, SCISSORS)
BEATS = {ROCK: SCISSORS, SCISSORS: PAPER, PAPER: ROCK}

WIN = "You win!"
TIE = "Tie!"
LOSE = "You lose :("
PROMPT = "Make your choice!"


class Phase(str, Enum):
    AWAITING_CHOICE = "awaiting_choice"
    RESOLVING = "resolving"
    COOLDOWN = "cooldown"


@dataclass(frozen=True)
class RPSState:
    phase: Phase = Phase.AWAITING_CHOICE
    user_choice: Optional[str] = None
    computer_choice: Optional[str] = None
    outcome: Optional[str] = None
    phase_started: float = 0.0
    confidence: float = 0.0


def determine_winner(user: str, computer: str) -> str:
    if user == computer:
        return TIE
    if BEATS.get(user) == computer:
        return WIN
    return LOSE


def random_choice() -> str:
    return random.choice(OPTIONS)


class RockPaperScissors(Game):
    name = "rps"
    interval = 5.0
    # a new round needs a classification published after the last one was scored
    act_on_repeats = False
    vocabulary = frozenset(OPTIONS)

    def __init__(self, chooser: Callable[[], str] = random_choice,
                 reveal_delay: float = 5.0, cooldown: float = 5.0):
        self.chooser = chooser
        self.reveal_delay = reveal_delay
        self.cooldown = cooldown

    def initial_state(self) -> RPSState:
        return RPSState()

    def advance(self, state: RPSState, now: float) -> RPSState:
        elapsed = now - state.phase_started
        if state.phase is Phase.RESOLVING and elapsed >= self.reveal_delay:
            return RPSState(Phase.COOLDOWN, state.user_choice, state.computer_choice,
                            state.outcome, now, state.confidence)
        if state.phase is Phase.COOLDOWN and elapsed >= self.cooldown:
            return RPSState(phase_started=now)
        return state

    def transition(self, state: RPSState, result: ClassificationResult, now: float) -> RPSState:
        if state.phase is not Phase.AWAITING_CHOICE:
            return state
        user = label_word(result.label)
        if user not in OPTIONS:
            return state
        computer = self.chooser()
        return RPSState(Phase.RESOLVING, user, computer, determine_winner(user, computer),
                        now, result.confidence)

    def render(self, state: RPSState, result: Optional[ClassificationResult]) -> str:
        if state.phase is Phase.RESOLVING:
            return f"User: {state.user_choice} ({state.confidence:.2f})"
        if state.phase is Phase.COOLDOWN:
            return f"Computer choice: {state.computer_choice}\n{state.outcome}"
        return PROMPT
