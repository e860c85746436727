"""
Tick-driven game controller.

Every game is the same loop: on a fixed interval, sample the latest
classification, feed it to the game's transition function, and re-render a
status line. Games only supply the transition/render functions.
"""
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

from gesture_arcade.orchestrator.contracts import ClassificationResult


class Game(ABC):
    name: str = "game"
    interval: float = 3.0
    # False: act once per published classification (sequence number)
    act_on_repeats: bool = False
    # empty: every label is accepted
    vocabulary: frozenset = frozenset()

    @abstractmethod
    def initial_state(self) -> Any:
        ...

    @abstractmethod
    def transition(self, state, result: ClassificationResult, now: float):
        """Return the next state. Unrecognized labels return `state` unchanged."""
        ...

    def advance(self, state, now: float):
        """Time-only transitions (cooldowns). Runs every tick."""
        return state

    @abstractmethod
    def render(self, state, result: Optional[ClassificationResult]) -> str:
        ...

    def is_terminal(self, state) -> bool:
        return False


class GameController:
    def __init__(self, game: Game, publisher, status_store,
                 interval: float | None = None, act_on_repeats: bool | None = None,
                 clock=time.monotonic):
        self.game = game
        self.publisher = publisher
        self.status = status_store
        self.interval = interval if interval is not None else game.interval
        self.act_on_repeats = act_on_repeats if act_on_repeats is not None else game.act_on_repeats
        self.clock = clock
        self._lock = threading.Lock()
        self._state = game.initial_state()
        self._status_text = game.render(self._state, None)
        self._last_seq = publisher.snapshot().sequence
        self.ticks = 0

    @property
    def state(self):
        with self._lock:
            return self._state

    @property
    def status_text(self) -> str:
        with self._lock:
            return self._status_text

    @property
    def finished(self) -> bool:
        return self.game.is_terminal(self.state)

    def reset(self) -> None:
        with self._lock:
            self._state = self.game.initial_state()
            self._status_text = self.game.render(self._state, None)
            # results published before the reset belong to the previous round
            self._last_seq = self.publisher.snapshot().sequence
        self.status.log(f"game[{self.game.name}]: reset")

    def tick(self, now: float | None = None) -> bool:
        """Advance one step. Returns True when the state changed."""
        now = self.clock() if now is None else now
        snap = self.publisher.snapshot()
        with self._lock:
            self.ticks += 1
            state = self.game.advance(self._state, now)
            if snap.result is not None and (self.act_on_repeats or snap.sequence != self._last_seq):
                self._last_seq = snap.sequence
                state = self.game.transition(state, snap.result, now)
            changed = state != self._state
            self._state = state
            if snap.result is not None or changed:
                self._status_text = self.game.render(state, snap.result)
            text = self._status_text
        if changed:
            self.status.log(f"game[{self.game.name}]: {text!r}")
        return changed

    def run(self, cancel: threading.Event) -> None:
        self.status.log(f"game[{self.game.name}]: ticking every {self.interval}s")
        while not cancel.wait(self.interval):
            try:
                self.tick()
            except Exception as e:
                self.status.error(f"game[{self.game.name}]: tick failed {type(e).__name__}: {e}")
                continue
            if self.finished:
                self.status.log(f"game[{self.game.name}]: finished")
                break
