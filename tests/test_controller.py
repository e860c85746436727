import threading

from gesture_arcade.games.binary_search import PROMPT, BinarySearch
from gesture_arcade.games.caption import WAITING, LiveCaption
from gesture_arcade.games.catalog import GAMES, create_game
from gesture_arcade.games.passcode import PasscodeUnlock
from gesture_arcade.orchestrator.contracts import ClassificationResult
from gesture_arcade.orchestrator.controller import GameController

import pytest


def test_tick_without_result_is_noop(publisher, status):
    ctrl = GameController(BinarySearch(), publisher, status)
    before = ctrl.state

    assert not ctrl.tick(now=0.0)
    assert ctrl.state is before
    assert ctrl.status_text == PROMPT


def test_same_sequence_is_not_replayed(publisher, status):
    ctrl = GameController(BinarySearch(), publisher, status)
    publisher.publish(ClassificationResult("0 thumbsup", 0.9))

    assert ctrl.tick(now=0.0)
    assert not ctrl.tick(now=1.0)
    assert ctrl.state.guess == 75


def test_act_on_repeats_replays(publisher, status):
    ctrl = GameController(BinarySearch(), publisher, status, act_on_repeats=True)
    publisher.publish(ClassificationResult("0 thumbsup", 0.9))

    ctrl.tick(now=0.0)
    ctrl.tick(now=1.0)
    assert ctrl.state.guess == 87


def test_result_published_before_controller_is_ignored(publisher, status):
    publisher.publish(ClassificationResult("0 thumbsup", 0.9))
    ctrl = GameController(BinarySearch(), publisher, status)

    assert not ctrl.tick(now=0.0)
    assert ctrl.state.guess == 50


def test_reset_discards_progress_and_old_results(publisher, status):
    ctrl = GameController(BinarySearch(), publisher, status)
    publisher.publish(ClassificationResult("thumbsdown", 0.9))
    ctrl.tick(now=0.0)
    assert ctrl.state.guess == 25

    ctrl.reset()
    assert ctrl.status_text == PROMPT
    ctrl.tick(now=1.0)
    assert ctrl.state.guess == 50


def test_unrecognized_label_keeps_state(publisher, status):
    ctrl = GameController(BinarySearch(), publisher, status)
    publisher.publish(ClassificationResult("5 scissors", 0.6))

    assert not ctrl.tick(now=0.0)
    assert ctrl.state == BinarySearch().initial_state()
    assert ctrl.status_text == "Guess: 50 - 5 scissors - 0.60"


def test_caption_follows_latest(publisher, status):
    ctrl = GameController(LiveCaption(), publisher, status)
    assert ctrl.status_text == WAITING

    publisher.publish(ClassificationResult("rock", 0.5))
    ctrl.tick(now=0.0)
    publisher.publish(ClassificationResult("paper", 0.25))
    ctrl.tick(now=1.0)
    assert ctrl.status_text == "paper - 0.25"


def test_run_stops_on_cancel(publisher, status):
    ctrl = GameController(LiveCaption(), publisher, status, interval=0.01)
    cancel = threading.Event()
    t = threading.Thread(target=ctrl.run, args=(cancel,))
    t.start()
    publisher.publish(ClassificationResult("rock", 0.5))

    cancel.set()
    t.join(timeout=1.0)
    assert not t.is_alive()


def test_run_exits_when_game_finishes(publisher, status):
    ctrl = GameController(PasscodeUnlock(expected="1234"), publisher, status,
                          interval=0.01, act_on_repeats=True)
    publisher.publish(ClassificationResult("9", 0.9))

    ctrl.run(threading.Event())  # returns on its own after 4 ticks

    assert ctrl.finished
    assert ctrl.status_text == "Incorrect PIN"
    assert ctrl.ticks == 4


def test_run_survives_failing_tick(publisher, status, monkeypatch):
    ctrl = GameController(LiveCaption(), publisher, status, interval=0.01)
    calls = []

    def boom(now=None):
        calls.append(now)
        if len(calls) >= 3:
            cancel.set()
        raise RuntimeError("render broke")

    cancel = threading.Event()
    monkeypatch.setattr(ctrl, "tick", boom)
    ctrl.run(cancel)

    assert len(calls) == 3
    assert "render broke" in status.last_error


def test_catalog():
    assert set(GAMES) == {"binary_search", "rps", "passcode", "caption"}
    assert create_game("passcode", passcode="9876").expected == "9876"
    with pytest.raises(ValueError, match="unknown game"):
        create_game("tetris")
