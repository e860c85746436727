from gesture_arcade.games.binary_search import BinarySearch
from gesture_arcade.games.caption import LiveCaption
from gesture_arcade.games.passcode import PasscodeUnlock
from gesture_arcade.games.rock_paper_scissors import RockPaperScissors

GAMES = {
    BinarySearch.name: BinarySearch,
    RockPaperScissors.name: RockPaperScissors,
    PasscodeUnlock.name: PasscodeUnlock,
    LiveCaption.name: LiveCaption,
}


def create_game(name: str, passcode: str = "1234"):
    if name not in GAMES:
        raise ValueError(f"unknown game {name!r}, expected one of {sorted(GAMES)}")
    if name == PasscodeUnlock.name:
        return PasscodeUnlock(expected=passcode)
    return GAMES[name]()
