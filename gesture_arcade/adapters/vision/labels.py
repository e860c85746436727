from pathlib import Path

from gesture_arcade.orchestrator.errors import LoadError

LABELS_FILE = "labels.txt"


def load_labels(path: Path) -> list[str]:
    """One label per line, in model output order. Blank lines are skipped."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise LoadError(f"cannot read labels file {path}: {e}") from e
    labels = [line.strip() for line in text.splitlines() if line.strip()]
    if not labels:
        raise LoadError(f"labels file {path} is empty")
    return labels


def label_word(label: str) -> str:
    """Playable word of a label: "2 scissors" -> "scissors", "stop" -> "stop"."""
    return label.split(" ", 1)[-1].strip().lower()
