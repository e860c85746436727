# Error codes returned by the API layer
ERR_NOT_RUNNING = "ERR_NOT_RUNNING"
ERR_BAD_GAME = "ERR_BAD_GAME"
ERR_BAD_FRAME = "ERR_BAD_FRAME"
ERR_UNKNOWN = "ERR_UNKNOWN"


class GestureArcadeError(Exception):
    """Base class for pipeline failures."""


class LoadError(GestureArcadeError):
    """Model or label file missing / unreadable. Fatal at startup."""


class OpenError(GestureArcadeError):
    """Camera device could not be opened."""


class PreprocessError(GestureArcadeError):
    """Frame buffer does not match its declared shape."""


class InferenceError(GestureArcadeError):
    """Backend call failed or its output does not match the labels."""
