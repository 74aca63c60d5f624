"""
Errors raised by the lane runner engine.

All of them are recoverable: the call is rejected before any state is
touched, so the caller can retry with valid input.
"""


class LaneRunnerError(Exception):
    """Base class for engine errors."""


class InvalidLaneError(LaneRunnerError, ValueError):
    """Chosen lane is outside [0, lane_count)."""

    def __init__(self, lane, lane_count: int):
        self.lane = lane
        self.lane_count = lane_count
        super().__init__(f"Invalid lane {lane!r}: must be in range 0..{lane_count - 1}")


class InvalidPhaseTransitionError(LaneRunnerError, RuntimeError):
    """Input delivered while the game is in the wrong phase."""

    def __init__(self, message: str, phase=None):
        self.phase = phase
        super().__init__(message)


class AlreadyOverError(LaneRunnerError, RuntimeError):
    """Mutating call made after the game has ended."""

    def __init__(self, message: str = "Game is already over"):
        super().__init__(message)
