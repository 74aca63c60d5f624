"""
Lane Runner Game Engine

Core game logic: rules, segment state machine, and timing.
Only the frame clock and signal plumbing depend on Qt; nothing here
touches the GUI.
"""

from engine.errors import (
    LaneRunnerError,
    InvalidLaneError,
    InvalidPhaseTransitionError,
    AlreadyOverError,
)
from engine.rules import RulesEngine, EngineState
from engine.difficulty import PhaseDurations, durations_for
from engine.coins import Coin, CoinField
from engine.segment import SegmentController
from engine.session import GameSession
from engine.timer import FrameClock

__all__ = [
    "LaneRunnerError",
    "InvalidLaneError",
    "InvalidPhaseTransitionError",
    "AlreadyOverError",
    "RulesEngine",
    "EngineState",
    "PhaseDurations",
    "durations_for",
    "Coin",
    "CoinField",
    "SegmentController",
    "GameSession",
    "FrameClock",
]
