"""
Checkpoint value types for the lane runner.

A CheckpointResult is produced exactly once per segment and is never
mutated afterwards; the rules engine keeps them in an append-only history.
"""

from dataclasses import dataclass
from enum import Enum


class SegmentPhase(Enum):
    """Presentation phases of one checkpoint segment."""
    IDLE = "idle"
    AWAITING_CHOICE = "awaiting_choice"
    PRE_OPEN = "pre_open"
    DOORS_OPENING = "doors_opening"
    DOORS_SLIDING = "doors_sliding"
    RUNNING = "running"
    RESULT = "result"
    ENDED = "ended"


@dataclass(frozen=True)
class CheckpointResult:
    """
    Immutable outcome of a single checkpoint.

    Amounts are integers in the smallest currency unit (pence).
    score_delta is the checkpoint reward (or penalty); bonus_delta holds
    the coins picked up while the segment was running.
    """
    index: int
    chosen_lane: int
    obstacle_lanes: frozenset[int]
    safe: bool
    score_delta: int
    total_score: int
    ended: bool
    bonus_delta: int = 0

    @property
    def hit(self) -> bool:
        """True when the chosen lane was obstructed."""
        return not self.safe
