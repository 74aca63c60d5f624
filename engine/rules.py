"""
Rules Engine - Decides obstacle placement, safety, and scoring.

Pure decision logic with no timing or rendering. The engine is the single
owner of the game state: checkpoint counter, score, result history and
the pending obstacle set all change only through its operations.
"""

import logging
import random
from enum import Enum
from typing import Optional

from engine.errors import AlreadyOverError, InvalidLaneError, InvalidPhaseTransitionError
from models.checkpoint import CheckpointResult
from models.schemas import GameConfig, GameSummary

logger = logging.getLogger(__name__)


class EngineState(Enum):
    """Lifecycle of a RulesEngine instance."""
    FRESH = "fresh"
    AWAITING_RESOLUTION = "awaiting_resolution"
    IDLE = "idle"
    OVER = "over"


class RulesEngine:
    """
    Enforces the lane runner rules for one play-through.

    Usage:
        engine = RulesEngine(GameConfig(seed=42))
        lanes = engine.start_segment()
        result = engine.resolve_choice(1)

    A finished engine is never reused; a restart builds a new instance.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self._rng = random.Random(self.config.seed)

        self._current_checkpoint = 0
        self._score = 0
        self._history: list[CheckpointResult] = []
        self._over = False
        self._ended_by_hit = False

        # Only set between start_segment() and resolve_choice()
        self._pending_lanes: Optional[frozenset[int]] = None
        self._pending_bonus = 0
        self._bonus_total = 0

    # ============ Read Accessors ============

    @property
    def current_checkpoint(self) -> int:
        return self._current_checkpoint

    @property
    def score(self) -> int:
        """Cumulative prize in pence."""
        return self._score

    @property
    def history(self) -> tuple[CheckpointResult, ...]:
        return tuple(self._history)

    @property
    def over(self) -> bool:
        return self._over

    @property
    def pending_obstacle_lanes(self) -> Optional[frozenset[int]]:
        return self._pending_lanes

    @property
    def has_pending_segment(self) -> bool:
        return self._pending_lanes is not None

    @property
    def pending_bonus(self) -> int:
        """Bonus collected so far in the pending segment."""
        return self._pending_bonus

    @property
    def state(self) -> EngineState:
        if self._over:
            return EngineState.OVER
        if self.has_pending_segment:
            return EngineState.AWAITING_RESOLUTION
        if not self._history:
            return EngineState.FRESH
        return EngineState.IDLE

    @property
    def progress(self) -> float:
        """Fraction of the maximum checkpoints already traversed, 0..1."""
        return min(self._current_checkpoint / self.config.max_checkpoints, 1.0)

    def is_over(self) -> bool:
        return self._over

    # ============ Segment Lifecycle ============

    def generate_obstacle_lanes(self) -> frozenset[int]:
        """
        Pick the obstructed lanes for the current checkpoint.

        One lane before the ramp checkpoint, then two distinct lanes
        (never all of them), drawn uniformly without replacement.
        """
        count = self.config.obstacle_count(self._current_checkpoint)
        return frozenset(self._rng.sample(range(self.config.lane_count), count))

    def start_segment(self) -> Optional[frozenset[int]]:
        """
        Generate and store the obstacle lanes for the upcoming checkpoint.

        Returns:
            The pending obstacle set, or None if the game is already over
        """
        if self._over:
            logger.debug("start_segment ignored: game is over")
            return None

        if self.has_pending_segment:
            raise InvalidPhaseTransitionError(
                f"Cannot start segment in state: {self.state.value}",
                phase=self.state,
            )

        self._pending_lanes = self.generate_obstacle_lanes()
        self._pending_bonus = 0
        logger.debug(
            "Checkpoint %d obstacle lanes: %s",
            self._current_checkpoint, sorted(self._pending_lanes),
        )
        return self._pending_lanes

    def resolve_choice(self, lane: int) -> CheckpointResult:
        """
        Score the chosen lane against the pending obstacle set.

        Args:
            lane: Zero-based lane index

        Returns:
            The immutable CheckpointResult appended to history

        Raises:
            InvalidLaneError: lane outside [0, lane_count)
            AlreadyOverError: the game has ended
            InvalidPhaseTransitionError: no segment is pending
        """
        self.validate_lane(lane)

        if self._over:
            raise AlreadyOverError(f"Cannot resolve checkpoint in state: {self.state.value}")

        if not self.has_pending_segment:
            raise InvalidPhaseTransitionError(
                f"Cannot resolve checkpoint in state: {self.state.value}",
                phase=self.state,
            )

        obstacle_lanes = self._pending_lanes
        safe = lane not in obstacle_lanes

        if safe:
            score_delta = self.config.checkpoint_prize
        else:
            # Hits end the run; any configured penalty cannot take the score below zero
            score_delta = -min(self.config.hit_penalty, self._score)

        new_score = self._score + score_delta
        new_checkpoint = self._current_checkpoint + 1
        ends_game = (not safe) or new_checkpoint >= self.config.max_checkpoints

        result = CheckpointResult(
            index=self._current_checkpoint,
            chosen_lane=lane,
            obstacle_lanes=obstacle_lanes,
            safe=safe,
            score_delta=score_delta,
            total_score=new_score,
            ended=ends_game,
            bonus_delta=self._pending_bonus,
        )

        self._score = new_score
        self._history.append(result)
        self._current_checkpoint = new_checkpoint
        self._pending_lanes = None
        self._pending_bonus = 0

        if ends_game:
            self._over = True
            self._ended_by_hit = not safe

        logger.info(
            "Checkpoint %d: lane %d %s (delta %+d, total %d)%s",
            result.index, lane, "SAFE" if safe else "HIT",
            score_delta, new_score, " - game over" if ends_game else "",
        )
        return result

    def award_bonus(self, amount: int) -> int:
        """
        Add a pickup reward to the score.

        Bonus pickups share the score path with checkpoint rewards and are
        only accepted while a segment is pending.

        Returns:
            The new cumulative score
        """
        if not isinstance(amount, int) or amount < 0:
            raise ValueError(f"Bonus amount must be a non-negative integer, got {amount!r}")

        if self._over:
            raise AlreadyOverError(f"Cannot award bonus in state: {self.state.value}")

        if not self.has_pending_segment:
            raise InvalidPhaseTransitionError(
                f"Cannot award bonus in state: {self.state.value}",
                phase=self.state,
            )

        self._score += amount
        self._pending_bonus += amount
        self._bonus_total += amount
        return self._score

    # ============ Validation Methods ============

    def validate_lane(self, lane: int) -> None:
        """Raise InvalidLaneError unless lane is in [0, lane_count)."""
        lane_count = self.config.lane_count
        if isinstance(lane, bool) or not isinstance(lane, int) or not 0 <= lane < lane_count:
            raise InvalidLaneError(lane, lane_count)

    # ============ Summary ============

    def get_summary(self) -> GameSummary:
        """Read-only snapshot for the end-of-game view."""
        safe_count = sum(1 for r in self._history if r.safe)
        return GameSummary(
            score=self._score,
            checkpoints=self._current_checkpoint,
            max_checkpoints=self.config.max_checkpoints,
            safe_count=safe_count,
            hit_count=len(self._history) - safe_count,
            bonus_total=self._bonus_total,
            over=self._over,
            ended_by_hit=self._ended_by_hit,
            history=tuple(self._history),
        )
