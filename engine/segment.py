"""
Segment Controller - Tick-driven state machine for one checkpoint at a time.

Sequences the presentation phases of each segment:

    awaiting_choice -> pre_open -> doors_opening -> doors_sliding
        -> running -> result -> awaiting_choice (next segment) | ended

and asks the RulesEngine to resolve the outcome at the right instant.
Time only moves through advance_time(), so the controller can be driven
by a real frame clock or stepped by hand in tests.
"""

import logging
import math
import random
from typing import Optional

from PySide6.QtCore import QObject, Signal

from engine.coins import CoinField
from engine.difficulty import PhaseDurations, durations_for
from engine.errors import AlreadyOverError, InvalidPhaseTransitionError
from engine.rules import RulesEngine
from models.checkpoint import CheckpointResult, SegmentPhase

logger = logging.getLogger(__name__)


class SegmentController(QObject):
    """
    Drives the segment lifecycle from delta-time ticks and lane choices.

    Each tick advances the phase at most once. Any overrun past a phase's
    duration is carried into the next phase's elapsed time and evaluated
    on the following tick.

    Usage:
        controller = SegmentController(RulesEngine(config))
        controller.checkpoint_resolved.connect(on_result)
        controller.start()
        controller.submit_lane_choice(1)
        controller.advance_time(1 / 60)
    """

    # Signals
    segment_started = Signal(object)            # frozenset of obstacle lanes
    phase_changed = Signal(object, object)      # new SegmentPhase, previous SegmentPhase
    checkpoint_resolved = Signal(object)        # CheckpointResult
    game_ended = Signal(object)                 # GameSummary
    coin_collected = Signal(int, int, int)      # lane, amount, total score
    score_changed = Signal(int)                 # total score

    def __init__(self, engine: RulesEngine, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.engine = engine
        self.config = engine.config

        self._phase = SegmentPhase.IDLE
        self._elapsed = 0.0

        # Per-segment state, reset by _begin_segment()
        self._obstacle_lanes: Optional[frozenset[int]] = None
        self._chosen_lane: Optional[int] = None
        self._resolved = False
        self._durations: PhaseDurations = durations_for(self.config, 0)
        self._obstacle_z = self.config.obstacle_start_z
        self._coins: Optional[CoinField] = None
        self._last_result: Optional[CheckpointResult] = None

        seed = self.config.seed
        self._coin_rng = random.Random(None if seed is None else f"{seed}/coins")

    # ============ Accessors ============

    @property
    def phase(self) -> SegmentPhase:
        return self._phase

    @property
    def phase_elapsed(self) -> float:
        """Seconds spent in the current phase."""
        return self._elapsed

    @property
    def obstacle_lanes(self) -> Optional[frozenset[int]]:
        """Obstructed lanes of the current segment, for presentation."""
        return self._obstacle_lanes

    @property
    def chosen_lane(self) -> Optional[int]:
        return self._chosen_lane

    @property
    def durations(self) -> PhaseDurations:
        return self._durations

    @property
    def obstacle_z(self) -> float:
        return self._obstacle_z

    @property
    def coins(self) -> Optional[CoinField]:
        return self._coins

    @property
    def last_result(self) -> Optional[CheckpointResult]:
        return self._last_result

    @property
    def is_resolved(self) -> bool:
        """Whether the current segment has already been scored."""
        return self._resolved

    @property
    def is_ended(self) -> bool:
        return self._phase == SegmentPhase.ENDED

    # ============ Inputs ============

    def start(self) -> None:
        """Begin the first segment."""
        if self._phase != SegmentPhase.IDLE:
            raise InvalidPhaseTransitionError(
                f"Cannot start in state: {self._phase.value}", phase=self._phase
            )
        self._begin_segment()

    def submit_lane_choice(self, lane: int) -> None:
        """
        Commit the player's lane for the current segment.

        Raises:
            InvalidLaneError: lane outside [0, lane_count); phase is unchanged
            AlreadyOverError: the game has ended
            InvalidPhaseTransitionError: not awaiting a choice
        """
        self.engine.validate_lane(lane)

        if self._phase == SegmentPhase.ENDED or self.engine.over:
            raise AlreadyOverError(f"Cannot choose lane in state: {self._phase.value}")

        if self._phase != SegmentPhase.AWAITING_CHOICE:
            logger.warning("Lane choice %d rejected in phase %s", lane, self._phase.value)
            raise InvalidPhaseTransitionError(
                f"Cannot choose lane in state: {self._phase.value}", phase=self._phase
            )

        self._chosen_lane = lane
        logger.debug("Checkpoint %d: lane %d chosen", self.engine.current_checkpoint, lane)
        self._set_phase(SegmentPhase.PRE_OPEN)

    def advance_time(self, delta: float) -> None:
        """
        Advance the state machine by one frame.

        Args:
            delta: Seconds since the previous frame (>= 0). Values above
                max_tick are clamped.
        """
        if not math.isfinite(delta) or delta < 0:
            raise ValueError(f"Time delta must be finite and non-negative, got {delta}")

        if self._phase in (SegmentPhase.IDLE, SegmentPhase.ENDED):
            return

        self._elapsed += self.clamp_delta(delta)

        if self._phase == SegmentPhase.AWAITING_CHOICE:
            return
        if self._phase == SegmentPhase.PRE_OPEN:
            self._advance_timed(SegmentPhase.DOORS_OPENING)
        elif self._phase == SegmentPhase.DOORS_OPENING:
            self._advance_timed(SegmentPhase.DOORS_SLIDING)
        elif self._phase == SegmentPhase.DOORS_SLIDING:
            self._advance_timed(SegmentPhase.RUNNING)
        elif self._phase == SegmentPhase.RUNNING:
            self._update_running()
        elif self._phase == SegmentPhase.RESULT:
            self._update_result()

    def clamp_delta(self, delta: float) -> float:
        """Limit a frame delta to max_tick."""
        if delta > self.config.max_tick:
            logger.debug("Clamping tick of %.3fs to %.3fs", delta, self.config.max_tick)
            return self.config.max_tick
        return delta

    # ============ Phase Handling ============

    def _set_phase(self, new_phase: SegmentPhase, carry: float = 0.0) -> None:
        """Switch phase and emit phase_changed."""
        previous = self._phase
        self._phase = new_phase
        self._elapsed = carry
        logger.debug("Phase %s -> %s", previous.value, new_phase.value)
        self.phase_changed.emit(new_phase, previous)

    def _advance_timed(self, next_phase: SegmentPhase) -> None:
        duration = self._durations.for_phase(self._phase)
        if self._elapsed < duration:
            return

        overrun = self._elapsed - duration
        if next_phase == SegmentPhase.RUNNING:
            self._coins = CoinField.spawn(self.config, self.engine.progress, self._coin_rng)
            self._obstacle_z = self.config.obstacle_start_z
        self._set_phase(next_phase, carry=overrun)

    def _begin_segment(self) -> None:
        lanes = self.engine.start_segment()
        if lanes is None:
            self._end_game()
            return

        self._obstacle_lanes = lanes
        self._chosen_lane = None
        self._resolved = False
        self._coins = None
        self._obstacle_z = self.config.obstacle_start_z
        self._durations = durations_for(self.config, self.engine.current_checkpoint)

        logger.info(
            "Checkpoint %d/%d started",
            self.engine.current_checkpoint + 1, self.config.max_checkpoints,
        )
        self.segment_started.emit(lanes)
        self._set_phase(SegmentPhase.AWAITING_CHOICE)

    def _update_running(self) -> None:
        cfg = self.config
        run = self._durations.run
        pass_through = self._durations.pass_through

        approach_t = min(self._elapsed / run, 1.0)
        approach_z = cfg.obstacle_start_z + (cfg.player_z - cfg.obstacle_start_z) * approach_t

        # Front face reaching the player while they occupy an obstructed lane
        if (self._chosen_lane in self._obstacle_lanes
                and approach_z + cfg.obstacle_half_depth >= cfg.player_z):
            self._obstacle_z = approach_z
            self._resolve()
            return

        if self._elapsed <= run:
            self._obstacle_z = approach_z
        else:
            pass_t = min((self._elapsed - run) / pass_through, 1.0)
            self._obstacle_z = cfg.player_z + (cfg.obstacle_past_z - cfg.player_z) * pass_t

        self._collect_coins()

        if self._elapsed >= run + pass_through:
            self._resolve()

    def _collect_coins(self) -> None:
        if self._coins is None:
            return

        collected = self._coins.update(
            self._elapsed, self._durations.run, self._durations.pass_through,
            self._chosen_lane,
        )
        prize = self.config.coin_prize
        for coin in collected:
            total = self.engine.award_bonus(prize)
            logger.debug("Coin collected in lane %d (+%d, total %d)", coin.lane, prize, total)
            self.coin_collected.emit(coin.lane, prize, total)
            self.score_changed.emit(total)

    def _resolve(self) -> None:
        """Score the segment. The latch makes this a no-op after the first call."""
        if self._resolved:
            return
        self._resolved = True

        result = self.engine.resolve_choice(self._chosen_lane)
        self._last_result = result

        self.checkpoint_resolved.emit(result)
        if result.score_delta:
            self.score_changed.emit(result.total_score)
        self._set_phase(SegmentPhase.RESULT)

    def _update_result(self) -> None:
        if self._elapsed < self._durations.result_pause:
            return
        if self.engine.over:
            self._end_game()
        else:
            self._begin_segment()

    def _end_game(self) -> None:
        summary = self.engine.get_summary()
        self._set_phase(SegmentPhase.ENDED)
        logger.info(
            "Game over after %d checkpoints: score %d (%s)",
            summary.checkpoints, summary.score,
            "hit" if summary.ended_by_hit else "completed",
        )
        self.game_ended.emit(summary)
