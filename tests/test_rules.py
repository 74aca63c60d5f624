"""
Unit tests for the RulesEngine.

Covers obstacle generation, scoring, termination and the error taxonomy.
"""

import dataclasses

import pytest

from engine.errors import AlreadyOverError, InvalidLaneError, InvalidPhaseTransitionError
from engine.rules import RulesEngine, EngineState
from models.schemas import GameConfig


def safe_lane(engine: RulesEngine) -> int:
    return min(set(range(engine.config.lane_count)) - engine.pending_obstacle_lanes)


def hit_lane(engine: RulesEngine) -> int:
    return min(engine.pending_obstacle_lanes)


def play_always(engine: RulesEngine, lane: int) -> None:
    while not engine.is_over():
        engine.start_segment()
        engine.resolve_choice(lane)


class TestRulesEngineSegments:
    """Tests for obstacle generation."""

    def setup_method(self):
        """Set up a fresh seeded RulesEngine for each test."""
        self.engine = RulesEngine(GameConfig(seed=42))

    def test_initial_state_is_fresh(self):
        """New engine starts at checkpoint 0 with no score."""
        assert self.engine.state == EngineState.FRESH
        assert self.engine.current_checkpoint == 0
        assert self.engine.score == 0
        assert self.engine.history == ()
        assert not self.engine.is_over()
        assert not self.engine.has_pending_segment
        assert self.engine.pending_obstacle_lanes is None

    def test_start_segment_stores_pending_lanes(self):
        """start_segment returns the set it stores as pending."""
        lanes = self.engine.start_segment()

        assert lanes == self.engine.pending_obstacle_lanes
        assert self.engine.has_pending_segment
        assert self.engine.state == EngineState.AWAITING_RESOLUTION
        assert all(0 <= lane < 3 for lane in lanes)

    def test_one_obstacle_before_ramp_two_after(self):
        """Obstacle count is 1 before the ramp checkpoint and 2 from it onward."""
        sizes = []
        while not self.engine.is_over():
            lanes = self.engine.start_segment()
            sizes.append((self.engine.current_checkpoint, len(lanes)))
            self.engine.resolve_choice(safe_lane(self.engine))

        assert len(sizes) == 20
        for checkpoint, size in sizes:
            assert size == (1 if checkpoint < 10 else 2)

    def test_obstacle_count_capped_below_lane_count(self):
        """With two lanes there is always exactly one obstacle."""
        engine = RulesEngine(GameConfig(lane_count=2, ramp_checkpoint=0, seed=3))

        while not engine.is_over():
            lanes = engine.start_segment()
            assert len(lanes) == 1
            engine.resolve_choice(safe_lane(engine))

    def test_start_segment_twice_is_rejected(self):
        """A pending segment must be resolved before the next one starts."""
        self.engine.start_segment()

        with pytest.raises(InvalidPhaseTransitionError, match="Cannot start segment"):
            self.engine.start_segment()

    def test_start_segment_after_over_returns_none(self):
        """Starting a segment after the game ended is a no-op."""
        self.engine.start_segment()
        self.engine.resolve_choice(hit_lane(self.engine))

        assert self.engine.start_segment() is None
        assert self.engine.pending_obstacle_lanes is None


class TestRulesEngineScoring:
    """Tests for choice resolution and scoring."""

    def setup_method(self):
        self.engine = RulesEngine(GameConfig(seed=7, checkpoint_prize=25))

    def test_safe_choice_awards_prize(self):
        """A safe choice awards the checkpoint prize and continues."""
        self.engine.start_segment()
        result = self.engine.resolve_choice(safe_lane(self.engine))

        assert result.safe
        assert result.score_delta == 25
        assert result.total_score == 25
        assert not result.ended
        assert self.engine.current_checkpoint == 1
        assert self.engine.pending_obstacle_lanes is None
        assert self.engine.state == EngineState.IDLE
        assert not self.engine.has_pending_segment

    def test_score_after_n_safe_segments(self):
        """Score after N safe segments equals N x prize."""
        for n in range(1, 8):
            self.engine.start_segment()
            self.engine.resolve_choice(safe_lane(self.engine))
            assert self.engine.score == n * 25

    def test_hit_ends_game_without_deduction(self):
        """Choosing an obstructed lane ends the game with no positive delta."""
        self.engine.start_segment()
        self.engine.resolve_choice(safe_lane(self.engine))
        self.engine.start_segment()
        result = self.engine.resolve_choice(hit_lane(self.engine))

        assert not result.safe
        assert result.hit
        assert result.ended
        assert result.score_delta == 0
        assert result.total_score == 25
        assert self.engine.is_over()
        assert self.engine.get_summary().ended_by_hit

    def test_every_obstacle_member_is_a_hit(self):
        """Any member of the obstacle set is unsafe; any other lane is safe."""
        probe = RulesEngine(GameConfig(seed=11, ramp_checkpoint=0))
        lanes = probe.start_segment()

        for lane in range(3):
            engine = RulesEngine(GameConfig(seed=11, ramp_checkpoint=0))
            engine.start_segment()
            result = engine.resolve_choice(lane)
            assert result.safe == (lane not in lanes)
            assert result.ended == (lane in lanes)

    def test_hit_penalty_is_deducted_once(self):
        """A configured hit penalty is deducted on the hit."""
        engine = RulesEngine(GameConfig(seed=5, hit_penalty=10))
        engine.start_segment()
        engine.resolve_choice(safe_lane(engine))
        engine.start_segment()
        result = engine.resolve_choice(hit_lane(engine))

        assert result.score_delta == -10
        assert engine.score == 15

    def test_hit_penalty_cannot_go_negative(self):
        """Score cannot go below zero after a hit penalty."""
        engine = RulesEngine(GameConfig(seed=5, hit_penalty=10))
        engine.start_segment()
        result = engine.resolve_choice(hit_lane(engine))

        assert result.score_delta == 0
        assert engine.score == 0

    def test_results_are_immutable(self):
        """A CheckpointResult cannot be modified once produced."""
        self.engine.start_segment()
        result = self.engine.resolve_choice(0)

        with pytest.raises(dataclasses.FrozenInstanceError):
            result.safe = not result.safe

    def test_history_is_a_copy(self):
        """The history accessor cannot be used to mutate engine state."""
        self.engine.start_segment()
        self.engine.resolve_choice(safe_lane(self.engine))

        history = self.engine.history
        assert isinstance(history, tuple)
        assert len(self.engine.history) == 1


class TestRulesEngineTermination:
    """Tests for game termination."""

    def test_exhaustion_ends_game(self):
        """Reaching max checkpoints ends the game on the last result."""
        engine = RulesEngine(GameConfig(max_checkpoints=3, seed=1))

        results = []
        while not engine.is_over():
            engine.start_segment()
            results.append(engine.resolve_choice(safe_lane(engine)))

        assert len(results) == 3
        assert [r.ended for r in results] == [False, False, True]
        assert all(r.safe for r in results)
        assert not engine.get_summary().ended_by_hit
        assert engine.state == EngineState.OVER

    def test_over_is_absorbing(self):
        """Once over, resolve_choice never appends to history."""
        engine = RulesEngine(GameConfig(seed=9))
        engine.start_segment()
        engine.resolve_choice(hit_lane(engine))
        length = len(engine.history)

        for lane in range(3):
            with pytest.raises(AlreadyOverError):
                engine.resolve_choice(lane)
            assert engine.is_over()

        assert len(engine.history) == length

    def test_seeded_runs_are_reproducible(self):
        """Same seed and choices reproduce identical score and history."""
        config = GameConfig(lane_count=3, max_checkpoints=20, checkpoint_prize=25, seed=2024)
        first = RulesEngine(config)
        second = RulesEngine(config)

        play_always(first, 1)
        play_always(second, 1)

        assert first.score == second.score
        assert first.history == second.history

    def test_string_seed_is_reproducible(self):
        """String seeds are accepted and deterministic."""
        first = RulesEngine(GameConfig(seed="lane-runner"))
        second = RulesEngine(GameConfig(seed="lane-runner"))

        assert first.start_segment() == second.start_segment()


class TestRulesEngineErrors:
    """Tests for rejected calls."""

    def setup_method(self):
        self.engine = RulesEngine(GameConfig(lane_count=3, seed=99))

    @pytest.mark.parametrize("lane", [-1, 3])
    def test_out_of_range_lane_is_rejected(self, lane):
        """Lanes outside [0, 3) raise InvalidLaneError and change nothing."""
        lanes = self.engine.start_segment()

        with pytest.raises(InvalidLaneError) as excinfo:
            self.engine.resolve_choice(lane)

        assert excinfo.value.lane == lane
        assert self.engine.current_checkpoint == 0
        assert self.engine.pending_obstacle_lanes == lanes
        assert self.engine.history == ()

    def test_non_integer_lane_is_rejected(self):
        """Non-integer lanes are invalid."""
        self.engine.start_segment()

        with pytest.raises(InvalidLaneError):
            self.engine.resolve_choice(1.0)

    def test_resolve_without_segment_is_rejected(self):
        """Resolving before start_segment raises InvalidPhaseTransitionError."""
        with pytest.raises(InvalidPhaseTransitionError, match="Cannot resolve checkpoint"):
            self.engine.resolve_choice(0)

        assert self.engine.current_checkpoint == 0

    def test_invalid_lane_error_is_a_value_error(self):
        """Callers may catch InvalidLaneError as ValueError."""
        self.engine.start_segment()

        with pytest.raises(ValueError):
            self.engine.resolve_choice(7)


class TestRulesEngineBonus:
    """Tests for the bonus (coin) score channel."""

    def setup_method(self):
        self.engine = RulesEngine(GameConfig(seed=3, checkpoint_prize=25))

    def test_bonus_adds_to_score_and_result(self):
        """Bonus awarded during a segment is recorded on its result."""
        self.engine.start_segment()
        self.engine.award_bonus(10)
        total = self.engine.award_bonus(10)
        result = self.engine.resolve_choice(safe_lane(self.engine))

        assert total == 20
        assert result.bonus_delta == 20
        assert result.score_delta == 25
        assert result.total_score == 45
        assert self.engine.get_summary().bonus_total == 20

    def test_bonus_requires_pending_segment(self):
        """Bonus outside a segment is rejected."""
        with pytest.raises(InvalidPhaseTransitionError):
            self.engine.award_bonus(10)

    def test_negative_bonus_is_rejected(self):
        """Bonus amounts must be non-negative."""
        self.engine.start_segment()

        with pytest.raises(ValueError):
            self.engine.award_bonus(-5)
        assert self.engine.score == 0

    def test_bonus_after_over_is_rejected(self):
        """No score changes after the game has ended."""
        self.engine.start_segment()
        self.engine.resolve_choice(hit_lane(self.engine))

        with pytest.raises(AlreadyOverError):
            self.engine.award_bonus(10)


class TestRulesEngineSummary:
    """Tests for the read-only summary."""

    def test_summary_counts(self):
        """Summary reports checkpoints, safe and hit counts."""
        engine = RulesEngine(GameConfig(seed=21, checkpoint_prize=25))
        for _ in range(3):
            engine.start_segment()
            engine.resolve_choice(safe_lane(engine))
        engine.start_segment()
        engine.resolve_choice(hit_lane(engine))

        summary = engine.get_summary()

        assert summary.checkpoints == 4
        assert summary.max_checkpoints == 20
        assert summary.safe_count == 3
        assert summary.hit_count == 1
        assert summary.score == 75
        assert summary.over
        assert len(summary.history) == 4

    def test_summary_has_no_side_effects(self):
        """Calling get_summary does not change state."""
        engine = RulesEngine(GameConfig(seed=21))
        engine.start_segment()
        before = engine.pending_obstacle_lanes

        engine.get_summary()
        engine.is_over()

        assert engine.pending_obstacle_lanes == before
        assert engine.current_checkpoint == 0
