"""
Pydantic schemas for data validation.
"""

import re
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from config import RULES_SETTINGS, TIMING_SETTINGS, TRACK_SETTINGS
from models.checkpoint import CheckpointResult


INT_SEED = re.compile(r"-?[0-9]+")


# ============ Game Configuration ============

class GameConfig(BaseModel):
    """
    Immutable per-game configuration.

    Prize amounts are integers in pence. Durations are in seconds and are
    the base values before the difficulty ramp shortens them.
    """
    model_config = ConfigDict(frozen=True)

    lane_count: int = Field(RULES_SETTINGS.lane_count, ge=2)
    max_checkpoints: int = Field(RULES_SETTINGS.max_checkpoints, ge=1)
    ramp_checkpoint: int = Field(RULES_SETTINGS.ramp_checkpoint, ge=0)

    checkpoint_prize: int = Field(RULES_SETTINGS.checkpoint_prize, ge=0)
    hit_penalty: int = Field(RULES_SETTINGS.hit_penalty, ge=0)

    coin_prize: int = Field(RULES_SETTINGS.coin_prize, ge=0)
    coin_base_max: int = Field(RULES_SETTINGS.coin_base_max, ge=0)
    coin_ramp_extra: int = Field(RULES_SETTINGS.coin_ramp_extra, ge=0)

    seed: Optional[Union[int, str]] = None

    # Phase durations
    reveal_delay: float = Field(TIMING_SETTINGS.reveal_delay, gt=0)
    door_open_duration: float = Field(TIMING_SETTINGS.door_open_duration, gt=0)
    door_slide_duration: float = Field(TIMING_SETTINGS.door_slide_duration, gt=0)
    run_duration: float = Field(TIMING_SETTINGS.run_duration, gt=0)
    pass_duration: float = Field(TIMING_SETTINGS.pass_duration, gt=0)
    result_pause: float = Field(TIMING_SETTINGS.result_pause, gt=0)

    # Difficulty ramp
    run_ramp: float = Field(TIMING_SETTINGS.run_ramp, ge=0, lt=1)
    door_ramp: float = Field(TIMING_SETTINGS.door_ramp, ge=0, lt=1)
    min_phase_duration: float = Field(TIMING_SETTINGS.min_phase_duration, gt=0)

    max_tick: float = Field(TIMING_SETTINGS.max_tick, gt=0)

    # Track geometry
    obstacle_start_z: float = TRACK_SETTINGS.obstacle_start_z
    player_z: float = TRACK_SETTINGS.player_z
    obstacle_past_z: float = TRACK_SETTINGS.obstacle_past_z
    obstacle_half_depth: float = Field(TRACK_SETTINGS.obstacle_half_depth, ge=0)
    pickup_radius: float = Field(TRACK_SETTINGS.pickup_radius, gt=0)

    @field_validator("seed")
    @classmethod
    def normalize_seed(cls, v):
        """Blank means unseeded; integer strings (e.g. from the CLI) seed like ints."""
        if isinstance(v, str):
            v = v.strip()
            if INT_SEED.fullmatch(v):
                return int(v)
            return v or None
        return v

    @model_validator(mode="after")
    def track_is_ordered(self) -> "GameConfig":
        if not self.obstacle_start_z < self.player_z < self.obstacle_past_z:
            raise ValueError(
                "Track positions must satisfy obstacle_start_z < player_z < obstacle_past_z"
            )
        return self

    @property
    def coins_enabled(self) -> bool:
        return self.coin_prize > 0 and self.coin_base_max > 0

    def obstacle_count(self, checkpoint: int) -> int:
        """Number of obstructed lanes for the given checkpoint index."""
        if checkpoint < self.ramp_checkpoint:
            return 1
        return min(2, self.lane_count - 1)


# ============ Game Summary ============

class GameSummary(BaseModel):
    """
    Read-only snapshot of a play-through.
    Handed to the end-of-game view.
    """
    model_config = ConfigDict(frozen=True)

    score: int = 0
    checkpoints: int = 0
    max_checkpoints: int = 0
    safe_count: int = 0
    hit_count: int = 0
    bonus_total: int = 0
    over: bool = False
    ended_by_hit: bool = False
    history: tuple[CheckpointResult, ...] = ()
