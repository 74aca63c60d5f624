"""
Difficulty ramp for segment timings.

Run and door durations shrink linearly with progress through the game,
down to a bounded minimum. The ramp is evaluated once per segment start.
"""

from dataclasses import dataclass
from typing import Optional

from models.checkpoint import SegmentPhase
from models.schemas import GameConfig


@dataclass(frozen=True)
class PhaseDurations:
    """Durations (seconds) of the timed phases of one segment."""
    reveal_delay: float
    door_open: float
    door_slide: float
    run: float
    pass_through: float
    result_pause: float

    @property
    def door_travel(self) -> float:
        """Total time the doors spend moving toward the player."""
        return self.door_open + self.door_slide

    def for_phase(self, phase: SegmentPhase) -> Optional[float]:
        """Fixed duration of a timed phase; None for untimed phases."""
        return {
            SegmentPhase.PRE_OPEN: self.reveal_delay,
            SegmentPhase.DOORS_OPENING: self.door_open,
            SegmentPhase.DOORS_SLIDING: self.door_slide,
            SegmentPhase.RESULT: self.result_pause,
        }.get(phase)


def ramp_factor(progress: float, strength: float) -> float:
    """Multiplier in (0, 1] applied to a base duration at the given progress."""
    progress = min(max(progress, 0.0), 1.0)
    return 1.0 - strength * progress


def durations_for(config: GameConfig, checkpoint: int) -> PhaseDurations:
    """Compute the segment timings for a checkpoint index."""
    progress = checkpoint / config.max_checkpoints
    floor = config.min_phase_duration

    run_factor = ramp_factor(progress, config.run_ramp)
    door_factor = ramp_factor(progress, config.door_ramp)

    return PhaseDurations(
        reveal_delay=config.reveal_delay,
        door_open=max(floor, config.door_open_duration * door_factor),
        door_slide=max(floor, config.door_slide_duration * door_factor),
        run=max(floor, config.run_duration * run_factor),
        pass_through=config.pass_duration,
        result_pause=config.result_pause,
    )
