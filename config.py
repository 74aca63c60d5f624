"""
Lane Runner Configuration

Centralized settings, paths, and constants for the application.
"""

from pathlib import Path
from dataclasses import dataclass
import appdirs


# Application info
APP_NAME = "LaneRunner"
APP_AUTHOR = "LaneRunner"
APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class Paths:
    """Application paths."""
    # Config directory (stores user preferences)
    config_dir: Path = Path(appdirs.user_config_dir(APP_NAME, APP_AUTHOR))

    # Log directory
    log_dir: Path = Path(appdirs.user_log_dir(APP_NAME, APP_AUTHOR))

    @property
    def log_file(self) -> Path:
        return self.log_dir / "lane_runner.log"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        for dir_path in [self.config_dir, self.log_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class RulesSettings:
    """Checkpoint rules and prize amounts (in pence)."""
    lane_count: int = 3
    max_checkpoints: int = 20

    # Checkpoint index from which two lanes are obstructed
    ramp_checkpoint: int = 10

    checkpoint_prize: int = 25
    hit_penalty: int = 0

    # Coin pickups during the run phase
    coin_prize: int = 10
    coin_base_max: int = 10
    coin_ramp_extra: int = 6


@dataclass(frozen=True)
class TimingSettings:
    """Base phase durations in seconds, before the difficulty ramp."""
    reveal_delay: float = 0.5
    door_open_duration: float = 0.9
    door_slide_duration: float = 0.6
    run_duration: float = 3.5
    pass_duration: float = 1.5
    result_pause: float = 1.0

    # Fraction removed at full progress
    run_ramp: float = 0.4
    door_ramp: float = 0.3
    min_phase_duration: float = 0.05

    # Largest delta accepted from a single frame
    max_tick: float = 0.5


@dataclass(frozen=True)
class TrackSettings:
    """Positions along the track (world units, player faces -z)."""
    obstacle_start_z: float = -55.0
    player_z: float = 2.0
    obstacle_past_z: float = 20.0
    obstacle_half_depth: float = 0.5
    pickup_radius: float = 0.5


@dataclass(frozen=True)
class ClockSettings:
    """Host frame clock settings."""
    # Frame interval in milliseconds (~60 fps)
    frame_interval_ms: int = 16


@dataclass(frozen=True)
class UISettings:
    """UI-related settings."""
    min_width: int = 640
    min_height: int = 480
    prize_font_size: int = 36
    log_limit: int = 50


# Singleton instances
PATHS = Paths()
RULES_SETTINGS = RulesSettings()
TIMING_SETTINGS = TimingSettings()
TRACK_SETTINGS = TrackSettings()
CLOCK_SETTINGS = ClockSettings()
UI_SETTINGS = UISettings()


def init_config() -> None:
    """Initialize configuration and create required directories."""
    PATHS.ensure_directories()
