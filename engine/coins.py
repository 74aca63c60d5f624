"""
Coin pickups for the run phase.

Coins are a secondary reward channel: the field only reports which coins
the player reached, and the controller pays them out through
RulesEngine.award_bonus so the engine stays the single source of score.
"""

import random
from dataclasses import dataclass, field

from models.schemas import GameConfig


@dataclass
class Coin:
    """A single coin travelling down one lane."""
    lane: int
    offset: float  # 0..0.85, spacing within its lane
    z: float
    taken: bool = False


@dataclass
class CoinField:
    """
    The coins spawned for one segment.

    Coins follow the obstacle's approach curve, each trailing slightly by
    its offset, then continue past the player during the pass-through.
    """
    config: GameConfig
    coins: list[Coin] = field(default_factory=list)

    # Maximum share of the approach a coin trails the obstacle by
    LAG = 0.05
    SPREAD = 0.85

    @classmethod
    def spawn(cls, config: GameConfig, progress: float, rng: random.Random) -> "CoinField":
        """
        Scatter coins across the lanes.

        The upper bound on coin count grows with progress; lanes are
        picked uniformly and coins within a lane are evenly spaced.
        """
        if not config.coins_enabled:
            return cls(config)

        progress = min(max(progress, 0.0), 1.0)
        dynamic_max = config.coin_base_max + int(progress * config.coin_ramp_extra)
        total = rng.randint(1, dynamic_max)

        buckets = [0] * config.lane_count
        for _ in range(total):
            buckets[rng.randrange(config.lane_count)] += 1

        coins = []
        for lane, count in enumerate(buckets):
            for i in range(count):
                offset = ((i + 1) / (count + 1)) * cls.SPREAD
                coins.append(Coin(lane=lane, offset=offset, z=config.obstacle_start_z))
        return cls(config, coins)

    @property
    def remaining(self) -> int:
        return sum(1 for c in self.coins if not c.taken)

    def coins_in_lane(self, lane: int) -> list[Coin]:
        return [c for c in self.coins if c.lane == lane]

    def update(self, elapsed: float, run_duration: float, pass_duration: float,
               player_lane: int) -> list[Coin]:
        """
        Move coins to their positions at `elapsed` seconds into the run.

        Returns:
            Coins newly collected by a player in `player_lane`
        """
        cfg = self.config
        collected = []

        for coin in self.coins:
            if coin.taken:
                continue

            if elapsed <= run_duration:
                approach_t = min(elapsed / run_duration, 1.0)
                lag = (1.0 - coin.offset) * self.LAG
                t = min(max(approach_t - lag, 0.0) / (1.0 - lag), 1.0)
                coin.z = cfg.obstacle_start_z + (cfg.player_z - cfg.obstacle_start_z) * t
            else:
                pass_t = min((elapsed - run_duration) / pass_duration, 1.0)
                coin.z = cfg.player_z + (cfg.obstacle_past_z - cfg.player_z) * pass_t

            # Coins only move toward +z, so reaching the window counts as crossing it
            if coin.lane == player_lane and coin.z >= cfg.player_z - cfg.pickup_radius:
                coin.taken = True
                collected.append(coin)

        return collected
