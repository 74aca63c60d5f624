"""
Game Session - One play-through, owned explicitly by the caller.

Bundles the RulesEngine and SegmentController for a single game and
relays controller events onto the application's EventBus. A restart
builds a new session; a finished session is never reused.
"""

import logging
from typing import Optional

from PySide6.QtCore import QObject

from engine.rules import RulesEngine
from engine.segment import SegmentController
from models.checkpoint import SegmentPhase
from models.schemas import GameConfig, GameSummary
from services.event_bus import EventBus

logger = logging.getLogger(__name__)


class GameSession(QObject):
    """
    Owns the game state for one play-through.

    Usage:
        session = GameSession(GameConfig(seed=7), event_bus)
        session.start()
        clock.tick.connect(session.advance_time)
    """

    def __init__(self, config: Optional[GameConfig] = None,
                 event_bus: Optional[EventBus] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.config = config or GameConfig()
        self.engine = RulesEngine(self.config)
        self.controller = SegmentController(self.engine, self)

        self.event_bus: Optional[EventBus] = None
        self._connections: list = []
        if event_bus is not None:
            self.connect_bus(event_bus)

    # ============ Event Bus Wiring ============

    def connect_bus(self, event_bus: EventBus) -> None:
        """Relay controller signals onto the event bus."""
        if self.event_bus is not None:
            self.disconnect_bus()

        c = self.controller
        pairs = [
            (c.segment_started, event_bus.segment_started),
            (c.phase_changed, event_bus.phase_changed),
            (c.checkpoint_resolved, event_bus.checkpoint_resolved),
            (c.game_ended, event_bus.game_ended),
            (c.coin_collected, event_bus.coin_collected),
            (c.score_changed, event_bus.score_changed),
        ]
        for signal, slot in pairs:
            signal.connect(slot)

        self._connections = pairs
        self.event_bus = event_bus

    def disconnect_bus(self) -> None:
        """Detach from the event bus so a stale session stays silent."""
        for signal, slot in self._connections:
            signal.disconnect(slot)
        self._connections = []
        self.event_bus = None

    # ============ Lifecycle ============

    def start(self) -> None:
        """Start the first segment."""
        logger.info(
            "New game: %d lanes, %d checkpoints, seed=%r",
            self.config.lane_count, self.config.max_checkpoints, self.config.seed,
        )
        if self.event_bus is not None:
            self.event_bus.game_started.emit(self.config)
        self.controller.start()

    def restart(self) -> "GameSession":
        """
        Build a fresh session with the same configuration and bus.

        This session is detached and must not be used afterwards.
        """
        bus = self.event_bus
        self.disconnect_bus()
        return GameSession(self.config, bus)

    # ============ Inputs ============

    def choose_lane(self, lane: int) -> None:
        self.controller.submit_lane_choice(lane)

    def advance_time(self, delta: float) -> None:
        self.controller.advance_time(delta)

    # ============ Accessors ============

    @property
    def phase(self) -> SegmentPhase:
        return self.controller.phase

    @property
    def score(self) -> int:
        return self.engine.score

    @property
    def current_checkpoint(self) -> int:
        return self.engine.current_checkpoint

    def is_over(self) -> bool:
        return self.engine.is_over()

    def summary(self) -> GameSummary:
        return self.engine.get_summary()
