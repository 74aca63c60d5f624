"""
Lane Runner Application Controller

Top-level controller that wires together all application components.
"""

import logging
from typing import Optional

from PySide6.QtCore import QObject

from services.event_bus import EventBus
from engine.errors import LaneRunnerError
from engine.session import GameSession
from engine.timer import FrameClock
from models.schemas import GameConfig

logger = logging.getLogger(__name__)


class LaneRunnerApp(QObject):
    """
    Top-level application controller.
    Owns the event bus, the frame clock, the window and the current session.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        super().__init__()

        self.config = config or GameConfig()

        # Core services
        self.event_bus = EventBus()
        self.clock = FrameClock(max_delta=self.config.max_tick)

        # Active session (created per play-through)
        self.session: Optional[GameSession] = None

        # Create main window
        from gui.main_window import MainWindow
        self.main_window = MainWindow(self.event_bus)

        # Wire up player input
        self.event_bus.lane_requested.connect(self._on_lane_requested)
        self.event_bus.restart_requested.connect(self.new_game)
        self.event_bus.game_ended.connect(self._on_game_ended)

    def show(self) -> None:
        """Show the main application window and start a game."""
        self.main_window.show()
        self.new_game()

    def new_game(self) -> GameSession:
        """
        Replace the current session with a fresh one.

        Returns:
            The started GameSession
        """
        self.clock.stop()
        if self.session is not None:
            self.clock.tick.disconnect(self.session.advance_time)
            self.session = self.session.restart()
        else:
            self.session = GameSession(self.config, self.event_bus)

        self.clock.tick.connect(self.session.advance_time)
        self.session.start()
        self.clock.start()
        return self.session

    def _on_lane_requested(self, lane: int) -> None:
        """Forward a lane choice from the UI to the session."""
        if self.session is None:
            return
        try:
            self.session.choose_lane(lane)
        except LaneRunnerError as e:
            logger.warning("Lane choice rejected: %s", e)
            self.event_bus.emit_message("warning", str(e))

    def _on_game_ended(self, summary) -> None:
        self.clock.stop()
