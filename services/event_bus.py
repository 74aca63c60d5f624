"""
Event Bus - Central signal hub for inter-module communication.

Collaborators (window, audio, overlays) connect to this single object
rather than to a particular game session, so a restart only needs to
rewire the new session to the bus.
"""

from PySide6.QtCore import QObject, Signal


class EventBus(QObject):
    """
    Central signal hub for the lane runner.

    The EventBus acts as a mediator between application components:
    - GameSession relays segment controller events
    - GUI components listen and update displays
    - GUI components request lane choices and restarts

    Usage:
        # In GameSession
        controller.checkpoint_resolved.connect(bus.checkpoint_resolved)

        # In MainWindow
        self.event_bus.checkpoint_resolved.connect(self._on_checkpoint_resolved)
    """

    # ============ Game Lifecycle ============
    game_started = Signal(object)           # GameConfig
    game_ended = Signal(object)             # GameSummary

    # ============ Segment Lifecycle ============
    segment_started = Signal(object)        # frozenset of obstacle lanes
    phase_changed = Signal(object, object)  # new SegmentPhase, previous SegmentPhase
    checkpoint_resolved = Signal(object)    # CheckpointResult

    # ============ Scoring Events ============
    coin_collected = Signal(int, int, int)  # lane, amount, total score
    score_changed = Signal(int)             # total score in pence

    # ============ Player Input ============
    lane_requested = Signal(int)            # lane index chosen in the UI
    restart_requested = Signal()

    # ============ System Events ============
    system_message = Signal(str, str)       # (level, message) - e.g., ("warning", "Invalid lane")

    def __init__(self):
        super().__init__()

    def emit_message(self, level: str, message: str) -> None:
        """Emit a system message (info, warning, error)."""
        self.system_message.emit(level, message)
