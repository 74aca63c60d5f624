"""
Frame Clock - Real-time delta source for the segment controller.

Measures wall-clock time between frames and emits it as a clamped
delta in seconds. Game logic never reads the clock directly; it only
sees the values passed to SegmentController.advance_time().
"""

from PySide6.QtCore import QObject, Qt, Signal, QTimer, QElapsedTimer

from config import CLOCK_SETTINGS, TIMING_SETTINGS


class FrameClock(QObject):
    """
    Precision frame clock (~60 fps).

    Usage:
        clock = FrameClock()
        clock.tick.connect(session.advance_time)
        clock.start()
    """

    # Signals
    tick = Signal(float)    # seconds since the previous frame, clamped

    def __init__(self, interval_ms: int = None, max_delta: float = None):
        """
        Initialize the frame clock.

        Args:
            interval_ms: Frame interval in milliseconds (default: 16)
            max_delta: Largest delta emitted per frame in seconds (default: 0.5)
        """
        super().__init__()

        self._interval_ms = interval_ms or CLOCK_SETTINGS.frame_interval_ms
        self._max_delta = max_delta or TIMING_SETTINGS.max_tick
        self._is_running = False
        self._last_ms = 0

        # Internal Qt timers
        self._timer = QTimer(self)
        self._timer.setInterval(self._interval_ms)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._on_tick)

        self._elapsed = QElapsedTimer()

    @property
    def is_running(self) -> bool:
        """Check if the clock is currently running."""
        return self._is_running

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def max_delta(self) -> float:
        return self._max_delta

    def start(self) -> None:
        """Start emitting frame ticks."""
        if self._is_running:
            return
        self._is_running = True
        self._elapsed.start()
        self._last_ms = 0
        self._timer.start()

    def stop(self) -> None:
        """Stop the clock."""
        self._timer.stop()
        self._is_running = False

    def clamp_delta(self, delta: float) -> float:
        """Guard against huge deltas after the host was suspended."""
        return min(max(delta, 0.0), self._max_delta)

    def _on_tick(self) -> None:
        """Handle timer timeout - emit the time since the last frame."""
        now_ms = self._elapsed.elapsed()
        delta = (now_ms - self._last_ms) / 1000.0
        self._last_ms = now_ms
        self.tick.emit(self.clamp_delta(delta))
