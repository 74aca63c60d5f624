"""
Main Window - Lane Runner status panel.

Shows the prize, checkpoint counter and phase, offers one button per
lane while a choice is awaited, and keeps a log of checkpoint results.
Everything arrives through the EventBus; the window never touches the
game session directly.
"""

from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QPushButton, QListWidget,
)
from PySide6.QtCore import Qt, Slot

from config import UI_SETTINGS
from models.checkpoint import CheckpointResult, SegmentPhase
from models.schemas import GameConfig, GameSummary
from services.event_bus import EventBus


PHASE_MESSAGES = {
    SegmentPhase.AWAITING_CHOICE: "Pick a door",
    SegmentPhase.PRE_OPEN: "Preparing run...",
    SegmentPhase.DOORS_OPENING: "Doors opening...",
    SegmentPhase.DOORS_SLIDING: "Doors opening...",
    SegmentPhase.RUNNING: "Running...",
    SegmentPhase.ENDED: "Game over",
}


def format_pence(pence: int) -> str:
    """Format an amount in pence as pounds."""
    return f"£{pence / 100:.2f}"


class MainWindow(QMainWindow):
    """
    Lane runner overlay:
    - Prize and checkpoint counter
    - Lane buttons (keys 1..N)
    - Result log
    - End-of-game summary with restart
    """

    def __init__(self, event_bus: EventBus):
        super().__init__()
        self.event_bus = event_bus
        self._config: Optional[GameConfig] = None
        self._lane_buttons: list[QPushButton] = []
        self._accepting_choice = False

        self.setWindowTitle("Lane Runner")
        self.setMinimumSize(UI_SETTINGS.min_width, UI_SETTINGS.min_height)

        self._build_ui()
        self._connect_signals()

    def _build_ui(self) -> None:
        """Build the window UI."""
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 16, 16, 16)

        # Status row
        status = QHBoxLayout()
        self.prize_label = QLabel(format_pence(0))
        self.prize_label.setStyleSheet(
            f"font-size: {UI_SETTINGS.prize_font_size}pt; font-weight: bold; color: #FCD116;"
        )
        status.addWidget(self.prize_label)

        self.checkpoint_label = QLabel("Checkpoint 1")
        self.checkpoint_label.setStyleSheet("font-size: 14pt; color: #A0A0B0;")
        self.checkpoint_label.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        status.addWidget(self.checkpoint_label)
        layout.addLayout(status)

        self.phase_label = QLabel("")
        self.phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.phase_label)

        # Lane buttons are rebuilt per game (lane count is configurable)
        self.lane_row = QHBoxLayout()
        layout.addLayout(self.lane_row)

        self.log_list = QListWidget()
        layout.addWidget(self.log_list, stretch=1)

        self.summary_label = QLabel("")
        self.summary_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.summary_label.hide()
        layout.addWidget(self.summary_label)

        self.restart_button = QPushButton("Play again")
        self.restart_button.clicked.connect(self.event_bus.restart_requested.emit)
        self.restart_button.hide()
        layout.addWidget(self.restart_button)

        self.setCentralWidget(central)

    def _connect_signals(self) -> None:
        bus = self.event_bus
        bus.game_started.connect(self._on_game_started)
        bus.phase_changed.connect(self._on_phase_changed)
        bus.checkpoint_resolved.connect(self._on_checkpoint_resolved)
        bus.score_changed.connect(self._on_score_changed)
        bus.game_ended.connect(self._on_game_ended)
        bus.system_message.connect(self._on_system_message)

    def _rebuild_lane_buttons(self, lane_count: int) -> None:
        for button in self._lane_buttons:
            self.lane_row.removeWidget(button)
            button.deleteLater()
        self._lane_buttons = []

        for lane in range(lane_count):
            button = QPushButton(f"Lane {lane + 1}")
            button.setMinimumHeight(48)
            button.clicked.connect(lambda _=False, idx=lane: self._request_lane(idx))
            self.lane_row.addWidget(button)
            self._lane_buttons.append(button)

    def _set_lanes_enabled(self, enabled: bool) -> None:
        self._accepting_choice = enabled
        for button in self._lane_buttons:
            button.setEnabled(enabled)

    def _request_lane(self, lane: int) -> None:
        # Buttons are disabled by the resulting phase change, so a rejected choice leaves them usable
        if self._accepting_choice:
            self.event_bus.lane_requested.emit(lane)

    def keyPressEvent(self, event) -> None:
        text = event.text()
        if text.isdigit() and self._config is not None:
            lane = int(text) - 1
            if 0 <= lane < self._config.lane_count:
                self._request_lane(lane)
                return
        super().keyPressEvent(event)

    # ============ Event Bus Slots ============

    @Slot(object)
    def _on_game_started(self, config: GameConfig) -> None:
        self._config = config
        self._rebuild_lane_buttons(config.lane_count)
        self.log_list.clear()
        self.summary_label.hide()
        self.restart_button.hide()
        self.prize_label.setText(format_pence(0))
        self.checkpoint_label.setText(f"Checkpoint 1/{config.max_checkpoints}")

    @Slot(object, object)
    def _on_phase_changed(self, phase: SegmentPhase, previous: SegmentPhase) -> None:
        self._set_lanes_enabled(phase == SegmentPhase.AWAITING_CHOICE)
        # The result line is set by _on_checkpoint_resolved
        message = PHASE_MESSAGES.get(phase)
        if message is not None:
            self.phase_label.setText(message)

    @Slot(object)
    def _on_checkpoint_resolved(self, result: CheckpointResult) -> None:
        lanes = ", ".join(str(lane + 1) for lane in sorted(result.obstacle_lanes))
        line = (
            f"CP {result.index + 1}: chose {result.chosen_lane + 1}, obstacle @ {lanes} "
            f"=> {'SAFE' if result.safe else 'HIT'}"
        )
        if result.score_delta:
            line += f" {'+' if result.score_delta > 0 else '-'}{format_pence(abs(result.score_delta))}"
        if result.bonus_delta:
            line += f" (coins +{format_pence(result.bonus_delta)})"
        line += f" | Total {format_pence(result.total_score)}"

        self.log_list.insertItem(0, line)
        while self.log_list.count() > UI_SETTINGS.log_limit:
            self.log_list.takeItem(self.log_list.count() - 1)

        self.phase_label.setText("Safe!" if result.safe else "Hit!")
        if self._config is not None and not result.ended:
            self.checkpoint_label.setText(
                f"Checkpoint {result.index + 2}/{self._config.max_checkpoints}"
            )

    @Slot(int)
    def _on_score_changed(self, total: int) -> None:
        self.prize_label.setText(format_pence(total))

    @Slot(object)
    def _on_game_ended(self, summary: GameSummary) -> None:
        self._set_lanes_enabled(False)
        self.prize_label.setText(format_pence(summary.score))
        self.summary_label.setText(
            f"Checkpoints: {summary.checkpoints} | Safe: {summary.safe_count} | "
            f"Hits: {summary.hit_count} | Coins: {format_pence(summary.bonus_total)}"
        )
        self.summary_label.show()
        self.restart_button.show()

    @Slot(str, str)
    def _on_system_message(self, level: str, message: str) -> None:
        self.statusBar().showMessage(f"{level.upper()}: {message}", 3000)
