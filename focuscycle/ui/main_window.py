from __future__ import annotations

from PyQt6.QtCore import QRect, Qt
from PyQt6.QtGui import QAction, QColor, QKeySequence, QPainter, QPen
from PyQt6.QtWidgets import (
    QApplication,
    QCheckBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSpinBox,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from focuscycle.core.coordinator import SessionCoordinator
from focuscycle.core.cycle import CycleConfig, EngineState, PhaseChanged, PhaseKind, SessionSummary, format_clock, progress
from focuscycle.core.errors import InvalidConfigError, InvalidStateError
from focuscycle.core.identity import IdentityProbe


PHASE_TITLES = {
    PhaseKind.WORK: "Work",
    PhaseKind.SHORT_BREAK: "Short break",
    PhaseKind.LONG_BREAK: "Long break",
}
PHASE_COLORS = {
    PhaseKind.WORK: "#eb8f60",
    PhaseKind.SHORT_BREAK: "#6fae7c",
    PhaseKind.LONG_BREAK: "#5b8fc7",
}
NOTICE_TIMEOUT_MS = 8000


class CountdownWidget(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(320, 320)
        self._progress = 0.0
        self._color = QColor(PHASE_COLORS[PhaseKind.WORK])
        self._remaining_text = "00:00"

    def set_state(self, progress: float, phase: PhaseKind, remaining_text: str) -> None:
        self._progress = progress
        self._color = QColor(PHASE_COLORS[phase])
        self._remaining_text = remaining_text
        self.update()

    def paintEvent(self, event) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        rect = self.rect().adjusted(20, 20, -20, -20)
        diameter = min(rect.width(), rect.height())
        circle_rect = QRect(
            rect.left() + (rect.width() - diameter) // 2,
            rect.top() + (rect.height() - diameter) // 2,
            diameter,
            diameter,
        )

        painter.setPen(QPen(QColor("#eee4db"), 12))
        painter.drawEllipse(circle_rect)
        painter.setPen(QPen(self._color, 12))
        span = int(-360 * 16 * self._progress)
        painter.drawArc(circle_rect, 90 * 16, span)

        font = painter.font()
        font.setPointSize(max(12, diameter // 7))
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QColor("#2d2824"))
        painter.drawText(circle_rect, Qt.AlignmentFlag.AlignCenter, self._remaining_text)


class MainWindow(QMainWindow):
    def __init__(self, coordinator: SessionCoordinator, identity: IdentityProbe) -> None:
        super().__init__()
        self.setWindowTitle("Focus Cycle")
        self.resize(820, 520)

        self.coordinator = coordinator
        self.identity = identity

        self._build_ui()
        self._connect_signals()
        self._load_config_fields(self.coordinator.state.config)
        self._render(self.coordinator.state)
        self._refresh_account()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        split = QSplitter(Qt.Orientation.Horizontal)
        left = QWidget()
        right = QWidget()
        split.addWidget(left)
        split.addWidget(right)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)

        root_layout = QHBoxLayout(central)
        root_layout.addWidget(split)

        left_layout = QVBoxLayout(left)
        self.phase_label = QLabel()
        self.phase_label.setObjectName("Heading")
        self.cycle_label = QLabel()
        self.cycle_label.setObjectName("MutedText")
        header = QHBoxLayout()
        header.addWidget(self.phase_label)
        header.addStretch()
        header.addWidget(self.cycle_label)
        left_layout.addLayout(header)

        self.countdown = CountdownWidget()
        left_layout.addWidget(self.countdown, 1)

        controls = QHBoxLayout()
        self.toggle_btn = QPushButton("Start")
        self.toggle_btn.setObjectName("PrimaryButton")
        self.reset_btn = QPushButton("Reset")
        self.reset_btn.setObjectName("SecondaryButton")
        controls.addStretch()
        controls.addWidget(self.toggle_btn)
        controls.addWidget(self.reset_btn)
        controls.addStretch()
        left_layout.addLayout(controls)

        right_layout = QVBoxLayout(right)
        settings_title = QLabel("Cycle")
        settings_title.setObjectName("SubtleTitle")
        right_layout.addWidget(settings_title)

        config_box = QWidget()
        config_form = QFormLayout(config_box)
        self.work_spin = self._minutes_spin()
        self.short_break_spin = self._minutes_spin()
        self.long_break_spin = self._minutes_spin()
        self.cycles_spin = QSpinBox()
        self.cycles_spin.setRange(1, 12)
        self.long_break_check = QCheckBox("Long break after a full set")
        self.apply_btn = QPushButton("Apply")
        config_form.addRow("Work (min):", self.work_spin)
        config_form.addRow("Short break (min):", self.short_break_spin)
        config_form.addRow("Long break (min):", self.long_break_spin)
        config_form.addRow("Cycles per set:", self.cycles_spin)
        config_form.addRow(self.long_break_check)
        config_form.addRow(self.apply_btn)
        right_layout.addWidget(config_box)

        self.error_label = QLabel()
        self.error_label.setObjectName("ErrorText")
        self.error_label.setWordWrap(True)
        right_layout.addWidget(self.error_label)

        stats_box = QWidget()
        stats_form = QFormLayout(stats_box)
        self.recorded_label = QLabel("0")
        self.recorded_label.setObjectName("StatValue")
        self.account_label = QLabel()
        self.account_label.setObjectName("MutedText")
        stats_form.addRow("Sessions recorded:", self.recorded_label)
        stats_form.addRow("Account:", self.account_label)
        right_layout.addWidget(stats_box)
        right_layout.addStretch()

        space_action = QAction(self)
        space_action.setShortcut(QKeySequence(Qt.Key.Key_Space))
        space_action.triggered.connect(self.coordinator.toggle)
        self.addAction(space_action)

        self.statusBar()

    def _minutes_spin(self) -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(1, 240)
        return spin

    def _connect_signals(self) -> None:
        self.toggle_btn.clicked.connect(self.coordinator.toggle)
        self.reset_btn.clicked.connect(self._reset)
        self.apply_btn.clicked.connect(self._apply_config)
        self.coordinator.state_changed.connect(self._render)
        self.coordinator.phase_changed.connect(self._on_phase_changed)
        self.coordinator.set_completed.connect(self._on_set_completed)
        self.coordinator.session_recorded.connect(self._on_session_recorded)
        self.coordinator.submission_failed.connect(self._show_notice)

    def _load_config_fields(self, config: CycleConfig) -> None:
        self.work_spin.setValue(config.work_minutes)
        self.short_break_spin.setValue(config.short_break_minutes)
        self.long_break_spin.setValue(config.long_break_minutes)
        self.cycles_spin.setValue(config.cycles_per_set)
        self.long_break_check.setChecked(config.long_break_enabled)

    def _apply_config(self) -> None:
        try:
            config = CycleConfig(
                work_minutes=self.work_spin.value(),
                short_break_minutes=self.short_break_spin.value(),
                long_break_minutes=self.long_break_spin.value(),
                cycles_per_set=self.cycles_spin.value(),
                long_break_enabled=self.long_break_check.isChecked(),
            )
            self.coordinator.reconfigure(config)
        except (InvalidConfigError, InvalidStateError) as exc:
            self.error_label.setText(str(exc))
            return
        self.error_label.clear()

    def _reset(self) -> None:
        self.coordinator.reset()
        self.error_label.clear()

    def _render(self, state: EngineState) -> None:
        self.phase_label.setText(PHASE_TITLES[state.phase])
        self.cycle_label.setText(f"Cycle {self.coordinator.engine.current_cycle}/{state.config.cycles_per_set}")
        self.countdown.set_state(progress(state), state.phase, format_clock(state.remaining_seconds))
        self.toggle_btn.setText("Pause" if state.running else "Start")
        for widget in (
            self.work_spin,
            self.short_break_spin,
            self.long_break_spin,
            self.cycles_spin,
            self.long_break_check,
            self.apply_btn,
        ):
            widget.setEnabled(not state.running)

    def _on_phase_changed(self, event: PhaseChanged) -> None:
        QApplication.beep()
        self._show_notice(f"{PHASE_TITLES[event.current]} started")

    def _on_set_completed(self, summary: SessionSummary) -> None:
        QApplication.beep()
        minutes = summary.work_duration_seconds // 60
        self._show_notice(f"Set complete: {summary.cycles_completed} cycles, {minutes} min of focus")
        self._refresh_account()

    def _on_session_recorded(self, _summary: SessionSummary) -> None:
        self.recorded_label.setText(str(self.coordinator.recorded_sessions))

    def _show_notice(self, message: str) -> None:
        self.statusBar().showMessage(message, NOTICE_TIMEOUT_MS)

    def _refresh_account(self) -> None:
        actor = self.identity.current_actor()
        self.account_label.setText("Guest (sessions are not recorded)" if actor.is_guest else actor.id)

    def closeEvent(self, event) -> None:  # noqa: N802
        self.coordinator.shutdown()
        event.accept()
