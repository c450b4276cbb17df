"""Practice widget that feeds key presses into a TypingSession."""

import html
from typing import Optional

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtGui import QFont, QKeyEvent
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from core.models import CharacterStatus, LiveStats, SessionPhase, SessionSnapshot
from core.scheduler import QtScheduler
from core.session_config import SessionConfig
from core.session_engine import TypingSession

STATUS_STYLES = {
    CharacterStatus.PENDING: "color: #9ca3af;",
    CharacterStatus.CORRECT: "color: #10b981;",
    CharacterStatus.CORRECTED: "color: #f59e0b;",
    CharacterStatus.INCORRECT: "color: #ef4444; background: #fee2e2;",
    CharacterStatus.CURRENT: "color: #111827; background: #c7d2fe;",
}


def render_snapshot_html(snapshot: SessionSnapshot) -> str:
    """Render the reference text as colored HTML spans."""
    spans = []
    for state in snapshot.characters:
        char = "&nbsp;" if state.char == " " else html.escape(state.char)
        spans.append(f'<span style="{STATUS_STYLES[state.status]}">{char}</span>')
    return "".join(spans)


class TypingWidget(QWidget):
    """Shows the practice text and live statistics."""

    completed = Signal(object)  # CompletionRecord

    def __init__(self, reference_text: str, config: Optional[SessionConfig] = None,
                 simple_mode: bool = False, font_size: int = 18, parent=None):
        """Initialize typing widget.

        Args:
            reference_text: Normalized text to practice
            config: Session configuration
            simple_mode: Hide the live statistics bar
            font_size: Point size of the practice text
            parent: Parent widget
        """
        super().__init__(parent)
        self.simple_mode = simple_mode
        self.font_size = font_size
        self.scheduler = QtScheduler(self)
        self.session = TypingSession(
            reference_text,
            config=config,
            scheduler=self.scheduler,
            on_complete=self.completed.emit,
            on_stats_update=self._on_stats_update,
        )
        self.init_ui()
        self.refresh()

        # Lockout release happens off the keystroke path; repaint periodically
        self._tick = QTimer(self)
        self._tick.setInterval(200)
        self._tick.timeout.connect(self._on_tick)
        self._tick.start()

    def init_ui(self) -> None:
        """Initialize user interface."""
        self.setFocusPolicy(Qt.StrongFocus)
        layout = QVBoxLayout()

        self.text_label = QLabel()
        self.text_label.setWordWrap(True)
        self.text_label.setTextFormat(Qt.RichText)
        text_font = QFont("monospace")
        text_font.setPointSize(self.font_size)
        self.text_label.setFont(text_font)
        layout.addWidget(self.text_label)

        stats_layout = QHBoxLayout()
        self.wpm_label = QLabel()
        self.accuracy_label = QLabel()
        self.errors_label = QLabel()
        self.progress_label = QLabel()
        for label in (self.wpm_label, self.accuracy_label,
                      self.errors_label, self.progress_label):
            label.setStyleSheet("font-size: 14px; font-weight: bold;")
            stats_layout.addWidget(label)
        self.stats_widget = QWidget()
        self.stats_widget.setLayout(stats_layout)
        self.stats_widget.setVisible(not self.simple_mode)
        layout.addWidget(self.stats_widget)

        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #ef4444; font-weight: bold;")
        layout.addWidget(self.error_label)

        button_layout = QHBoxLayout()
        button_layout.addStretch()
        reset_button = QPushButton("Reset")
        reset_button.setFocusPolicy(Qt.NoFocus)
        reset_button.clicked.connect(lambda: self.reset())
        button_layout.addWidget(reset_button)
        layout.addLayout(button_layout)

        layout.addStretch()
        self.setLayout(layout)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        """Translate a Qt key press into a session keystroke."""
        if event.key() == Qt.Key_Backspace:
            key = "Backspace"
        else:
            key = event.text()
        modifiers = event.modifiers()
        self.session.submit_key(
            key,
            ctrl=bool(modifiers & Qt.ControlModifier),
            meta=bool(modifiers & Qt.MetaModifier),
        )
        self.refresh()

    def reset(self, reference_text: Optional[str] = None) -> None:
        self.session.restart(reference_text)
        self.refresh()
        self.setFocus()

    def refresh(self) -> None:
        """Redraw the text, stats and error indicator from a snapshot."""
        snapshot = self.session.snapshot()
        self.text_label.setText(render_snapshot_html(snapshot))
        self._on_stats_update(self.session.live_stats())

        threshold = self.session.config.lockout.threshold
        if snapshot.lockout:
            seconds = self.session.config.lockout.cooldown_ms / 1000
            self.error_label.setText(f"Blocked! Wait {seconds:g} seconds...")
        elif snapshot.consecutive_errors > 0:
            self.error_label.setText(
                f"Consecutive Errors: {snapshot.consecutive_errors}/{threshold}"
            )
        else:
            self.error_label.clear()

    def _on_stats_update(self, stats: LiveStats) -> None:
        self.wpm_label.setText(f"WPM {stats.wpm}")
        self.accuracy_label.setText(f"Accuracy {stats.accuracy}%")
        self.errors_label.setText(f"Errors {stats.total_errors}")
        self.progress_label.setText(f"Progress {stats.progress}%")

    def _on_tick(self) -> None:
        if self.session.phase in (SessionPhase.TYPING, SessionPhase.LOCKED):
            self.refresh()

    def closeEvent(self, event) -> None:
        self._tick.stop()
        self.session.close()
        self.scheduler.cancel_all()
        super().closeEvent(event)


__all__ = ["TypingWidget", "render_snapshot_html"]
