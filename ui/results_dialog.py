"""Results dialog shown when a typing session completes."""

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QDialog,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
)

from core.metrics import format_time, get_performance_message
from core.models import CompletionRecord


class ResultsDialog(QDialog):
    """Final statistics for one completed session."""

    def __init__(self, record: CompletionRecord, parent=None):
        """Initialize results dialog.

        Args:
            record: Completion record of the finished session
            parent: Parent widget
        """
        super().__init__(parent)
        self.record = record
        self.init_ui()

    def init_ui(self) -> None:
        """Initialize user interface."""
        self.setWindowTitle("Results")
        self.setMinimumWidth(360)
        self.setWindowFlags(Qt.Dialog | Qt.WindowTitleHint | Qt.WindowCloseButtonHint)

        layout = QVBoxLayout()

        title_label = QLabel(get_performance_message(self.record.wpm, self.record.accuracy))
        title_font = QFont()
        title_font.setPointSize(18)
        title_font.setBold(True)
        title_label.setFont(title_font)
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title_label)

        layout.addSpacing(10)

        grid = QGridLayout()
        rows = [
            ("Words Per Minute", str(self.record.wpm)),
            ("Net WPM", str(self.record.net_wpm)),
            ("Accuracy", f"{self.record.accuracy}%"),
            ("Total Errors", str(self.record.total_errors)),
            ("Time", format_time(self.record.time_in_seconds)),
            ("Grade", self.record.grade),
        ]
        value_font = QFont()
        value_font.setBold(True)
        for row, (name, value) in enumerate(rows):
            grid.addWidget(QLabel(name), row, 0)
            value_label = QLabel(value)
            value_label.setFont(value_font)
            value_label.setAlignment(Qt.AlignmentFlag.AlignRight)
            grid.addWidget(value_label, row, 1)
        layout.addLayout(grid)

        layout.addStretch()

        button_layout = QHBoxLayout()
        button_layout.addStretch()

        again_button = QPushButton("Try Again")
        again_button.clicked.connect(self.accept)
        button_layout.addWidget(again_button)

        close_button = QPushButton("Close")
        close_button.clicked.connect(self.reject)
        button_layout.addWidget(close_button)

        button_layout.addStretch()
        layout.addLayout(button_layout)

        self.setLayout(layout)
