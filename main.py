#!/usr/bin/env python3
"""TypeTrainer - desktop typing-speed trainer."""

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

log = logging.getLogger('typetrainer')


def setup_logging(verbose: bool = False) -> None:
    """Log to a rotating file in the XDG state directory and to stderr."""
    xdg_state_home = os.environ.get('XDG_STATE_HOME', str(Path.home() / '.local' / 'state'))
    log_dir = Path(xdg_state_home) / 'typetrainer'
    log_dir.mkdir(parents=True, exist_ok=True)

    # 5MB max, keep 5 backups
    file_handler = RotatingFileHandler(
        log_dir / 'typetrainer.log',
        maxBytes=5*1024*1024,
        backupCount=5
    )

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            file_handler,
            logging.StreamHandler()
        ]
    )


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Practice typing a text and measure WPM")
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--file', type=Path, help="Plain-text file to practice")
    source.add_argument('--text', help="Text to practice")
    parser.add_argument('--simple', action='store_true',
                        help="Hide live stats and never lock input")
    parser.add_argument('--no-lockout', action='store_true',
                        help="Disable the consecutive-error lockout")
    parser.add_argument('--verbose', '-v', action='store_true', help="Debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    from PySide6.QtWidgets import QApplication, QInputDialog, QMainWindow, QMessageBox

    from core.session_config import LockoutPolicy
    from core.text_normalizer import normalize_text, validate_typing_text
    from ui.results_dialog import ResultsDialog
    from ui.typing_widget import TypingWidget
    from utils.config import Config
    from utils.text_loader import TextLoadError, load_text_file

    data_dir = Path.home() / '.local' / 'share' / 'typetrainer'
    data_dir.mkdir(parents=True, exist_ok=True)
    config = Config(data_dir / 'settings.db')

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("TypeTrainer")

    raw_text = args.text
    if args.file:
        try:
            raw_text = load_text_file(args.file)
        except TextLoadError as e:
            log.error(f"Cannot load practice text: {e}")
            QMessageBox.critical(None, "TypeTrainer", str(e))
            return 1
        config.set('last_text_path', str(args.file))

    if raw_text is None:
        raw_text, ok = QInputDialog.getMultiLineText(
            None, "TypeTrainer", "Paste the text you want to practice:"
        )
        if not ok:
            return 0

    result = validate_typing_text(raw_text)
    if not result.is_valid:
        log.warning(f"{result.message}: {'; '.join(result.issues)}")
        QMessageBox.warning(None, "TypeTrainer", "\n".join([result.message, *result.issues]))
        return 1
    log.info(result.message)

    session_config = config.session_config()
    simple_mode = args.simple or config.get_bool('simple_mode')
    if simple_mode or args.no_lockout:
        session_config = session_config.model_copy(
            update={'lockout': LockoutPolicy(enabled=False)}
        )

    window = QMainWindow()
    window.setWindowTitle("TypeTrainer")
    widget = TypingWidget(
        normalize_text(raw_text),
        config=session_config,
        simple_mode=simple_mode,
        font_size=config.get_int('font_size', 18),
    )

    def on_completed(record) -> None:
        log.info(f"Completed: {record.wpm} WPM, {record.accuracy}% accuracy, "
                 f"{record.total_errors} errors, grade {record.grade}")
        dialog = ResultsDialog(record, parent=window)
        if dialog.exec():
            widget.reset()
        else:
            window.close()

    widget.completed.connect(on_completed)
    window.setCentralWidget(widget)
    window.resize(800, 400)
    window.show()
    widget.setFocus()

    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
