"""Real-time evaluation of a typing session.

A TypingSession judges keystrokes one at a time against a fixed reference
text, keeps error and speed statistics, optionally locks input after too
many consecutive mistakes, and produces a single CompletionRecord once the
whole text has been typed.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set

from core.metrics import (
    calculate_accuracy,
    calculate_progress,
    calculate_wpm,
    minutes_between,
    round_half_up,
)
from core.models import (
    CharacterState,
    CharacterStatus,
    CompletionRecord,
    LiveStats,
    SessionPhase,
    SessionSnapshot,
)
from core.scheduler import ScheduledTask, Scheduler, wall_clock_ms
from core.session_config import SessionConfig

log = logging.getLogger("typetrainer.session")

BACKSPACE_KEYS = frozenset({"Backspace", "BACKSPACE", "\b", "\x7f"})


class InvalidReferenceTextError(ValueError):
    """Raised when a session is started with an unusable reference text."""


@dataclass
class SessionState:
    """Mutable state of one typing attempt."""

    typed_log: List[str] = field(default_factory=list)
    cursor: int = 0
    consecutive_errors: int = 0
    total_errors: int = 0
    mistake_marks: Set[int] = field(default_factory=set)
    lockout: bool = False
    start_time_ms: Optional[int] = None
    end_time_ms: Optional[int] = None
    phase: SessionPhase = SessionPhase.NOT_STARTED
    wpm: int = 0
    accuracy: int = 100
    progress_percent: int = 0


def classify_characters(reference: str, typed_log: List[str], cursor: int,
                        mistake_marks: Set[int]) -> List[CharacterState]:
    """Classify every reference character for rendering.

    Args:
        reference: Reference text
        typed_log: Characters entered so far (one per judged position)
        cursor: Index of the next expected character
        mistake_marks: Positions that ever received a wrong keystroke

    Returns:
        One CharacterState per reference character
    """
    states = []
    for index, char in enumerate(reference):
        if index < cursor:
            if typed_log[index] == char:
                status = (CharacterStatus.CORRECTED if index in mistake_marks
                          else CharacterStatus.CORRECT)
            else:
                status = CharacterStatus.INCORRECT
        elif index == cursor:
            status = CharacterStatus.CURRENT
        else:
            status = CharacterStatus.PENDING
        states.append(CharacterState(char=char, index=index, status=status))
    return states


def _check_reference(reference_text: str) -> str:
    if not isinstance(reference_text, str) or not reference_text:
        raise InvalidReferenceTextError(
            "Invalid reference text: a typing session needs a non-empty text"
        )
    return reference_text


class TypingSession:
    """Keystroke-driven state machine for one reference text."""

    def __init__(self, reference_text: str,
                 config: Optional[SessionConfig] = None,
                 scheduler: Optional[Scheduler] = None,
                 clock: Optional[Callable[[], int]] = None,
                 on_complete: Optional[Callable[[CompletionRecord], None]] = None,
                 on_stats_update: Optional[Callable[[LiveStats], None]] = None):
        """Initialize typing session.

        Args:
            reference_text: Normalized text the user has to reproduce
            config: Lockout and completion settings (default: SessionConfig())
            scheduler: Runs the lockout release and completion notification
                later; defaults to a QtScheduler on the running event loop
            clock: Millisecond clock; defaults to the scheduler's virtual
                clock when it has one, else wall-clock time
            on_complete: Called once with the CompletionRecord
            on_stats_update: Called with LiveStats after each accepted keystroke

        Raises:
            InvalidReferenceTextError: If reference_text is empty
        """
        self.reference_text = _check_reference(reference_text)
        self.config = config or SessionConfig()
        if scheduler is None:
            from core.scheduler import QtScheduler
            scheduler = QtScheduler()
        self.scheduler = scheduler
        self.clock = clock or getattr(scheduler, "now_ms", wall_clock_ms)
        self.on_complete = on_complete
        self.on_stats_update = on_stats_update

        self.state = SessionState()
        self.completion_record: Optional[CompletionRecord] = None
        self.closed = False
        self._generation = 0
        self._release_task: Optional[ScheduledTask] = None
        self._completion_task: Optional[ScheduledTask] = None

        log.info(f"Session started ({len(self.reference_text)} chars, "
                 f"lockout={'on' if self.config.lockout.enabled else 'off'})")

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def typed_text(self) -> str:
        return "".join(self.state.typed_log)

    def submit_key(self, key: str, ctrl: bool = False, meta: bool = False) -> bool:
        """Judge one keystroke.

        Keystrokes are ignored while locked, after completion, after close(),
        for modifier combinations and for key names other than Backspace.

        Args:
            key: Typed character, or a key name such as "Backspace"
            ctrl: Whether Ctrl was held
            meta: Whether Cmd/Meta was held

        Returns:
            True if the keystroke changed the session state
        """
        state = self.state
        if self.closed or state.phase in (SessionPhase.LOCKED, SessionPhase.COMPLETED):
            return False

        if key in BACKSPACE_KEYS:
            if state.cursor == 0:
                return False
            now = self._start_timer()
            state.cursor -= 1
            state.typed_log.pop()
            state.consecutive_errors = 0
            self._refresh_metrics(now)
            self._notify_stats()
            return True

        # Enter, Tab and Escape arrive as control characters
        if not key or len(key) != 1 or not key.isprintable() or ctrl or meta:
            return False

        now = self._start_timer()
        index = state.cursor
        state.typed_log.append(key)
        state.cursor += 1

        mismatch = key != self.reference_text[index]
        if mismatch:
            state.total_errors += 1
            state.consecutive_errors += 1
            state.mistake_marks.add(index)
        else:
            state.consecutive_errors = 0

        self._refresh_metrics(now)
        self._notify_stats()

        if state.cursor == len(self.reference_text):
            self._complete(now)
        elif mismatch and self._should_lock():
            self._engage_lockout()
        return True

    def restart(self, reference_text: Optional[str] = None) -> None:
        """Discard progress and return to the not-started phase.

        Pending lockout releases and completion notifications from the
        previous attempt are cancelled.

        Args:
            reference_text: New text to practice; keeps the current one if None

        Raises:
            InvalidReferenceTextError: If a new, empty text is given
        """
        if reference_text is not None:
            self.reference_text = _check_reference(reference_text)
        self._cancel_pending()
        self.state = SessionState()
        self.completion_record = None
        self.closed = False
        log.info(f"Session restarted ({len(self.reference_text)} chars)")

    def close(self) -> None:
        """Tear the session down; nothing fires or mutates afterwards."""
        self._cancel_pending()
        self.closed = True

    def live_stats(self) -> LiveStats:
        """Current running statistics.

        Returns:
            LiveStats as of the last accepted keystroke
        """
        state = self.state
        return LiveStats(
            wpm=state.wpm,
            accuracy=state.accuracy,
            total_errors=state.total_errors,
            progress=state.progress_percent,
        )

    def snapshot(self) -> SessionSnapshot:
        """Immutable view of the current state for rendering."""
        state = self.state
        return SessionSnapshot(
            phase=state.phase,
            cursor=state.cursor,
            typed_text=self.typed_text,
            wpm=state.wpm,
            accuracy=state.accuracy,
            total_errors=state.total_errors,
            progress_percent=state.progress_percent,
            consecutive_errors=state.consecutive_errors,
            lockout=state.lockout,
            characters=classify_characters(
                self.reference_text, state.typed_log, state.cursor, state.mistake_marks
            ),
        )

    def _start_timer(self) -> int:
        now = self.clock()
        if self.state.start_time_ms is None:
            self.state.start_time_ms = now
            self.state.phase = SessionPhase.TYPING
        return now

    def _refresh_metrics(self, now_ms: int) -> None:
        state = self.state
        minutes = minutes_between(state.start_time_ms, now_ms)
        state.wpm = calculate_wpm(state.cursor, minutes)
        state.accuracy = calculate_accuracy(state.cursor, state.total_errors)
        state.progress_percent = calculate_progress(state.cursor, len(self.reference_text))

    def _should_lock(self) -> bool:
        policy = self.config.lockout
        return policy.enabled and self.state.consecutive_errors >= policy.threshold

    def _engage_lockout(self) -> None:
        state = self.state
        state.lockout = True
        state.phase = SessionPhase.LOCKED
        cooldown_ms = self.config.lockout.cooldown_ms
        log.debug(f"Lockout engaged after {state.consecutive_errors} consecutive errors "
                  f"at position {state.cursor} ({cooldown_ms}ms)")

        generation = self._generation
        if cooldown_ms == 0:
            self._release_lockout(generation)
            return
        self._release_task = self.scheduler.call_later(
            cooldown_ms, lambda: self._release_lockout(generation)
        )

    def _release_lockout(self, generation: int) -> None:
        # A timer that outlives restart() or close() must not touch the new state
        if generation != self._generation or self.state.phase != SessionPhase.LOCKED:
            return
        self._release_task = None
        self.state.lockout = False
        self.state.consecutive_errors = 0
        self.state.phase = SessionPhase.TYPING
        log.debug("Lockout released")

    def _complete(self, now_ms: int) -> None:
        state = self.state
        state.phase = SessionPhase.COMPLETED
        state.end_time_ms = now_ms

        elapsed_ms = max(0, now_ms - state.start_time_ms)
        characters = len(self.reference_text)
        self.completion_record = CompletionRecord(
            wpm=calculate_wpm(characters, minutes_between(state.start_time_ms, now_ms)),
            accuracy=calculate_accuracy(characters, state.total_errors),
            total_errors=state.total_errors,
            time_in_seconds=round_half_up(elapsed_ms / 1000),
            characters_typed=characters,
        )
        log.debug(f"Session completed: {self.completion_record.model_dump()}")

        generation = self._generation
        delay_ms = self.config.completion_delay_ms
        if delay_ms == 0:
            self._deliver_completion(generation)
            return
        self._completion_task = self.scheduler.call_later(
            delay_ms, lambda: self._deliver_completion(generation)
        )

    def _deliver_completion(self, generation: int) -> None:
        if generation != self._generation or self.completion_record is None:
            return
        self._completion_task = None
        if self.on_complete:
            try:
                self.on_complete(self.completion_record)
            except Exception:
                log.exception("Error in completion callback")

    def _notify_stats(self) -> None:
        if self.on_stats_update:
            try:
                self.on_stats_update(self.live_stats())
            except Exception:
                log.exception("Error in stats update callback")

    def _cancel_pending(self) -> None:
        self._generation += 1
        for task in (self._release_task, self._completion_task):
            if task is not None:
                task.cancel()
        self._release_task = None
        self._completion_task = None


def start_session(reference_text: str, **kwargs) -> TypingSession:
    """Create a TypingSession; see TypingSession for keyword arguments."""
    return TypingSession(reference_text, **kwargs)


__all__ = [
    "BACKSPACE_KEYS",
    "InvalidReferenceTextError",
    "SessionState",
    "TypingSession",
    "classify_characters",
    "start_session",
]
