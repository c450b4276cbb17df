"""Pydantic models for TypeTrainer data structures."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from core.metrics import calculate_net_wpm, get_grade

PerformanceGrade = Literal["A+", "A", "B", "C", "D", "F"]


class SessionPhase(str, Enum):
    """Lifecycle phase of a typing session."""

    NOT_STARTED = "not_started"
    TYPING = "typing"
    LOCKED = "locked"
    COMPLETED = "completed"


class CharacterStatus(str, Enum):
    """Render classification of one reference character."""

    PENDING = "pending"
    CORRECT = "correct"
    CORRECTED = "corrected"  # mistyped at some point, now typed correctly
    INCORRECT = "incorrect"  # mistyped and not yet fixed
    CURRENT = "current"


class ValidationResult(BaseModel):
    """Outcome of checking a candidate practice text."""

    is_valid: bool = Field(..., description="Whether the text can be practiced")
    message: str = Field(..., description="Human-readable summary")
    normalized_length: int = Field(..., description="Length after normalization")
    word_count: int = Field(..., description="Whitespace-delimited word count")
    issues: list[str] = Field(default_factory=list, description="Failed checks")

    model_config = ConfigDict(frozen=True, extra="ignore")


class CharacterState(BaseModel):
    """One reference character with its render status."""

    char: str = Field(..., description="Reference character")
    index: int = Field(..., description="Position in the reference text")
    status: CharacterStatus = Field(..., description="Render classification")

    model_config = ConfigDict(frozen=True, extra="ignore")


class LiveStats(BaseModel):
    """Running statistics pushed after every accepted keystroke."""

    wpm: int = Field(..., description="Live words per minute")
    accuracy: int = Field(..., description="Live accuracy percentage")
    total_errors: int = Field(..., description="Mismatched keystrokes so far")
    progress: int = Field(..., description="Progress through the text (%)")

    model_config = ConfigDict(frozen=True, extra="ignore")


class CompletionRecord(BaseModel):
    """Final result of a completed typing session."""

    wpm: int = Field(..., description="Gross words per minute")
    accuracy: int = Field(..., description="Accuracy percentage (0-100)")
    total_errors: int = Field(..., description="Mismatched keystrokes")
    time_in_seconds: int = Field(..., description="Elapsed time in whole seconds")
    characters_typed: int = Field(..., description="Length of the reference text")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @computed_field
    @property
    def net_wpm(self) -> int:
        """Gross WPM scaled by accuracy."""
        return calculate_net_wpm(self.wpm, self.accuracy)

    @computed_field
    @property
    def grade(self) -> PerformanceGrade:
        return get_grade(self.wpm, self.accuracy)


class SessionSnapshot(BaseModel):
    """Read-only view of a session for rendering."""

    phase: SessionPhase
    cursor: int
    typed_text: str
    wpm: int
    accuracy: int
    total_errors: int
    progress_percent: int
    consecutive_errors: int
    lockout: bool
    characters: list[CharacterState] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")
