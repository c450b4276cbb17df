"""Typing session configuration with Pydantic validation."""

from pydantic import BaseModel, ConfigDict, Field


class LockoutPolicy(BaseModel):
    """Anti-cheat lockout after too many consecutive errors."""

    enabled: bool = Field(
        default=True,
        description="Block input after too many consecutive mismatches",
    )
    threshold: int = Field(
        default=3,
        ge=1,
        description="Consecutive mismatches that engage the lockout",
    )
    cooldown_ms: int = Field(
        default=2000,
        ge=0,
        description="How long input stays blocked once locked (ms)",
    )

    model_config = ConfigDict(frozen=True, extra="ignore")


class SessionConfig(BaseModel):
    """Configuration for TypingSession."""

    lockout: LockoutPolicy = Field(
        default_factory=LockoutPolicy,
        description="Consecutive-error lockout policy",
    )
    completion_delay_ms: int = Field(
        default=500,
        ge=0,
        description="Delay before the completion record is delivered (ms)",
    )

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def simple(cls, completion_delay_ms: int = 500) -> "SessionConfig":
        """Lockout-free configuration: the cursor always advances."""
        return cls(
            lockout=LockoutPolicy(enabled=False),
            completion_delay_ms=completion_delay_ms,
        )


__all__ = ["LockoutPolicy", "SessionConfig"]
