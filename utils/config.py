"""Configuration management for TypeTrainer."""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.session_config import LockoutPolicy, SessionConfig

log = logging.getLogger("typetrainer.config")


class AppSettings(BaseModel):
    """Application settings with validation."""

    # Lockout settings
    lockout_enabled: bool = Field(
        default=True,
        description="Block input after too many consecutive errors",
    )
    lockout_threshold: int = Field(
        default=3,
        ge=1,
        description="Consecutive errors that engage the lockout",
    )
    lockout_cooldown_ms: int = Field(
        default=2000,
        ge=0,
        description="How long input stays blocked (ms)",
    )

    # Session settings
    completion_delay_ms: int = Field(
        default=500,
        ge=0,
        description="Pause before the results are shown (ms)",
    )
    simple_mode: bool = Field(
        default=False,
        description="Hide live stats and never lock input",
    )

    # Display
    font_size: int = Field(
        default=18, ge=8, le=48, description="Practice text font size (pt)"
    )
    last_text_path: str = Field(
        default="", description="Most recently loaded practice file"
    )

    model_config = ConfigDict(extra="ignore")


class Config:
    """Configuration manager using SQLite for persistence with Pydantic validation."""

    def __init__(self, db_path: Path):
        """Initialize config with database connection.

        Args:
            db_path: Path to SQLite database
        """
        self.db_path = Path(db_path)
        self._init_settings_table()
        self._ensure_defaults()

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init_settings_table(self) -> None:
        """Create settings table if not exists."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            conn.commit()

    def _ensure_defaults(self) -> None:
        """Ensure all default settings exist in database."""
        defaults = AppSettings().model_dump()

        with self._get_connection() as conn:
            cursor = conn.cursor()
            for key, value in defaults.items():
                cursor.execute(
                    """
                    INSERT OR IGNORE INTO settings (key, value)
                    VALUES (?, ?)
                """,
                    (key, self._serialize_value(value)),
                )
            conn.commit()

    def _serialize_value(self, value: Any) -> str:
        """Convert value to string for storage."""
        if isinstance(value, bool):
            return "True" if value else "False"
        if isinstance(value, (list, dict)):
            return json.dumps(value)
        return str(value)

    def _simple_parse(self, value: str) -> Any:
        """Best-effort parsing of a stored string."""
        if value.startswith("[") or value.startswith("{"):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        return value

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Get configuration value.

        Args:
            key: Setting key
            default: Default value if not found

        Returns:
            Setting value
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
            result = cursor.fetchone()
        if result:
            field = AppSettings.model_fields.get(key)
            if field is not None and field.annotation is str:
                return result[0]
            parsed = self._simple_parse(result[0])
            if field is not None:
                try:
                    return getattr(AppSettings(**{key: parsed}), key)
                except ValueError:
                    log.warning(f"Ignoring invalid stored value for {key}: {result[0]!r}")
                    return AppSettings.model_fields[key].default
            return parsed
        if default is not None:
            return default
        if key in AppSettings.model_fields:
            return AppSettings.model_fields[key].default
        return None

    def get_int(self, key: str, default: Optional[int] = None) -> int:
        """Get integer configuration value."""
        value = self.get(key, default)
        try:
            return int(value)
        except (ValueError, TypeError):
            return default if default is not None else 0

    def get_bool(self, key: str, default: Optional[bool] = None) -> bool:
        """Get boolean configuration value."""
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return bool(value)
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes", "on")
        return bool(value) if value else False

    def set(self, key: str, value: Any) -> None:
        """Set configuration value with pydantic validation.

        Args:
            key: Setting key
            value: Setting value

        Raises:
            ValueError: If value fails validation
        """
        if key in AppSettings.model_fields:
            try:
                validated = AppSettings(**{key: value})
            except ValueError as e:
                raise ValueError(f"Invalid value for {key}: {e}") from e
            value = getattr(validated, key)

        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO settings (key, value)
                VALUES (?, ?)
            """,
                (key, self._serialize_value(value)),
            )
            conn.commit()
        log.debug(f"Setting {key} = {value!r}")

    def get_all(self) -> dict[str, Any]:
        """Get all settings as dictionary."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT key, value FROM settings")
            settings = {row[0]: self._simple_parse(row[1]) for row in cursor.fetchall()}
        return settings

    def session_config(self) -> SessionConfig:
        """Build the SessionConfig described by the stored settings."""
        completion_delay_ms = self.get_int("completion_delay_ms")
        if self.get_bool("simple_mode"):
            return SessionConfig.simple(completion_delay_ms=completion_delay_ms)
        return SessionConfig(
            lockout=LockoutPolicy(
                enabled=self.get_bool("lockout_enabled"),
                threshold=self.get_int("lockout_threshold"),
                cooldown_ms=self.get_int("lockout_cooldown_ms"),
            ),
            completion_delay_ms=completion_delay_ms,
        )
