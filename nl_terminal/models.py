"""Data models for the natural-language terminal."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
import re
import uuid

from .exceptions import ValidationError


class RiskLevel(Enum):
    """Risk level assigned to a command by the safety validator."""
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


class SafetyLevel(Enum):
    """User-configured strictness for running flagged commands."""
    STRICT = "strict"
    MODERATE = "moderate"
    PERMISSIVE = "permissive"

    @classmethod
    def coerce(cls, value) -> "SafetyLevel":
        """Accept either a SafetyLevel or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValidationError(f"Invalid safety level: {value!r}")


class HistoryStatus(Enum):
    """Outcome of a submitted request."""
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class PhraseEntry:
    """One row of the phrase catalog."""
    phrase_key: str
    shell_command: str
    explanation: str


@dataclass(frozen=True)
class PatternRule:
    """A command shape the safety validator looks for."""
    rule_id: str
    pattern: re.Pattern
    description: str

    def matches(self, command: str) -> bool:
        return self.pattern.search(command) is not None


@dataclass(frozen=True)
class SafetyVerdict:
    """Result of validating a command."""
    is_safe: bool
    risk_level: RiskLevel
    blocked_patterns: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    suggestions: Tuple[str, ...] = ()
    blocked_rule_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Translation:
    """A natural-language request resolved to a shell command."""
    original_query: str
    shell_command: str
    explanation: str
    confidence: float
    safety_check: SafetyVerdict
    alternatives: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class ExecutionResult:
    """What an executor reports back after running a command."""
    success: bool
    output: str
    execution_time: int
    exit_code: int
    stderr: Optional[str] = None

    @property
    def display_output(self) -> str:
        """Output to show the user; stderr wins on failure."""
        if self.success:
            return self.output
        return self.stderr or self.output


@dataclass(frozen=True)
class HistoryEntry:
    """Stored record of one submitted request."""
    natural_language: str
    shell_command: str
    output: str
    status: HistoryStatus
    ai_explanation: Optional[str] = None
    execution_time: Optional[int] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.status == HistoryStatus.BLOCKED and self.execution_time is not None:
            raise ValueError("blocked entries cannot carry an execution time")
        if self.execution_time is not None and self.execution_time < 0:
            raise ValueError("execution_time must be non-negative")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "naturalLanguage": self.natural_language,
            "shellCommand": self.shell_command,
            "output": self.output,
            "status": self.status.value,
        }
        if self.ai_explanation is not None:
            data["aiExplanation"] = self.ai_explanation
        if self.execution_time is not None:
            data["executionTime"] = self.execution_time
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            natural_language=data["naturalLanguage"],
            shell_command=data["shellCommand"],
            output=data["output"],
            status=HistoryStatus(data["status"]),
            ai_explanation=data.get("aiExplanation"),
            execution_time=data.get("executionTime")
        )


SHELL_TYPES = ("bash", "powershell", "zsh", "cmd")
THEMES = ("dark", "darker", "midnight")
EXPLAINERS = ("mock", "gemini")


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class Settings:
    """Application settings."""
    shell_type: str = "bash"
    safety_level: SafetyLevel = SafetyLevel.MODERATE
    theme: str = "dark"
    font_size: int = 14
    show_ai_panel: bool = True
    show_suggestions: bool = True
    sound_effects: bool = False
    auto_execute_safe: bool = False
    explainer: str = "mock"
    translation_delay: Tuple[float, float] = (0.5, 1.0)
    command_timeout: float = 30.0
    max_output_bytes: int = 1024 * 1024
    api_key_service: str = "nl-terminal"
    api_key_account: str = "gemini-api-key"

    def __post_init__(self):
        self.safety_level = SafetyLevel.coerce(self.safety_level)
        if self.shell_type not in SHELL_TYPES:
            raise ValidationError(f"Invalid shell_type: {self.shell_type}")
        if self.theme not in THEMES:
            raise ValidationError(f"Invalid theme: {self.theme}")
        if self.explainer not in EXPLAINERS:
            raise ValidationError(f"Invalid explainer: {self.explainer}")
        for name in ("show_ai_panel", "show_suggestions", "sound_effects", "auto_execute_safe"):
            if not isinstance(getattr(self, name), bool):
                raise ValidationError(f"{name} must be true or false")
        if not _is_int(self.font_size) or self.font_size <= 0:
            raise ValidationError("font_size must be a positive integer")
        if (not isinstance(self.translation_delay, (list, tuple))
                or len(self.translation_delay) != 2
                or not all(_is_number(value) for value in self.translation_delay)
                or not 0 <= self.translation_delay[0] <= self.translation_delay[1]):
            raise ValidationError(f"Invalid translation_delay: {self.translation_delay}")
        self.translation_delay = tuple(self.translation_delay)
        if not _is_number(self.command_timeout) or self.command_timeout <= 0:
            raise ValidationError("command_timeout must be a positive number")
        if not _is_int(self.max_output_bytes) or self.max_output_bytes <= 0:
            raise ValidationError("max_output_bytes must be a positive integer")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "shell_type": self.shell_type,
            "safety_level": self.safety_level.value,
            "theme": self.theme,
            "font_size": self.font_size,
            "show_ai_panel": self.show_ai_panel,
            "show_suggestions": self.show_suggestions,
            "sound_effects": self.sound_effects,
            "auto_execute_safe": self.auto_execute_safe,
            "explainer": self.explainer,
            "translation_delay": list(self.translation_delay),
            "command_timeout": self.command_timeout,
            "max_output_bytes": self.max_output_bytes,
            "api_key_service": self.api_key_service,
            "api_key_account": self.api_key_account
        }
