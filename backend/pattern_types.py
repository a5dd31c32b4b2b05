"""Data models for personal patterns and mood prediction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class PatternType(str, Enum):
    IMPROVEMENT = "improvement"
    DECLINE = "decline"
    TRIGGER = "trigger"
    CYCLE = "cycle"
    CORRELATION = "correlation"


@dataclass
class PersonalPattern:
    type: PatternType
    pattern: str
    confidence: float  # 0.0 to 1.0
    frequency: int
    actionable_insight: str
    examples: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "pattern": self.pattern,
            "confidence": self.confidence,
            "frequency": self.frequency,
            "actionable_insight": self.actionable_insight,
            "examples": list(self.examples),
        }


@dataclass
class PatternPrediction:
    predicted_mood: int
    confidence: float
    based_on: str
    suggestion: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "predicted_mood": self.predicted_mood,
            "confidence": self.confidence,
            "based_on": self.based_on,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class MarkovState:
    mood: int
    context: Optional[str] = None

    @property
    def key(self) -> str:
        return f"{self.mood}_{self.context or 'unknown'}"


@dataclass
class MarkovTransition:
    from_state: MarkovState
    to_state: MarkovState
    count: int = 0
    probability: float = 0.0
