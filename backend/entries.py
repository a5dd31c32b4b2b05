"""Mood entries as the analysis engine sees them.

Entries are immutable snapshots. The store hands them over newest first
and nothing downstream mutates them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from functools import lru_cache
from typing import Any, Iterable, Optional

MIN_MOOD = 1
MAX_MOOD = 5


class InvalidEntryError(ValueError):
    """Raised when an entry payload cannot become a MoodEntry."""


@dataclass(frozen=True)
class SentimentResult:
    score: int = 0
    comparative: float = 0.0
    positive: list[str] = field(default_factory=list)
    negative: list[str] = field(default_factory=list)
    word_count: int = 0
    compound: float = 0.0  # VADER compound in [-1, 1]

    @property
    def mood(self) -> str:
        if self.compound >= 0.05:
            return "positive"
        if self.compound <= -0.05:
            return "negative"
        return "neutral"

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["mood"] = self.mood
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SentimentResult:
        return cls(
            score=int(data.get("score", 0)),
            comparative=float(data.get("comparative", 0.0)),
            positive=list(data.get("positive") or []),
            negative=list(data.get("negative") or []),
            word_count=int(data.get("word_count", data.get("wordCount", 0))),
            compound=float(data.get("compound", 0.0)),
        )


@lru_cache(maxsize=4096)
def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 string into a naive wall-clock datetime.

    Any UTC offset is dropped so hours and weekdays read the way the
    writer saw them. Returns None for missing or unparsable values.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


@dataclass(frozen=True)
class MoodEntry:
    id: Optional[int]
    mood_value: int
    mood_label: str
    timestamp: str
    reflection: Optional[str] = None
    created_at: Optional[str] = None
    sentiment: Optional[SentimentResult] = None

    @property
    def reflection_text(self) -> str:
        """Stripped reflection, or "" when absent or blank."""
        return (self.reflection or "").strip()

    @property
    def has_reflection(self) -> bool:
        return bool(self.reflection_text)

    @property
    def occurred_at(self) -> Optional[datetime]:
        return parse_timestamp(self.timestamp) or parse_timestamp(self.created_at)

    @property
    def recorded_at(self) -> Optional[datetime]:
        return parse_timestamp(self.created_at) or parse_timestamp(self.timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "mood_value": self.mood_value,
            "mood_label": self.mood_label,
            "reflection": self.reflection,
            "timestamp": self.timestamp,
            "created_at": self.created_at,
            "sentiment_data": self.sentiment.to_dict() if self.sentiment else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MoodEntry:
        """Build an entry from snake_case or camelCase keys."""
        raw_mood = data.get("mood_value", data.get("moodValue"))
        if raw_mood is None:
            raise InvalidEntryError("Missing 'mood_value'")
        if isinstance(raw_mood, bool) or (isinstance(raw_mood, float) and not raw_mood.is_integer()):
            raise InvalidEntryError(f"'mood_value' must be an integer, got {raw_mood!r}")
        try:
            mood_value = int(raw_mood)
        except (TypeError, ValueError):
            raise InvalidEntryError(f"'mood_value' must be an integer, got {raw_mood!r}")
        if not MIN_MOOD <= mood_value <= MAX_MOOD:
            raise InvalidEntryError(f"'mood_value' must be between {MIN_MOOD} and {MAX_MOOD}")

        mood_label = (_optional_text(data, "mood_label", "moodLabel") or "").strip()
        if not mood_label:
            raise InvalidEntryError("Missing 'mood_label'")
        reflection = _optional_text(data, "reflection")
        timestamp = _optional_text(data, "timestamp")
        created_at = _optional_text(data, "created_at", "createdAt")

        sentiment = data.get("sentiment_data", data.get("sentimentData"))
        if isinstance(sentiment, dict):
            sentiment = SentimentResult.from_dict(sentiment)
        elif not isinstance(sentiment, SentimentResult):
            sentiment = None

        return cls(
            id=data.get("id"),
            mood_value=mood_value,
            mood_label=mood_label,
            timestamp=timestamp or created_at or "",
            reflection=reflection,
            created_at=created_at,
            sentiment=sentiment,
        )


def _optional_text(data: dict[str, Any], *keys: str) -> Optional[str]:
    """First present value among ``keys``; must be a string when given."""
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise InvalidEntryError(f"'{keys[0]}' must be a string, got {value!r}")
        return value
    return None


def sort_recent(entries: Iterable[MoodEntry]) -> list[MoodEntry]:
    """Newest first by ``created_at`` (falling back to ``timestamp``).

    Undated entries keep their relative order at the end.
    """
    entries = list(entries)
    dated = [e for e in entries if e.recorded_at is not None]
    undated = [e for e in entries if e.recorded_at is None]
    dated.sort(key=lambda e: e.recorded_at, reverse=True)
    return dated + undated


def with_reflections(entries: Iterable[MoodEntry]) -> list[MoodEntry]:
    return [e for e in entries if e.has_reflection]
