"""Weekly summaries and the merged observation feed for the weekly view."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Literal, Optional, Sequence, Union

from entries import MoodEntry, with_reflections
from insight_types import MoodInsight, Priority
from pattern_types import PersonalPattern
from temporal_context import DAY_NAMES, day_name, is_weekend

MOOD_EMOJIS = {
    "Angry": "😡",
    "Frustrated": "😔",
    "Sad": "😐",
    "Neutral": "😊",
    "Content": "😄",
    "Joyful": "🤩",
    "Happy": "😆",
    "Surprised": "😲",
    "Worried": "😟",
    "Anxious": "😤",
}
DEFAULT_EMOJI = "😊"

# Filtered out of the weekly common-word list
COMMON_WORDS = frozenset({
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "a", "an", "as", "be", "been", "being", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "can", "am", "is", "are", "was", "were",
    "i", "me", "my", "mine", "you", "your", "yours", "he", "him", "his", "she", "her", "hers",
    "it", "its", "we", "us", "our", "ours", "they", "them", "their", "theirs",
    "this", "that", "these", "those", "there", "here", "where", "when", "why", "how",
    "what", "which", "who", "whom", "whose", "if", "then", "else", "so", "too", "very",
    "just", "now", "today", "get", "got", "getting", "go", "going", "went",
})

SUPPORTIVE_MESSAGES = (
    "Every week includes a natural range of emotions - this variety is healthy and human.",
    "Your weekly patterns show the normal ebb and flow of emotional life.",
    "This week's emotional landscape reflects the complex, authentic experience of being human.",
    "Like weather patterns, emotions naturally shift and change throughout the week.",
    "Your check-ins this week capture the beautiful complexity of human emotional experience.",
)

PRIORITY_WEIGHT = {Priority.HIGH: 0.9, Priority.MEDIUM: 0.6, Priority.LOW: 0.3}

_NON_WORD = re.compile(r"[^\w\s]")


@dataclass
class MoodDistribution:
    mood_label: str
    count: int
    emoji: str
    percentage: int


@dataclass
class ReflectionInsights:
    total_with_reflections: int = 0
    average_reflection_length: int = 0
    common_words: list[tuple[str, int]] = field(default_factory=list)
    days_with_reflections: int = 0
    total_days: int = 7


@dataclass
class TemporalPatterns:
    time_of_day_pattern: list[tuple[str, int]] = field(default_factory=list)
    weekday_pattern: list[tuple[str, int]] = field(default_factory=list)
    has_weekend_pattern: bool = False
    weekend_vs_weekday_message: Optional[str] = None


@dataclass
class WeeklySummary:
    week_start: datetime
    week_end: datetime
    total_entries: int
    mood_distribution: list[MoodDistribution]
    reflection_insights: ReflectionInsights
    temporal_patterns: TemporalPatterns
    week_label: str
    supportive_message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "total_entries": self.total_entries,
            "mood_distribution": [vars(d) for d in self.mood_distribution],
            "reflection_insights": {
                **vars(self.reflection_insights),
                "common_words": [
                    {"word": w, "count": c} for w, c in self.reflection_insights.common_words
                ],
            },
            "temporal_patterns": {
                "time_of_day_pattern": [
                    {"period": p, "count": c} for p, c in self.temporal_patterns.time_of_day_pattern
                ],
                "weekday_pattern": [
                    {"day": d, "count": c} for d, c in self.temporal_patterns.weekday_pattern
                ],
                "has_weekend_pattern": self.temporal_patterns.has_weekend_pattern,
                "weekend_vs_weekday_message": self.temporal_patterns.weekend_vs_weekday_message,
            },
            "week_label": self.week_label,
            "supportive_message": self.supportive_message,
        }


@dataclass
class Observation:
    """A pattern or an insight, flattened for one feed."""

    source: Literal["pattern", "insight"]
    kind: str
    text: str
    suggestion: Optional[str]
    weight: float

    def to_dict(self) -> dict[str, Any]:
        return vars(self).copy()


def get_week_range(day: Union[date, datetime]) -> tuple[datetime, datetime]:
    """Monday 00:00 through Sunday 23:59:59.999999 of the week holding ``day``."""
    if isinstance(day, datetime):
        day = day.date()
    monday = day - timedelta(days=day.weekday())
    start = datetime.combine(monday, time.min)
    end = datetime.combine(monday + timedelta(days=6), time.max)
    return start, end


def get_week_label(week_start: datetime, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    this_week_start, _ = get_week_range(now)
    diff_days = (this_week_start - week_start).days

    if diff_days == 0:
        return "This Week"
    if diff_days == 7:
        return "Last Week"
    if 0 < diff_days <= 21:
        weeks_ago = diff_days // 7
        return f"{weeks_ago} Week{'s' if weeks_ago > 1 else ''} Ago"
    label = f"{week_start:%b} {week_start.day}"
    if week_start.year != now.year:
        label += f", {week_start.year}"
    return label


def _mood_distribution(entries: Sequence[MoodEntry]) -> list[MoodDistribution]:
    counts = Counter(e.mood_label for e in entries)
    total = len(entries)
    return [
        MoodDistribution(
            mood_label=label,
            count=count,
            emoji=MOOD_EMOJIS.get(label, DEFAULT_EMOJI),
            percentage=round(count / total * 100),
        )
        for label, count in counts.most_common()
    ]


def _reflection_insights(entries: Sequence[MoodEntry]) -> ReflectionInsights:
    reflected = with_reflections(entries)
    if not reflected:
        return ReflectionInsights()

    total_words = sum(len(e.reflection_text.split()) for e in reflected)
    words: Counter[str] = Counter()
    for entry in reflected:
        for word in _NON_WORD.sub("", entry.reflection_text.lower()).split():
            if len(word) > 2 and word not in COMMON_WORDS:
                words[word] += 1

    return ReflectionInsights(
        total_with_reflections=len(reflected),
        average_reflection_length=round(total_words / len(reflected)),
        common_words=[(w, c) for w, c in words.most_common() if c >= 2][:5],
        days_with_reflections=len({e.recorded_at.date() for e in reflected}),
    )


def _period(moment: datetime) -> str:
    if 6 <= moment.hour < 12:
        return "morning"
    if 12 <= moment.hour < 17:
        return "afternoon"
    if 17 <= moment.hour < 22:
        return "evening"
    return "night"


def _temporal_patterns(entries: Sequence[MoodEntry]) -> TemporalPatterns:
    periods = Counter({"morning": 0, "afternoon": 0, "evening": 0, "night": 0})
    days = Counter({day: 0 for day in DAY_NAMES})
    for entry in entries:
        periods[_period(entry.recorded_at)] += 1
        days[day_name(entry.recorded_at)] += 1

    weekend_count = sum(1 for e in entries if is_weekend(e.recorded_at))
    weekday_count = len(entries) - weekend_count
    has_weekend_pattern = weekend_count > 0 and weekday_count > 0

    message = None
    if has_weekend_pattern:
        weekend_rate, weekday_rate = weekend_count / 2, weekday_count / 5
        if weekend_rate > weekday_rate * 1.5:
            message = "You tend to check in more often on weekends"
        elif weekday_rate > weekend_rate * 1.5:
            message = "You check in more regularly during weekdays"

    return TemporalPatterns(
        time_of_day_pattern=[(p, c) for p, c in periods.most_common() if c > 0],
        weekday_pattern=[(d, c) for d, c in days.most_common() if c > 0],
        has_weekend_pattern=has_weekend_pattern,
        weekend_vs_weekday_message=message,
    )


def _supportive_message(summary: WeeklySummary) -> str:
    if summary.total_entries == 0:
        return (
            "Every week is different - there's no pressure to track daily. "
            "Your emotional awareness journey happens at your own pace."
        )
    if summary.total_entries == 1:
        return (
            "One check-in this week shows mindful attention to your inner experience. "
            "Each moment of self-awareness matters."
        )
    if len(summary.mood_distribution) <= 2:
        return (
            "Your check-ins this week show focused emotional experiences. "
            "Both consistency and variety in emotions are completely natural."
        )
    return SUPPORTIVE_MESSAGES[summary.total_entries % len(SUPPORTIVE_MESSAGES)]


def generate_weekly_summary(
    entries: Iterable[MoodEntry],
    week_start: Optional[Union[date, datetime]] = None,
    now: Optional[datetime] = None,
) -> WeeklySummary:
    now = now or datetime.now()
    start, end = get_week_range(week_start or now)
    week_entries = [
        e for e in entries
        if e.recorded_at is not None and start <= e.recorded_at <= end
    ]

    summary = WeeklySummary(
        week_start=start,
        week_end=end,
        total_entries=len(week_entries),
        mood_distribution=_mood_distribution(week_entries),
        reflection_insights=_reflection_insights(week_entries),
        temporal_patterns=_temporal_patterns(week_entries),
        week_label=get_week_label(start, now),
    )
    summary.supportive_message = _supportive_message(summary)
    return summary


def get_available_weeks(entries: Iterable[MoodEntry]) -> list[datetime]:
    """Distinct week starts holding entries, most recent first."""
    starts = {get_week_range(e.recorded_at)[0] for e in entries if e.recorded_at is not None}
    return sorted(starts, reverse=True)


def collect_observations(
    patterns: Iterable[PersonalPattern], insights: Iterable[MoodInsight]
) -> list[Observation]:
    observations = [
        Observation(
            source="pattern",
            kind=p.type.value,
            text=p.pattern,
            suggestion=p.actionable_insight,
            weight=p.confidence,
        )
        for p in patterns
    ]
    observations.extend(
        Observation(
            source="insight",
            kind=i.type.value,
            text=i.observation,
            suggestion=i.actionable_suggestion,
            weight=PRIORITY_WEIGHT[i.priority],
        )
        for i in insights
    )
    observations.sort(key=lambda o: o.weight, reverse=True)
    return observations
