"""Mood changes that follow activities, and phrases that mark hard days."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from entries import MoodEntry
from pattern_types import PatternType, PersonalPattern
from text_features import THEME_KEYWORDS, extract_themes

ACTIVITY_KEYWORDS = ("walk", "exercise", "workout", "meditation", "sleep", "rest", "work", "meeting")

IMPROVEMENT_SHARE = 0.7  # share of positive deltas for an improvement pattern
SUGGESTION_SHARE = 0.6  # share of positive deltas before suggesting an activity
TRIGGER_MIN_COUNT = 3
TRIGGER_MAX_AVG_MOOD = 2
TRIGGER_CONFIDENCE = 0.8
PRECURSOR_MIN_COUNT = 3


@dataclass
class ActivityObservation:
    activity: str
    mood_change: int
    from_mood: int
    to_mood: int
    example: str


def _consecutive_pairs(chronological: Sequence[MoodEntry], max_pairs: Optional[int]):
    pairs = list(zip(chronological, chronological[1:]))
    if max_pairs is None:
        return pairs
    return pairs[-max_pairs:] if max_pairs > 0 else []


def correlate_activities(
    chronological: Sequence[MoodEntry],
    activities: Sequence[str] = ACTIVITY_KEYWORDS,
    max_activities: Optional[int] = 6,
    max_pairs: Optional[int] = 40,
) -> dict[str, list[ActivityObservation]]:
    """Mood delta to the next entry whenever a reflection mentions an activity.

    Only activities with at least one observation appear in the result.
    """
    if max_activities is not None:
        activities = activities[:max_activities]
    pairs = _consecutive_pairs(chronological, max_pairs)

    observations: dict[str, list[ActivityObservation]] = {}
    for activity in activities:
        found = [
            ActivityObservation(
                activity=activity,
                mood_change=following.mood_value - current.mood_value,
                from_mood=current.mood_value,
                to_mood=following.mood_value,
                example=current.reflection_text[:100],
            )
            for current, following in pairs
            if activity in current.reflection_text.lower()
        ]
        if found:
            observations[activity] = found
    return observations


def improvement_share(observations: Sequence[ActivityObservation]) -> float:
    if not observations:
        return 0.0
    return sum(1 for o in observations if o.mood_change > 0) / len(observations)


def activity_patterns(observations: dict[str, list[ActivityObservation]]) -> list[PersonalPattern]:
    patterns = []
    for activity, found in observations.items():
        share = improvement_share(found)
        if share <= IMPROVEMENT_SHARE:
            continue
        improvements = [o for o in found if o.mood_change > 0]
        patterns.append(PersonalPattern(
            type=PatternType.IMPROVEMENT,
            pattern=f"{activity} consistently improves your mood",
            confidence=share,
            frequency=len(found),
            actionable_insight=f"When feeling down, try {activity}",
            examples=[o.example for o in improvements[:2]],
        ))
    return patterns


def preventive_suggestion(observations: dict[str, list[ActivityObservation]]) -> str:
    """What has lifted the mood before, for a predicted dip."""
    for activity, found in observations.items():
        share = improvement_share(found)
        if share > SUGGESTION_SHARE:
            return f"Consider {activity} - it has helped {round(share * 100)}% of the time"
    return "Take a moment for self-care - your patterns suggest this might be a challenging transition"


def trigger_patterns(entries: Sequence[MoodEntry], phrase_counts: dict[str, int]) -> list[PersonalPattern]:
    """Recurring phrases whose entries average a low mood."""
    patterns = []
    for phrase, count in phrase_counts.items():
        if count < TRIGGER_MIN_COUNT:
            continue
        matching = [e for e in entries if phrase in e.reflection_text.lower()]
        if not matching:
            continue
        average = sum(e.mood_value for e in matching) / len(matching)
        if average > TRIGGER_MAX_AVG_MOOD:
            continue
        patterns.append(PersonalPattern(
            type=PatternType.TRIGGER,
            pattern=f'"{phrase}" appears when you\'re struggling',
            confidence=TRIGGER_CONFIDENCE,
            frequency=count,
            actionable_insight=(
                f"This phrase appears {count} times, usually indicating challenging times. "
                "Consider addressing the root cause."
            ),
            examples=[e.reflection_text[:50] for e in matching[:2]],
        ))
    return patterns


def good_mood_precursors(chronological: Sequence[MoodEntry], max_pairs: Optional[int] = 30) -> list[str]:
    """Themes written about right before a good (>=4) check-in."""
    counts = dict.fromkeys(THEME_KEYWORDS, 0)
    for current, following in _consecutive_pairs(chronological, max_pairs):
        if following.mood_value >= 4:
            for theme in extract_themes(current.reflection):
                counts[theme] += 1

    return [
        f"{theme.capitalize()} activities often precede good moods ({count} times)"
        for theme, count in counts.items()
        if count >= PRECURSOR_MIN_COUNT
    ]
