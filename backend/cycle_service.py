"""Weekly mood cycles and improvement/decline runs."""

from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from entries import MoodEntry
from pattern_types import PatternType, PersonalPattern
from temporal_context import DAY_NAMES

MIN_DAY_SAMPLES = 3
CHALLENGING_DAY_AVG = 2.5
BEST_DAY_AVG = 4
CYCLE_CONFIDENCE = 0.7
MIN_STREAK_LENGTH = 2
STREAK_PATTERN_THRESHOLD = 3


def day_cycle_patterns(entries: Sequence[MoodEntry]) -> list[PersonalPattern]:
    """Weekdays that are reliably hard or reliably good, Monday first."""
    moods_by_day: dict[int, list[int]] = defaultdict(list)
    for entry in entries:
        moment = entry.occurred_at
        if moment is None:
            continue
        moods_by_day[moment.weekday()].append(entry.mood_value)

    patterns = []
    for weekday, day in enumerate(DAY_NAMES):
        moods = moods_by_day.get(weekday, [])
        if len(moods) < MIN_DAY_SAMPLES:
            continue
        average = sum(moods) / len(moods)
        examples = [f"Average mood: {average:.1f}", f"Tracked {len(moods)} {day}s"]
        if average <= CHALLENGING_DAY_AVG:
            patterns.append(PersonalPattern(
                type=PatternType.CYCLE,
                pattern=f"{day}s tend to be challenging",
                confidence=CYCLE_CONFIDENCE,
                frequency=len(moods),
                actionable_insight=f"Plan extra self-care for {day}s when you tend to struggle",
                examples=examples,
            ))
        elif average >= BEST_DAY_AVG:
            patterns.append(PersonalPattern(
                type=PatternType.CYCLE,
                pattern=f"{day}s are typically your best days",
                confidence=CYCLE_CONFIDENCE,
                frequency=len(moods),
                actionable_insight=f"Schedule important activities on {day}s when you feel best",
                examples=examples,
            ))
    return patterns


def count_streaks(moods: Sequence[int]) -> tuple[int, int]:
    """Count finished improvement and decline runs of length >= 2.

    A run finishes when the direction flips; flat steps neither extend nor
    break it, and the run still open at the end is not counted.
    """
    improvement_streaks = decline_streaks = 0
    streak_type: Optional[str] = None
    streak_length = 0

    for previous, current in zip(moods, moods[1:]):
        change = current - previous
        if change == 0:
            continue
        direction = "improvement" if change > 0 else "decline"
        if direction == streak_type:
            streak_length += 1
            continue
        if streak_length >= MIN_STREAK_LENGTH:
            if streak_type == "improvement":
                improvement_streaks += 1
            elif streak_type == "decline":
                decline_streaks += 1
        streak_type = direction
        streak_length = 1

    return improvement_streaks, decline_streaks


def progression_patterns(chronological: Sequence[MoodEntry], max_entries: Optional[int] = 50) -> list[PersonalPattern]:
    window = list(chronological)
    if max_entries is not None:
        window = window[-max_entries:] if max_entries > 0 else []
    improvement_streaks, decline_streaks = count_streaks([e.mood_value for e in window])

    patterns = []
    if improvement_streaks > STREAK_PATTERN_THRESHOLD:
        patterns.append(PersonalPattern(
            type=PatternType.IMPROVEMENT,
            pattern="You show resilience with mood rebounds",
            confidence=0.8,
            frequency=improvement_streaks,
            actionable_insight="Trust your resilience - you've recovered from difficult times before",
            examples=["Multiple recovery patterns detected"],
        ))
    if decline_streaks > STREAK_PATTERN_THRESHOLD:
        patterns.append(PersonalPattern(
            type=PatternType.DECLINE,
            pattern="Watch for cascading mood declines",
            confidence=0.7,
            frequency=decline_streaks,
            actionable_insight=(
                "When mood starts dropping, take preventive action early - "
                "you've experienced mood cascades before"
            ),
            examples=[f"{decline_streaks} decline sequences detected"],
        ))
    return patterns
