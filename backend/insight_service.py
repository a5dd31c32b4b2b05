"""Human-readable insights from a snapshot of mood entries.

Every heuristic looks at the entries on its own and returns at most one
insight. A heuristic that fails is logged and skipped; the rest still run.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Iterable, Optional, Sequence

from entries import MoodEntry, sort_recent, with_reflections
from insight_types import (
    ConsistencyData,
    ContextWordData,
    DayOfWeekData,
    DiscrepancyData,
    InsightType,
    LengthVariationData,
    MoodDivergenceData,
    MoodInsight,
    Priority,
    RecoveryData,
    ReflectionDepthData,
    ThemeDivergenceData,
    TimeOfDayData,
    TriggerData,
    VocabularyGrowthData,
)
from markov_model import round_half_up
from temporal_context import DAY_NAMES, day_name, insight_window, is_weekend
from text_features import find_common_context_words

logger = logging.getLogger(__name__)

MIN_INSIGHT_ENTRIES = 3
MIN_REFLECTED_ENTRIES = 2
SECONDS_PER_DAY = 24 * 60 * 60


def _dated(entries: Sequence[MoodEntry]) -> list[MoodEntry]:
    return [e for e in entries if e.recorded_at is not None]


def _average_sentiment(entries: Sequence[MoodEntry]) -> float:
    scored = [e.sentiment.comparative for e in entries if e.sentiment is not None]
    if not scored:
        return 0.0
    return sum(scored) / len(scored)


def _word_count(entry: MoodEntry) -> int:
    return len(entry.reflection_text.split())


def nuanced_emotions(reflected: Sequence[MoodEntry]) -> Optional[MoodInsight]:
    """Reflections whose tone disagrees with the mood rating."""
    discrepancies = 0
    for entry in reflected:
        if entry.sentiment is None:
            continue
        mood_normalized = (entry.mood_value - 1) / 4
        sentiment_normalized = max(-1.0, min(1.0, entry.sentiment.comparative * 5))
        if abs(mood_normalized - (sentiment_normalized + 1) / 2) > 0.3:
            discrepancies += 1

    if discrepancies < 2:
        return None
    return MoodInsight(
        type=InsightType.NUANCED_EMOTIONS,
        observation="Your written reflections reveal more complexity than your mood ratings suggest",
        priority=Priority.LOW,
        actionable_suggestion=(
            "Trust the depth of your written reflections - "
            "they capture nuances that simple ratings might miss"
        ),
        data=DiscrepancyData(discrepancies=discrepancies, reflected_entries=len(reflected)),
    )


def day_of_week_patterns(entries: Sequence[MoodEntry]) -> Optional[MoodInsight]:
    dated = _dated(entries)
    if len(dated) < 7:
        return None

    moods: dict[str, list[int]] = {day: [] for day in DAY_NAMES}
    for entry in dated:
        moods[day_name(entry.recorded_at)].append(entry.mood_value)
    averages = [(day, sum(values) / len(values)) for day, values in moods.items() if values]
    if len(averages) < 3:
        return None

    averages.sort(key=lambda item: item[1])
    lowest_day, lowest_avg = averages[0]
    highest_day, highest_avg = averages[-1]
    if highest_avg - lowest_avg <= 0.8:
        return None

    data = DayOfWeekData(
        lowest_day=lowest_day,
        lowest_average=round(lowest_avg, 1),
        highest_day=highest_day,
        highest_average=round(highest_avg, 1),
    )
    if lowest_day == "Monday" and lowest_avg < 3:
        return MoodInsight(
            type=InsightType.DAY_OF_WEEK_PATTERNS,
            observation="Mondays tend to be tougher for you",
            priority=Priority.MEDIUM,
            actionable_suggestion="Consider preparing something positive for Monday mornings",
            data=data,
        )
    return MoodInsight(
        type=InsightType.DAY_OF_WEEK_PATTERNS,
        observation=f"{lowest_day}s tend to be lower energy while {highest_day}s are typically brighter",
        priority=Priority.MEDIUM,
        data=data,
    )


def time_of_day_patterns(entries: Sequence[MoodEntry]) -> Optional[MoodInsight]:
    dated = _dated(entries)
    if len(dated) < 6:
        return None

    morning = [e for e in dated if insight_window(e.recorded_at) == "morning"]
    evening = [e for e in dated if insight_window(e.recorded_at) == "evening"]
    if len(morning) < 2 or len(evening) < 2:
        return None

    morning_sentiment = _average_sentiment(morning)
    evening_sentiment = _average_sentiment(evening)
    if abs(morning_sentiment - evening_sentiment) <= 0.3:
        return None

    if morning_sentiment > evening_sentiment:
        observation = (
            "Morning check-ins tend to show more forward-looking language "
            "while evening entries are more reflective"
        )
    else:
        observation = "Evening check-ins show different emotional processing patterns compared to morning entries"
    return MoodInsight(
        type=InsightType.TIME_OF_DAY_PATTERNS,
        observation=observation,
        priority=Priority.MEDIUM,
        data=TimeOfDayData(
            morning_count=len(morning),
            evening_count=len(evening),
            morning_sentiment=round(morning_sentiment, 3),
            evening_sentiment=round(evening_sentiment, 3),
        ),
    )


def _dominant_context_word(entries: Sequence[MoodEntry]):
    """Top contextual word if it shows up at least 0.6 times per entry."""
    words = find_common_context_words(entries)
    if not words:
        return None
    word, count = words[0]
    if count >= math.ceil(len(entries) * 0.6):
        return word, count
    return None


def trigger_identification(reflected: Sequence[MoodEntry]) -> Optional[MoodInsight]:
    if len(reflected) < 5:
        return None

    low = [e for e in reflected if e.mood_value <= 2]
    high = [e for e in reflected if e.mood_value >= 4]
    if len(low) < 2:
        return None

    trigger = _dominant_context_word(low)
    if trigger:
        word, count = trigger
        return MoodInsight(
            type=InsightType.TRIGGER_IDENTIFICATION,
            observation=f"{word} seems to be on your mind during tougher days",
            priority=Priority.HIGH,
            actionable_suggestion=f"Consider noting what specific {word} situations affect your mood most",
            data=TriggerData(word=word, frequency=count),
        )

    if len(high) >= 2:
        lift = _dominant_context_word(high)
        if lift:
            word, count = lift
            return MoodInsight(
                type=InsightType.TRIGGER_IDENTIFICATION,
                observation=f"{word} often appears in your brighter moments",
                priority=Priority.HIGH,
                actionable_suggestion=f"Notice what it is about {word} that lifts your mood",
                data=TriggerData(word=word, frequency=count, positive=True),
            )
    return None


def progress_recognition(
    entries: Sequence[MoodEntry], reflected: Sequence[MoodEntry], now: datetime
) -> Optional[MoodInsight]:
    if len(entries) < 7:
        return None

    dated = _dated(entries)
    if dated:
        oldest = min(e.recorded_at for e in dated)
        days = max(1, math.floor((now - oldest).total_seconds() / SECONDS_PER_DAY))
        if len(entries) / days > 0.3 and days > 1:
            return MoodInsight(
                type=InsightType.PROGRESS_RECOGNITION,
                observation=(
                    f"You've been consistent with tracking for {days} days - "
                    "building this habit of self-awareness"
                ),
                priority=Priority.MEDIUM,
                actionable_suggestion="Celebrate this consistency - it shows your commitment to understanding yourself",
                data=ConsistencyData(days=days, entries=len(entries)),
            )

    if len(reflected) < 10:
        return None

    recent, older = reflected[:5], reflected[-5:]
    recent_avg = sum(_word_count(e) for e in recent) / len(recent)
    older_avg = sum(_word_count(e) for e in older) / len(older)
    if recent_avg >= older_avg * 1.3:
        return MoodInsight(
            type=InsightType.PROGRESS_RECOGNITION,
            observation=(
                "You're writing more detailed reflections as time goes on - "
                "your self-awareness is deepening"
            ),
            priority=Priority.MEDIUM,
            data=ReflectionDepthData(
                recent_average_words=round_half_up(recent_avg),
                older_average_words=round_half_up(older_avg),
            ),
        )

    recent_words = {w for e in recent for w in e.reflection_text.lower().split()}
    older_words = {w for e in older for w in e.reflection_text.lower().split()}
    growth = (len(recent_words) - len(older_words)) / len(older_words)
    if growth >= 0.2:
        return MoodInsight(
            type=InsightType.PROGRESS_RECOGNITION,
            observation=(
                "Your emotional vocabulary is expanding - "
                "you're finding new ways to express your experiences"
            ),
            priority=Priority.LOW,
            data=VocabularyGrowthData(expansion_percent=round_half_up(growth * 100)),
        )
    return None


def coping_recognition(entries: Sequence[MoodEntry]) -> Optional[MoodInsight]:
    """How quickly low moods (<=2) are followed by a check-in of 3 or more."""
    if len(entries) < 10:
        return None

    chronological = sorted(_dated(entries), key=lambda e: e.recorded_at)
    lows = [e for e in chronological if e.mood_value <= 2]
    if len(lows) < 2:
        return None

    recovery_days = []
    for low in lows:
        recovery = next(
            (e for e in chronological if e.recorded_at > low.recorded_at and e.mood_value >= 3),
            None,
        )
        if recovery is None:
            continue
        elapsed = (recovery.recorded_at - low.recorded_at).total_seconds()
        days = max(1, math.floor(elapsed / SECONDS_PER_DAY))
        if days <= 7:
            recovery_days.append(days)

    if len(recovery_days) < 2:
        return None
    average = max(1.0, sum(recovery_days) / len(recovery_days))
    if average > 3:
        return None

    rounded = round_half_up(average)
    unit = "day" if rounded == 1 else "days"
    return MoodInsight(
        type=InsightType.COPING_RECOGNITION,
        observation=f"You naturally bounce back from difficult moments - usually within {rounded} {unit}",
        priority=Priority.HIGH,
        actionable_suggestion="You might reflect on what helps you process difficult experiences",
        data=RecoveryData(average_days=rounded, instances=len(recovery_days)),
    )


def environmental_awareness(entries: Sequence[MoodEntry]) -> Optional[MoodInsight]:
    if len(entries) < 10:
        return None

    dated = _dated(entries)
    weekday = [e for e in dated if not is_weekend(e.recorded_at)]
    weekend = [e for e in dated if is_weekend(e.recorded_at)]
    if len(weekday) < 3 or len(weekend) < 2:
        return None

    weekday_topics = [word for word, _ in find_common_context_words(weekday)[:2]]
    weekend_topics = [word for word, _ in find_common_context_words(weekend)[:2]]
    if weekday_topics and weekend_topics and not set(weekday_topics) & set(weekend_topics):
        return MoodInsight(
            type=InsightType.ENVIRONMENTAL_AWARENESS,
            observation="Your weekdays and weekends bring out different sides of your emotional world",
            priority=Priority.LOW,
            data=ThemeDivergenceData(weekday_focus=weekday_topics[0], weekend_focus=weekend_topics[0]),
        )

    weekday_avg = sum(e.mood_value for e in weekday) / len(weekday)
    weekend_avg = sum(e.mood_value for e in weekend) / len(weekend)
    if abs(weekday_avg - weekend_avg) <= 0.5:
        return None

    if weekend_avg > weekday_avg:
        observation = (
            "Your mood patterns vary between weekdays and weekends - "
            "weekend entries tend to reflect different energy levels"
        )
    else:
        observation = "Your mood patterns show interesting differences between weekdays and weekends"
    return MoodInsight(
        type=InsightType.ENVIRONMENTAL_AWARENESS,
        observation=observation,
        priority=Priority.LOW,
        data=MoodDivergenceData(weekday_average=round(weekday_avg, 1), weekend_average=round(weekend_avg, 1)),
    )


def length_variation(reflected: Sequence[MoodEntry]) -> Optional[MoodInsight]:
    """Long reflections that coincide with negative sentiment."""
    lengths = [_word_count(e) for e in reflected]
    if not lengths:
        return None
    average = sum(lengths) / len(lengths)
    if max(lengths) - min(lengths) <= average * 0.8:
        return None

    difficult = [
        e for e, length in zip(reflected, lengths)
        if length > average * 1.3 and e.sentiment is not None and e.sentiment.comparative < 0
    ]
    if not difficult:
        return None
    return MoodInsight(
        type=InsightType.LENGTH_VARIATION,
        observation="You tend to write more when working through difficult experiences",
        priority=Priority.LOW,
        actionable_suggestion="Writing more during tough times is a healthy way to process emotions",
        data=LengthVariationData(average_words=round(average, 1), difficult_long_entries=len(difficult)),
    )


def contextual_patterns(reflected: Sequence[MoodEntry]) -> Optional[MoodInsight]:
    negative = [e for e in reflected if e.sentiment is not None and e.sentiment.comparative < -0.1]
    if len(negative) < 2:
        return None

    words = find_common_context_words(negative)
    if not words or words[0][1] < 2:
        return None
    word, count = words[0]
    return MoodInsight(
        type=InsightType.CONTEXTUAL_PATTERNS,
        observation=f"{word} comes up often during more challenging times",
        priority=Priority.MEDIUM,
        actionable_suggestion=f"Pay attention to how different {word} situations affect you",
        data=ContextWordData(word=word, frequency=count),
    )


def generate_insights(entries: Iterable[MoodEntry], now: Optional[datetime] = None) -> list[MoodInsight]:
    """Run every heuristic and order the results high -> medium -> low.

    Returns an empty list below MIN_INSIGHT_ENTRIES entries or
    MIN_REFLECTED_ENTRIES reflections.
    """
    now = now or datetime.now()
    ordered = sort_recent(entries)
    if len(ordered) < MIN_INSIGHT_ENTRIES:
        return []
    reflected = with_reflections(ordered)
    if len(reflected) < MIN_REFLECTED_ENTRIES:
        return []

    heuristics = (
        ("nuanced_emotions", lambda: nuanced_emotions(reflected)),
        ("day_of_week_patterns", lambda: day_of_week_patterns(ordered)),
        ("time_of_day_patterns", lambda: time_of_day_patterns(ordered)),
        ("trigger_identification", lambda: trigger_identification(reflected)),
        ("progress_recognition", lambda: progress_recognition(ordered, reflected, now)),
        ("coping_recognition", lambda: coping_recognition(ordered)),
        ("environmental_awareness", lambda: environmental_awareness(ordered)),
        ("length_variation", lambda: length_variation(reflected)),
        ("contextual_patterns", lambda: contextual_patterns(reflected)),
    )

    insights = []
    for name, heuristic in heuristics:
        try:
            insight = heuristic()
        except Exception:
            logger.exception("Insight heuristic %r failed; skipping it", name)
            continue
        if insight is not None:
            insights.append(insight)

    insights.sort(key=lambda insight: insight.priority.rank)
    logger.info("Generated %d insight(s) from %d entries", len(insights), len(ordered))
    return insights
