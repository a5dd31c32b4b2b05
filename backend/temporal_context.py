"""Categorical time context for entries.

The Markov model buckets the whole day into four parts; the insight
pipeline only compares a morning window (06-11) with an evening window
(18-23).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from text_features import extract_themes

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def time_of_day(moment: datetime) -> str:
    hour = moment.hour
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def insight_window(moment: datetime) -> Optional[str]:
    """"morning" for 06-11, "evening" for 18-23, otherwise None."""
    hour = moment.hour
    if 6 <= hour < 12:
        return "morning"
    if 18 <= hour <= 23:
        return "evening"
    return None


def is_weekend(moment: datetime) -> bool:
    return moment.weekday() >= 5


def day_name(moment: datetime) -> str:
    return DAY_NAMES[moment.weekday()]


def state_context(moment: datetime, reflection: Optional[str] = None) -> str:
    """Composite key "{timeOfDay}_{weekday|weekend}_{theme|general}"."""
    themes = extract_themes(reflection)
    day_kind = "weekend" if is_weekend(moment) else "weekday"
    return f"{time_of_day(moment)}_{day_kind}_{themes[0] if themes else 'general'}"
