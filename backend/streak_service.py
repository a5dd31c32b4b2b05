"""Check-in streaks and gentle engagement messages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from entries import MoodEntry, with_reflections

GRACE_PERIOD_HOURS = 4  # check-ins before 04:00 count for the previous day

MILESTONES = {
    3: "Building consistency - three days of mindful self-reflection",
    7: "A week of self-awareness - consistency is taking root",
    14: "Two weeks of mindful tracking - you're developing a caring routine",
    30: "A month of self-reflection - this practice is becoming part of you",
    60: "Two months of emotional awareness - your consistency is remarkable",
    100: "100 days of mindful tracking - you've built a beautiful habit of self-care",
}


@dataclass
class StreakData:
    current_streak: int = 0
    longest_streak: int = 0
    last_entry_date: Optional[date] = None
    streak_start_date: Optional[date] = None
    is_milestone: bool = False
    milestone_message: Optional[str] = None
    show_encouragement: bool = False
    encouragement_message: Optional[str] = None

    def to_dict(self):
        data = vars(self).copy()
        for key in ("last_entry_date", "streak_start_date"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data


@dataclass
class EngagementData:
    total_entries: int = 0
    show_message: bool = False
    message: str = ""
    weeks_active: int = 0
    months_active: int = 0
    average_reflection_length: int = 0
    emotional_vocabulary_growth: bool = False

    def to_dict(self):
        return vars(self).copy()


def streak_day(moment: datetime) -> date:
    if moment.hour < GRACE_PERIOD_HOURS:
        return (moment - timedelta(days=1)).date()
    return moment.date()


def _longest_run(days: list[date]) -> int:
    longest = run = 0
    for index, day in enumerate(days):
        if index and (day - days[index - 1]).days == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
    return longest


def calculate_streak(entries: Iterable[MoodEntry], now: Optional[datetime] = None) -> StreakData:
    now = now or datetime.now()
    days = sorted({streak_day(e.recorded_at) for e in entries if e.recorded_at is not None})
    if not days:
        return StreakData()

    longest = _longest_run(days)
    today = now.date()
    yesterday = today - timedelta(days=1)
    logged = set(days)

    if today not in logged and yesterday not in logged:
        return StreakData(
            longest_streak=longest,
            last_entry_date=days[-1],
            show_encouragement=True,
            encouragement_message=(
                f"Starting fresh - your previous best was {longest} days"
                if longest > 0
                else "Starting fresh - every journey begins with a single step"
            ),
        )

    start = today if today in logged else yesterday
    current = 0
    while start - timedelta(days=current) in logged:
        current += 1
    streak_start = start - timedelta(days=current - 1)

    milestone = MILESTONES.get(current)
    return StreakData(
        current_streak=current,
        longest_streak=max(longest, current),
        last_entry_date=days[-1],
        streak_start_date=streak_start,
        is_milestone=milestone is not None,
        milestone_message=milestone,
    )


def streak_display_text(streak: StreakData) -> str:
    if streak.show_encouragement:
        return streak.encouragement_message or "Starting fresh"
    if streak.current_streak == 0:
        return "Ready to begin your mindful tracking journey"
    if streak.current_streak == 1:
        return "Day 1 of mindful tracking"
    # Past a month the wording gets quieter
    if streak.current_streak > 30:
        return "Consistent mindful tracking - well done"
    return f"Day {streak.current_streak} of mindful tracking"


def should_show_streak_prominently(streak: StreakData) -> bool:
    if streak.current_streak > 60:
        return False
    if streak.is_milestone or streak.show_encouragement:
        return True
    return streak.current_streak > 0


def calculate_engagement(entries: Iterable[MoodEntry], now: Optional[datetime] = None) -> EngagementData:
    now = now or datetime.now()
    dated = [e for e in entries if e.recorded_at is not None]
    if not dated:
        return EngagementData()

    first = min(e.recorded_at for e in dated)
    days_since_first = (now - first).days
    weeks_active = max(1, days_since_first // 7)
    months_active = max(1, days_since_first // 30)

    reflected = with_reflections(dated)
    average_length = 0
    if reflected:
        average_length = round(sum(len(e.reflection_text.split()) for e in reflected) / len(reflected))
    vocabulary_growth = len({e.mood_label for e in dated if e.mood_label}) >= 5

    total = len(dated)
    message = ""
    if total >= 20:
        if months_active >= 2:
            message = (
                f"Your emotional awareness practice has been developing beautifully over "
                f"{months_active} month{'s' if months_active > 1 else ''}"
            )
        elif weeks_active >= 3:
            message = f"{total} thoughtful reflections - your self-awareness journey is growing"
        else:
            message = f"{total} reflections completed - you're building meaningful awareness"
    elif total >= 10:
        if vocabulary_growth:
            message = f"You're exploring the full spectrum of your emotions with {total} reflections"
        else:
            message = f"{total} check-ins completed - you're developing a caring routine"
    elif total >= 5:
        message = f"{total} moments of self-reflection - your awareness practice is taking shape"

    return EngagementData(
        total_entries=total,
        show_message=bool(message),
        message=message,
        weeks_active=weeks_active,
        months_active=months_active,
        average_reflection_length=average_length,
        emotional_vocabulary_growth=vocabulary_growth,
    )


def engagement_insight(engagement: EngagementData) -> str:
    if engagement.total_entries == 0:
        return "Ready to begin your emotional awareness journey"
    if engagement.emotional_vocabulary_growth and engagement.total_entries >= 15:
        return "You're developing a rich understanding of your emotional landscape"
    if engagement.average_reflection_length > 50 and engagement.total_entries >= 10:
        return "Your reflections show deep, thoughtful self-exploration"
    if engagement.months_active >= 2:
        return "Your commitment to emotional awareness spans multiple months"
    return "Your self-reflection practice is growing with each entry"
