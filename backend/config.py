import os
from dataclasses import dataclass, fields
from typing import Optional

from dotenv import load_dotenv

load_dotenv()  # Load from .env file

# --- Storage ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///moodjournal.db")

# --- Server ---
FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN")
PORT = int(os.getenv("PORT", "5000"))
DEBUG = os.getenv("FLASK_DEBUG", "0") == "1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# --- Free tier (applied by the routes, never by the engine) ---
FREE_INSIGHT_LIMIT = int(os.getenv("FREE_INSIGHT_LIMIT", "2"))
FREE_PATTERN_LIMIT = int(os.getenv("FREE_PATTERN_LIMIT", "0"))
FREE_HISTORY_DAYS = int(os.getenv("FREE_HISTORY_DAYS", "30"))


@dataclass
class AnalysisLimits:
    """Caps that keep one analysis pass bounded for any history size.

    ``None`` disables a cap.
    """

    max_entries: Optional[int] = 100  # most recent entries the detector looks at
    max_transition_pairs: Optional[int] = 50  # consecutive pairs fed to the Markov model
    max_phrase_entries: Optional[int] = 30  # reflections mined for 2-grams
    max_phrase_words: Optional[int] = 50  # words per reflection mined for 2-grams
    max_activities: Optional[int] = 6  # activity keywords correlated
    max_activity_pairs: Optional[int] = 40  # pairs scanned per activity
    max_streak_entries: Optional[int] = 50  # entries walked for progression streaks
    max_correlation_pairs: Optional[int] = 30  # pairs scanned for good-mood precursors
    max_patterns: Optional[int] = 5  # personal patterns returned

    @classmethod
    def unbounded(cls) -> "AnalysisLimits":
        return cls(**{f.name: None for f in fields(cls)})


def cap(items, limit):
    """First ``limit`` items of a list, or all of them when limit is None."""
    items = list(items)
    if limit is None:
        return items
    return items[:max(0, limit)]
