"""Insight models.

Each insight type carries one of a closed set of supporting-data
variants, checked when the insight is built.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar, Optional, Union


class InsightType(str, Enum):
    NUANCED_EMOTIONS = "nuanced_emotions"
    CONTEXTUAL_PATTERNS = "contextual_patterns"
    LENGTH_VARIATION = "length_variation"
    TEMPORAL_PATTERNS = "temporal_patterns"  # reserved; no heuristic emits it yet
    DAY_OF_WEEK_PATTERNS = "day_of_week_patterns"
    TIME_OF_DAY_PATTERNS = "time_of_day_patterns"
    TRIGGER_IDENTIFICATION = "trigger_identification"
    PROGRESS_RECOGNITION = "progress_recognition"
    COPING_RECOGNITION = "coping_recognition"
    ENVIRONMENTAL_AWARENESS = "environmental_awareness"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


@dataclass(frozen=True)
class DiscrepancyData:
    kind: ClassVar[str] = "discrepancy"
    discrepancies: int
    reflected_entries: int


@dataclass(frozen=True)
class DayOfWeekData:
    kind: ClassVar[str] = "day_of_week"
    lowest_day: str
    lowest_average: float
    highest_day: str
    highest_average: float


@dataclass(frozen=True)
class TimeOfDayData:
    kind: ClassVar[str] = "time_of_day"
    morning_count: int
    evening_count: int
    morning_sentiment: float
    evening_sentiment: float


@dataclass(frozen=True)
class TriggerData:
    kind: ClassVar[str] = "trigger"
    word: str
    frequency: int
    positive: bool = False


@dataclass(frozen=True)
class ConsistencyData:
    kind: ClassVar[str] = "consistency"
    days: int
    entries: int


@dataclass(frozen=True)
class ReflectionDepthData:
    kind: ClassVar[str] = "reflection_depth"
    recent_average_words: int
    older_average_words: int


@dataclass(frozen=True)
class VocabularyGrowthData:
    kind: ClassVar[str] = "vocabulary_growth"
    expansion_percent: int


@dataclass(frozen=True)
class RecoveryData:
    kind: ClassVar[str] = "recovery"
    average_days: int
    instances: int


@dataclass(frozen=True)
class ThemeDivergenceData:
    kind: ClassVar[str] = "theme_divergence"
    weekday_focus: str
    weekend_focus: str


@dataclass(frozen=True)
class MoodDivergenceData:
    kind: ClassVar[str] = "mood_divergence"
    weekday_average: float
    weekend_average: float


@dataclass(frozen=True)
class LengthVariationData:
    kind: ClassVar[str] = "length_variation"
    average_words: float
    difficult_long_entries: int


@dataclass(frozen=True)
class ContextWordData:
    kind: ClassVar[str] = "context_word"
    word: str
    frequency: int


InsightData = Union[
    DiscrepancyData, DayOfWeekData, TimeOfDayData, TriggerData, ConsistencyData,
    ReflectionDepthData, VocabularyGrowthData, RecoveryData, ThemeDivergenceData,
    MoodDivergenceData, LengthVariationData, ContextWordData,
]

ALLOWED_DATA: dict[InsightType, tuple[type, ...]] = {
    InsightType.NUANCED_EMOTIONS: (DiscrepancyData,),
    InsightType.CONTEXTUAL_PATTERNS: (ContextWordData,),
    InsightType.LENGTH_VARIATION: (LengthVariationData,),
    InsightType.TEMPORAL_PATTERNS: (),
    InsightType.DAY_OF_WEEK_PATTERNS: (DayOfWeekData,),
    InsightType.TIME_OF_DAY_PATTERNS: (TimeOfDayData,),
    InsightType.TRIGGER_IDENTIFICATION: (TriggerData,),
    InsightType.PROGRESS_RECOGNITION: (ConsistencyData, ReflectionDepthData, VocabularyGrowthData),
    InsightType.COPING_RECOGNITION: (RecoveryData,),
    InsightType.ENVIRONMENTAL_AWARENESS: (ThemeDivergenceData, MoodDivergenceData),
}


@dataclass(frozen=True)
class MoodInsight:
    type: InsightType
    observation: str
    priority: Priority
    actionable_suggestion: Optional[str] = None
    data: Optional[InsightData] = None

    def __post_init__(self):
        if self.data is not None and not isinstance(self.data, ALLOWED_DATA[self.type]):
            raise TypeError(
                f"{type(self.data).__name__} is not supporting data for {self.type.value} insights"
            )

    def to_dict(self) -> dict[str, Any]:
        supporting = None
        if self.data is not None:
            supporting = {"kind": self.data.kind, **asdict(self.data)}
        return {
            "type": self.type.value,
            "observation": self.observation,
            "priority": self.priority.value,
            "actionable_suggestion": self.actionable_suggestion,
            "supporting_data": supporting,
        }
