"""Personal pattern detection over a snapshot of mood entries.

One detector is built per analysis session: the Markov model, phrase
counts and activity correlations are computed once in the constructor
and reused by every query on that instance.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from config import AnalysisLimits, cap
from correlation_service import (
    activity_patterns,
    correlate_activities,
    good_mood_precursors,
    preventive_suggestion,
    trigger_patterns,
)
from cycle_service import day_cycle_patterns, progression_patterns
from entries import MoodEntry, sort_recent
from markov_model import FALLBACK_CONFIDENCE, NO_DATA_CONFIDENCE, MarkovModel, round_half_up
from pattern_types import MarkovState, PatternPrediction, PersonalPattern
from temporal_context import state_context
from text_features import extract_bigrams

logger = logging.getLogger(__name__)

MIN_PATTERN_ENTRIES = 5


class PatternDetector:
    def __init__(
        self,
        entries: Iterable[MoodEntry],
        limits: Optional[AnalysisLimits] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.limits = limits or AnalysisLimits()
        self.clock = clock
        # Newest first, capped; pair scans walk the oldest-first copy.
        self.entries = cap(sort_recent(entries), self.limits.max_entries)
        self.chronological = list(reversed(self.entries))

        self.model = MarkovModel.build(self.chronological, self.limits.max_transition_pairs)
        self.phrase_counts = extract_bigrams(
            self.entries,
            max_entries=self.limits.max_phrase_entries,
            max_words=self.limits.max_phrase_words,
        )
        self.activity_observations = correlate_activities(
            self.chronological,
            max_activities=self.limits.max_activities,
            max_pairs=self.limits.max_activity_pairs,
        )

    def predict_next_mood(self, current_mood: int, reflection: Optional[str] = None) -> PatternPrediction:
        """Most likely next mood from the current mood and what was just written.

        Without a reflection the state has no context, so only the
        similar-mood fallback can answer.
        """
        context = None
        if reflection and reflection.strip():
            context = state_context(self.clock(), reflection)
        state = MarkovState(mood=current_mood, context=context)
        best = self.model.most_likely(state)
        if best is None:
            return self._predict_from_similar_states(state)

        observed = sum(t.count for t in self.model.transitions_from(state))
        suggestion = None
        if best.to_state.mood < current_mood:
            suggestion = preventive_suggestion(self.activity_observations)

        return PatternPrediction(
            predicted_mood=best.to_state.mood,
            confidence=best.probability,
            based_on=f"Based on {observed} similar past situations",
            suggestion=suggestion,
        )

    def _predict_from_similar_states(self, state: MarkovState) -> PatternPrediction:
        similar = self.model.similar_transitions(state.mood)
        if not similar:
            return PatternPrediction(
                predicted_mood=state.mood,
                confidence=NO_DATA_CONFIDENCE,
                based_on="Insufficient data for prediction",
            )
        average = sum(t.to_state.mood for t in similar) / len(similar)
        return PatternPrediction(
            predicted_mood=round_half_up(average),
            confidence=FALLBACK_CONFIDENCE,
            based_on=f"Based on {len(similar)} similar situations",
        )

    def get_personal_patterns(self) -> list[PersonalPattern]:
        """Top patterns by confidence; empty below MIN_PATTERN_ENTRIES entries."""
        if len(self.entries) < MIN_PATTERN_ENTRIES:
            return []

        sources = (
            ("activity", lambda: activity_patterns(self.activity_observations)),
            ("trigger", lambda: trigger_patterns(self.entries, self.phrase_counts)),
            ("cycle", lambda: day_cycle_patterns(self.entries)),
            ("progression", lambda: progression_patterns(
                self.chronological, self.limits.max_streak_entries)),
        )
        patterns: list[PersonalPattern] = []
        for name, detect in sources:
            try:
                patterns.extend(detect())
            except Exception:
                logger.exception("Pattern source %r failed; skipping it", name)

        patterns.sort(key=lambda p: p.confidence, reverse=True)
        return cap(patterns, self.limits.max_patterns)

    def get_correlation_insights(self) -> list[str]:
        try:
            return good_mood_precursors(self.chronological, self.limits.max_correlation_pairs)
        except Exception:
            logger.exception("Correlation insights failed")
            return []
