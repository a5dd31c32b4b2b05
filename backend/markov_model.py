"""Mood transition statistics keyed by (mood, context) states."""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from entries import MoodEntry
from pattern_types import MarkovState, MarkovTransition
from temporal_context import state_context

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 0.5
NO_DATA_CONFIDENCE = 0.1


def entry_state(entry: MoodEntry) -> Optional[MarkovState]:
    """State for an entry, or None when it carries no usable date."""
    moment = entry.occurred_at
    if moment is None:
        return None
    return MarkovState(mood=entry.mood_value, context=state_context(moment, entry.reflection))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class MarkovModel:
    """First-order chain over consecutive entries.

    ``transitions`` maps a from-state key to its outgoing transitions in
    the order they were first seen; probabilities per key sum to 1.
    """

    def __init__(self) -> None:
        self.transitions: dict[str, list[MarkovTransition]] = {}

    @classmethod
    def build(cls, chronological: Sequence[MoodEntry], max_pairs: Optional[int] = 50) -> MarkovModel:
        """Build from oldest-first entries, keeping only the latest ``max_pairs`` pairs."""
        model = cls()
        pairs = list(zip(chronological, chronological[1:]))
        if max_pairs is not None:
            pairs = pairs[-max_pairs:] if max_pairs > 0 else []

        for current, following in pairs:
            from_state = entry_state(current)
            to_state = entry_state(following)
            if from_state is None or to_state is None:
                continue
            model.record(from_state, to_state)

        model.normalize()
        logger.debug("Built Markov model with %d states from %d pairs", len(model.transitions), len(pairs))
        return model

    def record(self, from_state: MarkovState, to_state: MarkovState) -> None:
        outgoing = self.transitions.setdefault(from_state.key, [])
        for transition in outgoing:
            if transition.to_state.key == to_state.key:
                transition.count += 1
                return
        outgoing.append(MarkovTransition(from_state=from_state, to_state=to_state, count=1))

    def normalize(self) -> None:
        for outgoing in self.transitions.values():
            total = sum(t.count for t in outgoing)
            for transition in outgoing:
                transition.probability = transition.count / total

    def transitions_from(self, state: MarkovState) -> list[MarkovTransition]:
        return self.transitions.get(state.key, [])

    def most_likely(self, state: MarkovState) -> Optional[MarkovTransition]:
        """Highest-probability transition; the first seen wins a tie."""
        outgoing = self.transitions_from(state)
        if not outgoing:
            return None
        return max(outgoing, key=lambda t: t.probability)

    def similar_transitions(self, mood: int, tolerance: int = 1) -> list[MarkovTransition]:
        return [
            transition
            for outgoing in self.transitions.values()
            for transition in outgoing
            if abs(transition.from_state.mood - mood) <= tolerance
        ]
