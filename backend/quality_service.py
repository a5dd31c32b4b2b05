from dataclasses import dataclass
from typing import Optional

from entries import with_reflections
from insight_service import MIN_INSIGHT_ENTRIES, MIN_REFLECTED_ENTRIES


@dataclass
class DataQuality:
    has_enough_data: bool
    reason: Optional[str] = None

    def to_dict(self):
        return {"has_enough_data": self.has_enough_data, "reason": self.reason}


def check_data_quality(entries):
    """Decide whether the insight pipeline has enough to work with.

    A negative result is routed to fallback content by the caller, not
    treated as an error.
    """
    entries = list(entries)
    count = len(entries)
    if count < MIN_INSIGHT_ENTRIES:
        remaining = MIN_INSIGHT_ENTRIES - count
        return DataQuality(
            False,
            f"Keep going! {remaining} more check-in{'s' if remaining != 1 else ''} "
            f"and you'll see your first insight",
        )

    dated = [e for e in entries if e.recorded_at is not None]
    if len(dated) < MIN_INSIGHT_ENTRIES:
        return DataQuality(False, "Too few check-ins have a readable date to look for patterns")

    if len(with_reflections(entries)) < MIN_REFLECTED_ENTRIES:
        return DataQuality(
            False,
            f"Add a short reflection to at least {MIN_REFLECTED_ENTRIES} check-ins to unlock insights",
        )

    return DataQuality(True)
