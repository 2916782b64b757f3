"""
Timeline Projection -- provenance timestamps as ordered events

Event sources are matched by predicate suffix only (`startedAtTime`,
`generatedAtTime`), whatever the namespace. Values that don't parse as
an instant are skipped instead of failing the projection.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .terms import QuadIndex, fragment_title

TIME_PREDICATE_SUFFIXES = ("startedAtTime", "generatedAtTime")


@dataclass(frozen=True)
class TemporalEvent:
    id: str
    subject: str
    predicate: str
    time: datetime
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "subject": self.subject,
            "predicate": self.predicate,
            "time": self.time.isoformat(),
            "label": self.label,
        }


def is_time_predicate(predicate: str) -> bool:
    return predicate.endswith(TIME_PREDICATE_SUFFIXES)


def parse_instant(value: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 date-time or date into an aware datetime.

    Naive values are taken as UTC; bare dates as midnight UTC.
    Returns None when the value is not a recognizable instant.
    """
    text = value.strip()
    if not text:
        return None
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            day = date.fromisoformat(text)
        except ValueError:
            return None
        parsed = datetime(day.year, day.month, day.day)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def project_events(index: QuadIndex) -> List[TemporalEvent]:
    """Collect timestamped events, sorted by time (stable for ties)."""
    events: List[TemporalEvent] = []
    for subject, quads in index.items():
        for quad in quads:
            if not is_time_predicate(quad.predicate):
                continue
            when = parse_instant(quad.object.value)
            if when is None:
                continue
            events.append(TemporalEvent(
                id=f"{subject}|{quad.predicate}",
                subject=subject,
                predicate=quad.predicate,
                time=when,
                label=fragment_title(subject),
            ))
    return sorted(events, key=lambda e: e.time)


def time_extent(events: Sequence[TemporalEvent]) -> Optional[Tuple[datetime, datetime]]:
    """Earliest and latest event time, or None for no events."""
    if not events:
        return None
    times = [e.time for e in events]
    return min(times), max(times)
