"""
Adapters for the roster, slot and conflict collaborators.

These only shape external data into models; conflict avoidance across
schedules is done entirely by folding existing assignments into each
candidate's blackout set before the graph is built.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, timedelta
from typing import Any, Protocol

from .exceptions import ConfigurationError
from .models import Candidate, Slot

logger = logging.getLogger(__name__)


class ConflictSource(Protocol):
    """Returns dates each candidate already covers on other schedules."""

    def __call__(
        self, candidates: Sequence[Candidate], horizon_start: date, horizon_end: date
    ) -> Mapping[str, Iterable[date]]: ...


def parse_date(value: Any, field: str = "date") -> date:
    """Accept a date or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise ConfigurationError(
                f"Date must be in YYYY-MM-DD format, got {value!r}", field
            )
    raise ConfigurationError(f"Unsupported date value: {value!r}", field)


def roster_from_records(records: Iterable[Mapping[str, Any]]) -> list[Candidate]:
    """
    Build candidates from ``{id, label?, blackout_dates?}`` mappings.

    Roster order is preserved; it is the tie-break order of the search.
    """
    candidates = []
    for i, record in enumerate(records):
        if "id" not in record:
            raise ConfigurationError(f"Candidate {i} missing required field: id", "candidates")
        candidate_id = str(record["id"]).strip()
        blackouts = frozenset(
            parse_date(value, "blackout_dates")
            for value in record.get("blackout_dates") or ()
        )
        candidates.append(
            Candidate(
                id=candidate_id,
                label=record.get("label") or candidate_id,
                blackout_dates=blackouts,
            )
        )
    return candidates


def slots_from_dates(dates: Iterable[date | str]) -> list[Slot]:
    return [Slot(index=i, date=parse_date(value, "slots")) for i, value in enumerate(dates)]


def weekly_slots(start: date, count: int, step_days: int = 7) -> list[Slot]:
    """``count`` slots starting at ``start``, ``step_days`` apart."""
    if count < 0:
        raise ConfigurationError("Slot count must not be negative", "count")
    if step_days < 1:
        raise ConfigurationError("Slot spacing must be at least one day", "step_days")
    return [
        Slot(index=i, date=start + timedelta(days=i * step_days)) for i in range(count)
    ]


def merge_conflicts(
    candidates: Sequence[Candidate], conflicts: Mapping[str, Iterable[date]]
) -> list[Candidate]:
    """Fold dates covered on other schedules into each candidate's blackouts."""
    known_ids = {candidate.id for candidate in candidates}
    unknown = sorted(set(conflicts) - known_ids)
    if unknown:
        logger.warning(f"Ignoring conflicts for unknown candidates: {unknown}")

    merged = []
    for candidate in candidates:
        dates = conflicts.get(candidate.id)
        merged.append(candidate.with_blackouts(dates) if dates else candidate)
    return merged


def collect_conflicts(
    source: ConflictSource, candidates: Sequence[Candidate], slots: Sequence[Slot]
) -> list[Candidate]:
    """Ask ``source`` for conflicts over the slot horizon and merge them in."""
    if not slots:
        return list(candidates)
    conflicts = source(candidates, slots[0].date, slots[-1].date)
    horizon = {slot.date for slot in slots}
    relevant = {
        candidate_id: [d for d in dates if d in horizon]
        for candidate_id, dates in conflicts.items()
    }
    logger.debug(
        f"Collected conflicts for {sum(1 for d in relevant.values() if d)} candidates"
    )
    return merge_conflicts(candidates, relevant)
