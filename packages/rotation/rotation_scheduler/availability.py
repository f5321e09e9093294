"""
Availability predicate and input validation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime

from .exceptions import ConfigurationError
from .models import Candidate, Slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityContext:
    """Extra unavailability injected from outside the roster.

    Typically the dates a candidate already covers on other schedules.
    """

    conflicts: Mapping[str, frozenset[date]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, conflicts: Mapping[str, Iterable[date]]) -> AvailabilityContext:
        return cls(conflicts={cid: frozenset(dates) for cid, dates in conflicts.items()})

    def conflicts_for(self, candidate_id: str) -> frozenset[date]:
        return self.conflicts.get(candidate_id, frozenset())


def can_assign(
    candidate: Candidate, slot: Slot, context: AvailabilityContext | None = None
) -> bool:
    """True if ``candidate`` may cover ``slot``."""
    if slot.date in candidate.blackout_dates:
        return False
    if context is not None and slot.date in context.conflicts_for(candidate.id):
        return False
    return True


def validate_inputs(candidates: Sequence[Candidate], slots: Sequence[Slot]) -> None:
    """Raise ConfigurationError for inputs the search cannot run on."""
    if not candidates:
        raise ConfigurationError("At least one candidate is required", "candidates")
    if not slots:
        raise ConfigurationError("At least one slot is required", "slots")

    seen_ids: set[str] = set()
    for i, candidate in enumerate(candidates):
        if not isinstance(candidate.id, str) or not candidate.id.strip():
            raise ConfigurationError(f"Candidate {i} has an empty id", "candidates")
        if candidate.id in seen_ids:
            raise ConfigurationError(
                f"Duplicate candidate id: {candidate.id}", "candidates"
            )
        seen_ids.add(candidate.id)
        for blackout in candidate.blackout_dates:
            # datetime is a date subclass but would never match a slot date
            if not isinstance(blackout, date) or isinstance(blackout, datetime):
                raise ConfigurationError(
                    f"Candidate {candidate.id} has a non-date blackout entry: {blackout!r}",
                    "blackout_dates",
                )

    previous: Slot | None = None
    for position, slot in enumerate(slots):
        if slot.index != position:
            raise ConfigurationError(
                f"Slot at position {position} has index {slot.index}", "slots"
            )
        if not isinstance(slot.date, date) or isinstance(slot.date, datetime):
            raise ConfigurationError(
                f"Slot {position} date must be a date, got {slot.date!r}", "slots"
            )
        if previous is not None and slot.date <= previous.date:
            raise ConfigurationError(
                f"Slot dates must be strictly ascending: {slot.date.isoformat()} "
                f"follows {previous.date.isoformat()}",
                "slots",
            )
        previous = slot

    logger.debug(
        f"Validated {len(candidates)} candidates across {len(slots)} slots"
    )
