"""
API wrapper functions for rotation scheduling.
"""

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_serializer

from .core import SearchConfig, build_schedule
from .exceptions import RotationSchedulerError, SchedulingInfeasible
from .models import Candidate, Schedule, ScheduleResult
from .sources import slots_from_dates

logger = logging.getLogger(__name__)


class CandidateInput(BaseModel):
    """Roster entry."""

    id: str = Field(..., description="Unique candidate identifier")
    label: str = Field("", description="Display label")
    blackout_dates: List[date] = Field(
        default_factory=list, description="Dates the candidate cannot cover"
    )


class SearchOptions(BaseModel):
    """Per-request search options; unset fields fall back to the defaults."""

    strict: Optional[bool] = Field(
        None, description="Keep every bound-passing branch (optimal, slower)"
    )
    stop_at_floor: Optional[bool] = Field(
        None, description="Stop as soon as a unit-cost-per-slot schedule is found"
    )
    max_steps: Optional[int] = Field(None, gt=0, description="Expansion budget")
    max_time_in_seconds: Optional[float] = Field(
        None, gt=0, description="Wall-clock budget"
    )


class ScheduleRequest(BaseModel):
    """Request model for rotation scheduling."""

    candidates: List[CandidateInput] = Field(..., description="Roster in tie-break order")
    slots: List[date] = Field(..., description="Target dates (YYYY-MM-DD), ascending")
    conflicts: Dict[str, List[date]] = Field(
        default_factory=dict,
        description="Dates each candidate already covers on other schedules",
    )
    options: SearchOptions = Field(default_factory=SearchOptions)


class AssignmentModel(BaseModel):
    slot_index: int
    date: date
    candidate_id: str


class ScheduleModel(BaseModel):
    cost: int
    assignments: List[AssignmentModel]


class ScheduleResultModel(BaseModel):
    """Result of a rotation search, or the reason it failed."""

    success: bool = Field(..., description="Whether a schedule was found")
    status: str = Field("", description="Search status or error code")
    cost: Optional[int] = Field(None, description="Minimal fairness cost")
    schedules: List[ScheduleModel] = Field(
        default_factory=list, description="All tied minimal-cost schedules"
    )
    preferred_index: Optional[int] = Field(
        None, description="Index of the roster-order tie-break choice"
    )
    solve_time_seconds: float = Field(0.0, description="Time taken to solve")
    stats: Dict[str, int] = Field(default_factory=dict)
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    infeasible_slot_index: Optional[int] = None


class ScheduleResponse(BaseModel):
    """Response model for rotation scheduling."""

    result: ScheduleResultModel = Field(..., description="Search result")
    request_id: Optional[str] = Field(None, description="Request identifier")
    generated_at: datetime = Field(
        default_factory=datetime.now, description="Response generation time"
    )

    @field_serializer("generated_at")
    def serialize_generated_at(self, value: datetime) -> str:
        return value.isoformat()


def resolve_config(
    options: SearchOptions, defaults: Optional[SearchConfig] = None
) -> SearchConfig:
    """Overlay request options on the default search configuration."""
    config = defaults or SearchConfig()
    overrides = options.model_dump(exclude_none=True)
    return replace(config, **overrides) if overrides else config


def run_schedule_request(
    request: ScheduleRequest, defaults: Optional[SearchConfig] = None
) -> ScheduleResult:
    """
    Run the search for a parsed request.

    Raises:
        ConfigurationError, SchedulingInfeasible, ComputationTimeout
    """
    candidates = [
        Candidate(
            id=entry.id,
            label=entry.label or entry.id,
            blackout_dates=frozenset(entry.blackout_dates),
        )
        for entry in request.candidates
    ]
    slots = slots_from_dates(request.slots)
    return build_schedule(
        candidates,
        slots,
        conflicts=request.conflicts or None,
        config=resolve_config(request.options, defaults),
    )


def format_schedule(schedule: Schedule) -> ScheduleModel:
    return ScheduleModel(
        cost=schedule.cost,
        assignments=[
            AssignmentModel(
                slot_index=a.slot_index, date=a.date, candidate_id=a.candidate_id
            )
            for a in schedule.assignments
        ],
    )


def format_schedule_result(result: ScheduleResult) -> ScheduleResultModel:
    """
    Convert a ScheduleResult into its response model.

    Args:
        result: ScheduleResult instance

    Returns:
        ScheduleResultModel
    """
    preferred = result.preferred
    return ScheduleResultModel(
        success=result.success,
        status=result.optimization_status,
        cost=result.cost if result.success else None,
        schedules=[format_schedule(s) for s in result.schedules],
        preferred_index=result.schedules.index(preferred) if preferred else None,
        solve_time_seconds=result.solve_time_seconds,
        stats={
            "nodes_built": result.stats.nodes_built,
            "expansions": result.stats.expansions,
            "pruned": result.stats.pruned,
            "leaves_reached": result.stats.leaves_reached,
            "max_depth_reached": result.stats.max_depth_reached,
        },
    )


def error_result(error: RotationSchedulerError) -> ScheduleResultModel:
    return ScheduleResultModel(
        success=False,
        status=f"ERROR: {error.error_code}",
        error_code=error.error_code,
        error_message=error.message,
        infeasible_slot_index=(
            error.slot_index if isinstance(error, SchedulingInfeasible) else None
        ),
    )


def build_schedule_api(
    request_data: Dict[str, Any], defaults: Optional[SearchConfig] = None
) -> Dict[str, Any]:
    """
    API wrapper for rotation scheduling.

    Failures never raise; they come back as an unsuccessful result carrying
    the error code and message.

    Args:
        request_data: Dictionary containing schedule request data
        defaults: Search configuration used where the request sets no option

    Returns:
        Dictionary containing schedule response data
    """
    request_id = str(uuid.uuid4())
    try:
        request = ScheduleRequest(**request_data)
        result_model = format_schedule_result(run_schedule_request(request, defaults))
    except ValidationError as e:
        logger.warning(f"Invalid schedule request {request_id}: {e}")
        result_model = ScheduleResultModel(
            success=False,
            status="ERROR: VALIDATION_ERROR",
            error_code="VALIDATION_ERROR",
            error_message=str(e),
        )
    except RotationSchedulerError as e:
        logger.warning(f"Schedule request {request_id} failed: {e.message}")
        result_model = error_result(e)

    response = ScheduleResponse(
        result=result_model, request_id=request_id, generated_at=datetime.now()
    )
    return response.model_dump(mode="json")


def validate_schedule_request(request_data: Dict[str, Any]) -> Optional[str]:
    """
    Validate schedule request data.

    Args:
        request_data: Dictionary containing request data

    Returns:
        Error message if validation fails, None if valid
    """
    required_fields = ["candidates", "slots"]
    for field in required_fields:
        if field not in request_data:
            return f"Missing required field: {field}"

    candidates = request_data["candidates"]
    if not isinstance(candidates, list):
        return "Candidates must be a list"
    if len(candidates) == 0:
        return "At least one candidate is required"

    for i, candidate in enumerate(candidates):
        if not isinstance(candidate, dict):
            return f"Candidate {i} must be a dictionary"
        if not str(candidate.get("id", "")).strip():
            return f"Candidate {i} missing required field: id"

    slots = request_data["slots"]
    if not isinstance(slots, list):
        return "Slots must be a list"
    if len(slots) == 0:
        return "At least one slot is required"

    for i, value in enumerate(slots):
        if isinstance(value, date):
            continue
        if not isinstance(value, str):
            return f"Slot {i} must be a date string"
        try:
            date.fromisoformat(value)
        except ValueError:
            return f"Slot {i} must be in YYYY-MM-DD format"

    return None
