"""
Rotation scheduling API endpoints.
"""

import logging
from datetime import date, datetime, timedelta
from uuid import uuid4

from fastapi import APIRouter, Depends

from rotation_api.config import settings
from rotation_scheduler import Candidate, SearchConfig, build_schedule, weekly_slots
from rotation_scheduler.api import (
    ScheduleRequest,
    ScheduleResponse,
    format_schedule_result,
    run_schedule_request,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rotation", tags=["rotation"])


def get_search_defaults() -> SearchConfig:
    return settings.search_config()


# Plain def: FastAPI runs it in the worker threadpool, one search per request
@router.post("/schedule", response_model=ScheduleResponse)
def create_schedule(
    request: ScheduleRequest,
    defaults: SearchConfig = Depends(get_search_defaults),
):
    """Build the fairest rotation for the posted roster and slots.

    Scheduling failures propagate to the registered exception handlers.
    """
    logger.info(
        f"Rotation request: {len(request.candidates)} candidates, "
        f"{len(request.slots)} slots, {len(request.conflicts)} with conflicts"
    )
    result = run_schedule_request(request, defaults)
    response = ScheduleResponse(
        result=format_schedule_result(result),
        request_id=str(uuid4()),
        generated_at=datetime.now(),
    )
    logger.info(
        f"Rotation completed: status={result.optimization_status}, "
        f"cost={result.cost}, tied={len(result.schedules)}"
    )
    return response


@router.get("/test", response_model=dict[str, str])
def test_rotation():
    """Smoke test: three interchangeable candidates over three weeks."""
    try:
        candidates = [Candidate(id=f"m{i}") for i in range(1, 4)]
        start = date.today() - timedelta(days=date.today().weekday())
        result = build_schedule(candidates, weekly_slots(start, 3))
        preferred = result.preferred
        return {
            "status": "success",
            "message": "Rotation scheduler working correctly",
            "rotation": ",".join(preferred.candidate_ids) if preferred else "",
            "cost": str(result.cost),
            "optimization_status": result.optimization_status,
            "solve_time_seconds": str(result.solve_time_seconds),
        }
    except Exception as e:
        logger.error(f"Rotation smoke test failed: {e}")
        return {
            "status": "error",
            "message": f"Rotation scheduler test failed: {str(e)}",
        }
