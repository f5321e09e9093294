"""
Exceptions raised by the rotation scheduler.
"""

from __future__ import annotations

from datetime import date


class RotationSchedulerError(Exception):
    """Base exception for rotation scheduling failures"""

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(RotationSchedulerError):
    """Raised before any search work when the inputs are malformed"""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        if field:
            message = f"Invalid '{field}': {message}"
        super().__init__(message, "CONFIGURATION_ERROR")


class SchedulingInfeasible(RotationSchedulerError):
    """Raised when no complete assignment exists.

    ``slot_index`` is the first slot that no live path can reach with an
    eligible candidate; relaxing constraints there is the caller's lever.
    """

    def __init__(self, slot_index: int, slot_date: date | None = None):
        self.slot_index = slot_index
        self.slot_date = slot_date
        message = f"No eligible candidate can be reached at slot {slot_index}"
        if slot_date is not None:
            message += f" ({slot_date.isoformat()})"
        super().__init__(message, "SCHEDULING_INFEASIBLE")


class ComputationTimeout(RotationSchedulerError):
    """Raised when the search exceeds its step or wall-clock budget"""

    def __init__(self, steps: int, elapsed_seconds: float, reason: str = "budget"):
        self.steps = steps
        self.elapsed_seconds = elapsed_seconds
        self.reason = reason
        message = (
            f"Search exceeded its {reason} after {steps} expansions "
            f"({elapsed_seconds:.3f}s)"
        )
        super().__init__(message, "COMPUTATION_TIMEOUT")
