"""
Post-race comparison.

Compares an actual finish time with the realistic estimate from a
previously generated report and grades the result.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Dict, Any

from .models import InvalidInputError
from .report import RaceReport
from .timecodec import format_seconds, parse_time_to_seconds, PACE_MODE


class FeedbackBand(Enum):
    """Result grade by percentage difference from the estimate."""
    EXCEPTIONAL = "exceptional"         # more than 2% faster
    MET_GOAL = "met or beat goal"       # up to 2% faster
    CLOSE = "close to estimate"         # up to 5% slower
    LEARNING = "learning opportunity"   # anything slower


FEEDBACK_MESSAGES = {
    FeedbackBand.EXCEPTIONAL: 'Exceptional performance! You beat the estimate by a wide margin.',
    FeedbackBand.MET_GOAL: 'Congratulations! You met or beat your realistic time goal.',
    FeedbackBand.CLOSE: 'Great result! You finished very close to the estimate. Excellent effort.',
    FeedbackBand.LEARNING: ('Race completed! Every race is a lesson. Use the data to adjust '
                            'your training for the next one.'),
}


@dataclass(frozen=True)
class PostRaceResult:
    """Actual vs estimated race outcome."""
    estimated_time: str
    actual_time: str
    difference_seconds: float          # actual - estimated
    difference_percentage: float
    estimated_pace: str
    actual_pace: str
    feedback_band: FeedbackBand
    generated_at: datetime

    @property
    def difference(self) -> str:
        return format_seconds(abs(self.difference_seconds))

    @property
    def was_faster(self) -> bool:
        return self.difference_seconds < 0

    @property
    def feedback(self) -> str:
        return FEEDBACK_MESSAGES[self.feedback_band]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'estimated_time': self.estimated_time,
            'actual_time': self.actual_time,
            'difference': self.difference,
            'difference_seconds': self.difference_seconds,
            'was_faster': self.was_faster,
            'difference_percentage': f"{self.difference_percentage:.2f}",
            'estimated_pace': self.estimated_pace,
            'actual_pace': self.actual_pace,
            'feedback_band': self.feedback_band.value,
            'feedback': self.feedback,
            'generated_at': self.generated_at.isoformat(),
        }


def classify_feedback(difference_percentage: float) -> FeedbackBand:
    """Grade the percentage difference (negative = faster than estimate)."""
    if difference_percentage < -2:
        return FeedbackBand.EXCEPTIONAL
    elif difference_percentage <= 0:
        return FeedbackBand.MET_GOAL
    elif difference_percentage <= 5:
        return FeedbackBand.CLOSE
    return FeedbackBand.LEARNING


def generate_post_race_result(
    report: Optional[RaceReport],
    actual_time: Optional[str],
    clock: Optional[Callable[[], datetime]] = None
) -> PostRaceResult:
    """
    Compare the actual finish time against the report's realistic estimate.

    Args:
        report: Previously generated race report
        actual_time: Actual finish time (``H:MM:SS`` or ``MM:SS``)
        clock: Callable returning the current time

    Returns:
        PostRaceResult

    Raises:
        InvalidInputError: If the report has no realistic estimate or the
            actual time is not a positive duration
    """
    if report is None or report.time_estimate.realistic is None:
        raise InvalidInputError("Pre-race analysis not found or incomplete.")

    estimated_seconds = parse_time_to_seconds(report.time_estimate.realistic)
    if estimated_seconds <= 0:
        raise InvalidInputError("Pre-race realistic estimate is not a valid time.")

    actual_seconds = parse_time_to_seconds(actual_time)
    if actual_seconds <= 0:
        raise InvalidInputError(
            "Actual race time is invalid. Use the format h:mm:ss or mm:ss."
        )

    distance = report.metadata.distance_km
    difference = actual_seconds - estimated_seconds
    percentage = difference / estimated_seconds * 100
    now = clock() if clock else datetime.now(timezone.utc)

    return PostRaceResult(
        estimated_time=report.time_estimate.realistic,
        actual_time=actual_time,
        difference_seconds=difference,
        difference_percentage=percentage,
        estimated_pace=format_seconds(estimated_seconds / distance, PACE_MODE),
        actual_pace=format_seconds(actual_seconds / distance, PACE_MODE),
        feedback_band=classify_feedback(percentage),
        generated_at=now,
    )
