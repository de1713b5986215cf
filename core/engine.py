"""
Race Analysis Engine: unified entry point for race preparation.

This module ties the individual calculators together:
- Performance projection from personal bests (Riegel)
- Health and risk analysis (BMI, heart rate, heat index, experience)
- Finish time estimates
- Segment pacing strategy
- Hydration plan
- Equipment recommendations
- Post-race comparison

The engine holds no per-run state. Every call receives the complete input
and returns a new report, so one instance can be shared freely.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Optional, Sequence
import math

from .equipment import generate_equipment_recommendations
from .estimates import generate_time_estimate
from .health import generate_health_analysis
from .hydration import generate_hydration_plan
from .models import (
    InvalidInputError,
    PersonalBest,
    RaceContext,
    RunnerProfile,
)
from .params import AnalysisParams
from .post_race import PostRaceResult, generate_post_race_result
from .projection import calculate_base_pace, generate_performance_comparison
from .report import RaceReport, ReportMetadata
from .segments import generate_segment_strategy


def utc_now() -> datetime:
    """Default report clock."""
    return datetime.now(timezone.utc)


def validate_distance(value: Any, max_distance_km: float = 200.0) -> float:
    """
    Validate and convert the target race distance.

    Args:
        value: Distance in km (number or numeric text)
        max_distance_km: Upper bound

    Returns:
        Distance as float

    Raises:
        InvalidInputError: If missing, non-numeric, non-positive or too long
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInputError("Race distance is required.")

    try:
        distance = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Race distance must be a number, got {value!r}.")

    if not math.isfinite(distance) or distance <= 0:
        raise InvalidInputError("Race distance must be greater than zero.")
    if distance > max_distance_km:
        raise InvalidInputError(
            f"Race distance must not exceed {max_distance_km:g} km."
        )

    return distance


class RaceAnalysisEngine:
    """
    Main engine for race preparation analysis.

    Construct one with custom ``AnalysisParams`` or a fixed clock for
    reproducible reports.
    """

    def __init__(
        self,
        params: Optional[AnalysisParams] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the race analysis engine.

        Args:
            params: Model constants (defaults if None)
            clock: Callable returning the generation timestamp
        """
        self.params = params or AnalysisParams()
        valid, message = self.params.validate()
        if not valid:
            raise ValueError(f"Invalid analysis parameters: {message}")
        self.clock = clock or utc_now

    def generate_report(
        self,
        profile: RunnerProfile,
        race: RaceContext,
        personal_bests: Sequence[PersonalBest] = ()
    ) -> RaceReport:
        """
        Generate the complete race report.

        Args:
            profile: Runner profile
            race: Target race and weather
            personal_bests: Zero to four personal best records

        Returns:
            RaceReport

        Raises:
            InvalidInputError: If the race distance is invalid
        """
        p = self.params
        distance = validate_distance(race.distance_km, p.max_distance_km)
        temp_c = race.resolved_temp_c

        comparison = generate_performance_comparison(
            personal_bests, distance, p.riegel_exponent
        )
        base_pace = calculate_base_pace(comparison, distance, p.default_pace)

        health = generate_health_analysis(
            profile,
            race,
            distance,
            medium_risk_factor=p.medium_risk_factor,
            high_risk_factor=p.high_risk_factor,
            heat_factor=p.heat_factor,
            heat_factor_temp_c=p.heat_factor_temp_c,
        )

        estimate = generate_time_estimate(
            distance,
            base_pace,
            health,
            optimistic_factor=p.optimistic_factor,
            conservative_factor=p.conservative_factor,
        )

        segments = generate_segment_strategy(distance, base_pace)

        hydration = generate_hydration_plan(
            distance,
            base_pace,
            temp_c,
            fluid_ml=p.fluid_ml,
            nutrition_min_distance_km=p.nutrition_min_distance_km,
            nutrition_min_elapsed_s=p.nutrition_min_elapsed_s,
            hot_temp_c=p.hot_temp_c,
            hot_interval_min=p.hot_interval_min,
            interval_min=p.interval_min,
        )

        equipment = generate_equipment_recommendations(race.surface, distance, temp_c)

        return RaceReport(
            health_analysis=health,
            time_estimate=estimate,
            segment_strategy=segments,
            hydration_plan=hydration,
            equipment_recommendations=equipment,
            performance_comparison=comparison,
            metadata=ReportMetadata(
                generated_at=self.clock(),
                distance_km=distance,
                base_pace=base_pace,
            ),
        )

    def generate_post_race_result(
        self,
        report: Optional[RaceReport],
        actual_time: Optional[str]
    ) -> PostRaceResult:
        """
        Compare an actual finish time with a previous report.

        Raises:
            InvalidInputError: If the report or actual time is invalid
        """
        return generate_post_race_result(report, actual_time, clock=self.clock)


def generate_report(
    profile: RunnerProfile,
    race: RaceContext,
    personal_bests: Sequence[PersonalBest] = (),
    params: Optional[AnalysisParams] = None,
    clock: Optional[Callable[[], datetime]] = None
) -> RaceReport:
    """Convenience wrapper around ``RaceAnalysisEngine.generate_report``."""
    return RaceAnalysisEngine(params, clock).generate_report(profile, race, personal_bests)


if __name__ == '__main__':
    from .models import ExperienceLevel

    print("Testing Race Analysis Engine...")
    print("=" * 60)

    engine = RaceAnalysisEngine()
    report = engine.generate_report(
        RunnerProfile(age=30, weight_kg=70, height_m=1.75,
                      experience_level=ExperienceLevel.INTERMEDIATE),
        RaceContext(distance_km=21.0975, temp_max_c=24, humidity_pct=60),
        [PersonalBest(10.0, '50:00', '10K')],
    )

    print(f"\nBase pace: {report.metadata.base_pace}/km")
    print(f"Risk: {report.health_analysis.risk_level.value}")
    print(f"Realistic: {report.time_estimate.realistic}")
    for segment in report.segment_strategy:
        print(f"  {segment.label:>12s}  {segment.pace}/km  {segment.effort.value}")
    for checkpoint in report.hydration_plan:
        print(f"  km {checkpoint.km:>5.1f}  {checkpoint.time:>8s}  {checkpoint.fluid}")

    result = engine.generate_post_race_result(report, '1:48:30')
    print(f"\nPost-race: {result.difference_percentage:+.2f}% ({result.feedback_band.value})")

    print("\n" + "=" * 60)
    print("All tests completed!")
