"""
Report generation utilities for race analysis.

Renders race reports as formatted text and tabular (pandas) output.
Rendering never changes report values; it only lays them out.
"""

from typing import List, Dict, Optional, Sequence

import pandas as pd

from core.report import RaceReport
from core.post_race import PostRaceResult
from data.records import RaceInputs


def _or_na(value, suffix: str = '') -> str:
    return f"{value}{suffix}" if value not in (None, '') else 'N/A'


def generate_race_report_text(
    report: RaceReport,
    inputs: Optional[RaceInputs] = None,
    title: str = "RACE ANALYSIS REPORT"
) -> str:
    """
    Generate a complete text report.

    Args:
        report: Race report
        inputs: Inputs the report was generated from (race/runner sections)
        title: Report title

    Returns:
        Formatted report string
    """
    meta = report.metadata
    health = report.health_analysis
    estimate = report.time_estimate
    timestamp = meta.generated_at.strftime("%Y-%m-%d %H:%M:%S")

    text = f"""
{'='*70}
{title}
{'='*70}
Generated: {timestamp}
Distance: {meta.distance_km:g} km
Base pace: {meta.base_pace}/km
"""

    if inputs is not None:
        race = inputs.race
        profile = inputs.profile
        text += f"""
RACE INFORMATION
----------------
Race name:                 {inputs.race_name or 'Not provided'}
Surface:                   {race.surface.value}
Max temperature:           {race.resolved_temp_c:g} °C
Humidity:                  {race.resolved_humidity_pct:g} %

RUNNER
------
Age:                       {_or_na(profile.age, ' years')}
Weight:                    {_or_na(profile.weight_kg, ' kg')}
Height:                    {_or_na(profile.height_m, ' m')}
Experience:                {profile.experience_level.value}
"""

    text += f"""
HEALTH AND SAFETY
-----------------
Risk level:                {health.risk_level.value}
"""
    if health.bmi is not None:
        text += f"BMI:                       {health.bmi:.1f} ({health.bmi_category})\n"
    if health.max_heart_rate is not None:
        text += f"Estimated max HR:          {health.max_heart_rate} bpm\n"
        for name, (low, high) in (health.heart_rate_zones or {}).items():
            text += f"  {name.replace('_', ' ').title():<24}{low} - {high} bpm\n"
    adjustments = health.safety_adjustments
    text += (f"Safety pace adjustment:    {adjustments.pace_adjustment:.3f}x "
             f"(+{adjustments.recommended_pace_increase}%)\n")

    if health.warnings:
        text += "\nWARNINGS:\n"
        for warning in health.warnings:
            text += f"  - {warning}\n"
    text += "\nRECOMMENDATIONS:\n"
    for recommendation in health.recommendations:
        text += f"  - {recommendation}\n"

    if not estimate.is_empty:
        text += f"""
TIME ESTIMATES
--------------
Optimistic:                {estimate.optimistic:>10}
Realistic:                 {estimate.realistic:>10}
Conservative:              {estimate.conservative:>10}
Safe pace (health-based):  {estimate.safe_pace:>10}
"""

    comparison = report.performance_comparison
    text += "\nPERFORMANCE PROJECTIONS\n-----------------------\n"
    if comparison.has_data:
        base = comparison.base_record
        text += f"Reference: {base.label} in {base.time}\n"
        text += f"{'Distance':<12} {'Projected':>10} {'Confidence':>12}\n"
        text += "-" * 36 + "\n"
        for p in comparison.projections:
            text += f"{p.label:<12} {p.projected_time:>10} {p.confidence.value:>12}\n"
    for recommendation in comparison.recommendations:
        text += f"{recommendation}\n"

    if report.segment_strategy:
        text += "\nPACING STRATEGY BY SEGMENT\n--------------------------\n"
        for segment in report.segment_strategy:
            text += (f"{segment.label:<14} {segment.pace:>6}/km  "
                     f"{segment.effort.value:<11} {segment.notes}\n")

    if report.hydration_plan:
        text += "\nHYDRATION AND NUTRITION PLAN\n----------------------------\n"
        for checkpoint in report.hydration_plan:
            fuel = f" + {checkpoint.nutrition}" if checkpoint.nutrition else ''
            text += f"{checkpoint.km:>6.1f} km ({checkpoint.time:>8}): {checkpoint.fluid}{fuel}\n"

    equipment = report.equipment_recommendations
    text += f"""
EQUIPMENT
---------
Shoes:     {equipment.shoes}
Clothing:  {equipment.clothing}
"""
    for accessory in equipment.accessories:
        text += f"  - {accessory}\n"

    text += "\nThese recommendations do not replace advice from a health or fitness professional.\n"
    text += "=" * 70 + "\n"
    return text


def generate_post_race_text(result: PostRaceResult) -> str:
    """Format a post-race comparison."""
    direction = 'faster' if result.was_faster else 'slower'
    return f"""
{'='*70}
POST-RACE ANALYSIS
{'='*70}
Estimated time:            {result.estimated_time:>10}
Actual time:               {result.actual_time:>10}
Difference:                {result.difference:>10} {direction} ({result.difference_percentage:+.2f}%)
Estimated pace:            {result.estimated_pace:>10}/km
Actual pace:               {result.actual_pace:>10}/km

{result.feedback}
{'='*70}
"""


def report_to_frames(report: RaceReport) -> Dict[str, pd.DataFrame]:
    """
    Tabulate the list-shaped report sections.

    Returns:
        Dictionary with 'projections', 'segments' and 'hydration' frames
    """
    return {
        'projections': pd.DataFrame(
            [p.to_dict() for p in report.performance_comparison.projections],
            columns=['distance_km', 'label', 'projected_seconds', 'projected_time', 'confidence'],
        ),
        'segments': pd.DataFrame(
            [s.to_dict() for s in report.segment_strategy],
            columns=['index', 'segment', 'start_km', 'end_km', 'pace',
                     'pace_multiplier', 'effort', 'notes'],
        ),
        'hydration': pd.DataFrame(
            [c.to_dict() for c in report.hydration_plan],
            columns=['km', 'elapsed_seconds', 'time', 'fluid_ml', 'servings',
                     'fluid', 'nutrition'],
        ),
    }


def summarize_reports(
    reports: Sequence[RaceReport],
    names: Optional[Sequence[str]] = None
) -> pd.DataFrame:
    """
    One-row-per-report summary for batch runs.

    Args:
        reports: Race reports
        names: Optional label per report

    Returns:
        DataFrame indexed by runner/race name
    """
    rows: List[Dict[str, object]] = []
    for i, report in enumerate(reports):
        health = report.health_analysis
        estimate = report.time_estimate
        rows.append({
            'name': names[i] if names is not None else f"runner_{i + 1}",
            'distance_km': report.metadata.distance_km,
            'base_pace': report.metadata.base_pace,
            'risk_level': health.risk_level.value,
            'bmi': round(health.bmi, 1) if health.bmi is not None else None,
            'pace_adjustment': health.safety_adjustments.pace_adjustment,
            'optimistic': estimate.optimistic,
            'realistic': estimate.realistic,
            'conservative': estimate.conservative,
            'safe_pace': estimate.safe_pace,
            'segments': len(report.segment_strategy),
            'hydration_stops': len(report.hydration_plan),
            'warnings': len(health.warnings),
        })

    return pd.DataFrame(rows).set_index('name') if rows else pd.DataFrame()
