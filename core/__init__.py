"""
Core calculations for race preparation analysis.

This package provides the complete set of calculators for:
- Clock time parsing and formatting
- Performance projection (Riegel)
- Health and risk analysis (BMI, heart rate zones, heat index)
- Finish time estimates
- Segment pacing strategy
- Hydration planning
- Equipment recommendations
- Post-race comparison
"""

# Time codec
from .timecodec import (
    parse_time_to_seconds,
    try_parse_time,
    format_seconds,
    adjust_pace,
    round_half_up,
)

# Inputs
from .models import (
    InvalidInputError,
    ExperienceLevel,
    SurfaceType,
    RunnerProfile,
    RaceContext,
    PersonalBest,
    STANDARD_DISTANCES,
)
from .params import AnalysisParams

# Performance projection
from .projection import (
    Confidence,
    Projection,
    PerformanceComparison,
    project_time_riegel,
    project_times_riegel,
    get_confidence_level,
    select_base_record,
    generate_performance_comparison,
    calculate_base_pace,
)

# Health and risk
from .health import (
    RiskLevel,
    HealthAnalysis,
    SafetyAdjustments,
    calculate_bmi,
    calculate_max_heart_rate,
    calculate_hr_zones,
    calculate_heat_index,
    calculate_safety_adjustments,
    generate_health_analysis,
)

# Plan sections
from .estimates import TimeEstimate, generate_time_estimate
from .segments import Effort, Segment, generate_segment_strategy
from .hydration import HydrationCheckpoint, generate_hydration_plan
from .equipment import EquipmentRecommendation, generate_equipment_recommendations

# Report and engine
from .report import RaceReport, ReportMetadata
from .post_race import (
    FeedbackBand,
    PostRaceResult,
    classify_feedback,
    generate_post_race_result,
)
from .engine import RaceAnalysisEngine, generate_report, validate_distance

__all__ = [
    # Time codec
    'parse_time_to_seconds',
    'try_parse_time',
    'format_seconds',
    'adjust_pace',
    'round_half_up',
    # Inputs
    'InvalidInputError',
    'ExperienceLevel',
    'SurfaceType',
    'RunnerProfile',
    'RaceContext',
    'PersonalBest',
    'STANDARD_DISTANCES',
    'AnalysisParams',
    # Projection
    'Confidence',
    'Projection',
    'PerformanceComparison',
    'project_time_riegel',
    'project_times_riegel',
    'get_confidence_level',
    'select_base_record',
    'generate_performance_comparison',
    'calculate_base_pace',
    # Health
    'RiskLevel',
    'HealthAnalysis',
    'SafetyAdjustments',
    'calculate_bmi',
    'calculate_max_heart_rate',
    'calculate_hr_zones',
    'calculate_heat_index',
    'calculate_safety_adjustments',
    'generate_health_analysis',
    # Plan sections
    'TimeEstimate',
    'generate_time_estimate',
    'Effort',
    'Segment',
    'generate_segment_strategy',
    'HydrationCheckpoint',
    'generate_hydration_plan',
    'EquipmentRecommendation',
    'generate_equipment_recommendations',
    # Report and engine
    'RaceReport',
    'ReportMetadata',
    'FeedbackBand',
    'PostRaceResult',
    'classify_feedback',
    'generate_post_race_result',
    'RaceAnalysisEngine',
    'generate_report',
    'validate_distance',
]
