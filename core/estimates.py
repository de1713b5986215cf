"""
Finish time estimates.

Turns the base pace into four finish-time bands. The "safe" band applies
the health analysis pace adjustment on top of the realistic estimate.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any

from .health import HealthAnalysis
from .timecodec import format_seconds, parse_time_to_seconds


@dataclass(frozen=True)
class TimeEstimate:
    """Finish time bands as clock text (all None when no pace was available)."""
    optimistic: Optional[str] = None
    realistic: Optional[str] = None
    conservative: Optional[str] = None
    safe_pace: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.realistic is None

    def to_dict(self) -> Dict[str, Any]:
        if self.is_empty:
            return {}
        return {
            'optimistic': self.optimistic,
            'realistic': self.realistic,
            'conservative': self.conservative,
            'safe_pace': self.safe_pace,
        }

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> 'TimeEstimate':
        d = d or {}
        return cls(
            optimistic=d.get('optimistic'),
            realistic=d.get('realistic'),
            conservative=d.get('conservative'),
            safe_pace=d.get('safe_pace'),
        )


def generate_time_estimate(
    distance_km: float,
    base_pace: Optional[str],
    health: Optional[HealthAnalysis] = None,
    optimistic_factor: float = 0.97,
    conservative_factor: float = 1.05
) -> TimeEstimate:
    """
    Estimate finish time bands.

    Args:
        distance_km: Race distance
        base_pace: Base pace per km (``M:SS``)
        health: Health analysis providing the safety pace factor
        optimistic_factor: Multiplier for the optimistic band
        conservative_factor: Multiplier for the conservative band

    Returns:
        TimeEstimate (empty if the pace does not parse to a positive value)
    """
    pace_seconds = parse_time_to_seconds(base_pace)
    if pace_seconds <= 0:
        return TimeEstimate()

    total_seconds = distance_km * pace_seconds
    safety_factor = health.safety_adjustments.pace_adjustment if health else 1.0

    return TimeEstimate(
        optimistic=format_seconds(total_seconds * optimistic_factor),
        realistic=format_seconds(total_seconds),
        conservative=format_seconds(total_seconds * conservative_factor),
        safe_pace=format_seconds(total_seconds * safety_factor),
    )
