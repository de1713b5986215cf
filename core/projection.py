"""
Performance projection from personal bests.

Based on:
- Riegel, P. (1981). Athletic records and human endurance.
  American Scientist 69(3): 285-290.

The personal best closest in distance to the target race is used as the
reference and projected to the standard distances (and the target) with
the Riegel power law:

    T2 = T1 × (D2 / D1) ^ 1.06
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List, Sequence, Tuple
import numpy as np

from .models import PersonalBest, STANDARD_DISTANCES
from .timecodec import format_seconds, round_half_up, PACE_MODE


RIEGEL_EXPONENT = 1.06
DEFAULT_PACE = '6:00'

NO_DATA_RECOMMENDATION = (
    'Enter at least one personal best for a more accurate performance analysis.'
)


class Confidence(Enum):
    """Reliability of a cross-distance projection."""
    HIGH = "High"       # distance ratio <= 2
    MEDIUM = "Medium"   # distance ratio <= 4
    LOW = "Low"         # anything further


@dataclass(frozen=True)
class Projection:
    """Projected finish time at one distance."""
    distance_km: float
    label: str
    projected_seconds: float
    confidence: Confidence

    @property
    def projected_time(self) -> str:
        return format_seconds(self.projected_seconds)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'distance_km': self.distance_km,
            'label': self.label,
            'projected_seconds': self.projected_seconds,
            'projected_time': self.projected_time,
            'confidence': self.confidence.value,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Projection':
        return cls(
            distance_km=float(d['distance_km']),
            label=d['label'],
            projected_seconds=float(d['projected_seconds']),
            confidence=Confidence(d['confidence']),
        )


@dataclass(frozen=True)
class PerformanceComparison:
    """Reference personal best and the projections derived from it."""
    has_data: bool
    base_record: Optional[PersonalBest] = None
    projections: Tuple[Projection, ...] = field(default_factory=tuple)
    recommendations: Tuple[str, ...] = field(default_factory=tuple)

    def find_projection(self, distance_km: float) -> Optional[Projection]:
        """Return the projection at exactly this distance, if any."""
        for projection in self.projections:
            if projection.distance_km == distance_km:
                return projection
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'has_data': self.has_data,
            'base_record': self.base_record.to_dict() if self.base_record else None,
            'projections': [p.to_dict() for p in self.projections],
            'recommendations': list(self.recommendations),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'PerformanceComparison':
        base = d.get('base_record')
        return cls(
            has_data=bool(d['has_data']),
            base_record=PersonalBest.from_dict(base) if base else None,
            projections=tuple(Projection.from_dict(p) for p in d.get('projections', [])),
            recommendations=tuple(d.get('recommendations', [])),
        )


def project_time_riegel(
    base_seconds: float,
    base_distance_km: float,
    target_distance_km: float,
    exponent: float = RIEGEL_EXPONENT
) -> float:
    """
    Project a finish time to another distance.

    Args:
        base_seconds: Known time at the base distance
        base_distance_km: Distance of the known time
        target_distance_km: Distance to project to
        exponent: Riegel fatigue exponent

    Returns:
        Projected time in seconds
    """
    return base_seconds * (target_distance_km / base_distance_km) ** exponent


def project_times_riegel(
    base_seconds: float,
    base_distance_km: float,
    target_distances_km: Sequence[float],
    exponent: float = RIEGEL_EXPONENT
) -> np.ndarray:
    """Vectorised ``project_time_riegel`` over several target distances."""
    ratios = np.asarray(target_distances_km, dtype=float) / base_distance_km
    return base_seconds * np.power(ratios, exponent)


def get_confidence_level(base_distance_km: float, target_distance_km: float) -> Confidence:
    """Classify projection reliability by how far the distances diverge."""
    ratio = (max(base_distance_km, target_distance_km) /
             min(base_distance_km, target_distance_km))
    if ratio <= 2:
        return Confidence.HIGH
    if ratio <= 4:
        return Confidence.MEDIUM
    return Confidence.LOW


def select_base_record(
    personal_bests: Sequence[PersonalBest],
    target_distance_km: float
) -> Optional[PersonalBest]:
    """
    Pick the personal best closest in distance to the target.

    Ties go to the record encountered first.
    """
    if not personal_bests:
        return None
    return min(personal_bests, key=lambda pb: abs(pb.distance_km - target_distance_km))


def generate_performance_comparison(
    personal_bests: Sequence[PersonalBest],
    target_distance_km: float,
    exponent: float = RIEGEL_EXPONENT
) -> PerformanceComparison:
    """
    Project finish times from the best-matching personal best.

    Projections cover the four standard distances plus the target when it
    is not one of them.

    Args:
        personal_bests: Zero to four personal best records
        target_distance_km: Race distance
        exponent: Riegel fatigue exponent

    Returns:
        PerformanceComparison (``has_data=False`` when no records given)
    """
    base = select_base_record(personal_bests, target_distance_km)
    if base is None:
        return PerformanceComparison(
            has_data=False,
            recommendations=(NO_DATA_RECOMMENDATION,),
        )

    targets: List[Tuple[float, str]] = list(STANDARD_DISTANCES)
    if not any(distance == target_distance_km for distance, _ in targets):
        targets.append((target_distance_km, f"{target_distance_km:g}K"))

    projected = project_times_riegel(
        base.seconds,
        base.distance_km,
        [distance for distance, _ in targets],
        exponent
    )

    projections = tuple(
        Projection(
            distance_km=distance,
            label=label,
            projected_seconds=float(seconds),
            confidence=get_confidence_level(base.distance_km, distance),
        )
        for (distance, label), seconds in zip(targets, projected)
    )

    return PerformanceComparison(
        has_data=True,
        base_record=base,
        projections=projections,
    )


def calculate_base_pace(
    comparison: PerformanceComparison,
    target_distance_km: float,
    default_pace: str = DEFAULT_PACE
) -> str:
    """
    Derive the per-km base pace for the target race.

    Order of preference:
        1. Projection at exactly the target distance
        2. Pace of the reference personal best itself
        3. Default recreational pace (6:00/km)

    Args:
        comparison: Output of ``generate_performance_comparison``
        target_distance_km: Race distance
        default_pace: Fallback pace text

    Returns:
        Pace text (``M:SS`` per km)
    """
    projection = comparison.find_projection(target_distance_km)
    if projection is not None:
        # Projected time is shown at whole-second resolution
        total_seconds = round_half_up(projection.projected_seconds)
        return format_seconds(total_seconds / target_distance_km, PACE_MODE)

    if comparison.base_record is not None:
        base = comparison.base_record
        return format_seconds(base.seconds / base.distance_km, PACE_MODE)

    return default_pace
