"""
Segment pacing strategy.

Splits the race into equal segments and assigns each a pace multiplier
following a negative-split curve: a slower warm-up segment, controlled
effort through the first half, then progressively faster.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, List, Tuple
import math

from .timecodec import adjust_pace


class Effort(Enum):
    """Perceived effort for a race segment."""
    WARM_UP = "Warm-up"
    CONTROLLED = "Controlled"
    INTENSE = "Intense"


EFFORT_NOTES = {
    Effort.WARM_UP: 'Focus on technique, not speed.',
    Effort.CONTROLLED: 'Hold the pace and save energy.',
    Effort.INTENSE: 'Increase the effort progressively.',
}


@dataclass(frozen=True)
class Segment:
    """One pacing segment of the race."""
    index: int
    start_km: float
    end_km: float
    pace: str
    pace_multiplier: float
    effort: Effort

    @property
    def label(self) -> str:
        return f"{self.start_km:.1f}-{self.end_km:.1f}km"

    @property
    def notes(self) -> str:
        return EFFORT_NOTES[self.effort]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'index': self.index,
            'segment': self.label,
            'start_km': self.start_km,
            'end_km': self.end_km,
            'pace': self.pace,
            'pace_multiplier': self.pace_multiplier,
            'effort': self.effort.value,
            'notes': self.notes,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Segment':
        return cls(
            index=int(d['index']),
            start_km=float(d['start_km']),
            end_km=float(d['end_km']),
            pace=d['pace'],
            pace_multiplier=float(d['pace_multiplier']),
            effort=Effort(d['effort']),
        )


def get_segment_size(distance_km: float) -> float:
    """Segment length: 1 km up to 10K, 2 km up to half marathon, else 5 km."""
    if distance_km <= 10:
        return 1.0
    elif distance_km <= 21.1:
        return 2.0
    return 5.0


def get_segment_profile(index: int, num_segments: int) -> Tuple[float, Effort]:
    """
    Pace multiplier and effort for a segment position.

    The first segment is always the warm-up; this is checked before the
    progress ratio so single-segment races never divide by zero.

    Returns:
        Tuple of (pace_multiplier, effort)
    """
    if index == 0:
        return 1.05, Effort.WARM_UP

    progress = index / (num_segments - 1)
    if progress <= 0.5:
        return 1.02, Effort.CONTROLLED
    elif progress <= 0.8:
        return 0.98, Effort.INTENSE
    return 0.96, Effort.INTENSE


def generate_segment_strategy(distance_km: float, base_pace: str) -> Tuple[Segment, ...]:
    """
    Build the per-segment pacing plan.

    Args:
        distance_km: Race distance
        base_pace: Base pace per km (``M:SS``)

    Returns:
        Contiguous segments covering [0, distance_km]
    """
    size = get_segment_size(distance_km)
    num_segments = math.ceil(distance_km / size)

    segments: List[Segment] = []
    for i in range(num_segments):
        start_km = i * size
        if start_km >= distance_km:
            break
        end_km = min((i + 1) * size, distance_km)
        multiplier, effort = get_segment_profile(i, num_segments)

        segments.append(Segment(
            index=i,
            start_km=start_km,
            end_km=end_km,
            pace=adjust_pace(base_pace, multiplier),
            pace_multiplier=multiplier,
            effort=effort,
        ))

    return tuple(segments)
