"""
Race report: the aggregate output of one analysis run.

Reports are immutable and serialise to plain dictionaries so callers can
persist them and re-read them later for the post-race comparison.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Any, Tuple

from .equipment import EquipmentRecommendation
from .estimates import TimeEstimate
from .health import HealthAnalysis
from .hydration import HydrationCheckpoint
from .projection import PerformanceComparison
from .segments import Segment


@dataclass(frozen=True)
class ReportMetadata:
    """Generation details."""
    generated_at: datetime
    distance_km: float
    base_pace: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'generated_at': self.generated_at.isoformat(),
            'distance_km': self.distance_km,
            'base_pace': self.base_pace,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ReportMetadata':
        return cls(
            generated_at=datetime.fromisoformat(d['generated_at']),
            distance_km=float(d['distance_km']),
            base_pace=d['base_pace'],
        )


@dataclass(frozen=True)
class RaceReport:
    """
    Complete race preparation report.

    Sections are produced in dependency order by the engine: projections
    feed the base pace, which drives estimates, segments and hydration.
    """
    health_analysis: HealthAnalysis
    time_estimate: TimeEstimate
    segment_strategy: Tuple[Segment, ...]
    hydration_plan: Tuple[HydrationCheckpoint, ...]
    equipment_recommendations: EquipmentRecommendation
    performance_comparison: PerformanceComparison
    metadata: ReportMetadata

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        return {
            'health_analysis': self.health_analysis.to_dict(),
            'time_estimate': self.time_estimate.to_dict(),
            'segment_strategy': [s.to_dict() for s in self.segment_strategy],
            'hydration_plan': [c.to_dict() for c in self.hydration_plan],
            'equipment_recommendations': self.equipment_recommendations.to_dict(),
            'performance_comparison': self.performance_comparison.to_dict(),
            'metadata': self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'RaceReport':
        """Rebuild a report from ``to_dict`` output."""
        return cls(
            health_analysis=HealthAnalysis.from_dict(d['health_analysis']),
            time_estimate=TimeEstimate.from_dict(d.get('time_estimate')),
            segment_strategy=tuple(Segment.from_dict(s) for s in d.get('segment_strategy', [])),
            hydration_plan=tuple(
                HydrationCheckpoint.from_dict(c) for c in d.get('hydration_plan', [])
            ),
            equipment_recommendations=EquipmentRecommendation.from_dict(
                d['equipment_recommendations']
            ),
            performance_comparison=PerformanceComparison.from_dict(d['performance_comparison']),
            metadata=ReportMetadata.from_dict(d['metadata']),
        )
