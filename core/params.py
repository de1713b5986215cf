"""
Tunable constants for race analysis.

Collected in one dataclass so an alternate set can be loaded from JSON
and passed to the engine. The defaults reproduce the published model
values (Riegel 1.06, ACSM hydration guidance, WHO BMI bands).
"""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, Tuple

from .timecodec import parse_time_to_seconds


@dataclass(frozen=True)
class AnalysisParams:
    """
    Parameters for the race analysis engine.

    Multipliers are expressed as factors (e.g., 1.05 = 5% slower).
    """

    # ═══════════════════════════════════════════════════════════════════════════
    # PERFORMANCE PROJECTION
    # ═══════════════════════════════════════════════════════════════════════════

    riegel_exponent: float = 1.06       # Fatigue exponent in T2 = T1 * (D2/D1)^k
    default_pace: str = '6:00'          # Average recreational pace per km

    # ═══════════════════════════════════════════════════════════════════════════
    # TIME ESTIMATE BANDS
    # ═══════════════════════════════════════════════════════════════════════════

    optimistic_factor: float = 0.97
    conservative_factor: float = 1.05

    # ═══════════════════════════════════════════════════════════════════════════
    # SAFETY PACE ADJUSTMENT
    # ═══════════════════════════════════════════════════════════════════════════

    medium_risk_factor: float = 1.05
    high_risk_factor: float = 1.12
    heat_factor: float = 1.05
    heat_factor_temp_c: float = 28.0    # Above this: extra heat slowdown

    # ═══════════════════════════════════════════════════════════════════════════
    # HYDRATION (ACSM: 150ml every 15-20 minutes)
    # ═══════════════════════════════════════════════════════════════════════════

    hot_temp_c: float = 25.0
    hot_interval_min: float = 15.0
    interval_min: float = 20.0
    fluid_ml: int = 150
    nutrition_min_distance_km: float = 15.0
    nutrition_min_elapsed_s: float = 3600.0

    # ═══════════════════════════════════════════════════════════════════════════
    # INPUT LIMITS
    # ═══════════════════════════════════════════════════════════════════════════

    max_distance_km: float = 200.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'AnalysisParams':
        """Create parameters from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})

    def validate(self) -> Tuple[bool, str]:
        """Validate parameter constraints."""
        issues = []

        if not (0 < self.riegel_exponent < 2):
            issues.append("Riegel exponent must be in (0, 2)")

        if parse_time_to_seconds(self.default_pace) <= 0:
            issues.append("Default pace must be a positive M:SS value")

        if not (0 < self.optimistic_factor <= 1 <= self.conservative_factor):
            issues.append("Estimate bands: 0 < optimistic <= 1 <= conservative")

        if not (1 <= self.medium_risk_factor <= self.high_risk_factor):
            issues.append("Risk factors: 1 <= medium <= high")

        if self.heat_factor < 1:
            issues.append("Heat factor must be >= 1")

        if not (0 < self.hot_interval_min and 0 < self.interval_min):
            issues.append("Hydration intervals must be positive")

        if self.fluid_ml <= 0:
            issues.append("Fluid volume must be positive")

        if self.max_distance_km <= 0:
            issues.append("Max distance must be positive")

        if issues:
            return False, "; ".join(issues)
        return True, "Valid"
