"""
Health and Risk Analysis for race preparation.

Based on:
- WHO (2000). Obesity: preventing and managing the global epidemic (BMI bands)
- Tanaka, H. et al. (2001). Age-predicted maximal heart rate revisited.
  JACC 37(1): 153-156
- Rothfusz, L. (1990). The heat index equation (NWS SR 90-23)

Each check produces a finding (minimum risk level, warnings,
recommendations). Findings are folded in a fixed order, so the risk
level can only go up while the analysis runs.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple

from .models import ExperienceLevel, RaceContext, RunnerProfile
from .timecodec import round_half_up


class RiskLevel(Enum):
    """Ordered risk classification."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _RISK_ORDER.index(self)

    def raise_to(self, minimum: 'RiskLevel') -> 'RiskLevel':
        """Return the higher of this level and ``minimum``."""
        return minimum if minimum.rank > self.rank else self


_RISK_ORDER = [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH]


GENERAL_SAFETY_RECOMMENDATIONS = (
    'Always warm up properly before the race and cool down afterwards.',
    'Listen to your body. Stop immediately if you feel sharp pain, dizziness or chest pain.',
)


@dataclass(frozen=True)
class HealthFinding:
    """Outcome of one health check."""
    minimum_risk: RiskLevel = RiskLevel.LOW
    warnings: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SafetyAdjustments:
    """Pace slowdown recommended for safety."""
    pace_adjustment: float = 1.0
    recommended_pace_increase: int = 0     # percent

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pace_adjustment': self.pace_adjustment,
            'recommended_pace_increase': self.recommended_pace_increase,
        }


@dataclass(frozen=True)
class HealthAnalysis:
    """
    Complete health and safety profile for a race.

    ``heart_rate_zones`` maps zone name -> (lower_bpm, upper_bpm).
    """
    risk_level: RiskLevel = RiskLevel.LOW
    bmi: Optional[float] = None
    bmi_category: str = ""
    max_heart_rate: Optional[int] = None
    heart_rate_zones: Optional[Dict[str, Tuple[int, int]]] = None
    heat_index: Optional[float] = None
    warnings: Tuple[str, ...] = field(default_factory=tuple)
    recommendations: Tuple[str, ...] = field(default_factory=tuple)
    safety_adjustments: SafetyAdjustments = field(default_factory=SafetyAdjustments)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'risk_level': self.risk_level.value,
            'bmi': round(self.bmi, 1) if self.bmi is not None else None,
            'bmi_category': self.bmi_category,
            'max_heart_rate': self.max_heart_rate,
            'heart_rate_zones': (
                {name: list(bounds) for name, bounds in self.heart_rate_zones.items()}
                if self.heart_rate_zones else None
            ),
            'heat_index': self.heat_index,
            'warnings': list(self.warnings),
            'recommendations': list(self.recommendations),
            'safety_adjustments': self.safety_adjustments.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'HealthAnalysis':
        zones = d.get('heart_rate_zones')
        adjustments = d.get('safety_adjustments') or {}
        return cls(
            risk_level=RiskLevel(d['risk_level']),
            bmi=d.get('bmi'),
            bmi_category=d.get('bmi_category', ''),
            max_heart_rate=d.get('max_heart_rate'),
            heart_rate_zones=(
                {name: tuple(bounds) for name, bounds in zones.items()} if zones else None
            ),
            heat_index=d.get('heat_index'),
            warnings=tuple(d.get('warnings', [])),
            recommendations=tuple(d.get('recommendations', [])),
            safety_adjustments=SafetyAdjustments(
                pace_adjustment=adjustments.get('pace_adjustment', 1.0),
                recommended_pace_increase=adjustments.get('recommended_pace_increase', 0),
            ),
        )


def calculate_bmi(weight_kg: Optional[float], height_m: Optional[float]) -> Optional[float]:
    """Body Mass Index, or None when weight/height are missing."""
    if not weight_kg or height_m is None or height_m <= 0:
        return None
    return weight_kg / (height_m ** 2)


def analyze_bmi(bmi: float) -> Tuple[str, HealthFinding]:
    """
    Categorize BMI using WHO thresholds.

    Returns:
        Tuple of (category, finding)
    """
    if bmi < 18.5:
        return 'Underweight (WHO)', HealthFinding(
            minimum_risk=RiskLevel.MEDIUM,
            warnings=('BMI below normal may indicate a nutritional deficiency. '
                      'Increased risk of stress fractures.',),
            recommendations=('WHO: See a health professional for a nutritional assessment.',),
        )
    elif bmi < 25:
        return 'Normal weight (WHO)', HealthFinding()
    elif bmi < 30:
        return 'Overweight (WHO)', HealthFinding(
            minimum_risk=RiskLevel.MEDIUM,
            warnings=('BMI indicates overweight, increasing stress on the joints '
                      '(knees, ankles).',),
            recommendations=('WHO: Focus on strength training to protect the joints.',),
        )
    else:
        return 'Obese (WHO)', HealthFinding(
            minimum_risk=RiskLevel.HIGH,
            warnings=('Obesity significantly increases the risk of cardiovascular events '
                      'and orthopedic injuries while running.',),
            recommendations=('CRITICAL: Medical consultation and clearance are essential '
                             'before long races.',),
        )


def calculate_max_heart_rate(age: int) -> int:
    """
    Estimate maximum heart rate (Tanaka).

    Formula: HRmax = 208 - 0.7 × age
    """
    return round_half_up(208 - 0.7 * age)


def calculate_hr_zones(max_hr: int) -> Dict[str, Tuple[int, int]]:
    """
    Calculate heart rate training zones as percentages of max HR.

    Zone system:
        Zone 1: 50-60% (recovery)
        Zone 2: 60-70% (aerobic base)
        Zone 3: 70-80% (tempo)
        Zone 4: 80-90% (threshold)
        Zone 5: 90-100% (anaerobic)

    Args:
        max_hr: Maximum heart rate

    Returns:
        Dictionary of zone name -> (lower_bound, upper_bound)
    """
    bands = [
        ('zone_1', 0.5, 0.6),
        ('zone_2', 0.6, 0.7),
        ('zone_3', 0.7, 0.8),
        ('zone_4', 0.8, 0.9),
        ('zone_5', 0.9, 1.0),
    ]
    return {
        name: (round_half_up(max_hr * low), round_half_up(max_hr * high))
        for name, low, high in bands
    }


def analyze_age_group(age: int) -> HealthFinding:
    """Runners 40 and over get at least medium risk."""
    if age >= 40:
        return HealthFinding(
            minimum_risk=RiskLevel.MEDIUM,
            recommendations=('Age over 40: WHO suggests regular medical check-ups '
                             'for people doing intense activity.',),
        )
    return HealthFinding()


def calculate_heat_index(temp_c: float, humidity_pct: float) -> float:
    """
    Heat index in °C (Rothfusz regression, Celsius coefficients).

    Args:
        temp_c: Air temperature (°C)
        humidity_pct: Relative humidity (%)

    Returns:
        Apparent temperature (°C)
    """
    t = temp_c
    rh = humidity_pct
    return (
        -8.78469475556
        + 1.61139411 * t
        + 2.33854883889 * rh
        - 0.14611605 * t * rh
        - 0.012308094 * t ** 2
        - 0.0164248277778 * rh ** 2
        + 0.002211732 * t ** 2 * rh
        + 0.00072546 * t * rh ** 2
        - 0.000003582 * t ** 2 * rh ** 2
    )


def analyze_climate_conditions(heat_index: float) -> HealthFinding:
    """
    Assess thermal stress.

    Heat index > 27 adds a warning only; > 32 also raises risk to medium.
    """
    feels_like = round_half_up(heat_index)
    warnings: List[str] = []
    recommendations: List[str] = []
    minimum_risk = RiskLevel.LOW

    if heat_index > 27:
        warnings.append(f'Hot conditions (feels like ~{feels_like}°C). '
                        'Increased risk of heat stress.')
        recommendations.append('Increase hydration and consider reducing intensity.')

    if heat_index > 32:
        minimum_risk = RiskLevel.MEDIUM
        warnings.append(f'DANGER: Extreme heat (feels like ~{feels_like}°C). '
                        'High risk of hyperthermia.')
        recommendations.append('WHO: Reduce intensity by 15-30%. Avoid racing if not '
                               'acclimatized.')

    return HealthFinding(minimum_risk, tuple(warnings), tuple(recommendations))


def analyze_experience_and_progression(
    distance_km: float,
    experience_level: ExperienceLevel
) -> HealthFinding:
    """Beginners racing beyond 10 km are high risk."""
    if distance_km > 10 and experience_level == ExperienceLevel.BEGINNER:
        return HealthFinding(
            minimum_risk=RiskLevel.HIGH,
            warnings=('Long distance for a beginner. High risk of overuse injury.',),
            recommendations=('Progression principle: increase weekly distance by '
                             'no more than 10-15%.',),
        )
    return HealthFinding()


def calculate_safety_adjustments(
    risk_level: RiskLevel,
    temp_c: float,
    medium_risk_factor: float = 1.05,
    high_risk_factor: float = 1.12,
    heat_factor: float = 1.05,
    heat_factor_temp_c: float = 28.0
) -> SafetyAdjustments:
    """
    Calculate pace slowdown for the final risk level.

    Formula:
        factor = risk_factor × (heat_factor if temp > 28°C)

    Args:
        risk_level: Final aggregated risk level
        temp_c: Expected max temperature

    Returns:
        SafetyAdjustments with factor and percent increase
    """
    factor = 1.0
    if risk_level == RiskLevel.MEDIUM:
        factor *= medium_risk_factor
    elif risk_level == RiskLevel.HIGH:
        factor *= high_risk_factor

    if temp_c > heat_factor_temp_c:
        factor *= heat_factor

    return SafetyAdjustments(
        pace_adjustment=factor,
        recommended_pace_increase=round_half_up((factor - 1) * 100),
    )


def generate_health_analysis(
    profile: RunnerProfile,
    race: RaceContext,
    distance_km: Optional[float] = None,
    **adjustment_params: float
) -> HealthAnalysis:
    """
    Run every health check and aggregate the results.

    Args:
        profile: Runner profile
        race: Race context (weather defaults applied)
        distance_km: Validated race distance (defaults to race.distance_km)
        **adjustment_params: Overrides for ``calculate_safety_adjustments``

    Returns:
        HealthAnalysis
    """
    distance = float(race.distance_km) if distance_km is None else distance_km
    temp_c = race.resolved_temp_c

    findings: List[HealthFinding] = []

    bmi = calculate_bmi(profile.weight_kg, profile.height_m)
    bmi_category = ''
    if bmi is not None:
        bmi_category, finding = analyze_bmi(bmi)
        findings.append(finding)

    max_hr = None
    zones = None
    if profile.age:
        max_hr = calculate_max_heart_rate(profile.age)
        zones = calculate_hr_zones(max_hr)
        findings.append(analyze_age_group(profile.age))

    heat_index = calculate_heat_index(temp_c, race.resolved_humidity_pct)
    findings.append(analyze_climate_conditions(heat_index))
    findings.append(analyze_experience_and_progression(distance, profile.experience_level))

    risk = RiskLevel.LOW
    warnings: List[str] = []
    recommendations: List[str] = []
    for finding in findings:
        risk = risk.raise_to(finding.minimum_risk)
        warnings.extend(finding.warnings)
        recommendations.extend(finding.recommendations)

    recommendations.extend(GENERAL_SAFETY_RECOMMENDATIONS)

    return HealthAnalysis(
        risk_level=risk,
        bmi=bmi,
        bmi_category=bmi_category,
        max_heart_rate=max_hr,
        heart_rate_zones=zones,
        heat_index=heat_index,
        warnings=tuple(warnings),
        recommendations=tuple(recommendations),
        safety_adjustments=calculate_safety_adjustments(risk, temp_c, **adjustment_params),
    )
