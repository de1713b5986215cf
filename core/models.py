"""
Input models for race analysis.

Defines the runner profile, race context and personal best records that
every analysis call receives in full, plus the single error type the
engine raises for invalid input.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any

from .timecodec import parse_time_to_seconds


class InvalidInputError(ValueError):
    """Raised when required race input is missing or invalid."""


class ExperienceLevel(Enum):
    """Runner experience classification."""
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"

    @classmethod
    def from_value(cls, value: Any) -> 'ExperienceLevel':
        """Resolve a level from an enum member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        text = str(value or '').strip().lower()
        for level in cls:
            if text in (level.value.lower(), level.name.lower()):
                return level
        return cls.INTERMEDIATE


class SurfaceType(Enum):
    """Race course surface."""
    ROAD = "Road"
    TRAIL = "Trail"

    @classmethod
    def from_value(cls, value: Any) -> 'SurfaceType':
        """Resolve a surface from an enum member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        text = str(value or '').strip().lower()
        for surface in cls:
            if text in (surface.value.lower(), surface.name.lower()):
                return surface
        return cls.ROAD


DEFAULT_TEMP_C = 20.0
DEFAULT_HUMIDITY_PCT = 50.0

# distance_km -> label for the four standard personal best distances
STANDARD_DISTANCES = (
    (5.0, '5K'),
    (10.0, '10K'),
    (21.0975, '21K'),
    (42.195, '42K'),
)


@dataclass(frozen=True)
class RunnerProfile:
    """
    Runner profile for a single analysis run.

    All physiological fields are optional; missing values simply skip
    the corresponding health checks.
    """
    age: Optional[int] = None
    weight_kg: Optional[float] = None
    height_m: Optional[float] = None
    experience_level: ExperienceLevel = ExperienceLevel.INTERMEDIATE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'age': self.age,
            'weight_kg': self.weight_kg,
            'height_m': self.height_m,
            'experience_level': self.experience_level.value,
        }


@dataclass(frozen=True)
class RaceContext:
    """Target race and expected weather."""
    distance_km: Any
    surface: SurfaceType = SurfaceType.ROAD
    temp_max_c: Optional[float] = None
    humidity_pct: Optional[float] = None

    @property
    def resolved_temp_c(self) -> float:
        """Expected max temperature, defaulting to 20°C."""
        return DEFAULT_TEMP_C if self.temp_max_c is None else float(self.temp_max_c)

    @property
    def resolved_humidity_pct(self) -> float:
        """Expected humidity, defaulting to 50%."""
        return DEFAULT_HUMIDITY_PCT if self.humidity_pct is None else float(self.humidity_pct)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'distance_km': self.distance_km,
            'surface': self.surface.value,
            'temp_max_c': self.temp_max_c,
            'humidity_pct': self.humidity_pct,
        }


@dataclass(frozen=True)
class PersonalBest:
    """A personal best time at one of the standard distances."""
    distance_km: float
    time: str
    label: str = ""

    @property
    def seconds(self) -> float:
        """Personal best duration in seconds (0 if unparseable)."""
        return parse_time_to_seconds(self.time)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'distance_km': self.distance_km,
            'time': self.time,
            'label': self.label,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'PersonalBest':
        """Create record from dictionary."""
        return cls(
            distance_km=float(d['distance_km']),
            time=d['time'],
            label=d.get('label', ''),
        )
