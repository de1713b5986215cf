"""
Hydration and nutrition checkpoints.

Based on:
- ACSM (2007). Exercise and fluid replacement position stand
  (~150ml every 15-20 minutes during prolonged running)

Walks the course kilometre by kilometre at the base pace and places a
drink whenever a full interval has passed since the previous one.
Intervals shorten in hot weather.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any, List, Tuple
import math

from .timecodec import format_seconds, parse_time_to_seconds


ACSM_HYDRATION_ML = 150
NUTRITION_SUGGESTION = 'Consider 1 carbohydrate gel'


@dataclass(frozen=True)
class HydrationCheckpoint:
    """A planned drink stop."""
    km: float
    elapsed_seconds: float
    fluid_ml: int
    servings: int = 1
    nutrition: Optional[str] = None

    @property
    def time(self) -> str:
        return format_seconds(self.elapsed_seconds)

    @property
    def fluid(self) -> str:
        return f"Drink {self.fluid_ml}ml of water or sports drink"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'km': self.km,
            'elapsed_seconds': self.elapsed_seconds,
            'time': self.time,
            'fluid_ml': self.fluid_ml,
            'servings': self.servings,
            'fluid': self.fluid,
            'nutrition': self.nutrition,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'HydrationCheckpoint':
        return cls(
            km=float(d['km']),
            elapsed_seconds=float(d['elapsed_seconds']),
            fluid_ml=int(d['fluid_ml']),
            servings=int(d.get('servings', 1)),
            nutrition=d.get('nutrition'),
        )


def get_hydration_interval(
    temp_c: float,
    hot_temp_c: float = 25.0,
    hot_interval_min: float = 15.0,
    interval_min: float = 20.0
) -> float:
    """Seconds between drinks: 15 min above 25°C, else 20 min."""
    minutes = hot_interval_min if temp_c > hot_temp_c else interval_min
    return minutes * 60


def get_checkpoint_stops(distance_km: float) -> List[float]:
    """Whole kilometres along the course, plus the finish if it is fractional."""
    stops = [float(km) for km in range(1, int(math.floor(distance_km)) + 1)]
    if distance_km > 0 and distance_km != math.floor(distance_km):
        stops.append(distance_km)
    return stops


def generate_hydration_plan(
    distance_km: float,
    base_pace: str,
    temp_c: float,
    fluid_ml: int = ACSM_HYDRATION_ML,
    nutrition_min_distance_km: float = 15.0,
    nutrition_min_elapsed_s: float = 3600.0,
    **interval_params: float
) -> Tuple[HydrationCheckpoint, ...]:
    """
    Plan drink stops along the course.

    A checkpoint is placed at the first stop where at least one interval
    has elapsed since the last drink. If several intervals passed (very
    slow pace), the checkpoint counts one serving per interval. The next
    interval is timed from the checkpoint itself.

    Args:
        distance_km: Race distance
        base_pace: Base pace per km (``M:SS``)
        temp_c: Expected max temperature
        fluid_ml: Fluid per serving
        nutrition_min_distance_km: Races longer than this get gel suggestions
        nutrition_min_elapsed_s: ...once this much time has elapsed
        **interval_params: Overrides for ``get_hydration_interval``

    Returns:
        Checkpoints in course order
    """
    pace_seconds = parse_time_to_seconds(base_pace)
    if pace_seconds <= 0:
        return ()

    interval = get_hydration_interval(temp_c, **interval_params)
    last_drink = 0.0
    next_drink = interval

    plan: List[HydrationCheckpoint] = []
    for km in get_checkpoint_stops(distance_km):
        elapsed = km * pace_seconds
        if elapsed < next_drink:
            continue

        servings = max(1, int((elapsed - last_drink) // interval))
        wants_fuel = (distance_km > nutrition_min_distance_km
                      and elapsed > nutrition_min_elapsed_s)

        plan.append(HydrationCheckpoint(
            km=km,
            elapsed_seconds=elapsed,
            fluid_ml=fluid_ml * servings,
            servings=servings,
            nutrition=NUTRITION_SUGGESTION if wants_fuel else None,
        ))

        last_drink = elapsed
        # Timed from this checkpoint, not the previous threshold: keeps every gap >= interval
        next_drink = elapsed + interval

    return tuple(plan)
