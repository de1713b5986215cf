"""
Flat input records -> typed analysis inputs.

A record is the flat field map kept by the input store (or one row of a
batch CSV): every value is raw text as the runner typed it. Missing or
unparseable optional values become None so the engine applies its
defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, Iterator, List, Mapping, Tuple, Union
import math

import pandas as pd

from core.models import (
    ExperienceLevel,
    PersonalBest,
    RaceContext,
    RunnerProfile,
    SurfaceType,
    STANDARD_DISTANCES,
)


# record field -> (distance_km, label)
PB_FIELDS = dict(zip(('pb5k', 'pb10k', 'pb21k', 'pb42k'), STANDARD_DISTANCES))

INPUT_FIELDS = [
    'raceName', 'raceDate', 'raceDistance', 'raceType',
    'tempMin', 'tempMax', 'humidity', 'rainChance',
    'runnerAge', 'runnerGender', 'runnerExperience', 'runnerWeight', 'runnerHeight',
    'pb5k', 'pb10k', 'pb21k', 'pb42k',
    'objective', 'targetTime',
]

# Values written by earlier Portuguese-language versions of the form
SURFACE_ALIASES = {'rua': 'Road', 'trilha': 'Trail'}
EXPERIENCE_ALIASES = {
    'iniciante': 'Beginner',
    'intermediário': 'Intermediate',
    'intermediario': 'Intermediate',
    'avançado': 'Advanced',
    'avancado': 'Advanced',
}


@dataclass(frozen=True)
class RaceInputs:
    """Typed inputs for one analysis run."""
    profile: RunnerProfile
    race: RaceContext
    personal_bests: Tuple[PersonalBest, ...] = field(default_factory=tuple)
    race_name: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'race_name': self.race_name,
            'profile': self.profile.to_dict(),
            'race': self.race.to_dict(),
            'personal_bests': [pb.to_dict() for pb in self.personal_bests],
        }


def parse_optional_float(value: Any) -> Optional[float]:
    """Parse a numeric field; blanks, text and NaN give None."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip().replace(',', '.')
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_optional_int(value: Any) -> Optional[int]:
    number = parse_optional_float(value)
    return None if number is None else int(number)


def parse_personal_bests(record: Mapping[str, Any]) -> Tuple[PersonalBest, ...]:
    """
    Collect personal bests in 5K, 10K, 21K, 42K order.

    A field counts as filled when it contains a colon.
    """
    records = []
    for key, (distance, label) in PB_FIELDS.items():
        value = record.get(key)
        if isinstance(value, str) and ':' in value:
            records.append(PersonalBest(distance_km=distance, time=value.strip(), label=label))
    return tuple(records)


def parse_input_record(record: Mapping[str, Any]) -> RaceInputs:
    """
    Convert a flat field record into analysis inputs.

    The race distance is passed through untouched; the engine validates it.

    Args:
        record: Field name -> raw value

    Returns:
        RaceInputs
    """
    experience = str(record.get('runnerExperience') or '').strip()
    surface = str(record.get('raceType') or '').strip()

    profile = RunnerProfile(
        age=parse_optional_int(record.get('runnerAge')),
        weight_kg=parse_optional_float(record.get('runnerWeight')),
        height_m=parse_optional_float(record.get('runnerHeight')),
        experience_level=ExperienceLevel.from_value(
            EXPERIENCE_ALIASES.get(experience.lower(), experience)
        ),
    )

    race = RaceContext(
        distance_km=record.get('raceDistance'),
        surface=SurfaceType.from_value(SURFACE_ALIASES.get(surface.lower(), surface)),
        temp_max_c=parse_optional_float(record.get('tempMax')),
        humidity_pct=parse_optional_float(record.get('humidity')),
    )

    return RaceInputs(
        profile=profile,
        race=race,
        personal_bests=parse_personal_bests(record),
        race_name=str(record.get('raceName') or ''),
    )


def load_records_csv(path: Union[str, Path]) -> pd.DataFrame:
    """
    Load a batch of input records.

    Every column is read as text so clock values like ``50:00`` survive.

    Args:
        path: CSV file with one record per row (columns named as INPUT_FIELDS)

    Returns:
        DataFrame of records
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Records file not found: {path}")
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def iter_input_records(df: pd.DataFrame) -> Iterator[Dict[str, Any]]:
    """Yield each row as a flat record dictionary."""
    for row in df.to_dict(orient='records'):
        yield {k: v for k, v in row.items() if v != ''}


def records_to_inputs(df: pd.DataFrame) -> List[RaceInputs]:
    """Parse every row of a records DataFrame."""
    return [parse_input_record(record) for record in iter_input_records(df)]
