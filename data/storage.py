"""
Persistent storage for input fields and the last report.

``KeyValueStore`` is a small JSON-file backed key-value store with a key
prefix; ``AppData`` layers the input field defaults, validation and the
saved report on top of it.
"""

from pathlib import Path
from typing import Optional, Dict, Any, List, Union
import json

from core.report import RaceReport
from .records import RaceInputs, parse_input_record


DEFAULT_PREFIX = 'runner_analysis_'

FIELD_DEFAULTS: Dict[str, Any] = {
    'raceName': '',
    'raceDate': '',
    'raceDistance': '',
    'raceType': 'Road',
    'tempMin': '',
    'tempMax': '',
    'humidity': '',
    'rainChance': '',
    'runnerAge': '',
    'runnerGender': '',
    'runnerExperience': 'Intermediate',
    'runnerWeight': '',
    'runnerHeight': '',
    'pb5k': '',
    'pb10k': '',
    'pb21k': '',
    'pb42k': '',
    'objective': 'Target Time',
    'targetTime': '',
    'analysis': None,
}

SUMMARY_FIELDS = {
    'raceName': 'Race Name',
    'raceDate': 'Race Date',
    'raceDistance': 'Distance',
    'runnerAge': 'Age',
    'runnerWeight': 'Weight',
    'runnerHeight': 'Height',
}


class KeyValueStore:
    """
    JSON-file backed key-value store.

    Keys are namespaced with a prefix so several tools can share a file.
    Every ``set`` writes the file through.
    """

    def __init__(self, path: Union[str, Path], prefix: str = DEFAULT_PREFIX):
        self.path = Path(path)
        self.prefix = prefix
        self._items = self._read()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                items = json.load(f)
        except (OSError, ValueError) as e:
            print(f"Warning: could not read store {self.path}: {e}")
            return {}
        return items if isinstance(items, dict) else {}

    def _write(self) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w') as f:
                json.dump(self._items, f, indent=2, ensure_ascii=False)
        except OSError as e:
            print(f"Warning: could not write store {self.path}: {e}")
            return False
        return True

    def set(self, key: str, value: Any) -> bool:
        """Store a JSON-serialisable value."""
        self._items[self.prefix + key] = value
        return self._write()

    def get(self, key: str, default: Any = None) -> Any:
        """Return a stored value, or ``default`` if absent."""
        return self._items.get(self.prefix + key, default)

    def clear(self) -> bool:
        """Remove every key carrying this store's prefix."""
        self._items = {
            k: v for k, v in self._items.items() if not k.startswith(self.prefix)
        }
        return self._write()


class AppData:
    """Input fields and saved analysis, loaded with defaults."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.data = self.load_data()

    def load_data(self) -> Dict[str, Any]:
        return {key: self.store.get(key, default) for key, default in FIELD_DEFAULTS.items()}

    def set(self, key: str, value: Any):
        self.data[key] = value
        self.store.set(key, value)

    def get(self, key: str) -> Any:
        return self.data.get(key)

    def reset(self):
        """Clear the store and restore defaults."""
        self.store.clear()
        self.data = self.load_data()

    def validate_required_data(self) -> Dict[str, Any]:
        """
        Check the fields required before an analysis can run.

        Returns:
            Dictionary with 'is_valid' and a list of 'errors'
        """
        errors: List[str] = []
        raw = self.data.get('raceDistance')
        if raw is None or str(raw).strip() == '':
            errors.append('Race distance is required')

        try:
            distance = float(raw)
        except (TypeError, ValueError):
            distance = float('nan')
        if not (0 < distance <= 200):
            errors.append('Distance must be a valid number above 0 and up to 200 km')

        return {
            'is_valid': len(errors) == 0,
            'errors': errors,
        }

    def get_data_summary(self) -> Dict[str, Any]:
        """Report which key fields are filled and overall completeness."""
        filled = []
        empty = []
        for key, label in SUMMARY_FIELDS.items():
            value = self.data.get(key)
            if value is not None and str(value).strip() != '':
                filled.append(label)
            else:
                empty.append(label)

        return {
            'filled': filled,
            'empty': empty,
            'completeness': round(len(filled) / len(SUMMARY_FIELDS) * 100),
        }

    def get_inputs(self) -> RaceInputs:
        """Typed inputs built from the stored fields."""
        return parse_input_record(self.data)

    def save_report(self, report: RaceReport):
        self.set('analysis', report.to_dict())

    def load_report(self) -> Optional[RaceReport]:
        """Return the saved report, or None if absent or unreadable."""
        saved = self.data.get('analysis')
        if not saved:
            return None
        try:
            return RaceReport.from_dict(saved)
        except (KeyError, TypeError, ValueError) as e:
            print(f"Warning: saved analysis could not be loaded: {e}")
            return None
