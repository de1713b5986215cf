"""Input records, masks and persistent storage."""

from .masks import apply_mask, mask_field, mask_time, mask_long_time
from .records import (
    RaceInputs,
    parse_input_record,
    load_records_csv,
    iter_input_records,
    records_to_inputs,
    INPUT_FIELDS,
)
from .storage import KeyValueStore, AppData

__all__ = [
    # Masks
    'apply_mask',
    'mask_field',
    'mask_time',
    'mask_long_time',
    # Records
    'RaceInputs',
    'parse_input_record',
    'load_records_csv',
    'iter_input_records',
    'records_to_inputs',
    'INPUT_FIELDS',
    # Storage
    'KeyValueStore',
    'AppData',
]
