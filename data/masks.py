"""
Input masks for raw form/CLI field values.

Each mask strips stray characters and truncates to the field's shape,
e.g. ``'5000'`` -> ``'50:00'`` for a time field.
"""

import re


def _digits(value: str) -> str:
    return re.sub(r'\D', '', value or '')


def mask_time(value: str) -> str:
    """Mask as ``MM:SS``."""
    numbers = _digits(value)
    if len(numbers) <= 2:
        return numbers
    return numbers[:2] + ':' + numbers[2:4]


def mask_long_time(value: str) -> str:
    """Mask as ``H:MM:SS``."""
    numbers = _digits(value)
    if len(numbers) <= 1:
        return numbers
    if len(numbers) <= 3:
        return numbers[:1] + ':' + numbers[1:3]
    return numbers[:1] + ':' + numbers[1:3] + ':' + numbers[3:5]


def mask_height(value: str) -> str:
    """Mask as ``M.CC`` metres."""
    numbers = _digits(value)
    if len(numbers) <= 1:
        return numbers
    return numbers[:1] + '.' + numbers[1:3]


# mask kind -> max digits for plain numeric fields
NUMERIC_LIMITS = {
    'percentage': 3,
    'temperature': 2,
    'distance': 3,
    'age': 2,
    'weight': 3,
}

# input field -> mask kind
# Distance, weight and temperature stay unmasked so decimals and
# negative temperatures survive.
FIELD_MASKS = {
    'raceName': 'raceName',
    'humidity': 'percentage',
    'rainChance': 'percentage',
    'runnerAge': 'age',
    'runnerHeight': 'height',
    'pb5k': 'time',
    'pb10k': 'time',
    'pb21k': 'longTime',
    'pb42k': 'longTime',
    'targetTime': 'longTime',
}


def apply_mask(value: str, kind: str) -> str:
    """
    Apply a named mask to a raw value.

    Unknown kinds return the value unchanged.

    Args:
        value: Raw input text
        kind: Mask name ('time', 'longTime', 'height', 'raceName' or a
            key of NUMERIC_LIMITS)

    Returns:
        Masked text
    """
    value = value or ''
    if kind == 'time':
        return mask_time(value)
    elif kind == 'longTime':
        return mask_long_time(value)
    elif kind == 'height':
        return mask_height(value)
    elif kind == 'raceName':
        return value[:50]
    elif kind in NUMERIC_LIMITS:
        return _digits(value)[:NUMERIC_LIMITS[kind]]
    return value


def mask_field(field_name: str, value: str) -> str:
    """Apply the mask registered for an input field (if any)."""
    kind = FIELD_MASKS.get(field_name)
    if kind is None:
        return value
    return apply_mask(value, kind)
