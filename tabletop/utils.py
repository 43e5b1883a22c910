"""
Shared utilities for the Tabletop League Engine.

This module provides common functions used across multiple modules
to avoid code duplication.
"""

import logging
import math
import numbers
from collections.abc import Iterable, Mapping
from decimal import Decimal

from tabletop.config import PLACEMENTS
from tabletop.exceptions import InvalidPlacements


# --- Logging Setup ---
def setup_logging(name: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


# --- Record Access ---
def get_field(record, *keys, default=None):
    """
    Read the first present key from a mapping or attribute from an object.

    Host payloads arrive with camelCase keys (``playerId``) while the
    engine's own dataclasses use snake_case (``player_id``); callers pass
    both spellings.
    """
    for key in keys:
        if isinstance(record, Mapping):
            if key in record:
                return record[key]
        elif hasattr(record, key):
            return getattr(record, key)
    return default


def pair_key(a, b) -> frozenset:
    """Unordered key for a pair of player ids."""
    return frozenset((a, b))


# --- Coercion ---
def to_number(value):
    """
    Coerce a loosely-typed configuration value to an int or float.

    Accepts numeric strings and any real number type, including numpy
    scalars and Decimal.

    Raises:
        ValueError: If the value is missing, non-numeric or not finite
    """
    # bool and numpy integers are Integral
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, (numbers.Real, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            number = float(text)
    else:
        raise ValueError(f"Cannot coerce {value!r} to a number")

    if not math.isfinite(number):
        raise ValueError(f"Non-finite number: {value!r}")
    return number


def placement_key(key) -> str:
    """Normalize a placement key (1, 1.0, "1") to its string form."""
    if isinstance(key, float) and key.is_integer():
        key = int(key)
    return str(key).strip()


# --- Validation ---
def validate_placements(placements: Iterable[int]) -> None:
    """
    Validate that a table's placements are a permutation of 1..4.

    Raises:
        InvalidPlacements: On ties, gaps or out-of-range values
    """
    placements = list(placements)
    try:
        ordered = sorted(placements)
    except TypeError:
        raise InvalidPlacements(placements) from None
    if ordered != list(PLACEMENTS):
        raise InvalidPlacements(placements)


__all__ = [
    # Logging
    'setup_logging',
    # Record access
    'get_field',
    'pair_key',
    # Coercion
    'to_number',
    'placement_key',
    # Validation
    'validate_placements',
]
