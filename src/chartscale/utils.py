from __future__ import annotations

import math
import numbers
from decimal import Decimal, InvalidOperation
from typing import Any

from chartscale.errors import ConfigurationError


def is_real_number(value: Any) -> bool:
    """True for ints, floats, numpy scalars and Decimals, but not for bools."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (numbers.Real, Decimal))


def is_finite_number(value: Any) -> bool:
    """True for real numbers that are neither NaN nor infinite."""
    if not is_real_number(value):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def to_decimal(value: Any, name: str = "value") -> Decimal:
    """
    Convert a number or numeric string to a Decimal.

    Floats go through their shortest repr, so 1.1 becomes Decimal("1.1")
    rather than the exact binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid {name}: {value!r}")
    if isinstance(value, numbers.Integral):
        return Decimal(int(value))
    if isinstance(value, (numbers.Real, str)):
        try:
            return Decimal(str(float(value)) if isinstance(value, numbers.Real) else value.strip())
        except InvalidOperation as e:
            raise ConfigurationError(f"Invalid {name}: {value!r}") from e
    raise ConfigurationError(f"Invalid {name}: {value!r}")


def round_half_up(x: float) -> int:
    """Round to the nearest integer, with halves going up (towards +inf)."""
    return math.floor(x + 0.5)
