"""
Divisor utilities (trial division).

Used by the tick scales to find step sizes compatible with a radix
(e.g. 1, 2, 3, 4, 6, 12 for months).
"""
from __future__ import annotations

import math
import numbers
from typing import List

# Optimisation for the most common radix
FACTORS_10 = [1, 2, 5, 10]


def _as_integer(value) -> int | None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if not math.isfinite(value) or value % 1 != 0:
        return None
    return int(value)


def _find_positive_factors(x: int) -> List[int]:
    root = math.isqrt(x)
    head: List[int] = []
    tail: List[int] = []
    for i in range(1, root + 1):
        if x % i == 0:
            head.append(i)
            if i != x // i:
                tail.append(x // i)
    return head + tail[::-1]


def find_factors(value) -> List[int]:
    """
    All divisors of an integer in ascending order.

    Negative inputs give the negated divisors (still ascending), zero and
    non-integers give an empty list.

    >>> find_factors(10)
    [1, 2, 5, 10]
    >>> find_factors(-10)
    [-10, -5, -2, -1]
    """
    x = _as_integer(value)
    if not x:
        return []
    negative = x < 0
    x = abs(x)

    if x == 1:
        factors = [1]
    elif x == 10:
        factors = list(FACTORS_10)
    else:
        factors = _find_positive_factors(x)

    if negative:
        factors = [-f for f in reversed(factors)]
    return factors


def find_common_factors(a, b) -> List[int]:
    """
    Divisors shared by `a` and `b`.

    Operands with different signs (or a zero operand) have no common factors.

    >>> find_common_factors(8, 12)
    [1, 2, 4]
    """
    x1 = _as_integer(a)
    x2 = _as_integer(b)
    if not x1 or not x2 or (x1 < 0) != (x2 < 0):
        return []
    if x1 == x2:
        return find_factors(x1)

    if abs(x1) < abs(x2):
        lower, higher = x1, x2
    else:
        lower, higher = x2, x1
    return [f for f in find_factors(lower) if higher % f == 0]
