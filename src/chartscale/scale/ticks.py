"""
Tick Generator
==============
Picks "nice" gridline positions for an axis.

The algorithm works in arbitrary precision (decimal.Decimal) so that tick
positions such as 0.3 or 1e-12 come out exact and print cleanly.

Candidates are built from the mantissas 1, 2, 5 and 10 scaled by a power of
ten derived from the minimum tick distance. Candidates closer together than
the minimum distance are rejected (except mantissa 10, which always fits) and
the survivor whose interval has the shortest decimal representation wins.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR
from typing import List, Optional

from chartscale.errors import ComputationError, ConfigurationError
from chartscale.utils import to_decimal

MANTISSAS = tuple(Decimal(m) for m in (1, 2, 5, 10))
_TEN = Decimal(10)


@dataclass(frozen=True)
class TickBase:
    """The chosen tick grid: `count` intervals from `start` to `end`."""
    start: Decimal
    end: Decimal
    interval: Decimal
    count: int


def _floor(x: Decimal) -> Decimal:
    return x.to_integral_value(rounding=ROUND_FLOOR)


def _ceil(x: Decimal) -> Decimal:
    return x.to_integral_value(rounding=ROUND_CEILING)


def find_tick_base(start, end, min_distance=0) -> TickBase:
    """
    Find the tick grid covering [start, end].

    Args:
        start: Start of the interval.
        end: End of the interval, strictly greater than `start`.
        min_distance: Smallest allowed distance between two ticks (>= 0).

    Returns:
        The winning TickBase.

    Raises:
        ConfigurationError: Invalid interval or minimum distance.
        ComputationError: No candidate interval was accepted.
    """
    a = to_decimal(start, "start")
    b = to_decimal(end, "end")
    if not a.is_finite() or not b.is_finite() or b <= a:
        raise ConfigurationError('Interval must be finite and with a positive length')

    min_dist = to_decimal(min_distance, "minimum distance")
    if not min_dist.is_finite() or min_dist < 0:
        raise ConfigurationError(f'Invalid minimum tick distance: {min_distance!r}')

    if min_dist > 0:
        exponent = _TEN ** _floor(min_dist.log10())
    else:
        # Nothing to satisfy, scale by the interval itself
        exponent = _TEN ** _floor((b - a).log10())

    best_rank = 0
    best: Optional[TickBase] = None
    for mantissa in MANTISSAS:
        m_start = _floor(a / exponent / mantissa) * mantissa
        m_end = _ceil(b / exponent / mantissa) * mantissa
        m_length = m_end - m_start
        count = m_length / mantissa
        interval = m_length / count * exponent
        if interval < min_dist and mantissa != _TEN:
            continue
        rank = len(str(interval))
        if best is None or rank < best_rank:
            best_rank = rank
            best = TickBase(
                start=m_start * exponent,
                end=m_end * exponent,
                interval=interval,
                count=int(count),
            )

    if best is None:
        raise ComputationError('Failed to find tick interval')
    return best


def ticks(start, end, min_distance=0, expand: bool = False) -> List[Decimal]:
    """
    Tick positions for the interval [start, end].

    Args:
        start: Start of the interval.
        end: End of the interval, strictly greater than `start`.
        min_distance: Smallest allowed distance between two ticks (>= 0).
        expand: If True, return the whole chosen grid, which may extend past
            the input bounds. Otherwise ticks are clipped to [start, end].

    Returns:
        Ascending tick positions with a uniform interval.

    >>> [str(t) for t in ticks(0, 5, min_distance=1.1)]
    ['0', '2', '4']
    """
    base = find_tick_base(start, end, min_distance)
    if expand:
        lower, upper = base.start, base.end
    else:
        lower, upper = to_decimal(start), to_decimal(end)

    result: List[Decimal] = []
    for i in range(base.count + 1):
        tick = base.start + base.interval * i
        if lower <= tick <= upper:
            result.append(tick)
    return result
