"""
Padding normalization.

Options accept either a single number (both sides) or a pair of numbers.
The shape is resolved once, at construction time.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Sequence, Union

from chartscale.errors import ConfigurationError
from chartscale.utils import is_finite_number, is_real_number

PaddingInput = Union[None, float, Sequence[float], "Padding"]


@dataclass(frozen=True)
class Padding:
    """Validated padding before (towards min) and after (towards max) a range."""
    before: float = 0.0
    after: float = 0.0

    def __post_init__(self) -> None:
        for side in (self.before, self.after):
            if not is_finite_number(side) or side < 0:
                raise ConfigurationError(f"Invalid padding: {side!r}")

    def __iter__(self) -> Iterator[float]:
        yield self.before
        yield self.after

    def __bool__(self) -> bool:
        return bool(self.before or self.after)

    @classmethod
    def normalize(cls, value: Any, default: float = 0.0) -> Padding:
        """
        Build a Padding from a user supplied shape.

        Args:
            value: None (use `default`), a number, a pair of numbers or a Padding.
            default: Value applied to both sides when `value` is None.

        Returns:
            A validated Padding.

        Raises:
            ConfigurationError: For any other shape.
        """
        if value is None:
            return cls(float(default), float(default))
        if isinstance(value, Padding):
            return value
        if is_real_number(value):
            return cls(float(value), float(value))
        if isinstance(value, (str, bytes)):
            raise ConfigurationError(f"Invalid padding: {value!r}")
        try:
            items = list(value)
        except TypeError:
            raise ConfigurationError(f"Invalid padding: {value!r}") from None
        if len(items) != 2 or not all(is_real_number(v) for v in items):
            raise ConfigurationError(f"Invalid padding: {value!r}")
        return cls(float(items[0]), float(items[1]))
