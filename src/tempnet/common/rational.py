"""
Rational approximation helpers for exact-count resampling.

The null-model sampler turns real-valued matrix entries and two-path weights
into integer replica counts. Each value is snapped to a mixed fraction whose
denominator divides ``precision``; multiplying all values by the least common
multiple of the denominators then yields integers whose ratios match the
original values up to ``1 / precision``. Because every denominator divides
``precision``, the least common multiple never exceeds it.
"""

import math
from typing import Iterable, NamedTuple

from .exceptions import require_positive


class MixedFraction(NamedTuple):
    """A non-negative value written as ``whole + numerator / denominator``."""

    whole: int
    numerator: int
    denominator: int


def gcd(a: int, b: int) -> int:
    """Greatest common divisor of two integers."""
    return math.gcd(a, b)


def lcm(a: int, b: int) -> int:
    """Least common multiple of two integers (0 if either is 0)."""
    if a == 0 or b == 0:
        return 0
    return abs(a * b) // math.gcd(a, b)


def lcm_of(denominators: Iterable[int]) -> int:
    """Least common multiple of a collection of denominators; 1 if empty."""
    result = 1
    for denominator in denominators:
        result = lcm(result, denominator)
    return result


def round_to_mixed_fraction(value: float, precision: int = 1000) -> MixedFraction:
    """
    Approximate a value by a mixed fraction on the grid ``k / precision``.

    Parameters
    ----------
    value : float
        Value to approximate
    precision : int, default 1000
        Resolution of the fractional part. The returned denominator always
        divides this number.

    Returns
    -------
    MixedFraction
        ``(whole, numerator, denominator)`` in lowest terms. The fractional
        part is the grid point nearest to ``|value - whole|``; exact ties are
        resolved towards the upper grid point. A fractional part that rounds
        up to one carries into the whole part.

    Raises
    ------
    ConfigurationError
        If precision is not positive

    Examples
    --------
    >>> round_to_mixed_fraction(5.5)
    MixedFraction(whole=5, numerator=1, denominator=2)
    >>> round_to_mixed_fraction(1 / 3, precision=10)
    MixedFraction(whole=0, numerator=3, denominator=10)
    """
    require_positive(precision, "precision")

    whole = math.trunc(value)
    fraction = abs(value - whole)
    if fraction == 0:
        return MixedFraction(whole, 0, 1)

    # Smallest grid index n with n / precision >= fraction
    n = math.ceil(fraction * precision)
    while n > 0 and (n - 1) / precision >= fraction:
        n -= 1
    while n / precision < fraction:
        n += 1

    hi = n / precision
    lo = (n - 1) / precision
    if (fraction - lo) < (hi - fraction):
        n -= 1

    if n == precision:
        return MixedFraction(whole + 1, 0, 1)
    if n == 0:
        return MixedFraction(whole, 0, 1)

    divisor = math.gcd(n, precision)
    return MixedFraction(whole, n // divisor, precision // divisor)
