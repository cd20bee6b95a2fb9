# -----------------------------------------------------------------------------
#  verify.py
#  Cross-checking the deterministic test against independent oracles
# -----------------------------------------------------------------------------

"""
Independent primality oracles and range cross-checks.

The Miller-Rabin decision has no runtime failure mode: a transcription error
in a witness table or a truncated product shows up only as a wrong boolean.
These helpers compare it against slower references:

  - ``trial``: trial division by 2, 3 and 6k +- 1 up to isqrt(n)
  - ``sympy``: sympy.isprime, one call per value
  - ``sieve``: sympy's sieve over the whole range at once
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from math import isqrt
from typing import NamedTuple

from sympy import isprime as sympy_isprime
from sympy import primerange

from detprime.millerrabin import miller_rabin
from detprime.progress import Progress
from detprime.utility import U64_MAX, UserInputError

ORACLES = ("sympy", "sieve", "trial")

# Largest span the sieve oracle will materialise at once.
_SIEVE_CHUNK = 1 << 20


class Mismatch(NamedTuple):
    n: int
    expected: bool
    got: bool


def trial_division_is_prime(n: int) -> bool:
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    limit = isqrt(n)
    k = 5
    while k <= limit:
        if n % k == 0 or n % (k + 2) == 0:
            return False
        k += 6
    return True


def _pointwise(oracle: Callable[[int], bool], values: Iterable[int]) -> Iterable[tuple[int, bool]]:
    for n in values:
        yield n, bool(oracle(n))


def _sieved(start: int, stop: int) -> Iterable[tuple[int, bool]]:
    lo = start
    while lo < stop:
        hi = min(stop, lo + _SIEVE_CHUNK)
        primes = set(primerange(lo, hi))
        for n in range(lo, hi):
            yield n, n in primes
        lo = hi


def _check_range(start: int, stop: int) -> None:
    if start < 0 or stop > U64_MAX + 1 or start > stop:
        raise UserInputError(f"cross-check range must satisfy 0 <= start <= stop <= 2**64, got [{start}, {stop}).")


def cross_check(
    start: int,
    stop: int,
    *,
    oracle: str = "sieve",
    test: Callable[[int], bool] = miller_rabin,
    progress: bool = False,
) -> list[Mismatch]:
    """
    Compare test(n) with the oracle for every n in [start, stop).

    Returns the mismatches (empty when the two agree everywhere).
    """
    _check_range(start, stop)
    if oracle == "sieve":
        pairs = _sieved(start, stop)
    elif oracle == "sympy":
        pairs = _pointwise(sympy_isprime, range(start, stop))
    elif oracle == "trial":
        pairs = _pointwise(trial_division_is_prime, range(start, stop))
    else:
        raise UserInputError(f"unknown oracle '{oracle}' (choose from {', '.join(ORACLES)}).")

    bar = Progress(stop - start, enabled=progress)
    out: list[Mismatch] = []
    try:
        for i, (n, expected) in enumerate(pairs):
            got = test(n)
            if got != expected:
                out.append(Mismatch(n, expected, got))
            if i & 0xFFF == 0:
                bar.update(i, f"n={n}")
    finally:
        bar.done()
    return out


def sympy_agrees(n: int, result: bool) -> bool:
    return bool(sympy_isprime(n)) == result
