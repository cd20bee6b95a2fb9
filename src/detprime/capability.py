# -----------------------------------------------------------------------------
#  capability.py
#  is_prime() over the 8/16/32/64-bit unsigned widths
# -----------------------------------------------------------------------------

"""
The public primality capability.

Every width is zero-extended into the 64-bit working domain and handed to the
single Miller-Rabin core, so the deterministic guarantee is the same whatever
width the caller declares. Plain ints carry their width explicitly (default
64 bits); NumPy unsigned scalars and arrays carry it in their dtype.
"""

from __future__ import annotations

import operator
from enum import IntEnum
from functools import singledispatch

import numpy as np

from detprime.millerrabin import miller_rabin
from detprime.utility import WidthError, typename


class Width(IntEnum):
    U8 = 8
    U16 = 16
    U32 = 32
    U64 = 64

    @property
    def max(self) -> int:
        return (1 << int(self)) - 1

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(f"uint{int(self)}")

    @classmethod
    def of(cls, value) -> Width:
        """Width of a NumPy unsigned scalar, array or dtype."""
        dt = np.dtype(getattr(value, "dtype", value))
        if dt.kind != "u":
            raise TypeError(f"expected an unsigned integer dtype, got {dt}")
        return cls(dt.itemsize * 8)


def widen(value: int, width: Width = Width.U64) -> int:
    """Zero-extend a value of the given width into the u64 domain."""
    width = Width(width)
    v = operator.index(value)
    if v < 0 or v > width.max:
        raise WidthError(v, int(width))
    return v


@singledispatch
def is_prime(value, width: Width | None = None) -> bool:
    """
    Return True iff value is prime.

    Accepts an int (declared width, default U64), a NumPy unsigned scalar, or
    a NumPy array of unsigned dtype (returns a boolean array of the same
    shape).
    """
    raise TypeError(f"cannot test primality of {typename(value)}")


@is_prime.register
def _(value: bool, width: Width | None = None) -> bool:
    raise TypeError("cannot test primality of bool")


@is_prime.register
def _(value: int, width: Width | None = None) -> bool:
    return miller_rabin(widen(value, Width.U64 if width is None else width))


@is_prime.register
def _(value: np.unsignedinteger, width: Width | None = None) -> bool:
    own = Width.of(value)
    if width is not None and Width(width) < own:
        raise TypeError(f"{typename(value)} does not narrow to {Width(width).name}")
    return miller_rabin(widen(value, own))


@is_prime.register
def _(value: np.ndarray, width: Width | None = None) -> np.ndarray:
    own = Width.of(value)
    if width is not None and Width(width) < own:
        raise TypeError(f"array of {value.dtype} does not narrow to {Width(width).name}")
    flat = (miller_rabin(v) for v in value.ravel().tolist())
    return np.fromiter(flat, dtype=bool, count=value.size).reshape(value.shape)


def is_prime_u8(value: int) -> bool:
    return miller_rabin(widen(value, Width.U8))


def is_prime_u16(value: int) -> bool:
    return miller_rabin(widen(value, Width.U16))


def is_prime_u32(value: int) -> bool:
    return miller_rabin(widen(value, Width.U32))


def is_prime_u64(value: int) -> bool:
    return miller_rabin(widen(value, Width.U64))
