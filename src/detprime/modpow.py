# -----------------------------------------------------------------------------
#  modpow.py
#  Modular multiplication and exponentiation over the unsigned 64-bit domain
# -----------------------------------------------------------------------------

"""
Modular exponentiation engine.

Every product ``a * b`` with ``a, b < m <= 2**64 - 1`` needs up to 128 bits
before it is reduced. Three interchangeable strategies are provided:

  - ``wide``:       the exact product is formed (Python ints play the role of
                    a 128-bit widening multiply) and reduced once.
  - ``binary``:     Russian-peasant doubling; no intermediate exceeds 64 bits.
  - ``montgomery``: Montgomery form with R = 2**64, every step masked back to
                    64 bits the way fixed-width hardware would wrap.

All three produce identical residues; they differ only in cost.
"""

from __future__ import annotations

from collections.abc import Callable

from detprime.utility import MASK64, UserInputError

STRATEGIES = ("wide", "binary", "montgomery")

MulMod = Callable[[int, int, int], int]


def mulmod(a: int, b: int, m: int) -> int:
    """a*b mod m, computed from the full double-width product."""
    return (a * b) % m


def _addmod(x: int, y: int, m: int) -> int:
    # x, y < m: compare against m - y instead of forming x + y >= 2**64
    if x >= m - y:
        return x - (m - y)
    return x + y


def mulmod_binary(a: int, b: int, m: int) -> int:
    """
    a*b mod m by doubling and adding (Russian-peasant multiplication).

    Slower than the widening product but never holds a value of m or more,
    so it stays inside 64 bits for any 64-bit modulus.
    """
    a %= m
    b %= m
    result = 0
    while b:
        if b & 1:
            result = _addmod(result, a, m)
        a = _addmod(a, a, m)
        b >>= 1
    return result


def powmod(base: int, exponent: int, modulus: int, mul: MulMod = mulmod) -> int:
    """
    base**exponent mod modulus by binary square-and-multiply.

    Bits of the exponent are consumed least-significant first. modulus must be
    positive; modulus == 1 gives 0.
    """
    if modulus <= 0:
        raise ValueError("modulus must be positive")
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    result = 1 % modulus
    base %= modulus
    while exponent:
        if exponent & 1:
            result = mul(result, base, modulus)
        base = mul(base, base, modulus)
        exponent >>= 1
    return result


class ResidueDomain:
    """
    Plain residues modulo ``modulus`` with a pluggable multiplication.

    Shares its interface with Montgomery so the Miller-Rabin core can run on
    either: ``one`` and ``minus_one`` are the representations of 1 and -1,
    ``enter``/``leave`` convert to and from the representation.
    """

    __slots__ = ("_mul", "minus_one", "modulus", "one")

    def __init__(self, modulus: int, mul: MulMod = mulmod):
        if modulus <= 0:
            raise ValueError("modulus must be positive")
        self.modulus = modulus
        self._mul = mul
        self.one = 1 % modulus
        self.minus_one = modulus - 1

    def enter(self, value: int) -> int:
        return value % self.modulus

    def leave(self, value: int) -> int:
        return value

    def mul(self, lhs: int, rhs: int) -> int:
        return self._mul(lhs, rhs, self.modulus)

    def pow(self, value: int, exponent: int) -> int:
        return powmod(value, exponent, self.modulus, self._mul)


class Montgomery:
    """
    Montgomery arithmetic modulo an odd 64-bit modulus with R = 2**64.

    Values are kept in Montgomery form x*R mod m. Reduction (REDC) uses the
    inverse of m modulo R, found by Newton iteration, so no division by m is
    needed after construction.
    """

    __slots__ = ("minus_one", "modulus", "modulus_inv", "one", "r2")

    def __init__(self, modulus: int):
        if modulus <= 1 or modulus & 1 == 0 or modulus > MASK64:
            raise ValueError("Montgomery modulus must be odd and in 3..2**64-1")
        self.modulus = modulus
        self.one = (1 << 64) % modulus            # R mod m
        self.r2 = (1 << 128) % modulus            # R^2 mod m
        self.minus_one = modulus - self.one

        # m*m == 1 (mod 8) for odd m; each step doubles the correct low bits
        inv = modulus
        while (modulus * inv) & MASK64 != 1:
            inv = (inv * (2 - modulus * inv)) & MASK64
        self.modulus_inv = inv

    def reduce(self, value: int) -> int:
        """REDC(value) = value * R^-1 mod m, for 0 <= value < m*R."""
        q = ((value & MASK64) * self.modulus_inv) & MASK64
        t = (value >> 64) - ((q * self.modulus) >> 64)
        return t + self.modulus if t < 0 else t

    def mul(self, lhs: int, rhs: int) -> int:
        return self.reduce(lhs * rhs)

    def enter(self, value: int) -> int:
        return self.mul(value % self.modulus, self.r2)

    def leave(self, value: int) -> int:
        return self.reduce(value)

    def pow(self, value: int, exponent: int) -> int:
        result = self.one
        while exponent:
            if exponent & 1:
                result = self.mul(result, value)
            value = self.mul(value, value)
            exponent >>= 1
        return result


def residue_domain(modulus: int, strategy: str = "wide") -> ResidueDomain | Montgomery:
    """Build the arithmetic for one modulus using the named multiplication strategy."""
    if strategy == "wide":
        return ResidueDomain(modulus, mulmod)
    if strategy == "binary":
        return ResidueDomain(modulus, mulmod_binary)
    if strategy == "montgomery":
        return Montgomery(modulus)
    raise UserInputError(
        f"unknown multiplication strategy '{strategy}' (choose from {', '.join(STRATEGIES)})."
    )
