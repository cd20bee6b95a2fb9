# tests/test_modpow.py
from __future__ import annotations

import random

import pytest

from detprime.modpow import (
    STRATEGIES,
    Montgomery,
    ResidueDomain,
    mulmod,
    mulmod_binary,
    powmod,
    residue_domain,
)
from detprime.utility import UserInputError
from known_values import U64_MAX

RNG = random.Random(20240611)

NEAR_MAX = [
    (U64_MAX - 1, U64_MAX - 1, U64_MAX),
    (U64_MAX - 2, U64_MAX - 3, U64_MAX - 1),
    (1 << 63, 1 << 63, U64_MAX),
    (18446744073709551556, 18446744073709551556, 18446744073709551557),
    (12345678901234567, 98765432109876543, (1 << 61) - 1),
]


@pytest.mark.parametrize("a,b,m", NEAR_MAX)
def test_mulmod_full_width_products(a, b, m):
    expected = (a * b) % m
    assert mulmod(a, b, m) == expected
    assert mulmod_binary(a, b, m) == expected


def test_mulmod_binary_random_u64():
    for _ in range(300):
        m = RNG.randrange(2, U64_MAX + 1)
        a, b = RNG.randrange(m), RNG.randrange(m)
        assert mulmod_binary(a, b, m) == a * b % m


@pytest.mark.parametrize("mul", [mulmod, mulmod_binary], ids=["wide", "binary"])
def test_powmod_matches_builtin(mul):
    for _ in range(100):
        m = RNG.randrange(1, U64_MAX + 1)
        base = RNG.randrange(U64_MAX + 1)
        exp = RNG.randrange(U64_MAX + 1)
        assert powmod(base, exp, m, mul) == pow(base, exp, m)


def test_powmod_edge_cases():
    assert powmod(5, 0, 7) == 1
    assert powmod(0, 0, 7) == 1
    assert powmod(0, 5, 7) == 0
    assert powmod(123, 456, 1) == 0
    assert powmod(2, 64, U64_MAX) == 1
    assert powmod(U64_MAX, U64_MAX, U64_MAX) == 0


def test_powmod_rejects_zero_modulus():
    with pytest.raises(ValueError):
        powmod(2, 3, 0)
    with pytest.raises(ValueError):
        powmod(2, -1, 7)


@pytest.mark.parametrize("m", [3, 5, 2047, 4294967291, 18446744073709551557, U64_MAX])
def test_montgomery_round_trip_and_pow(m):
    mont = Montgomery(m)
    assert mont.modulus_inv * m % (1 << 64) == 1
    assert mont.leave(mont.one) == 1 % m
    assert mont.leave(mont.minus_one) == m - 1
    for _ in range(50):
        a = RNG.randrange(m)
        e = RNG.randrange(1 << 64)
        assert mont.leave(mont.enter(a)) == a
        assert mont.leave(mont.pow(mont.enter(a), e)) == pow(a, e, m)


@pytest.mark.parametrize("m", [0, 1, 2, 1 << 40, 1 << 64])
def test_montgomery_rejects_bad_modulus(m):
    with pytest.raises(ValueError):
        Montgomery(m)


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_domains_agree(strategy):
    m = 3825123056546413051
    dom = residue_domain(m, strategy)
    a = dom.enter(123456789)
    x = dom.pow(a, m - 1)
    assert dom.leave(x) == pow(123456789, m - 1, m)
    assert dom.leave(dom.mul(a, a)) == 123456789 ** 2 % m


def test_residue_domain_plain_representation():
    dom = residue_domain(97, "binary")
    assert isinstance(dom, ResidueDomain)
    assert (dom.one, dom.minus_one) == (1, 96)
    assert dom.enter(200) == 6


def test_unknown_strategy():
    with pytest.raises(UserInputError, match="unknown multiplication strategy"):
        residue_domain(97, "karatsuba")
