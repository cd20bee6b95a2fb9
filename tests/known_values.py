# tests/known_values.py
"""Curated primes, composites and pseudoprimes shared by the test modules."""

U64_MAX = (1 << 64) - 1

PRIMES = [
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 47, 53, 59, 61, 67, 73, 79, 83, 89, 97,
    251, 65521, 998244353, 1000000007, 2147483647, 4294967291,
    67280421310721, 2305843009213693951, 999999999999999989,
    18446744073709551557,
]

NON_PRIMES = [
    0, 1, 4, 57, 5329, 49141, 10403,
    4759123141, 1122004669633, 21652684502221, 31858317218647, 47636622961201,
    55245642489451, 3071837692357849, 3770579582154547, 7999252175582851,
    585226005592931977,
    (1 << 64) - 1, (1 << 64) - 2,
]

CARMICHAEL = [
    561, 1105, 1729, 2465, 2821, 6601, 8911, 10585, 15841, 29341, 41041, 46657, 52633, 62745,
    63973, 75361, 101101, 115921, 126217, 162401, 172081, 188461, 252601, 278545, 294409,
    314821, 334153, 340561, 399001, 410041, 449065, 488881, 512461, 825265,
]

# Smallest strong pseudoprimes to the listed base sets.
STRONG_PSEUDOPRIMES = [
    (2047, (2,)),
    (1373653, (2, 3)),
    (9080191, (31, 73)),
    (25326001, (2, 3, 5)),
    (3215031751, (2, 3, 5, 7)),
    (4759123141, (2, 7, 61)),
    (2152302898747, (2, 3, 5, 7, 11)),
    (3474749660383, (2, 3, 5, 7, 11, 13)),
    (341550071728321, (2, 3, 5, 7, 11, 13, 17)),
    (3825123056546413051, (2, 3, 5, 7, 11, 13, 17, 19, 23)),
]
