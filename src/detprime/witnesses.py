# -----------------------------------------------------------------------------
#  witnesses.py
#  Deterministic Miller-Rabin witness sets keyed by magnitude
# -----------------------------------------------------------------------------

"""
Witness selection tables.

Each entry states: every odd n > 2 strictly below ``upper_bound`` is prime
iff it is a strong probable prime to all of ``witnesses``. The bounds are the
smallest strong pseudoprimes to the corresponding base set, so an entry's
bound is itself composite and is handled by the next entry.

The constants are copied from the published tables, see
https://miller-rabin.appspot.com/ and the sources named per entry. Do not
edit them by hand.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from detprime.utility import U64_MAX, UserInputError, check_u64


@dataclass(frozen=True)
class WitnessSetEntry:
    upper_bound: int
    witnesses: tuple[int, ...]
    source: str = ""


# Fewest witnesses for each range. The final entry is Sinclair's 7-base set,
# valid for all n < 2**64.
MINIMAL_TABLE: tuple[WitnessSetEntry, ...] = (
    WitnessSetEntry(2_047, (2,), "Pomerance, Selfridge & Wagstaff (1980)"),
    WitnessSetEntry(1_373_653, (2, 3), "Pomerance, Selfridge & Wagstaff (1980)"),
    WitnessSetEntry(9_080_191, (31, 73), "Jaeschke (1993)"),
    WitnessSetEntry(4_759_123_141, (2, 7, 61), "Jaeschke (1993)"),
    WitnessSetEntry(1_122_004_669_633, (2, 13, 23, 1_662_803), "Jaeschke (1993)"),
    WitnessSetEntry(2_152_302_898_747, (2, 3, 5, 7, 11), "Jaeschke (1993)"),
    WitnessSetEntry(3_474_749_660_383, (2, 3, 5, 7, 11, 13), "Jaeschke (1993)"),
    WitnessSetEntry(
        U64_MAX,
        (2, 325, 9_375, 28_178, 450_775, 9_780_504, 1_795_265_022),
        "Sinclair (2011)",
    ),
)

# Consecutive prime bases. The final entry (primes up to 37) is proven for all
# n < 318,665,857,834,031,151,167,461, which covers 2**64.
PRIME_BASE_TABLE: tuple[WitnessSetEntry, ...] = (
    WitnessSetEntry(2_047, (2,), "Pomerance, Selfridge & Wagstaff (1980)"),
    WitnessSetEntry(1_373_653, (2, 3), "Pomerance, Selfridge & Wagstaff (1980)"),
    WitnessSetEntry(25_326_001, (2, 3, 5), "Pomerance, Selfridge & Wagstaff (1980)"),
    WitnessSetEntry(3_215_031_751, (2, 3, 5, 7), "Pomerance, Selfridge & Wagstaff (1980)"),
    WitnessSetEntry(2_152_302_898_747, (2, 3, 5, 7, 11), "Jaeschke (1993)"),
    WitnessSetEntry(3_474_749_660_383, (2, 3, 5, 7, 11, 13), "Jaeschke (1993)"),
    WitnessSetEntry(341_550_071_728_321, (2, 3, 5, 7, 11, 13, 17), "Jaeschke (1993)"),
    WitnessSetEntry(
        3_825_123_056_546_413_051,
        (2, 3, 5, 7, 11, 13, 17, 19, 23),
        "Zhang & Tang (2003); Jiang & Deng (2014)",
    ),
    WitnessSetEntry(
        U64_MAX,
        (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37),
        "Jiang & Deng (2014)",
    ),
)

TABLES: dict[str, tuple[WitnessSetEntry, ...]] = {
    "minimal": MINIMAL_TABLE,
    "prime-bases": PRIME_BASE_TABLE,
}
DEFAULT_TABLE = "minimal"


def validate_table(table: tuple[WitnessSetEntry, ...]) -> None:
    """Raise ValueError unless the table is ordered, non-empty and covers all of u64."""
    if not table:
        raise ValueError("witness table is empty")
    prev = 0
    for entry in table:
        if entry.upper_bound <= prev:
            raise ValueError(f"bounds not strictly increasing at {entry.upper_bound}")
        if not entry.witnesses:
            raise ValueError(f"no witnesses for bound {entry.upper_bound}")
        if any(not isinstance(a, int) or a < 2 for a in entry.witnesses):
            raise ValueError(f"invalid witness in {entry.witnesses}")
        prev = entry.upper_bound
    if table[-1].upper_bound != U64_MAX:
        raise ValueError("last bound must be 2**64 - 1")


for _table in TABLES.values():
    validate_table(_table)

# Bounds are looked up by bisection; precomputed once per table.
_BOUNDS = {id(t): tuple(e.upper_bound for e in t) for t in TABLES.values()}


def get_table(name: str) -> tuple[WitnessSetEntry, ...]:
    try:
        return TABLES[name]
    except KeyError:
        raise UserInputError(
            f"unknown witness table '{name}' (choose from {', '.join(TABLES)})."
        ) from None


def entry_for(n: int, table: tuple[WitnessSetEntry, ...] | None = None) -> WitnessSetEntry:
    """
    Return the entry with the smallest bound greater than n.

    The last entry's bound is 2**64 - 1 and its witness set is proven for
    every n < 2**64, so n == 2**64 - 1 also resolves to it.
    """
    n = check_u64(n)
    table = MINIMAL_TABLE if table is None else table
    bounds = _BOUNDS.get(id(table))
    if bounds is None:
        bounds = tuple(e.upper_bound for e in table)
    i = bisect_right(bounds, n)
    return table[min(i, len(table) - 1)]


def witnesses_for(n: int, table: tuple[WitnessSetEntry, ...] | None = None) -> tuple[int, ...]:
    return entry_for(n, table).witnesses
