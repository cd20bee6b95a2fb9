# -----------------------------------------------------------------------------
#  millerrabin.py
#  Deterministic Miller-Rabin primality decision for 0 <= n < 2**64
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field

from detprime.modpow import Montgomery, ResidueDomain, residue_domain
from detprime.runtime import CFG
from detprime.utility import check_u64
from detprime.witnesses import DEFAULT_TABLE, WitnessSetEntry, entry_for, get_table

# Odd primes below 100; 2 is handled by the parity check.
SMALL_PRIMES = (
    3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47,
    53, 59, 61, 67, 71, 73, 79, 83, 89, 97,
)
# Every composite below 101**2 has a prime factor <= 97.
TRIAL_PROOF_LIMIT = 101 * 101


def decompose(n: int) -> tuple[int, int]:
    """Return (d, r) with n - 1 == d * 2**r and d odd. Requires odd n > 2."""
    m = n - 1
    r = (m & -m).bit_length() - 1
    return m >> r, r


def strong_probable_prime(a: int, d: int, r: int, domain: ResidueDomain | Montgomery) -> bool:
    """One Miller-Rabin round: is n = domain.modulus a strong probable prime to base a?"""
    x = domain.pow(domain.enter(a), d)
    if x == domain.one or x == domain.minus_one:
        return True
    for _ in range(r - 1):
        x = domain.mul(x, x)
        if x == domain.minus_one:
            return True
    return False


def _settings(strategy, table, trial_division):
    if strategy is None:
        strategy = CFG("ENGINE.MULMOD", "wide")
    if table is None:
        table = get_table(CFG("ENGINE.WITNESS_TABLE", DEFAULT_TABLE))
    elif isinstance(table, str):
        table = get_table(table)
    if trial_division is None:
        trial_division = bool(CFG("ENGINE.TRIAL_DIVISION", True))
    return strategy, table, trial_division


def _small_factor(n: int) -> int | None:
    for p in SMALL_PRIMES:
        if n % p == 0:
            return p
    return None


def miller_rabin(
    n: int,
    *,
    strategy: str | None = None,
    table: tuple[WitnessSetEntry, ...] | str | None = None,
    trial_division: bool | None = None,
) -> bool:
    """
    Return True iff n is prime, for any 0 <= n <= 2**64 - 1.

    Options left as None are taken from the active profile (ENGINE.MULMOD,
    ENGINE.WITNESS_TABLE, ENGINE.TRIAL_DIVISION). They change the cost of the
    decision, never its result.
    """
    n = check_u64(n)
    if n < 2:
        return False
    if n < 4:
        return True
    if n & 1 == 0:
        return False

    strategy, table, trial_division = _settings(strategy, table, trial_division)

    if trial_division:
        p = _small_factor(n)
        if p is not None:
            return n == p
        if n < TRIAL_PROOF_LIMIT:
            return True

    d, r = decompose(n)
    domain = residue_domain(n, strategy)
    for a in entry_for(n, table).witnesses:
        if a >= n:
            continue
        if not strong_probable_prime(a, d, r, domain):
            return False
    return True


# --- Traced decision ----------------------------------------------------------


@dataclass(frozen=True)
class WitnessRound:
    witness: int
    residues: tuple[int, ...]       # a^d, a^(2d), ... in ordinary form
    passed: bool
    skipped: bool = False           # witness >= n


@dataclass
class MillerRabinTrace:
    n: int
    is_prime: bool = False
    stage: str = "base-case"        # base-case | trial-division | witness
    divisor: int | None = None      # small prime factor, when trial division decided
    d: int | None = None
    r: int | None = None
    entry: WitnessSetEntry | None = None
    strategy: str = "wide"
    rounds: list[WitnessRound] = field(default_factory=list)

    @property
    def failed_witness(self) -> int | None:
        for rnd in self.rounds:
            if not rnd.passed and not rnd.skipped:
                return rnd.witness
        return None


def _traced_round(a: int, d: int, r: int, domain) -> WitnessRound:
    x = domain.pow(domain.enter(a), d)
    seen = [domain.leave(x)]
    if x == domain.one or x == domain.minus_one:
        return WitnessRound(a, tuple(seen), True)
    for _ in range(r - 1):
        x = domain.mul(x, x)
        seen.append(domain.leave(x))
        if x == domain.minus_one:
            return WitnessRound(a, tuple(seen), True)
    return WitnessRound(a, tuple(seen), False)


def explain(
    n: int,
    *,
    strategy: str | None = None,
    table: tuple[WitnessSetEntry, ...] | str | None = None,
    trial_division: bool | None = None,
) -> MillerRabinTrace:
    """
    Run the same decision as miller_rabin() and record how it was reached.

    Stops at the first failing witness, like the untraced decision.
    """
    n = check_u64(n)
    strategy, table, trial_division = _settings(strategy, table, trial_division)
    trace = MillerRabinTrace(n=n, strategy=strategy)

    if n < 2 or n & 1 == 0 or n < 4:
        trace.is_prime = n in (2, 3)
        if n > 3:
            trace.divisor = 2
        return trace

    if trial_division:
        p = _small_factor(n)
        if p is not None or n < TRIAL_PROOF_LIMIT:
            trace.stage = "trial-division"
            trace.divisor = p if p != n else None
            trace.is_prime = p is None or p == n
            return trace

    trace.stage = "witness"
    trace.d, trace.r = decompose(n)
    trace.entry = entry_for(n, table)
    domain = residue_domain(n, strategy)
    for a in trace.entry.witnesses:
        if a >= n:
            trace.rounds.append(WitnessRound(a, (), True, skipped=True))
            continue
        rnd = _traced_round(a, trace.d, trace.r, domain)
        trace.rounds.append(rnd)
        if not rnd.passed:
            return trace
    trace.is_prime = True
    return trace
