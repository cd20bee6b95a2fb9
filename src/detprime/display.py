# -----------------------------------------------------------------------------
#  display.py
#  Console output for verdicts, traces, tables and profiles
# -----------------------------------------------------------------------------

from __future__ import annotations

from colorama import Fore, Style

from detprime.millerrabin import MillerRabinTrace
from detprime.utility import group_digits
from detprime.verify import Mismatch
from detprime.witnesses import WitnessSetEntry

HEAD = Fore.CYAN + Style.BRIGHT
YES = Fore.GREEN + Style.BRIGHT
NO = Fore.RED + Style.BRIGHT
RESET = Style.RESET_ALL


def _yes_no(flag: bool) -> str:
    return f"{YES}prime{RESET}" if flag else f"{NO}composite{RESET}"


def format_verdict(n: int, result: bool, *, text: str | None = None) -> str:
    shown = text if text and text.strip() != str(n) else None
    label = f"{shown} = {n}" if shown else str(n)
    return f"{Fore.YELLOW}{label}{RESET}: {_yes_no(result)}"


def print_verdict(n: int, result: bool, *, text: str | None = None, verified: bool | None = None) -> None:
    line = format_verdict(n, result, text=text)
    if verified is True:
        line += f"  {Style.DIM}(agrees with sympy){RESET}"
    elif verified is False:
        line += f"  {NO}MISMATCH with sympy{RESET}"
    print(line)


def print_trace(trace: MillerRabinTrace) -> None:
    print(f"{HEAD}Primality trace:{RESET}")
    print(f"  Input:                {group_digits(trace.n)}")
    print(f"  Bits:                 {trace.n.bit_length()}")
    print(f"  Decided by:           {trace.stage}")

    if trace.stage == "base-case":
        if trace.divisor:
            print(f"  Reason:               even, divisible by {trace.divisor}")
        else:
            print(f"  Reason:               {'2 and 3 are prime' if trace.is_prime else '0 and 1 are not prime'}")
    elif trace.stage == "trial-division":
        if trace.divisor:
            print(f"  Reason:               divisible by {trace.divisor}")
        else:
            print("  Reason:               no prime factor <= 97 and n < 101^2")
    else:
        print(f"  Decomposition:        n-1 = {trace.d} * 2^{trace.r}")
        if trace.entry is not None:
            print(f"  Witness set:          n < {group_digits(trace.entry.upper_bound)}: "
                  f"{', '.join(map(str, trace.entry.witnesses))}")
            print(f"  Source:               {trace.entry.source}")
        print(f"  Multiplication:       {trace.strategy}")
        for rnd in trace.rounds:
            if rnd.skipped:
                print(f"    a={rnd.witness}: {Style.DIM}skipped (a >= n){RESET}")
                continue
            chain = " -> ".join(str(x) for x in rnd.residues)
            mark = f"{YES}pass{RESET}" if rnd.passed else f"{NO}fail{RESET}"
            print(f"    a={rnd.witness}: {mark}  [{chain}]")

    print(f"  Result:               {_yes_no(trace.is_prime)}")


def print_table(name: str, table: tuple[WitnessSetEntry, ...]) -> None:
    print(f"{HEAD}Witness table '{name}':{RESET}")
    width = max(len(group_digits(e.upper_bound)) for e in table)
    for e in table:
        bound = group_digits(e.upper_bound).rjust(width)
        print(f"  n < {bound}  {Fore.YELLOW}{', '.join(map(str, e.witnesses))}{RESET}"
              f"  {Style.DIM}{e.source}{RESET}")


def print_profiles_with_descriptions(items: list[tuple[str, str]], current: str | None = None) -> None:
    print(f"{HEAD}Profiles:{RESET}")
    for name, desc in items:
        mark = "*" if name == current else " "
        print(f" {mark} {Fore.YELLOW}{name:<12}{RESET} {desc}")


def print_mismatches(start: int, stop: int, oracle: str, mismatches: list[Mismatch]) -> None:
    span = f"[{group_digits(start)}, {group_digits(stop)})"
    if not mismatches:
        print(f"{YES}OK{RESET}: {span} agrees with the {oracle} oracle ({group_digits(stop - start)} values).")
        return
    print(f"{NO}{len(mismatches)} mismatch(es){RESET} in {span} against the {oracle} oracle:")
    for m in mismatches[:20]:
        print(f"  {m.n}: expected {_yes_no(m.expected)}, got {_yes_no(m.got)}")
    if len(mismatches) > 20:
        print(f"  ... and {len(mismatches) - 20} more")
