# -----------------------------------------------------------------------------
#  utility.py
#  Shared errors, domain constants and small helpers
# -----------------------------------------------------------------------------

from __future__ import annotations

import operator
import shutil

U64_MAX = (1 << 64) - 1
MASK64 = U64_MAX


class UserInputError(Exception):
    pass


class WidthError(UserInputError, ValueError):
    """A value does not fit the unsigned width it was declared with."""

    def __init__(self, value: int, bits: int):
        super().__init__(f"{value} does not fit in an unsigned {bits}-bit integer (0..{(1 << bits) - 1}).")
        self.value = value
        self.bits = bits


def check_u64(n: int) -> int:
    """Return n as a plain int in 0..2**64-1; floats and other non-integers raise TypeError."""
    n = operator.index(n)
    if n < 0 or n > U64_MAX:
        raise WidthError(n, 64)
    return n


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out


def group_digits(n: int, sep: str = ",") -> str:
    """12345678 -> '12,345,678'."""
    s = f"{n:,}"
    return s if sep == "," else s.replace(",", sep)


def get_terminal_width(default=80):
    """
    Return the terminal's character width if detected, else the default
    value (80 by default).
    """
    try:
        return shutil.get_terminal_size().columns
    except Exception:
        return default
