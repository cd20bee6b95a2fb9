from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("detprime")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .capability import Width, is_prime, is_prime_u8, is_prime_u16, is_prime_u32, is_prime_u64, widen
from .config import load_settings
from .millerrabin import MillerRabinTrace, explain, miller_rabin
from .modpow import Montgomery, mulmod, mulmod_binary, powmod
from .runtime import APPLY, CFG
from .utility import U64_MAX, UserInputError, WidthError
from .witnesses import MINIMAL_TABLE, PRIME_BASE_TABLE, WitnessSetEntry, witnesses_for

__all__ = [
    "APPLY",
    "CFG",
    "MINIMAL_TABLE",
    "PRIME_BASE_TABLE",
    "U64_MAX",
    "MillerRabinTrace",
    "Montgomery",
    "UserInputError",
    "Width",
    "WidthError",
    "WitnessSetEntry",
    "__version__",
    "explain",
    "is_prime",
    "is_prime_u8",
    "is_prime_u16",
    "is_prime_u32",
    "is_prime_u64",
    "load_settings",
    "miller_rabin",
    "mulmod",
    "mulmod_binary",
    "powmod",
    "widen",
    "witnesses_for",
]
