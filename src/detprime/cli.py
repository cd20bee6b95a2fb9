# src/detprime/cli.py

"""
detprime - deterministic primality for unsigned integers up to 64 bits

Description:
    Decides primality of one or more numbers with deterministic Miller-Rabin,
    explains how a verdict was reached, and cross-checks ranges against
    independent oracles.

usage: see detprime -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import platform
import sys
import textwrap
import threading
import traceback

from colorama import Fore, Style
from colorama import just_fix_windows_console

from detprime import __version__ as _ver
from detprime import config as CONFIG
from detprime.capability import Width, widen
from detprime.display import (
    print_mismatches,
    print_profiles_with_descriptions,
    print_table,
    print_trace,
    print_verdict,
)
from detprime.expreval import parse_uint
from detprime.millerrabin import explain, miller_rabin
from detprime.runtime import APPLY, CFG
from detprime.runtime import current as _rt_current
from detprime.utility import UserInputError, flatten_dotted, typename
from detprime.verify import ORACLES, cross_check, sympy_agrees
from detprime.witnesses import DEFAULT_TABLE, get_table
from detprime.workspace import seed_workspace, workspace_dir


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook

    def _thread_excepthook(args):
        sys.stderr.write("\n[UNCAUGHT THREAD EXCEPTION]\n")
        traceback.print_exception(args.exc_type, args.exc_value, args.exc_traceback, file=sys.stderr)
        sys.stderr.flush()
    threading.excepthook = _thread_excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not (msg.startswith("Invalid input:") or msg.startswith("Error:")):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _configure_text_streams() -> None:
    if os.environ.get("PYTHONIOENCODING"):
        return
    # Only touch redirected output (pipes/files), leave TTY as-is
    if sys.stdout.isatty() or not hasattr(sys.stdout, "reconfigure"):
        return
    enc = (sys.stdout.encoding or "").lower()
    if platform.system() == "Windows" or enc in ("", "ascii", "us-ascii"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    numbers:
      Plain literals (97, 0xFF, 1_000_003, "18 446 744 073 709 551 557") or
      integer expressions (2**64-59, "(1<<61)-1", 1e9+7).

    profiles:
      Profiles are TOML files selecting the multiplication strategy, witness
      table and trial division. Lookup: $DETPRIME_HOME/profiles, then the
      packaged profiles. Default profile: $DETPRIME_PROFILE or 'default'.
    """)

    p = argparse.ArgumentParser(
        prog="detprime",
        description="Deterministic Miller-Rabin primality for unsigned integers up to 64 bits",
        usage=(
            "detprime [N ...] [--bits {8,16,32,64}] [--profile NAME] [--explain] [--verify]\n"
            "       detprime --cross-check START STOP [--oracle {sympy,sieve,trial}]\n"
            "       detprime --table | --profiles | --init [--overwrite]\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("numbers", nargs="*", metavar="N", help="numbers or integer expressions to test")
    p.add_argument("--bits", type=int, choices=[int(w) for w in Width], default=64,
                   help="declared unsigned width of the inputs (default 64)")
    p.add_argument("--profile", default=None, help="profile name (default: $DETPRIME_PROFILE or 'default')")
    p.add_argument("--explain", action="store_true", help="show decomposition and witness rounds")
    p.add_argument("--verify", action="store_true", help="also check each verdict against sympy.isprime")
    p.add_argument("--cross-check", nargs=2, metavar=("START", "STOP"),
                   help="compare every n in [START, STOP) against an oracle")
    p.add_argument("--oracle", choices=ORACLES, default="sieve", help="oracle for --cross-check (default sieve)")
    p.add_argument("--table", action="store_true", help="print the active witness table")
    p.add_argument("--profiles", action="store_true", help="list available profiles")
    p.add_argument("--init", action="store_true", help="copy packaged profiles into the workspace")
    p.add_argument("--overwrite", action="store_true", help="with --init: replace existing profiles")
    p.add_argument("--quiet", action="store_true", help="suppress progress output")
    p.add_argument("--debug", action="store_true", help="show profile settings and full tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        if _rt_current().debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _print_debug_settings(selected: CONFIG.Settings) -> None:
    print(f"[debug] active profile: {selected.name}", file=sys.stderr)
    if selected._source:
        print(f"[debug] profile file: {selected._source}", file=sys.stderr)
    flat = flatten_dotted(selected.as_dict())
    for k in sorted(flat, key=str.lower):
        v = CFG(k, None)
        print(f"        {k:.<40} {v!r} ({typename(v)})", file=sys.stderr)
    print(file=sys.stderr)


def _main_impl(argv=None) -> int:

    just_fix_windows_console()
    _configure_text_streams()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    if args.overwrite and not args.init:
        parser.error("--overwrite can only be used together with --init")

    if args.init:
        ws, copied = seed_workspace(overwrite=args.overwrite)
        print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0

    # --- profile ---
    selected = CONFIG.load_settings(args.profile)
    APPLY(selected)
    # command-line flags win over the profile
    if args.debug:
        rt.debug = True
    if args.quiet:
        rt.progress = False
    _install_loud_error_handlers(rt.debug)
    if rt.debug:
        _print_debug_settings(selected)

    if args.profiles:
        print_profiles_with_descriptions(CONFIG.list_profiles_with_descriptions(), current=selected.name)
        print(f"Workspace: {workspace_dir()}")
        return 0

    if args.table:
        name = CFG("ENGINE.WITNESS_TABLE", DEFAULT_TABLE)
        print_table(name, get_table(name))
        return 0

    if args.cross_check:
        start = parse_uint(args.cross_check[0], 65)
        stop = parse_uint(args.cross_check[1], 65)
        mismatches = cross_check(start, stop, oracle=args.oracle, progress=rt.progress)
        print_mismatches(start, stop, args.oracle, mismatches)
        return 1 if mismatches else 0

    if not args.numbers:
        parser.print_usage()
        return 2

    width = Width(args.bits)
    failed = False
    for text in args.numbers:
        n = widen(parse_uint(text, 64), width)
        if args.explain:
            trace = explain(n)
            print_trace(trace)
            result = trace.is_prime
        else:
            result = miller_rabin(n)

        verified = None
        if args.verify:
            verified = sympy_agrees(n, result)
            failed |= not verified
        print_verdict(n, result, text=text, verified=verified)

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
