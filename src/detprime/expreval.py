# -----------------------------------------------------------------------------
#  expreval.py
#  Parsing command-line numbers: literals and safe integer expressions
# -----------------------------------------------------------------------------

from __future__ import annotations

import ast
import operator as op
import re

from detprime.runtime import CFG
from detprime.utility import UserInputError

# ---- simple number parsing helpers ----
_THIN_SPACES = ("\u2009", "\u202F", "\u00A0")  # thin, narrow no-break, no-break
_SEP_CLASS = r"[ ,_\u00A0\u2009\u202F]"       # spaces/commas/underscores & NBSP variants; a dot is a decimal point
_GROUPED_RE = re.compile(rf"^[+-]?\d{{1,3}}(?:{_SEP_CLASS}\d{{3}})+$")

_ALLOWED_BINOPS = {
    ast.Add:      op.add,
    ast.Sub:      op.sub,
    ast.Mult:     op.mul,
    ast.FloorDiv: op.floordiv,
    ast.Mod:      op.mod,
    ast.LShift:   op.lshift,
    ast.RShift:   op.rshift,
    ast.BitAnd:   op.and_,
    ast.BitXor:   op.xor,
    ast.BitOr:    op.or_,
}
_ALLOWED_UNARYOPS = {
    ast.UAdd: op.pos,
    ast.USub: op.neg,
    ast.Invert: op.invert,
}

_MAX_NODES = 256  # sanity guard

_SCI_NOTATION_TOKEN = re.compile(
    r"""
    (?<![\w.])          # not immediately after a word char or dot
    (\d+)               # mantissa (digits)
    [eE]
    (\+?\d+)            # non-negative exponent
    (?![\w.])           # not immediately before a word char or dot
    """,
    re.VERBOSE,
)


class _IntExprError(Exception):
    pass


def _max_bits() -> int:
    return int(CFG("BEHAVIOUR.MAX_BITS", 4096))


def _guard(value: int) -> int:
    limit = _max_bits()
    if value.bit_length() > limit:
        raise UserInputError(
            f"intermediate value has more than {limit} bits. "
            "Increase BEHAVIOUR.MAX_BITS in the profile or pass a smaller expression."
        )
    return value


def _rewrite_scientific_notation(expr: str) -> str:
    """1e9+7 -> (1*10**9)+7, so the evaluator only ever sees integers."""
    return _SCI_NOTATION_TOKEN.sub(lambda m: f"({m.group(1)}*10**{int(m.group(2))})", expr)


def _eval_int_expr(expr: str) -> int:
    """
    Evaluate a *safe* integer expression.

    Allowed: integer literals (incl. underscores, 0x/0o/0b), parentheses,
             + - * // % **, << >>, & ^ |, unary + - ~.
    Disallowed: names, calls, attributes, subscripts, floats.
    Every intermediate is bounded by BEHAVIOUR.MAX_BITS.
    """
    expr = _rewrite_scientific_notation(expr)
    try:
        tree = ast.parse(expr.strip(), mode="eval")
    except SyntaxError as e:
        raise _IntExprError("invalid integer expression") from e

    if sum(1 for _ in ast.walk(tree)) > _MAX_NODES:
        raise _IntExprError("expression too large")

    def _eval(node) -> int:
        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, int):
                raise _IntExprError("only integers are allowed")
            return _guard(node.value)

        if isinstance(node, ast.UnaryOp) and type(node.op) in _ALLOWED_UNARYOPS:
            return _ALLOWED_UNARYOPS[type(node.op)](_eval(node.operand))

        if isinstance(node, ast.BinOp):
            op_type = type(node.op)
            left = _eval(node.left)
            right = _eval(node.right)

            if op_type is ast.Pow:
                if right < 0:
                    raise UserInputError("negative exponents are not allowed in integer expressions")
                # left**right has more than right * (bitlen(left) - 1) bits
                if abs(left) > 1 and right * (left.bit_length() - 1) > _max_bits():
                    raise UserInputError(
                        f"{left}**{right} exceeds {_max_bits()} bits. "
                        "Increase BEHAVIOUR.MAX_BITS in the profile or pass a smaller expression."
                    )
                return _guard(left ** right)

            if op_type in (ast.LShift, ast.RShift) and right < 0:
                raise UserInputError(f"negative shift count {right} in integer expression")

            if op_type is ast.LShift and right > _max_bits():
                raise UserInputError(f"shift by {right} exceeds {_max_bits()} bits.")

            if op_type in (ast.FloorDiv, ast.Mod) and right == 0:
                raise UserInputError("division by zero in integer expression")

            if op_type in _ALLOWED_BINOPS:
                return _guard(_ALLOWED_BINOPS[op_type](left, right))

        raise _IntExprError(f"unsupported syntax: {type(node).__name__}")

    return _eval(tree.body)


def _parse_int_literal(text: str) -> int | None:
    """Accepts: 42  -7  1_000_000  0xFF  0b1010  123,456,789  123 456 789
       Rejects: 3.14  3.141  123.456.789  1,23  0xG1"""

    if text is None:
        return None

    s = text.strip()
    if not s:
        return None

    for ch in _THIN_SPACES:
        s = s.replace(ch, " ")

    if s.lower().startswith(("0x", "0b", "0o")):
        try:
            return int(s.replace("_", ""), 0)
        except ValueError:
            return None

    if re.fullmatch(r"[+-]?\d[\d_]*", s):
        try:
            return int(s.replace("_", ""))
        except ValueError:
            return None

    if _GROUPED_RE.match(s):
        return int(re.sub(_SEP_CLASS, "", s))

    return None


# ---- public entry point ----
def parse_int(s: str) -> int | None:
    """Parse a literal or an integer expression; None when s is neither."""
    n = _parse_int_literal(s)
    if n is not None:
        return n
    try:
        return _eval_int_expr(s)
    except _IntExprError:
        return None


def parse_uint(s: str, bits: int = 64) -> int:
    """Parse s and check it is an unsigned integer of the given width."""
    n = parse_int(s)
    if n is None:
        raise UserInputError(f"Invalid input: '{s}' is not an integer or integer expression.")
    if n < 0 or n.bit_length() > bits:
        raise UserInputError(f"Invalid input: {s} = {n} is outside 0..2**{bits}-1.")
    return n
