# tests/test_expreval.py
from __future__ import annotations

import pytest

from detprime.expreval import parse_int, parse_uint
from detprime.runtime import APPLY
from detprime.utility import UserInputError


@pytest.mark.parametrize(
    "text,value",
    [
        ("97", 97),
        ("  561 ", 561),
        ("0xFF", 255),
        ("0b1011", 11),
        ("1_000_003", 1000003),
        ("18 446 744 073 709 551 557", 18446744073709551557),
        ("18\u2009446\u2009744\u2009073\u2009709\u2009551\u2009557", 18446744073709551557),
        ("2**64-59", 18446744073709551557),
        ("(1<<61)-1", 2305843009213693951),
        ("1e9+7", 1000000007),
        ("3*5*17*257*641*65537*6700417", (1 << 64) - 1),
        ("-7", -7),
        ("~0 & 0xFF", 255),
    ],
)
def test_parse_int(text, value):
    assert parse_int(text) == value


@pytest.mark.parametrize("text", ["abc", "3.14", "3.141", "123.456.789", "", "2 ** x", "__import__('os')", "[1]", "True"])
def test_parse_int_rejects(text):
    assert parse_int(text) is None


@pytest.mark.parametrize("text", ["2**-1", "1//0", "5 % 0", "1 << 100000", "7**100000", "1<<-1", "64 >> -2"])
def test_parse_int_user_errors(text):
    with pytest.raises(UserInputError):
        parse_int(text)


def test_max_bits_from_profile():
    APPLY({"BEHAVIOUR": {"MAX_BITS": 64}})
    assert parse_int("2**63") == 1 << 63
    with pytest.raises(UserInputError, match="MAX_BITS"):
        parse_int("2**80")


def test_parse_uint_range():
    assert parse_uint("2**64-1") == (1 << 64) - 1
    assert parse_uint("255", 8) == 255
    with pytest.raises(UserInputError, match="outside"):
        parse_uint("2**64")
    with pytest.raises(UserInputError, match="outside"):
        parse_uint("-1")
    with pytest.raises(UserInputError, match="Invalid input"):
        parse_uint("seven")
