# tests/test_cli.py
from __future__ import annotations

import pytest

from detprime.cli import main
from detprime.workspace import workspace_dir


def run(capsys, *argv):
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, out, err


def test_prime_and_composite(capsys):
    code, out, _ = run(capsys, "97", "561", "2**64-59")
    assert code == 0
    lines = out.strip().splitlines()
    assert len(lines) == 3
    assert "97" in lines[0] and "prime" in lines[0] and "composite" not in lines[0]
    assert "561" in lines[1] and "composite" in lines[1]
    assert "2**64-59 = 18446744073709551557" in lines[2] and "composite" not in lines[2]


def test_width_violation_is_user_error(capsys):
    code, out, err = run(capsys, "--bits", "8", "300")
    assert code == 2
    assert "8-bit" in err
    assert out == ""


def test_invalid_number(capsys):
    code, _, err = run(capsys, "seven")
    assert code == 2
    assert "Invalid input" in err


def test_negative_shift_is_user_error(capsys):
    code, out, err = run(capsys, "1<<-1")
    assert code == 2
    assert "negative shift count" in err
    assert "Unexpected error" not in err


def test_decimal_point_is_not_grouping(capsys):
    code, out, err = run(capsys, "3.141")
    assert code == 2
    assert "Invalid input" in err
    assert out == ""


def test_comma_grouping_accepted(capsys):
    code, out, _ = run(capsys, "1,000,003")
    assert code == 0
    assert "1000003" in out and "prime" in out


def test_explain(capsys):
    code, out, _ = run(capsys, "--explain", "--profile", "textbook", "2047")
    assert code == 0
    assert "Decided by:           witness" in out
    assert "n-1 = 1023 * 2^1" in out
    assert "Multiplication:       binary" in out
    assert "a=3" in out


def test_verify_flag(capsys):
    code, out, _ = run(capsys, "--verify", "18446744073709551557", "3825123056546413051")
    assert code == 0
    assert out.count("agrees with sympy") == 2


def test_table(capsys):
    code, out, _ = run(capsys, "--table")
    assert code == 0
    assert "Witness table 'minimal'" in out
    assert "1795265022" in out and "Sinclair" in out


def test_table_follows_profile(capsys):
    code, out, _ = run(capsys, "--profile", "textbook", "--table")
    assert code == 0
    assert "prime-bases" in out
    assert "2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37" in out


def test_cross_check(capsys):
    code, out, _ = run(capsys, "--cross-check", "0", "10_000", "--oracle", "sympy", "--quiet")
    assert code == 0
    assert "OK" in out and "10,000 values" in out


def test_profiles_listing(capsys):
    code, out, _ = run(capsys, "--profiles")
    assert code == 0
    for name in ("default", "montgomery", "textbook"):
        assert name in out


def test_unknown_profile(capsys):
    code, _, err = run(capsys, "--profile", "nope", "7")
    assert code == 2
    assert "not found" in err


def test_init_seeds_workspace(capsys):
    code, out, _ = run(capsys, "--init")
    assert code == 0
    assert (workspace_dir() / "profiles" / "default.toml").is_file()
    assert "profiles: 3" in out


def test_overwrite_requires_init(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--overwrite"])
    assert exc.value.code == 2


def test_no_numbers_prints_usage(capsys):
    code, out, _ = run(capsys)
    assert code == 2
    assert "usage" in out.lower()
