# tests/test_config.py
from __future__ import annotations

import pytest

from detprime import config
from detprime.millerrabin import explain
from detprime.runtime import APPLY, CFG, current
from detprime.utility import UserInputError
from detprime.workspace import seed_workspace, workspace_dir


def _write_profile(name: str, text: str):
    pdir = workspace_dir() / "profiles"
    pdir.mkdir(parents=True, exist_ok=True)
    path = pdir / f"{name}.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_packaged_default_profile():
    s = config.load_settings()
    assert s.name == "default"
    assert s.as_dict()["ENGINE"]["MULMOD"] == "wide"
    assert "_PROFILE_" not in s.as_dict()
    assert s.description != "(no description)"


def test_profile_from_environment(monkeypatch):
    monkeypatch.setenv("DETPRIME_PROFILE", "montgomery")
    assert config.load_settings().name == "montgomery"


def test_apply_installs_settings():
    APPLY(config.load_settings("textbook"))
    assert current().profile_name == "textbook"
    assert CFG("ENGINE.MULMOD") == "binary"
    assert CFG("ENGINE.TRIAL_DIVISION") is False
    assert CFG("ENGINE.MISSING", 42) == 42
    t = explain(561)
    assert t.stage == "witness" and t.strategy == "binary"


def test_runtime_flags_follow_profile():
    APPLY({"BEHAVIOUR": {"DEBUG": True, "PROGRESS": False}})
    assert current().debug is True
    assert current().progress is False


def test_workspace_profile_shadows_package():
    _write_profile("default", """
[_PROFILE_]
description = "my   local\\n default"

[ENGINE]
MULMOD = "montgomery"
""")
    s = config.load_settings("default")
    assert s.as_dict()["ENGINE"]["MULMOD"] == "montgomery"
    assert s.description == "my local default"
    assert s._source.parent == workspace_dir() / "profiles"


def test_unknown_profile():
    with pytest.raises(UserInputError, match="not found"):
        config.load_settings("nope")


@pytest.mark.parametrize(
    "body,msg",
    [
        ('[ENGINE]\nMULMOD = "fast"\n', "ENGINE.MULMOD"),
        ('[ENGINE]\nWITNESS_TABLE = "random"\n', "ENGINE.WITNESS_TABLE"),
        ('[ENGINE]\nTRIAL_DIVISION = "yes"\n', "ENGINE.TRIAL_DIVISION"),
        ("[BEHAVIOUR]\nMAX_BITS = 8\n", "MAX_BITS"),
    ],
)
def test_invalid_settings_rejected(body, msg):
    _write_profile("bad", body)
    with pytest.raises(UserInputError, match=msg):
        config.load_settings("bad")


def test_malformed_toml_reports_location():
    _write_profile("broken", "[ENGINE\nMULMOD = 1\n")
    with pytest.raises(UserInputError, match="line 1"):
        config.load_settings("broken")


def test_list_profiles():
    _write_profile("mine", '[_PROFILE_]\nname = "mine"\ndescription = "custom"\n')
    items = dict(config.list_profiles_with_descriptions())
    assert {"default", "montgomery", "textbook", "mine"} <= set(items)
    assert items["mine"] == "custom"


def test_seed_workspace_copies_once():
    root, copied = seed_workspace()
    assert root == workspace_dir()
    assert copied["profiles"] >= 3
    assert (root / "profiles" / "default.toml").is_file()
    _, again = seed_workspace()
    assert again["profiles"] == 0
    _, forced = seed_workspace(overwrite=True)
    assert forced["profiles"] == copied["profiles"]
