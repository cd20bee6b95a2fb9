from __future__ import annotations

import os
import tomllib as toml
from dataclasses import dataclass
from importlib.resources import files as pkg_files
from pathlib import Path
from typing import Any

from detprime.modpow import STRATEGIES
from detprime.utility import UserInputError
from detprime.witnesses import TABLES
from detprime.workspace import workspace_dir

PROFILE_ENV = "DETPRIME_PROFILE"


@dataclass
class Settings:
    """
    Wrap the full TOML dict (without the [_PROFILE_] section).
    .as_dict() feeds runtime.apply().

      - name:        resolved profile name (file stem if not given in [_PROFILE_])
      - description: one-line description from [_PROFILE_] or "(no description)"
    """
    data: dict[str, Any]
    name: str
    description: str
    _source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


# --- Paths -----------------------------------------------------------------

def _profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _packaged_profile(name: str):
    return pkg_files("detprime") / "profiles" / f"{name}.toml"


def _profile_path(name: str) -> Path | None:
    """Workspace copy first, then the profile shipped with the package."""
    p = _profiles_dir() / f"{name}.toml"
    if p.is_file():
        return p
    ref = _packaged_profile(name)
    if ref.is_file():
        return Path(str(ref))
    return None


# --- I/O -------------------------------------------------------------------


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return toml.load(f)
    except toml.TOMLDecodeError as e:
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        msg = getattr(e, "msg", str(e))
        where = []
        if lineno is not None:
            where.append(f"line {lineno}")
        if colno is not None:
            where.append(f"column {colno}")
        loc = f" (at {', '.join(where)})" if where else ""
        raise UserInputError(f"reading {path.name}: {msg}{loc}.") from None


def _sanitize_oneline(s: str) -> str:
    return " ".join(str(s).split()) or "(no description)"


def _split_profile_data(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    """
    Extract [_PROFILE_] meta (name, description) and return:
      (settings_without_profile, resolved_name, resolved_description)
    """
    meta = raw.get("_PROFILE_") or {}
    data = {k: v for k, v in raw.items() if k != "_PROFILE_"}
    name = str(meta.get("name") or fallback_name)
    description = _sanitize_oneline(str(meta.get("description") or ""))
    return data, name, description


def _validate(data: dict[str, Any], source: str) -> None:
    engine = data.get("ENGINE", {}) or {}
    mulmod = engine.get("MULMOD", "wide")
    if mulmod not in STRATEGIES:
        raise UserInputError(
            f"{source}: ENGINE.MULMOD must be one of {', '.join(STRATEGIES)}, got {mulmod!r}."
        )
    table = engine.get("WITNESS_TABLE", "minimal")
    if table not in TABLES:
        raise UserInputError(
            f"{source}: ENGINE.WITNESS_TABLE must be one of {', '.join(TABLES)}, got {table!r}."
        )
    trial = engine.get("TRIAL_DIVISION", True)
    if not isinstance(trial, bool):
        raise UserInputError(f"{source}: ENGINE.TRIAL_DIVISION must be true or false.")
    max_bits = (data.get("BEHAVIOUR", {}) or {}).get("MAX_BITS", 4096)
    if not isinstance(max_bits, int) or max_bits < 64:
        raise UserInputError(f"{source}: BEHAVIOUR.MAX_BITS must be an integer >= 64.")


# --- Public API ------------------------------------------------------------


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """
    Return [(name, description), ...] for packaged and workspace profiles.
    A workspace profile shadows the packaged one of the same name.
    """
    paths: dict[str, Path] = {}
    pkg_dir = pkg_files("detprime") / "profiles"
    for ref in pkg_dir.iterdir():
        if ref.name.endswith(".toml"):
            paths[ref.name[:-5]] = Path(str(ref))
    if _profiles_dir().is_dir():
        for p in _profiles_dir().glob("*.toml"):
            paths[p.stem] = p

    items: list[tuple[str, str]] = []
    for stem, p in paths.items():
        try:
            _, nm, desc = _split_profile_data(_load_toml(p), stem)
        except UserInputError:
            nm, desc = stem, "(unreadable)"
        items.append((nm, desc))
    return sorted(items, key=lambda t: t[0].lower())


def default_profile_name() -> str:
    return os.environ.get(PROFILE_ENV) or "default"


def load_settings(name: str | None = None) -> Settings:
    """
    Load a profile by name (default: $DETPRIME_PROFILE or 'default'), strip
    the [_PROFILE_] metadata, validate the ENGINE section, and return Settings.
    """
    name = name or default_profile_name()
    path = _profile_path(name)
    if path is None:
        raise UserInputError(f"profile '{name}' not found (looked in {_profiles_dir()} and the package).")

    data, resolved_name, description = _split_profile_data(_load_toml(path), path.stem)
    _validate(data, path.name)

    return Settings(
        data=data,
        name=resolved_name,
        description=description,
        _source=path,
    )
