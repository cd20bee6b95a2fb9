# runtime.py
from __future__ import annotations

from contextvars import ContextVar
from dataclasses import asdict as _asdict
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Runtime:
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    debug: bool = False  # controls verbosity / tracebacks
    progress: bool = True  # progress bar on long cross-checks

    def apply(self, settings: Any) -> None:
        """Install a Settings object (or a plain nested dict) as the active profile."""
        self.profile_name = getattr(settings, "name", None) or "default"

        if hasattr(settings, "as_dict") and callable(settings.as_dict):
            cfg = settings.as_dict()
        elif hasattr(settings, "__dataclass_fields__"):
            cfg = _asdict(settings)
        else:
            cfg = settings
        self.settings = dict(cfg or {})

        # runtime flags follow the profile unless the profile is silent
        dbg = self.get("BEHAVIOUR.DEBUG", None)
        if isinstance(dbg, bool):
            self.debug = dbg

        prog = self.get("BEHAVIOUR.PROGRESS", None)
        if isinstance(prog, bool):
            self.progress = prog

    def get(self, key: str, default: Any = None) -> Any:
        """Dotted lookup into the nested profile, e.g. 'ENGINE.MULMOD'."""
        if not key:
            return default
        cur: Any = self.settings
        for part in key.split("."):
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur


# --- Context management ---

_current_runtime: ContextVar[Runtime | None] = ContextVar("detprime_runtime", default=None)


def current() -> Runtime:
    rt = _current_runtime.get()
    if rt is None:
        rt = Runtime()
        _current_runtime.set(rt)
    return rt


def reset() -> None:
    """Drop the runtime of the current context; the next current() starts fresh."""
    _current_runtime.set(None)


def APPLY(settings: Any) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)

