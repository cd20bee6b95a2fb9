# src/detprime/progress.py
from __future__ import annotations

import sys
import time

from detprime.utility import get_terminal_width, group_digits


class Progress:
    """Single-line progress bar for range cross-checks; throttled, stdout only."""

    THROTTLE = 0.1

    def __init__(self, total: int, *, enabled: bool = True, stream=None):
        self.total = max(1, int(total))
        self.enabled = enabled
        self.stream = stream or sys.stdout
        self.start = time.perf_counter()
        self.last_draw = 0.0
        self.spin = "|/-\\"
        self.i = 0

    def update(self, done: int, label: str = "") -> None:
        if not self.enabled:
            return
        now = time.perf_counter()
        if now - self.last_draw < self.THROTTLE and done < self.total:
            return
        self.last_draw = now
        self.i = (self.i + 1) % len(self.spin)
        frac = min(max(done / self.total, 0.0), 1.0)
        elapsed = now - self.start
        rate = done / elapsed if elapsed > 0 else 0.0
        bar_len = max(10, min(40, get_terminal_width() - 60))
        fill = int(frac * bar_len)
        bar = "#" * fill + "-" * (bar_len - fill)
        msg = f"\r[{self.spin[self.i]}] [{bar}] {int(frac * 100):3d}%  {group_digits(int(rate))}/s  {label[:24]}"
        self.stream.write(msg)
        self.stream.flush()

    def done(self) -> None:
        if not self.enabled:
            return
        self.stream.write("\r" + " " * (get_terminal_width() - 1) + "\r")
        self.stream.flush()
