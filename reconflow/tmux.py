"""Selecting tmux sessions and trimming their captured output."""

from __future__ import annotations

from dataclasses import dataclass, field

NO_TMUX = "No tmux available"


def parse_sessions(raw: str) -> list[str]:
    """Session names from the output of ``tmux ls``."""
    sessions = []
    for line in raw.split("\n"):
        if not line.strip() or " " not in line:
            continue
        sessions.append(line.split(" ")[0].rstrip(":"))
    return sessions


@dataclass
class Tmux:
    """Known tmux sessions and which of them to look at."""

    apply_all: bool = False
    selected_window: str = ""
    exclude: str = ""
    limit: int = 0
    windows: list[str] = field(default_factory=list)

    @classmethod
    def from_listing(cls, raw, apply_all=False, selected_window="", exclude="", limit=0):
        """Build from ``tmux ls`` output; raises RuntimeError if tmux is unavailable."""
        if "command not found" in raw or "\n" not in raw:
            raise RuntimeError("tmux program not installed")
        return cls(
            apply_all=apply_all,
            selected_window=selected_window,
            exclude=exclude,
            limit=limit,
            windows=parse_sessions(raw),
        )

    def selected_windows(self) -> list[str]:
        """Sessions to capture: all or the selected one, minus excluded prefixes."""
        return [
            window
            for window in self.windows
            if (self.apply_all or window == self.selected_window)
            and not (self.exclude and window.startswith(self.exclude))
        ]

    def tail(self, raw: str) -> str:
        """The captured output cut to the last ``limit`` lines."""
        data = raw.split("\n")
        if 0 < self.limit < len(data):
            return "\n".join(data[len(data) - self.limit:len(data) - 1])
        return raw

    def describe(self) -> str:
        """The session names as one line."""
        return ", ".join(self.windows) if self.windows else NO_TMUX