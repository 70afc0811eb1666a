import pytest

from reconflow.tmux import NO_TMUX, Tmux, parse_sessions

LISTING = "main: 1 windows (created Mon)\nwork: 2 windows (created Tue)\n\nbad\n"


def test_parse_sessions():
    assert parse_sessions(LISTING) == ["main", "work"]
    assert parse_sessions("") == []


def test_from_listing_errors():
    with pytest.raises(RuntimeError):
        Tmux.from_listing("bash: tmux: command not found\n")
    with pytest.raises(RuntimeError):
        Tmux.from_listing("no server running")


def test_from_listing_settings():
    tmux = Tmux.from_listing(LISTING, apply_all=True, exclude="wo", limit=3)
    assert tmux.windows == ["main", "work"]
    assert tmux.limit == 3
    assert tmux.selected_windows() == ["main"]


def test_selected_window_only():
    tmux = Tmux.from_listing(LISTING, selected_window="work")
    assert tmux.selected_windows() == ["work"]
    assert Tmux.from_listing(LISTING).selected_windows() == []


def test_tail():
    raw = "a\nb\nc\nd\n"
    assert Tmux(limit=0).tail(raw) == raw
    assert Tmux(limit=50).tail(raw) == raw
    assert Tmux(limit=-1).tail(raw) == raw
    assert Tmux(limit=2).tail(raw) == "d"
    lines = Tmux(limit=3).tail(raw).split("\n")
    assert lines == ["c", "d"]


def test_describe():
    assert Tmux(windows=["main", "work"]).describe() == "main, work"
    assert Tmux().describe() == NO_TMUX