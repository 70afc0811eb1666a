import re

from reconflow.banner import banner

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _plain(text):
    return _ANSI.sub("", text)


def test_banner_mentions_version_author_and_description():
    text = _plain(banner("v9.9.9", "Someone", "Recon workflows"))
    assert "v9.9.9 by Someone" in text
    assert "Recon workflows" in text
    assert "¯\\_(ツ)_/¯" in text


def test_banner_is_coloured_and_terminated():
    text = banner("v1", "a", "d")
    assert text.startswith("\x1b[32m")
    assert text.endswith("\n\n")
    assert text.count("\x1b[0m") >= 5


def test_banner_art_lines():
    text = _plain(banner("v1", "a", "d"))
    assert ".;1tfLCL1," in text
    assert ".,::::::::,." in text
    assert text.index(".;1tfLCL1,") < text.index("v1 by a")