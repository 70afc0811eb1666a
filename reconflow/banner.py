"""The coloured start-up banner."""

from __future__ import annotations

_GREEN = "\x1b[32m"
_MAGENTA = "\x1b[35m"
_HI_WHITE = "\x1b[97m"
_HI_CYAN = "\x1b[96m"
_RESET = "\x1b[0m"

_PAD = " " * 36


def _paint(code: str, text: str) -> str:
    return f"{code}{text}{_RESET}"


def _green(text: str) -> str:
    return _paint(_GREEN, text)


def _white(text: str) -> str:
    return _paint(_HI_WHITE, text)


def _art() -> str:
    top = [
        "",
        "            ",
        "                                        .;1tfLCL1,",
        "                                       .,,..;i;f0G;",
        "                                             ,:,tCC.  ...",
        "                                             ;i:fCL,1LLtf1i;,",
        "                                           .,::tCL1LC1::;, .,,",
        "                                           ;1:tCL,tLt,1:",
        "                                          ,::tLf, 1Lf;::.",
        "                                        .ii:tLt.  .1Lf;i1.",
        "                                        ,:;tf1      1ft;::",
        "                                     .1;:tf1 ",
    ]
    art = _green("\n".join(top))
    art += _white(" ,i1t1, ") + _green(" ift;;1,\n" + _PAD + ",i:t;f.")
    art += _white(" ,LLffLL: ") + _green(" tft;i:\n" + _PAD + ".;:;fff ")
    art += _white(" .LCLLLf,") + _green(" 1ffi:;.\n" + _PAD + ":fi;Lff1.  ")
    art += _white(",;;:")
    bottom = [
        "  ifffi;f;",
        "                                     .:::tCLLfi:,,:ifLfLt::;.",
        "                                      ,11:1CCCCCLLLLLLf1;1t:",
        "                                      .it;:;1fLLLLfft1;:;ti.",
        "                                         ,:;::;;;;;;;;;;,",
        "                                           .,::::::::,.",
        "\t",
    ]
    art += _green("\n".join(bottom))
    return art


def banner(version: str, author: str, description: str) -> str:
    """The ASCII-art banner with version, author and description."""
    text = _art()
    text += "\n\n\t" + _green(f"                  Reconflow Next Generation {_white(version)}")
    text += _green(f" by {_paint(_MAGENTA, author)}")
    text += "\n\n" + _paint(_HI_CYAN, f"\t                    {description}") + "\n"
    text += "\n" + _white("                                            ¯\\_(ツ)_/¯") + "\n\n"
    return text