"""Recognising the kind of a scan input and checking it against a requirement."""

from __future__ import annotations

import ipaddress
import logging
import os
import re
import secrets
import string
import tempfile
from dataclasses import dataclass

from .models import Options

logger = logging.getLogger(__name__)

_FQDN_RE = re.compile(
    r"^([a-zA-Z0-9][a-zA-Z0-9-]{0,62})(\.[a-zA-Z0-9][a-zA-Z0-9-]{0,62})*?"
    r"(\.[a-zA-Z][a-zA-Z0-9]{0,62})\.?$"
)
_HOSTNAME_RE = re.compile(
    r"^[A-Za-z](?:[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.?)?[A-Za-z0-9]$"
)
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_USERINFO_CHARS = frozenset(string.ascii_letters + string.digits + "-._:~!$&'()*+,;=%@")
_HOST_CHARS = frozenset(string.ascii_letters + string.digits + "-_.~!$&'()*+,;=:[]<>\"%")
_SAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


class InputValidationError(ValueError):
    """Raised when an input is unrecognised or not of the required type."""


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation: the input to scan and its detected type."""

    value: str
    input_type: str
    as_file: bool = False


def _get_scheme(raw: str) -> tuple[str, str]:
    for i, ch in enumerate(raw):
        if ch.isascii() and ch.isalpha():
            continue
        if ch.isascii() and (ch.isdigit() or ch in "+-."):
            if i == 0:
                return "", raw
            continue
        if ch == ":":
            if i == 0:
                raise ValueError("missing protocol scheme")
            return raw[:i], raw[i + 1:]
        return "", raw
    return "", raw


def _valid_port(port: str) -> bool:
    return port == "" or (port.startswith(":") and all(c in string.digits for c in port[1:]))


def _valid_host(host: str) -> bool:
    if host.startswith("["):
        end = host.rfind("]")
        if end < 0 or not _valid_port(host[end + 1:]):
            return False
    elif ":" in host and not _valid_port(host[host.rfind(":"):]):
        return False
    if _BAD_ESCAPE_RE.search(host):
        return False
    return all(not ch.isascii() or ch in _HOST_CHARS for ch in host)


def _valid_authority(authority: str) -> bool:
    userinfo, sep, host = authority.rpartition("@")
    if sep:
        if any(ch not in _USERINFO_CHARS for ch in userinfo):
            return False
        if _BAD_ESCAPE_RE.search(userinfo):
            return False
    return _valid_host(host)


def _is_request_uri(raw: str) -> bool:
    text = raw.split("#", 1)[0]
    if not text or any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in text):
        return False
    if text == "*":
        return True
    try:
        scheme, rest = _get_scheme(text)
    except ValueError:
        return False
    if rest.endswith("?") and rest.count("?") == 1:
        rest = rest[:-1]
    else:
        rest = rest.split("?", 1)[0]
    if not rest.startswith("/"):
        return scheme != ""
    if scheme and rest.startswith("//"):
        authority = rest[2:]
        slash = authority.find("/")
        if slash >= 0:
            authority, rest = authority[:slash], authority[slash:]
        else:
            rest = ""
        if not _valid_authority(authority):
            return False
    return not _BAD_ESCAPE_RE.search(rest)


def _is_cidr(raw: str) -> bool:
    _, sep, prefix = raw.partition("/")
    if not sep or not prefix.isascii() or not prefix.isdigit():
        return False
    try:
        ipaddress.ip_network(raw, strict=False)
    except ValueError:
        return False
    return True


def _is_ipv4(raw: str) -> bool:
    if "%" in raw:
        return False
    try:
        addr = ipaddress.ip_address(raw)
    except ValueError:
        return False
    return addr.version == 4 or addr.ipv4_mapped is not None


def _file_exists(path: str) -> bool:
    return bool(path) and os.path.isfile(os.path.expanduser(path))


def detect_input_type(raw: str) -> str:
    """Classify an input as file, ip, domain, cidr, url or git-url.

    Later checks win over earlier ones, so a URL that is also a file path is a url.
    """
    input_type = ""
    if raw and _file_exists(raw):
        input_type = "file"
    if raw and _is_ipv4(raw):
        input_type = "ip"
    if raw and (_FQDN_RE.match(raw) or _HOSTNAME_RE.match(raw)):
        input_type = "domain"
    if raw and _is_cidr(raw):
        input_type = "cidr"
    if raw and _is_request_uri(raw):
        input_type = "url"
        if raw.startswith(("https://github.com", "https://gitlab.com")):
            input_type = "git-url"
    if raw.startswith("git@"):
        input_type = "git-url"
    if not input_type:
        raise InputValidationError(f"unrecognized input: {raw}")
    return input_type


def _safe_name(raw: str) -> str:
    return _SAFE_NAME_RE.sub("_", raw).strip("_") or "input"


def _random_suffix(length: int = 4) -> str:
    return "".join(secrets.choice(string.ascii_lowercase) for _ in range(length))


def _input_file(raw: str, options: Options) -> str:
    folder = os.path.join(tempfile.gettempdir(), "reconflow")
    os.makedirs(folder, exist_ok=True)
    name = _safe_name(options.scan.custom_workspace or raw)
    dest = os.path.join(folder, f"{name}-{_random_suffix()}")
    with open(dest, "w", encoding="utf-8") as handle:
        handle.write(raw)
    logger.info("Convert input to a file: %s", dest)
    return dest


def validate_input(raw: str, required_input: str, options: Options) -> ValidationResult:
    """Check ``raw`` against the required input type.

    A file-type requirement (``file`` or ``*-file``) accepts an existing file whose
    lines all match, or a single value that is then written to a new file.
    """
    if not required_input or options.disable_validate_input:
        return ValidationResult(value=raw, input_type="")

    required = required_input.strip().lower()
    as_file = required.endswith("-file") or required == "file"

    if as_file and _file_exists(raw):
        with open(os.path.expanduser(raw), encoding="utf-8") as handle:
            lines = handle.read().splitlines()
        for index, line in enumerate(lines):
            if not line.strip():
                continue
            try:
                line_type = detect_input_type(line)
            except InputValidationError:
                continue
            if not required.startswith(line_type):
                message = (
                    f"line {index} in {raw} file not match the require input: "
                    f"{line} -- {line_type}"
                )
                logger.error(message)
                raise InputValidationError(message)
        return ValidationResult(value=raw, input_type="file", as_file=True)

    input_type = detect_input_type(raw)
    logger.info("Start validating input: %s -- %s", raw, input_type)
    if not required.startswith(input_type):
        raise InputValidationError(
            "input does not match the require validation: "
            f"inputType:{input_type} -- requireType:{required}"
        )

    if as_file:
        return ValidationResult(value=_input_file(raw, options), input_type=input_type, as_file=True)
    return ValidationResult(value=raw, input_type=input_type)