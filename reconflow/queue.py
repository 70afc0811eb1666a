"""Queue entries: picking targets from a queue file and building scan commands."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from typing import Any

logger = logging.getLogger(__name__)

INPUT_PLACEHOLDER = "{{.input}}"


@dataclass
class InputFormat:
    """A queue entry written as JSON."""

    input: str = ""
    input_as_file: bool = False
    flow: str = ""
    modules: list[str] = field(default_factory=list)
    params: list[str] = field(default_factory=list)
    extra: str = ""
    command: str = ""


def _normalise(key: str) -> str:
    return key.replace("_", "").lower()


_FIELDS = {_normalise(f.name): f.name for f in fields(InputFormat)}
_LIST_FIELDS = {"modules", "params"}


def _convert(name: str, value: Any) -> Any:
    if value is None:
        return [] if name in _LIST_FIELDS else (False if name == "input_as_file" else "")
    if name in _LIST_FIELDS:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise TypeError(name)
        return list(value)
    if name == "input_as_file":
        if not isinstance(value, bool):
            raise TypeError(name)
        return value
    if not isinstance(value, str):
        raise TypeError(name)
    return value


def parse_queue_entry(raw: str) -> InputFormat | None:
    """Read a JSON queue entry; a plain target (not a JSON object) gives None.

    An empty entry raises ValueError.
    """
    if not raw.strip():
        raise ValueError("target is empty")
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    values: dict[str, Any] = {}
    try:
        for key, value in data.items():
            name = _FIELDS.get(_normalise(str(key)))
            if name is not None:
                values[name] = _convert(name, value)
    except TypeError:
        return None
    return InputFormat(**values)


def build_command(input_format: InputFormat, binary: str) -> str:
    """The command line that runs the scan described by a queue entry."""
    command = input_format.command
    if not command:
        flag = "-T" if input_format.input_as_file else "-t"
        command = f"{binary} scan {flag} {input_format.input}"
        if input_format.flow:
            command += " -f " + input_format.flow
        for module in input_format.modules:
            command += " -m " + module
        for param in input_format.params:
            command += " -p " + param
        command += " " + input_format.extra
    return command.replace(INPUT_PLACEHOLDER, input_format.input)


def pop_first_line(queue_file) -> str:
    """Remove the first target from the queue file and return it ("" if empty)."""
    try:
        with open(queue_file, encoding="utf-8") as handle:
            lines = [line.strip() for line in handle.read().splitlines()]
    except FileNotFoundError:
        return ""
    lines = [line for line in lines if line]
    if not lines:
        return ""
    target, rest = lines[0], lines[1:]
    logger.debug("Getting the target from the queue file: %s -- %s", queue_file, target)
    with open(queue_file, "w", encoding="utf-8") as handle:
        handle.write("\n".join(rest))
    return target