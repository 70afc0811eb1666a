"""Update metadata: reading, generating and comparing released versions."""

from __future__ import annotations

import json
import logging
import os
import urllib.error
import urllib.request
from collections.abc import Callable
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)

DEFAULT_WORKFLOW_VERSION = "v0.0.1"

Fetch = Callable[[str], "tuple[int, str]"]


class UpdateError(Exception):
    """Raised when update metadata cannot be fetched, read or compared."""


@dataclass
class UpdateMetaData:
    """Versions of the core and of the workflows, and when they were released."""

    core_version: str = ""
    workflow_version: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "UpdateMetaData":
        if not isinstance(data, dict):
            raise UpdateError("metadata must be a JSON object")
        values = {}
        for key in ("core_version", "workflow_version", "updated_at"):
            value = data.get(key, "")
            if not isinstance(value, str):
                raise UpdateError(f"metadata field {key} must be a string")
            values[key] = value
        return cls(**values)

    def to_json(self) -> str:
        return json.dumps(asdict(self))


def _parse_metadata(text: str, where: str) -> UpdateMetaData:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise UpdateError(f"error to parse metadata: {where}") from exc
    return UpdateMetaData.from_dict(data)


def load_metadata(path) -> UpdateMetaData:
    """Read a metadata file; raises UpdateError when it is not valid metadata."""
    path = os.fspath(path)
    with open(path, encoding="utf-8") as handle:
        return _parse_metadata(handle.read(), path)


def _write(path: str, metadata: UpdateMetaData) -> None:
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(metadata.to_json())


def generate_metadata(path, version: str, now: datetime | None = None) -> UpdateMetaData:
    """Write metadata for ``version`` (core and workflows alike) and return it."""
    now = now or datetime.now()
    metadata = UpdateMetaData(
        core_version=version,
        workflow_version=version,
        updated_at=now.strftime("%Y-%m-%dT%H:%M"),
    )
    logger.info("Generate meta data: %s", metadata.to_json())
    _write(os.fspath(path), metadata)
    return metadata


def _version(raw: str) -> Version:
    try:
        return Version(raw)
    except InvalidVersion as exc:
        raise UpdateError(f"error parsing version: {raw}") from exc


def needs_update(old: UpdateMetaData, new: UpdateMetaData) -> bool:
    """True when the core, or failing that the workflows, are older than released."""
    if _version(old.core_version) < _version(new.core_version):
        logger.info("Core %s is outdated, latest is %s", old.core_version, new.core_version)
        return True
    if _version(old.workflow_version) < _version(new.workflow_version):
        logger.info(
            "Workflow %s is outdated, latest is %s",
            old.workflow_version,
            new.workflow_version,
        )
        return True
    return False


def _http_get(url: str) -> tuple[int, str]:
    try:
        with urllib.request.urlopen(url, timeout=30) as response:
            return response.status, response.read().decode("utf-8", errors="replace")
    except urllib.error.HTTPError as exc:
        return exc.code, ""
    except (urllib.error.URLError, OSError) as exc:
        raise UpdateError(f"error fetching metadata from: {url}") from exc


def check_update(metadata_file, metadata_url: str, current_version: str, fetch=None) -> bool:
    """Fetch released metadata, store it in ``metadata_file`` and tell if an update is due.

    Without a stored file the installed core is ``current_version`` and the workflows
    are taken as the oldest release.
    """
    metadata_file = os.fspath(metadata_file)
    fetch = fetch or _http_get
    logger.info("Checking metadata information from: %s", metadata_url)

    old = UpdateMetaData(core_version=current_version, workflow_version=DEFAULT_WORKFLOW_VERSION)
    if os.path.isfile(metadata_file):
        old = load_metadata(metadata_file)

    status, body = fetch(metadata_url)
    if status != 200:
        raise UpdateError(f"error fetching metadata from: {metadata_url}")
    new = _parse_metadata(body, metadata_url)

    logger.info("Writing metadata to: %s", metadata_file)
    _write(metadata_file, new)
    return needs_update(old, new)