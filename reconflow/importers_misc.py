"""Readers for links, archives, IP ranges, certificates, credentials and cloud buckets."""

from __future__ import annotations

import json
import logging
import os
import re
from collections.abc import Iterator
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any
from urllib.parse import urlsplit

from .importers import gen_hash

logger = logging.getLogger(__name__)

NOTIFICATION_KINDS = ("start", "done")

_ZERO_DECIMAL_RE = re.compile(r"^([+-]?\d+)\.0*$")


class _BadRecord(Exception):
    """A line that does not hold the expected fields."""


@dataclass
class Link:
    """A link found in a page."""

    link_value: str
    link_source: str
    url: str
    link_type: str


@dataclass
class ArchiveEntry:
    """A URL taken from a web archive."""

    archive_value: str
    archive_checksum: str


@dataclass
class IPRange:
    """An address block announced by an autonomous system."""

    as_number: str
    country: str
    value: str
    info: str
    amount: int


@dataclass
class CertInfo:
    """Certificate details of a domain."""

    domain: str
    cert_info: str
    org_info: str
    is_wildcard: bool = False


@dataclass
class Credential:
    """A leaked credential."""

    cred_id: str
    email: str
    username: str
    password: str
    hashed_password: str
    name: str
    phone: str
    ip_address: str
    source: str


@dataclass
class CloudBrute:
    """A cloud storage name found by brute force."""

    status: str
    cloud_domain: str
    raw_data: str


@dataclass
class Notification:
    """An event about a scan, carrying the scan serialised as JSON."""

    notification_type: str
    notification_source: str
    new_data: str
    obj_refer: int
    scan_refer: int
    target_refer: int


def _lines(src) -> list[str]:
    src = os.fspath(src)
    if not os.path.isfile(src):
        logger.error("file not found: %s", src)
        raise FileNotFoundError(f"file not found: {src}")
    with open(src, encoding="utf-8", errors="replace") as handle:
        return handle.read().splitlines()


def _json_lines(src) -> Iterator[tuple[str, dict[str, Any]]]:
    for line in _lines(src):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
        except ValueError:
            logger.error("Error parse JSON Data")
            continue
        if isinstance(data, dict):
            yield line, data
        else:
            logger.error("Error parse JSON Data")


def _text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise _BadRecord(key)
    return value


def _to_str(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_uint(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value) if value >= 0 else 0
    if isinstance(value, str):
        text = value.strip()
        match = _ZERO_DECIMAL_RE.match(text)
        if match:
            text = match.group(1)
        try:
            number = int(text, 0)
        except ValueError:
            return 0
        return number if number >= 0 else 0
    return 0


def read_links(src) -> list[Link]:
    """Links from JSON lines with ``input``, ``source``, ``type`` and ``output``."""
    links = []
    for _, data in _json_lines(src):
        try:
            link = Link(
                link_value=_text(data, "output"),
                link_source=_text(data, "source"),
                url=_text(data, "input"),
                link_type=_text(data, "type"),
            )
        except _BadRecord as exc:
            logger.error("Error parse JSON Data: missing %s", exc)
            continue
        links.append(link)
    return links


def read_archive(src) -> list[ArchiveEntry]:
    """Archived URLs that have a path; bare domains and ``/`` are skipped."""
    entries = []
    for line in _lines(src):
        if not line.strip():
            continue
        try:
            path = urlsplit(line).path
        except ValueError:
            continue
        if path in ("", "/"):
            continue
        entries.append(ArchiveEntry(archive_value=line, archive_checksum=gen_hash(line)))
    return entries


def read_ip_ranges(src) -> list[IPRange]:
    """Address blocks from JSON lines."""
    ranges = []
    for line, data in _json_lines(src):
        logger.debug("Processing: %s", line)
        ranges.append(
            IPRange(
                as_number=_to_str(data.get("Number")),
                country=_to_str(data.get("CountryCode")),
                value=_to_str(data.get("CIDR")),
                info=_to_str(data.get("Description")),
                amount=_to_uint(data.get("Count")),
            )
        )
    return ranges


def read_certs(src) -> list[CertInfo]:
    """Certificates; a ``*.`` domain is marked wildcard and stripped of its prefix."""
    certs = []
    for _, data in _json_lines(src):
        domain = _to_str(data.get("Domain"))
        is_wildcard = "*." in domain
        if is_wildcard:
            domain = domain.lstrip("*.")
        certs.append(
            CertInfo(
                domain=domain,
                cert_info=_to_str(data.get("CertInfo")),
                org_info=_to_str(data.get("OrgInfo")),
                is_wildcard=is_wildcard,
            )
        )
    return certs


def read_credentials(src) -> list[Credential]:
    """Credentials from JSON lines of a breach search."""
    creds = []
    for _, data in _json_lines(src):
        creds.append(
            Credential(
                cred_id=_to_str(data.get("id")),
                email=_to_str(data.get("email")),
                username=_to_str(data.get("username")),
                password=_to_str(data.get("password")),
                hashed_password=_to_str(data.get("hashed_password")),
                name=_to_str(data.get("name")),
                phone=_to_str(data.get("phone")),
                ip_address=_to_str(data.get("ip_address")),
                source=_to_str(data.get("database_name")),
            )
        )
    return creds


def read_cloud_brute(src) -> list[CloudBrute]:
    """Results of ``<status> - <domain>`` lines; ``Label: status`` keeps the status."""
    results = []
    for line in _lines(src):
        if not line.strip() or " - " not in line:
            continue
        parts = line.split(" - ")
        status = parts[0]
        if ": " in status:
            status = status.split(": ")[1]
        results.append(CloudBrute(status=status, cloud_domain=parts[1], raw_data=line))
    return results


def scan_notification(kind: str, scan: Any, scan_id: int, target_id: int) -> Notification:
    """A ``start`` or ``done`` notification carrying the scan as JSON."""
    if kind not in NOTIFICATION_KINDS:
        raise ValueError(f"unknown notification kind: {kind!r}")
    if is_dataclass(scan) and not isinstance(scan, type):
        scan = asdict(scan)
    try:
        data = json.dumps(scan)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"err marshal object: {exc}") from exc
    return Notification(
        notification_type=kind,
        notification_source="scan",
        new_data=data,
        obj_refer=scan_id,
        scan_refer=scan_id,
        target_refer=target_id,
    )