"""Readers that turn scanner output files into asset, DNS, HTTP and vulnerability records."""

from __future__ import annotations

import base64
import hashlib
import json
import logging
import os
import posixpath
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

NO_CONTENT = "No-Content"

_ZERO_DECIMAL_RE = re.compile(r"^([+-]?\d+)\.0*$")


class _BadRecord(Exception):
    """A line that does not hold the expected fields."""


@dataclass
class Asset:
    """A discovered host, optionally with the technologies it runs."""

    asset_value: str
    technology: str = ""
    is_alive: bool = False


@dataclass
class DnsRecord:
    """One DNS answer with a checksum that identifies it."""

    domain: str
    dns_type: str
    dns_value: str
    dns_checksum: str


@dataclass
class HttpRecord:
    """An HTTP probe result; ``http_content`` is the base64 body or ``No-Content``."""

    url: str
    title: str
    checksum: str
    status_code: int
    content_length: int
    http_content: str
    redirect: str


@dataclass
class ScreenshotRecord:
    """A screenshot of a URL, base64 encoded."""

    url: str
    screenshot_data: str


@dataclass
class PortRecord:
    """Open ports of an address, as ``port/protocol/product`` joined by commas."""

    dns_value: str
    ports: str
    dns_type: str = "A"


@dataclass
class Vulnerability:
    """A finding reported by a vulnerability scanner."""

    url: str
    vuln_request: str
    vuln_response: str
    detection_string: str
    vulnerability_title: str
    signature_id: str
    confidence: str
    severity: str
    source: str


@dataclass
class DirectoryRecord:
    """A path found by content discovery."""

    url: str
    status: int
    content_length: int
    words: int
    redirect_url: str = ""


def gen_hash(text: str) -> str:
    """Hex SHA-1 digest of ``text``."""
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def _lines(src) -> list[str]:
    src = os.fspath(src)
    if not os.path.isfile(src):
        logger.error("file not found: %s", src)
        raise FileNotFoundError(f"file not found: {src}")
    with open(src, encoding="utf-8", errors="replace") as handle:
        return handle.read().splitlines()


def _json_lines(src, *, log_errors: bool = False) -> Iterator[dict[str, Any]]:
    for line in _lines(src):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
        except ValueError:
            if log_errors:
                logger.error("Error parse JSON Data")
            continue
        if isinstance(data, dict):
            yield data


def _text(data: Any, *path: str) -> str:
    for key in path:
        if not isinstance(data, dict) or key not in data:
            raise _BadRecord(".".join(path))
        data = data[key]
    if not isinstance(data, str):
        raise _BadRecord(".".join(path))
    return data


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        match = _ZERO_DECIMAL_RE.match(text)
        if match:
            text = match.group(1)
        try:
            return int(text, 0)
        except ValueError:
            return 0
    return 0


def _file_as_base64(path: str) -> str:
    try:
        with open(path, "rb") as handle:
            return base64.b64encode(handle.read()).decode("ascii")
    except OSError:
        return ""


def _base_dir(src) -> str:
    return posixpath.dirname(os.path.abspath(os.fspath(src)))


def read_subdomains(src) -> list[Asset]:
    """One asset per non-empty line of a subdomain list."""
    return [Asset(asset_value=line.strip()) for line in _lines(src) if line.strip()]


def read_dns(src) -> list[DnsRecord]:
    """Records from ``name type value`` lines; trailing dots are dropped."""
    records = []
    for line in _lines(src):
        line = line.strip()
        if not line or " " not in line:
            continue
        fields = line.split(" ")
        if len(fields) < 3:
            logger.debug("Skip short DNS line: %s", line)
            continue
        domain = fields[0].strip(".")
        dns_type = fields[1].strip()
        dns_value = fields[2].strip(".")
        if not domain.strip() or not dns_value.strip():
            continue
        records.append(
            DnsRecord(
                domain=domain,
                dns_type=dns_type,
                dns_value=dns_value,
                dns_checksum=gen_hash(f"{domain}-{dns_type}-{dns_value}"),
            )
        )
    return records


def read_tech(src) -> list[Asset]:
    """Live assets from ``domain|<host>;;techs|<list>`` lines."""
    assets = []
    for line in _lines(src):
        if ";;" not in line:
            logger.error("Invalid format: %s", line)
            continue
        parts = line.split(";;")
        domain = parts[0].removeprefix("domain|")
        techs = parts[1].removeprefix("techs|")
        if not techs.strip():
            logger.error("Invalid format: %s", line)
            continue
        assets.append(Asset(asset_value=domain, technology=techs, is_alive=True))
    return assets


def read_http_json(src) -> list[HttpRecord]:
    """HTTP probe results; content files are resolved next to ``src`` when relative."""
    base = _base_dir(src)
    logger.debug("Set Base Dir for content: %s", base)
    records = []
    for data in _json_lines(src):
        try:
            url = _text(data, "url")
            title = _text(data, "title")
            checksum = _text(data, "checksum")
            content_path = _text(data, "content_file")
            status = _text(data, "status")
            length = _text(data, "length")
            redirect = _text(data, "redirect")
        except _BadRecord as exc:
            logger.debug("Skip HTTP record without %s", exc)
            continue

        if not os.path.isfile(content_path):
            content_path = posixpath.join(base, content_path)
        content = NO_CONTENT
        if NO_CONTENT not in content_path:
            content = _file_as_base64(content_path)

        records.append(
            HttpRecord(
                url=url,
                title=title,
                checksum=checksum,
                status_code=_to_int(status),
                content_length=_to_int(length),
                http_content=content,
                redirect=redirect,
            )
        )
    return records


def read_screenshot_json(src) -> list[ScreenshotRecord]:
    """Screenshots with their image files read as base64."""
    base = _base_dir(src)
    logger.debug("Set Base Dir for screenshot: %s", base)
    records = []
    for data in _json_lines(src):
        try:
            url = _text(data, "url")
            image_path = _text(data, "image")
            tech = _text(data, "tech")
        except _BadRecord as exc:
            logger.debug("Skip screenshot record without %s", exc)
            continue
        if tech:
            logger.debug("more tech: %s", tech)
        if not os.path.isfile(image_path):
            image_path = posixpath.join(base, image_path)
        records.append(ScreenshotRecord(url=url, screenshot_data=_file_as_base64(image_path)))
    return records


def _lower_keys(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        return {}
    return {str(key).lower(): value for key, value in data.items()}


def _port_info(port: Any) -> str:
    fields = _lower_keys(port)
    service = _lower_keys(fields.get("service"))
    parts = (fields.get("portid"), fields.get("protocol"), service.get("product"))
    return "/".join("" if part is None else str(part) for part in parts).strip("/")


def read_port_json(src) -> list[PortRecord]:
    """Open ports per address from port scan results."""
    records = []
    for data in _json_lines(src):
        try:
            address = _text(data, "IPAddress")
        except _BadRecord:
            continue
        ports = data.get("Ports")
        if not isinstance(ports, list) or not ports:
            continue
        if not all(isinstance(port, dict) for port in ports):
            continue
        infos = [_port_info(port) for port in ports]
        records.append(PortRecord(dns_value=address, ports=",".join(infos)))
    return records


def _read_text(path: str) -> str:
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            return handle.read()
    except OSError:
        return ""


def read_jaeles_vulns(src) -> list[Vulnerability]:
    """Findings whose details live in the report files the summary lines point to."""
    base_dir = posixpath.dirname(os.fspath(src))
    findings = []
    for data in _json_lines(src, log_errors=True):
        try:
            raw = _text(data, "OutputFile")
        except _BadRecord:
            logger.error("Error parse JSON Data")
            continue
        report_path = raw
        if not os.path.isfile(report_path):
            report_path = posixpath.join(base_dir, raw)
            if not os.path.isfile(report_path):
                report_path = posixpath.join(posixpath.dirname(base_dir), raw)

        try:
            detail = json.loads(_read_text(report_path))
            finding = Vulnerability(
                url=_text(detail, "URL"),
                vuln_request=_text(detail, "Req"),
                vuln_response=_text(detail, "Res"),
                detection_string=_text(detail, "DetectionString"),
                vulnerability_title=_text(detail, "SignName"),
                signature_id=_text(detail, "SignID"),
                confidence=_text(detail, "Confidence"),
                severity=_text(detail, "Risk"),
                source="Jaeles",
            )
        except (ValueError, _BadRecord):
            logger.error("Error parse JSON Data")
            continue
        findings.append(finding)
    return findings


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def read_nuclei_vulns(src) -> list[Vulnerability]:
    """Findings from JSON lines; request and response are stored base64 encoded."""
    findings = []
    for data in _json_lines(src, log_errors=True):
        try:
            finding = Vulnerability(
                url=_text(data, "host"),
                vuln_request=_b64(_text(data, "request")),
                vuln_response=_b64(_text(data, "response")),
                detection_string=_text(data, "matched"),
                vulnerability_title=_text(data, "info", "name"),
                signature_id=_text(data, "templateID"),
                confidence="Tentative",
                severity=_text(data, "info", "severity"),
                source="Nuclei",
            )
        except _BadRecord as exc:
            logger.error("Error parse JSON Data: missing %s", exc)
            continue
        findings.append(finding)
    return findings


def read_directory_json(src) -> list[DirectoryRecord]:
    """Content discovery hits; lines without a ``url`` are ignored."""
    records = []
    for line in _lines(src):
        if not line.strip() or "url" not in line:
            continue
        try:
            data = json.loads(line)
            url = _text(data, "url")
        except (ValueError, _BadRecord):
            logger.error("Error parse JSON Data")
            continue
        records.append(
            DirectoryRecord(
                url=url,
                status=_to_int(data.get("status")),
                content_length=_to_int(data.get("length")),
                words=_to_int(data.get("words")),
            )
        )
    return records