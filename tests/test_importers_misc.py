import json

import pytest

from reconflow.importers import gen_hash
from reconflow.importers_misc import (
    CloudBrute,
    read_archive,
    read_certs,
    read_cloud_brute,
    read_credentials,
    read_ip_ranges,
    read_links,
    scan_notification,
)

PASSWORD = "password"


def _write(tmp_path, name, lines):
    path = tmp_path / name
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def test_read_links(tmp_path):
    line = json.dumps({
        "input": "http://academy.example.com",
        "source": "body",
        "type": "url",
        "output": "http://academy.example.com/a",
        "status": 307,
        "length": 7,
    })
    src = _write(tmp_path, "links.json", [line, "", "not json", json.dumps({"input": 1})])
    links = read_links(src)
    assert len(links) == 1
    assert links[0].link_value == "http://academy.example.com/a"
    assert links[0].url == "http://academy.example.com"
    assert links[0].link_source == "body"
    assert links[0].link_type == "url"


def test_read_links_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_links(tmp_path / "absent.json")


def test_read_archive_skips_root_paths(tmp_path):
    lines = [
        "https://example.com",
        "https://example.com/",
        "https://example.com/login?next=1",
        "",
    ]
    entries = read_archive(_write(tmp_path, "archive.txt", lines))
    assert [e.archive_value for e in entries] == ["https://example.com/login?next=1"]
    assert entries[0].archive_checksum == gen_hash("https://example.com/login?next=1")


def test_read_ip_ranges_casts_values(tmp_path):
    lines = [
        json.dumps({
            "Number": 13335,
            "CountryCode": "US",
            "CIDR": "192.0.2.0/24",
            "Description": "TEST-NET",
            "Count": 256,
        }),
        json.dumps({"CIDR": "198.51.100.0/24", "Count": "-4"}),
    ]
    ranges = read_ip_ranges(_write(tmp_path, "asn.json", lines))
    assert ranges[0].as_number == "13335"
    assert ranges[0].country == "US"
    assert ranges[0].value == "192.0.2.0/24"
    assert ranges[0].info == "TEST-NET"
    assert ranges[0].amount == 256
    assert ranges[1].as_number == ""
    assert ranges[1].amount == 0


def test_read_certs_wildcard(tmp_path):
    lines = [
        json.dumps({"Domain": "*.example.com", "CertInfo": "c", "OrgInfo": "o"}),
        json.dumps({"Domain": "www.example.com"}),
    ]
    certs = read_certs(_write(tmp_path, "certs.json", lines))
    assert certs[0].domain == "example.com"
    assert certs[0].is_wildcard is True
    assert certs[0].cert_info == "c"
    assert certs[1].domain == "www.example.com"
    assert certs[1].is_wildcard is False
    assert certs[1].org_info == ""


def test_read_credentials(tmp_path):
    record = {
        "id": "abc",
        "email": "user@example.com",
        "username": "user",
        "password": PASSWORD,
        "hashed_password": "secret",
        "name": "Test User",
        "ip_address": "192.0.2.1",
        "phone": "n/a",
        "database_name": "leak",
    }
    creds = read_credentials(_write(tmp_path, "creds.json", [json.dumps(record)]))
    assert len(creds) == 1
    cred = creds[0]
    assert cred.email == "user@example.com"
    assert cred.password == PASSWORD
    assert cred.hashed_password == "secret"
    assert cred.source == "leak"
    assert cred.cred_id == "abc"


def test_read_cloud_brute(tmp_path):
    lines = [
        "Protected: 200 - bucket.example.com",
        "403 - other.example.com",
        "no separator here",
    ]
    results = read_cloud_brute(_write(tmp_path, "cloud.txt", lines))
    assert results == [
        CloudBrute(status="200", cloud_domain="bucket.example.com", raw_data=lines[0]),
        CloudBrute(status="403", cloud_domain="other.example.com", raw_data=lines[1]),
    ]


def test_scan_notification_round_trip():
    scan = {"task_name": "general", "done_step": 3}
    note = scan_notification("done", scan, 5, 9)
    assert note.notification_type == "done"
    assert note.notification_source == "scan"
    assert json.loads(note.new_data) == scan
    assert (note.obj_refer, note.scan_refer, note.target_refer) == (5, 5, 9)


def test_scan_notification_errors():
    with pytest.raises(ValueError):
        scan_notification("paused", {}, 1, 1)
    with pytest.raises(ValueError):
        scan_notification("start", {"x": object()}, 1, 1)