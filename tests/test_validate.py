import os

import pytest

from reconflow.models import Options
from reconflow.validate import (
    InputValidationError,
    ValidationResult,
    detect_input_type,
    validate_input,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("target.com", "domain"),
        ("apple.com", "domain"),
        ("1.2.3.4", "ip"),
        ("http://127.0.0.1/q", "url"),
        ("sub.domain.com", "domain"),
        ("1.2.3.4/24", "cidr"),
        ("https://github.com/team/project", "git-url"),
        ("https://gitlab.com/team/project", "git-url"),
        ("git@example.com:team/project.git", "git-url"),
        ("::ffff:1.2.3.4", "ip"),
        ("10.0.0.0/8", "cidr"),
    ],
)
def test_detect_input_type(raw, expected):
    assert detect_input_type(raw) == expected


@pytest.mark.parametrize("raw", ["", "!!!", "1.2.3", "a b c"])
def test_detect_unrecognized(raw):
    with pytest.raises(InputValidationError):
        detect_input_type(raw)


def test_detect_relative_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "list_1").write_text("x")
    assert detect_input_type("list_1") == "file"


def test_validate_matching_domain():
    result = validate_input("apple.com", "domain", Options())
    assert result == ValidationResult(value="apple.com", input_type="domain")


def test_validate_mismatch():
    with pytest.raises(InputValidationError, match="inputType:ip"):
        validate_input("1.2.3.4", " Domain ", Options())


def test_validate_disabled():
    assert validate_input("1.2.3.4", "", Options()).input_type == ""
    result = validate_input("1.2.3.4", "domain", Options(disable_validate_input=True))
    assert result.value == "1.2.3.4"
    assert result.input_type == ""


def test_validate_file_input(tmp_path):
    path = tmp_path / "targets.txt"
    path.write_text("a1.example.com\n\nb2.example.com\n")
    result = validate_input(str(path), "domain-file", Options())
    assert result == ValidationResult(value=str(path), input_type="file", as_file=True)


def test_validate_file_bad_line(tmp_path):
    path = tmp_path / "targets.txt"
    path.write_text("a1.example.com\n1.2.3.4\n")
    with pytest.raises(InputValidationError, match="line 1"):
        validate_input(str(path), "domain-file", Options())


def test_validate_value_converted_to_file():
    result = validate_input("example.com", "domain-file", Options())
    try:
        assert result.as_file is True
        assert result.input_type == "domain"
        with open(result.value, encoding="utf-8") as handle:
            assert handle.read() == "example.com"
        assert os.path.basename(result.value).startswith("example.com-")
    finally:
        os.remove(result.value)