import pytest

from reconflow.templating import (
    NO_VALUE,
    TemplateError,
    alt_resolve_variable,
    resolve_data,
    resolve_slice,
)


def test_resolve_data_substitutes_keys():
    data = {"Output": "/ws/out", "Workspace": "exmaple.com"}
    assert resolve_data("{{.Output}}/subdomain/{{.Workspace}}.txt", data) == (
        "/ws/out/subdomain/exmaple.com.txt"
    )


def test_resolve_data_allows_spaces_in_action():
    assert resolve_data("{{ .Name }}", {"Name": "probe"}) == "probe"


def test_missing_key_prints_no_value():
    assert resolve_data("{{.Missing}}", {}) == NO_VALUE
    assert NO_VALUE == "<no value>"


def test_plain_text_is_untouched():
    text = "echo hello > /tmp/x.txt"
    assert resolve_data(text, {"a": "b"}) == text


def test_unclosed_action_raises():
    with pytest.raises(TemplateError):
        resolve_data("{{.Output", {"Output": "x"})


def test_unknown_function_raises():
    with pytest.raises(TemplateError):
        resolve_data("{{ upper .Output }}", {"Output": "x"})


def test_nested_field_returns_template_unchanged():
    template = "prefix {{.Output.Sub}}"
    assert resolve_data(template, {"Output": "x"}) == template


def test_trim_markers_remove_whitespace():
    assert resolve_data("a  {{- .x -}}  b", {"x": "1"}) == "a1b"


def test_comment_renders_nothing():
    assert resolve_data("a{{/* note */}}b", {}) == resolve_data("ab", {})


def test_string_literal_action():
    assert resolve_data('x{{"lit"}}y', {}) == "xlity"


def test_resolve_slice_keeps_order_and_length():
    items = ["{{.a}}", "{{.b}}-{{.a}}", "plain"]
    result = resolve_slice(items, {"a": "1", "b": "2"})
    assert result == ["1", "2-1", "plain"]
    assert len(result) == len(items)


def test_alt_resolve_uses_square_brackets_only():
    data = {"line": "sub.exmaple.com", "Output": "/out"}
    result = alt_resolve_variable("probe [[.line]] > {{.Output}}", data)
    assert result == "probe sub.exmaple.com > {{.Output}}"


def test_alt_resolve_nested_field_returns_template():
    template = "[[.line.x]]"
    assert alt_resolve_variable(template, {"line": "a"}) == template


def test_alt_resolve_unclosed_raises():
    with pytest.raises(TemplateError):
        alt_resolve_variable("[[.line", {"line": "a"})