import os
import re

import pytest

from reconflow.models import EnvConfig, Flow, Options, ScanConfig
from reconflow.target import (
    is_root_domain,
    parse_input,
    parse_input_format,
    parse_params,
    parse_target,
    public_suffix,
)


@pytest.mark.parametrize(
    "raw",
    ["http://exmaple.com", "exmaple.com", "http://exmaple.com/123?q=1", "1.2.3.4", "1.2.3.4/24"],
)
def test_parse_target_source_cases_not_empty(raw):
    result = parse_target(raw)
    assert len(result) > 0
    assert result["Target"] == raw


def test_parse_target_http_url():
    result = parse_target("http://exmaple.com")
    assert result["Scheme"] == "http"
    assert result["Domain"] == "exmaple.com"
    assert result["Host"] == "exmaple.com"
    assert result["Port"] == "80"
    assert result["Org"] == "exmaple"
    assert result["URL"] == "http://exmaple.com"
    assert result["BaseURL"] == "http://exmaple.com"
    assert result["Extension"] == ".com"


def test_parse_target_bare_domain_defaults_to_https():
    result = parse_target("exmaple.com")
    assert result["Scheme"] == "https"
    assert result["Port"] == "443"
    assert result["URL"] == "https://exmaple.com"
    assert result["Target"] == "exmaple.com"


def test_parse_target_with_query():
    result = parse_target("http://exmaple.com/123?q=1")
    assert result["Path"] == "/123"
    assert result["RawQuery"] == "q=1"
    assert result["URL"] == "http://exmaple.com/123?q=1"


def test_parse_target_ip_and_cidr():
    ip = parse_target("1.2.3.4")
    assert ip["Domain"] == "1.2.3.4"
    assert ip["Org"] == "3"
    cidr = parse_target("1.2.3.4/24")
    assert cidr["Domain"] == "1.2.3.4"
    assert cidr["Path"] == "/24"


def test_parse_target_custom_port():
    result = parse_target("http://exmaple.com:8080/x")
    assert result["Port"] == "8080"
    assert result["Host"] == "exmaple.com:8080"
    assert result["URL"] == "http://exmaple.com:8080/x?"
    assert result["BaseURL"] == "http://exmaple.com:8080"


def test_parse_target_empty():
    assert parse_target("") == {}


def test_public_suffix():
    assert public_suffix("exmaple.com") == ("com", True)
    assert public_suffix("sub.exmaple.co.uk") == ("co.uk", True)
    assert public_suffix("1.2.3.4") == ("4", False)
    assert public_suffix("foo.github.io") == ("github.io", False)


def test_public_suffix_wildcard_and_exception():
    assert public_suffix("a.b.ck") == ("b.ck", True)
    assert public_suffix("www.ck") == ("ck", True)


def test_org_strips_multi_label_suffix():
    assert parse_target("https://shop.exmaple.co.uk")["Org"] == "shop.exmaple"


def test_parse_params():
    params = parse_params(["threads=10", "novalue", "url=http://a/?x=1"])
    assert params == {"threads": "10", "url": "http://a/?x=1"}


def test_is_root_domain():
    assert is_root_domain("exmaple.com") is False
    assert is_root_domain("a.b.unknowntld") is True
    assert is_root_domain("a.b.c.unknowntld") is False


def _options(**kwargs):
    env = EnvConfig(
        base_folder="/opt/base",
        binaries_folder="/opt/bin",
        data_folder="/opt/data",
        workflows_folder="/opt/workflow",
        cloud_config_folder="/opt/clouds",
        workspaces_folder="/ws",
        storages_folder="/st",
    )
    return Options(env=env, **kwargs)


def test_parse_input_env_values():
    result = parse_input("exmaple.com", _options(version="v1"))
    assert result["BaseFolder"] == "opt/base"
    assert result["Binaries"] == "/opt/bin"
    assert result["Plugins"] == "/opt/bin"
    assert result["Scripts"] == "/opt/workflow"
    assert result["Workspaces"] == "/ws"
    assert result["Workspace"] == "exmaple.com"
    assert result["Output"] == "/ws/exmaple.com"
    assert result["Version"] == "v1"
    assert result["CWD"] == os.getcwd()
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", result["Date"])


def test_parse_input_custom_workspace():
    options = _options(scan=ScanConfig(custom_workspace="custom", base_workspace="/other"))
    result = parse_input("exmaple.com", options)
    assert result["Workspace"] == "custom"
    assert result["Output"] == "/other/custom"


def test_parse_input_flow_params_are_resolved():
    options = _options(flow=Flow(params=[{"wordlist": "{{.Data}}/w.txt"}]))
    result = parse_input("exmaple.com", options)
    assert result["wordlist"] == "/opt/data/w.txt"


def test_parse_input_format_overrides():
    options = _options(enable_format_input=True)
    result = parse_input('{"Target": "exmaple.com", "Extra": 1, "Flag": true}', options)
    assert result["Domain"] == "exmaple.com"
    assert result["Target"] == "exmaple.com"
    assert result["Extra"] == "1"
    assert result["Flag"] == "true"
    assert "RawFormat" not in result


def test_parse_input_format_not_json():
    raw = "exmaple.com"
    assert parse_input_format(raw, _options()) == {"RawFormat": raw}


def test_parse_input_format_missing_target():
    with pytest.raises(ValueError):
        parse_input_format('{"Other": "x"}', _options())