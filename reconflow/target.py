"""Parsing of scan targets and of the run's template variables."""

from __future__ import annotations

import json
import os
import posixpath
import re
from dataclasses import replace
from datetime import date
from typing import Any, NamedTuple
from urllib.parse import unquote, urlsplit

from .models import Options
from .templating import resolve_data

# A built-in subset of the public suffix list.
_ICANN_RULES = frozenset(
    """
    com net org edu gov mil int arpa info biz name pro aero asia cat coop jobs
    mobi museum post tel travel xxx app dev xyz online site top shop store tech
    cloud blog page club live news space website link click work digital agency
    ac ad ae af ag ai al am ao aq ar as at au aw ax az ba bb bd be bf bg bh bi
    bj bm bn bo br bs bt bw by bz ca cc cd cf cg ch ci cl cm cn co cr cu cv cw
    cx cy cz de dj dk dm do dz ec ee eg er es et eu fi fj fk fm fo fr ga gb gd
    ge gf gg gh gi gl gm gn gp gq gr gs gt gu gw gy hk hm hn hr ht hu id ie il
    im in io iq ir is it je jm jo jp ke kg kh ki km kn kp kr kw ky kz la lb lc
    li lk lr ls lt lu lv ly ma mc md me mg mh mk ml mm mn mo mp mq mr ms mt mu
    mv mw mx my mz na nc ne nf ng ni nl no np nr nu nz om pa pe pf pg ph pk pl
    pm pn pr ps pt pw py qa re ro rs ru rw sa sb sc sd se sg sh si sj sk sl sm
    sn so sr ss st su sv sx sy sz tc td tf tg th tj tk tl tm tn to tr tt tv tw
    tz ua ug uk us uy uz va vc ve vg vi vn vu wf ws ye yt za zm zw
    *.ck !www.ck
    co.uk org.uk me.uk ltd.uk plc.uk net.uk ac.uk gov.uk nhs.uk police.uk sch.uk
    com.au net.au org.au edu.au gov.au id.au asn.au
    co.jp ne.jp or.jp ac.jp go.jp ad.jp ed.jp gr.jp lg.jp
    com.br net.br org.br gov.br edu.br
    com.cn net.cn org.cn gov.cn edu.cn ac.cn
    co.nz net.nz org.nz govt.nz ac.nz
    co.in net.in org.in firm.in gen.in ind.in ac.in edu.in gov.in
    com.vn net.vn org.vn edu.vn gov.vn
    co.za org.za gov.za ac.za net.za
    com.sg net.sg org.sg edu.sg gov.sg
    com.hk net.hk org.hk edu.hk gov.hk
    co.kr or.kr ne.kr go.kr ac.kr re.kr
    com.tw net.tw org.tw edu.tw gov.tw idv.tw
    com.mx net.mx org.mx gob.mx edu.mx
    com.ar net.ar org.ar gob.ar
    co.id or.id ac.id go.id web.id
    com.my net.my org.my gov.my edu.my
    com.ph net.ph org.ph gov.ph edu.ph
    com.tr net.tr org.tr gov.tr edu.tr
    co.il org.il ac.il gov.il
    com.ua net.ua org.ua gov.ua
    com.ru net.ru org.ru
    co.th in.th ac.th go.th or.th
    com.pk com.sa com.eg co.ke
    """.split()
)

_PRIVATE_RULES = frozenset(
    """
    github.io gitlab.io githubusercontent.com herokuapp.com appspot.com
    blogspot.com cloudfront.net azurewebsites.net netlify.app vercel.app
    pages.dev workers.dev firebaseapp.com s3.amazonaws.com
    """.split()
)

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_WORKSPACE_RE = re.compile(r"[^A-Za-z0-9._-]+")


def _rule(name: str) -> bool | None:
    if name in _ICANN_RULES:
        return True
    if name in _PRIVATE_RULES:
        return False
    return None


def public_suffix(domain: str) -> tuple[str, bool]:
    """Return the public suffix of ``domain`` and whether it is ICANN managed.

    Without a matching rule the last label is the suffix and the flag is false.
    """
    labels = domain.split(".")
    lowered = [label.lower() for label in labels]
    for start in range(len(labels)):
        candidate = ".".join(lowered[start:])
        exception = _rule("!" + candidate)
        if exception is not None:
            return ".".join(labels[start + 1:]), exception
        exact = _rule(candidate)
        if exact is not None:
            return ".".join(labels[start:]), exact
        if start + 1 < len(labels):
            wildcard = _rule("*." + ".".join(lowered[start + 1:]))
            if wildcard is not None:
                return ".".join(labels[start:]), wildcard
    return labels[-1], False


class _URL(NamedTuple):
    scheme: str
    host: str
    hostname: str
    port: str
    path: str
    raw_query: str


def _split_host(host: str) -> tuple[str, str]:
    if host.startswith("["):
        end = host.find("]")
        if end < 0:
            raise ValueError("missing ']' in host")
        rest = host[end + 1:]
        if rest and not rest.startswith(":"):
            raise ValueError("invalid port")
        return host[1:end], rest[1:]
    hostname, sep, port = host.rpartition(":")
    return (hostname, port) if sep else (host, "")


def _parse_url(raw: str) -> _URL | None:
    if _CONTROL_RE.search(raw):
        return None
    try:
        parts = urlsplit(raw)
    except ValueError:
        return None
    host = parts.netloc.rpartition("@")[2]
    try:
        hostname, port = _split_host(host)
    except ValueError:
        return None
    if port and not port.isdigit():
        return None
    if any(ch.isspace() for ch in hostname):
        return None
    if _BAD_ESCAPE_RE.search(parts.path) or _BAD_ESCAPE_RE.search(hostname):
        return None
    return _URL(
        scheme=parts.scheme,
        host=host,
        hostname=unquote(hostname),
        port=port,
        path=unquote(parts.path),
        raw_query=parts.query,
    )


def _extension(path: str) -> str:
    tail = path.rsplit("/", 1)[-1]
    dot = tail.rfind(".")
    return tail[dot:] if dot >= 0 else ""


def _organisation(domain: str) -> str:
    suffix, icann = public_suffix(domain)
    if icann:
        return domain.replace(f".{suffix}", "")
    if "." in domain:
        parts = domain.split(".")
        return parts[0] if len(parts) == 2 else parts[-2]
    return domain


def parse_target(raw: str) -> dict[str, str]:
    """Split a target (domain, URL, IP or CIDR) into its template variables."""
    target: dict[str, str] = {}
    if raw == "":
        return target
    target["Target"] = raw

    url = _parse_url(raw)
    if url is None or not url.scheme or "." in url.scheme:
        raw = f"https://{raw}"
        url = _parse_url(raw)
        if url is None:
            return target

    domain = url.hostname
    if url.port == "":
        port = "443" if "https" in url.scheme else "80"
        hostname = domain
    elif url.port in ("443", "80"):
        port = url.port
        hostname = domain
    else:
        port = url.port
        hostname = f"{domain}:{url.port}"

    target["Scheme"] = url.scheme
    target["Path"] = url.path
    target["Domain"] = domain
    target["Org"] = _organisation(domain)
    target["Host"] = hostname
    target["Port"] = port
    target["RawQuery"] = url.raw_query

    common_port = port in ("80", "443")
    if url.raw_query and common_port:
        target["URL"] = f"{url.scheme}://{hostname}{url.path}?{url.raw_query}"
    elif not common_port:
        target["URL"] = f"{url.scheme}://{domain}:{port}{url.path}?{url.raw_query}"
    else:
        target["URL"] = f"{url.scheme}://{hostname}{url.path}"

    target["BaseURL"] = f"{url.scheme}://{url.host}"
    target["Extension"] = _extension(target["BaseURL"])
    return target


def _workspace_name(raw: str) -> str:
    return _WORKSPACE_RE.sub("_", raw.split("://", 1)[-1]).strip("_")


def _join(*parts: str) -> str:
    kept = [part for part in parts if part]
    return posixpath.normpath(posixpath.join(*kept)) if kept else ""


def _expand_home(path: str) -> str:
    return os.path.expanduser(path)


def parse_input(raw: str, options: Options) -> dict[str, str]:
    """Build the full set of template variables for a run on ``raw``."""
    if options.enable_format_input:
        return parse_input_format(raw, replace(options, enable_format_input=False))

    values = parse_target(raw)
    try:
        values["CWD"] = os.getcwd()
    except OSError:
        pass
    today = date.today().strftime("%Y-%m-%d")
    values["Version"] = options.version
    values["WSCDN"] = options.ws_cdn_url
    values["CDN"] = options.cdn_url
    values["Date"] = today
    values["TS"] = today

    env = options.env
    values["BaseFolder"] = _expand_home(env.base_folder.lstrip("/"))
    values["Plugins"] = env.binaries_folder
    values["Binaries"] = env.binaries_folder
    values["Data"] = env.data_folder
    values["Workflow"] = env.workflows_folder
    values["Scripts"] = env.workflows_folder
    values["Cloud"] = env.cloud_config_folder
    values["Workspaces"] = options.scan.base_workspace or env.workspaces_folder
    values["Storages"] = env.storages_folder

    values["Workspace"] = _workspace_name(options.scan.custom_workspace or raw)
    values["Output"] = _join(values["Workspaces"], values["Workspace"])

    for param in options.flow.params:
        for key, value in param.items():
            value = resolve_data(value, values)
            if value.startswith("~/"):
                value = _expand_home(value)
            values[key] = value
    return values


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<nil>"
    if isinstance(value, list):
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, dict):
        items = " ".join(f"{key}:{_format_value(value[key])}" for key in sorted(value))
        return f"map[{items}]"
    return str(value)


def parse_input_format(raw: str, options: Options) -> dict[str, str]:
    """Read a JSON target description; its keys override the parsed values.

    Input that is not JSON yields only ``RawFormat``. JSON without a
    ``Target`` key raises ValueError.
    """
    target = {"RawFormat": raw}
    try:
        parsed = json.loads(raw, parse_int=str, parse_float=str)
    except ValueError:
        return target
    if not isinstance(parsed, dict) or "Target" not in parsed:
        raise ValueError("missing Target in special input")

    raw_target = parsed["Target"]
    target = parse_input("" if raw_target is None else _format_value(raw_target), options)
    for key, value in parsed.items():
        target[key] = _format_value(value)
    return target


def parse_params(raw_params) -> dict[str, str]:
    """Turn ``key=value`` strings into a mapping; items without ``=`` are skipped."""
    params: dict[str, str] = {}
    for item in raw_params:
        if "=" not in item:
            continue
        key = item.split("=")[0]
        params[key] = item.replace(key + "=", "")
    return params


def is_root_domain(raw: str) -> bool:
    """Report whether ``raw`` is a root domain under an unlisted suffix."""
    suffix, icann = public_suffix(raw)
    if icann:
        return False
    return raw.replace(f".{suffix}", "").count(".") == 1