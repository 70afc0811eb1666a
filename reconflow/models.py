"""Data model for workflows, modules, steps and run options."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

Params = list[dict[str, str]]


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable) and not isinstance(value, Mapping):
        return [_to_str(item) for item in value]
    return [_to_str(value)]


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1", "on"}
    return bool(value)


def _to_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"expected an integer, got {value!r}") from None


def _to_params(value: Any) -> Params:
    if value is None:
        return []
    if isinstance(value, Mapping):
        value = [value]
    params: Params = []
    for item in value:
        if not isinstance(item, Mapping):
            raise ValueError(f"params entries must be mappings, got {item!r}")
        params.append({str(key): _to_str(val) for key, val in item.items()})
    return params


def _pick(data: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    for name in names:
        if name in data:
            return data[name]
    return default


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} definition must be a mapping, got {type(data).__name__}")
    return data


@dataclass
class Step:
    """One step of a module: commands, scripts and their conditions."""

    label: str = ""
    timeout: str = ""
    threads: str = ""
    parallel: int = 0
    std: str = ""
    source: str = ""
    required: list[str] = field(default_factory=list)
    conditions: list[str] = field(default_factory=list)
    commands: list[str] = field(default_factory=list)
    scripts: list[str] = field(default_factory=list)
    rcommands: list[str] = field(default_factory=list)
    rscripts: list[str] = field(default_factory=list)
    pconditions: list[str] = field(default_factory=list)
    pscripts: list[str] = field(default_factory=list)
    ose: list[str] = field(default_factory=list)


@dataclass
class ModuleReport:
    """Report files a module produces."""

    final: list[str] = field(default_factory=list)
    noti: list[str] = field(default_factory=list)
    diff: list[str] = field(default_factory=list)


@dataclass
class Module:
    """A module: a named list of steps with pre- and post-run scripts."""

    name: str = ""
    desc: str = ""
    usage: str = ""
    validator: str = ""
    resume: bool = False
    forced: bool = False
    no_db: bool = False
    params: Params = field(default_factory=list)
    pre_run: list[str] = field(default_factory=list)
    post_run: list[str] = field(default_factory=list)
    report: ModuleReport = field(default_factory=ModuleReport)
    steps: list[Step] = field(default_factory=list)
    module_path: str = ""


@dataclass
class Routine:
    """A group of modules that run together within a flow."""

    flow_folder: str = ""
    modules: list[str] = field(default_factory=list)
    routine_name: str = ""
    parsed_modules: list[Module] = field(default_factory=list)


@dataclass
class Flow:
    """A workflow: a list of routines plus shared parameters."""

    name: str = ""
    desc: str = ""
    type: str = ""
    default_type: str = ""
    usage: str = ""
    validator: str = ""
    input: str = ""
    force_params: bool = False
    no_db: bool = False
    params: Params = field(default_factory=list)
    routines: list[Routine] = field(default_factory=list)


@dataclass
class EnvConfig:
    """Folders of the local installation."""

    root_folder: str = ""
    base_folder: str = ""
    binaries_folder: str = ""
    data_folder: str = ""
    workflows_folder: str = ""
    cloud_config_folder: str = ""
    workspaces_folder: str = ""
    storages_folder: str = ""
    ose_folder: str = ""
    backup_folder: str = ""
    scripts_folder: str = ""
    ui_folder: str = ""


@dataclass
class ScanConfig:
    """What to scan and with which flow or modules."""

    input: str = ""
    flow: str = ""
    modules: list[str] = field(default_factory=list)
    params: list[str] = field(default_factory=list)
    base_workspace: str = ""
    custom_workspace: str = ""
    scan_id: str = ""
    r_options: dict[str, str] = field(default_factory=dict)


@dataclass
class ReportConfig:
    """Settings for listing and extracting reports."""

    extract_folder: str = ""
    raw: bool = False
    static: bool = False
    public_ip: str = ""


@dataclass
class Options:
    """All settings of one run."""

    env: EnvConfig = field(default_factory=EnvConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    flow: Flow = field(default_factory=Flow)
    module: Module = field(default_factory=Module)
    version: str = ""
    cdn_url: str = ""
    ws_cdn_url: str = ""
    static_prefix: str = ""
    log_file: str = ""
    no_db: bool = False
    no_clean: bool = False
    resume: bool = False
    timeout: str = ""
    concurrency: int = 1
    exclude: list[str] = field(default_factory=list)
    enable_format_input: bool = False
    disable_validate_input: bool = False
    enable_backup: bool = False


_STEP_LISTS = (
    "required",
    "conditions",
    "commands",
    "scripts",
    "rcommands",
    "rscripts",
    "pconditions",
    "pscripts",
    "ose",
)


def step_from_dict(data: Any) -> Step:
    """Build a Step from a mapping as found in a module file."""
    data = _require_mapping(data, "step")
    lists = {name: _to_str_list(data.get(name)) for name in _STEP_LISTS}
    return Step(
        label=_to_str(data.get("label")),
        timeout=_to_str(data.get("timeout")),
        threads=_to_str(data.get("threads")),
        parallel=_to_int(data.get("parallel")),
        std=_to_str(data.get("std")),
        source=_to_str(data.get("source")),
        **lists,
    )


def _report_from_dict(data: Any) -> ModuleReport:
    data = _require_mapping(data, "report")
    return ModuleReport(
        final=_to_str_list(data.get("final")),
        noti=_to_str_list(data.get("noti")),
        diff=_to_str_list(data.get("diff")),
    )


def module_from_dict(data: Any) -> Module:
    """Build a Module from a mapping as found in a module file."""
    data = _require_mapping(data, "module")
    return Module(
        name=_to_str(data.get("name")),
        desc=_to_str(data.get("desc")),
        usage=_to_str(data.get("usage")),
        validator=_to_str(data.get("validator")),
        resume=_to_bool(data.get("resume", False)),
        forced=_to_bool(data.get("forced", False)),
        no_db=_to_bool(_pick(data, "no_db", "nodb", default=False)),
        params=_to_params(data.get("params")),
        pre_run=_to_str_list(_pick(data, "pre_run", "prerun")),
        post_run=_to_str_list(_pick(data, "post_run", "postrun")),
        report=_report_from_dict(data.get("report")),
        steps=[step_from_dict(step) for step in data.get("steps") or []],
        module_path=_to_str(data.get("module_path")),
    )


def _routine_from_dict(data: Any) -> Routine:
    data = _require_mapping(data, "routine")
    return Routine(
        flow_folder=_to_str(_pick(data, "flow_folder", "flow")),
        modules=_to_str_list(data.get("modules")),
        routine_name=_to_str(data.get("routine_name")),
        parsed_modules=[module_from_dict(m) for m in data.get("parsed_modules") or []],
    )


def flow_from_dict(data: Any) -> Flow:
    """Build a Flow from a mapping as found in a workflow file."""
    data = _require_mapping(data, "flow")
    return Flow(
        name=_to_str(data.get("name")),
        desc=_to_str(data.get("desc")),
        type=_to_str(data.get("type")),
        default_type=_to_str(data.get("default_type")),
        usage=_to_str(data.get("usage")),
        validator=_to_str(data.get("validator")),
        input=_to_str(data.get("input")),
        force_params=_to_bool(data.get("force_params", False)),
        no_db=_to_bool(_pick(data, "no_db", "nodb", default=False)),
        params=_to_params(data.get("params")),
        routines=[_routine_from_dict(r) for r in data.get("routines") or []],
    )