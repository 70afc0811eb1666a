"""Report paths of modules and listings of workspaces and their reports."""

from __future__ import annotations

import json
import logging
import os
import posixpath
import sys
from collections.abc import Iterator, Mapping
from dataclasses import replace
from typing import Any

from tabulate import tabulate

from .models import Module, ModuleReport, Options
from .templating import resolve_data

logger = logging.getLogger(__name__)

STORAGES_MARKER = ".reconflow/storages"
COLUMN_WIDTH = 120

_HI_CYAN = "\x1b[96m"
_HI_BLUE = "\x1b[94m"
_HI_GREEN = "\x1b[92m"
_HI_MAGENTA = "\x1b[95m"
_RESET = "\x1b[0m"


def _paint(code: str, text: str) -> str:
    return f"{code}{text}{_RESET}"


def _exists(path: str) -> bool:
    return bool(path) and os.path.exists(os.path.expanduser(path))


def _unique(items) -> list[str]:
    return list(dict.fromkeys(items))


def resolve_reports(module: Module, params: Mapping[str, str]) -> Module:
    """Return a copy of ``module`` with its report templates rendered."""
    report = ModuleReport(
        final=[resolve_data(item, params) for item in module.report.final],
        noti=[resolve_data(item, params) for item in module.report.noti],
        diff=[resolve_data(item, params) for item in module.report.diff],
    )
    return replace(module, report=report)


def check_resume(module: Module) -> bool:
    """True when every final report already exists, so the module can be skipped.

    Reports kept in the storages folder do not count as missing.
    """
    return all(
        STORAGES_MARKER in report or _exists(report) for report in module.report.final
    )


def report_files(module: Module) -> list[str]:
    """Unique report paths of a module that exist as a file or a folder."""
    files = [*module.report.final, *module.report.noti, *module.report.diff]
    return [report for report in _unique(files) if _exists(report)]


def process_report(options: Options, report_path: str) -> str:
    """Turn a report path into its public URL when serving statically, and colour it."""
    if options.report.static and options.env.workspaces_folder:
        base = (
            f"https://{options.report.public_ip}:8000/"
            f"{options.static_prefix}/workspaces"
        )
        report_path = report_path.replace(options.env.workspaces_folder, base)
    if report_path.endswith(".html"):
        report_path = _paint(_HI_CYAN, report_path)
    if report_path.endswith(".json"):
        report_path = _paint(_HI_BLUE, report_path)
    return report_path


def render_table(header, rows) -> str:
    """Render rows under a header as a bordered text table."""
    rows = [list(row) for row in rows]
    kwargs: dict[str, Any] = {"headers": list(header), "tablefmt": "grid"}
    if rows:
        kwargs["maxcolwidths"] = COLUMN_WIDTH
    return tabulate(rows, **kwargs)


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _read_json(path: str) -> Any:
    try:
        with open(path, encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, ValueError):
        return None


def _workspace_dirs(options: Options) -> tuple[str, list[os.DirEntry]]:
    folder = os.path.expanduser(options.env.workspaces_folder)
    with os.scandir(folder) as entries:
        dirs = sorted((e for e in entries if e.is_dir()), key=lambda e: e.name)
    return folder, dirs


def list_workspaces(options: Options) -> list[list[str]]:
    """Describe every non-empty workspace: name, status, flow, progress and path."""
    folder, dirs = _workspace_dirs(options)
    rows: list[list[str]] = []
    for entry in dirs:
        ws_folder = posixpath.join(folder, entry.name)
        if not os.listdir(ws_folder):
            continue

        status = "unknown"
        flow_name = "unknown"
        progress = "N/A"
        if os.path.isfile(posixpath.join(ws_folder, "done")):
            status = "done"

        runtime_file = posixpath.join(ws_folder, "runtime")
        if os.path.isfile(runtime_file):
            logger.debug("Reading information from: %s", runtime_file)
            runtime = _read_json(runtime_file)
            if isinstance(runtime, dict):
                flow_name = _to_str(runtime.get("task_name"))
                done_step = _to_str(runtime.get("done_step"))
                total_steps = _to_str(runtime.get("total_steps"))
                if _to_str(runtime.get("is_running")) == "true":
                    status = "running"
                progress = f"{done_step}/{total_steps}"

        rows.append([entry.name, status, flow_name, progress, ws_folder])

    header = ["Workspace Name", "Flow", "Status", "Progress", "Workspace Path"]
    print(render_table(header, rows), file=sys.stderr)
    print(_paint(_HI_GREEN, "📁 Total Workspaces: ") + _paint(_HI_MAGENTA, str(len(rows))))
    return rows


def _walk(root: str) -> Iterator[str]:
    yield root
    if os.path.isdir(root) and not os.path.islink(root):
        for name in sorted(os.listdir(root)):
            yield from _walk(posixpath.join(root, name))


def list_single_workspace(options: Options, target: str) -> list[list[str]]:
    """List the reports of one workspace, from its runtime file or from its folder."""
    folder, dirs = _workspace_dirs(options)
    header = ["Workspace Name", "Module", "Report Name", "Report Path"]
    rows: list[list[str]] = []

    for entry in dirs:
        if entry.name != target:
            continue
        ws_folder = posixpath.join(folder, entry.name)

        runtime_file = posixpath.join(ws_folder, "runtime")
        if os.path.isfile(runtime_file) and not options.report.raw:
            logger.info("Reading information from: %s", runtime_file)
            runtime = _read_json(runtime_file)
            reports = []
            if isinstance(runtime, dict) and isinstance(runtime.get("target"), dict):
                reports = runtime["target"].get("reports") or []
            for report in reports if isinstance(reports, list) else []:
                if not isinstance(report, dict):
                    continue
                report_path = _to_str(report.get("report_path"))
                if not _exists(report_path):
                    continue
                rows.append([
                    entry.name,
                    _to_str(report.get("module")),
                    process_report(options, _to_str(report.get("report_name"))),
                    process_report(options, report_path),
                ])
            continue

        header = ["Workspace Name", "Report Name", "Report Path"]
        if options.report.static:
            header = ["Workspace Name", "Report Name", "Report URL"]
        for report_path in _walk(ws_folder):
            rows.append([
                entry.name,
                process_report(options, posixpath.basename(report_path)),
                process_report(options, report_path),
            ])

    print(render_table(header, rows), file=sys.stderr)
    return rows