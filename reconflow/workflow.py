"""Locating and loading workflow, module and script files."""

from __future__ import annotations

import glob
import logging
import os
import posixpath
from dataclasses import replace

import yaml

from .models import Flow, Module, Options, flow_from_dict, module_from_dict
from .templating import resolve_data

logger = logging.getLogger(__name__)

THIS_FILE = "{{.this_file}}"


class WorkflowError(Exception):
    """Raised when a workflow or module file cannot be read or parsed."""


def _join(*parts: str) -> str:
    kept = [part for part in parts if part]
    if not kept:
        return ""
    return posixpath.normpath(posixpath.join(*kept))


def _file_exists(path: str) -> bool:
    return bool(path) and os.path.isfile(os.path.expanduser(path))


def _glob(pattern: str) -> list[str]:
    return sorted(glob.glob(pattern))


def _unique(items) -> list[str]:
    return list(dict.fromkeys(items))


def _load_yaml(path: str):
    try:
        with open(path, encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except OSError as exc:
        logger.error("YAML parsing err: %s -- #%s", path, exc)
        raise WorkflowError(f"cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        logger.error("Error unmarshal: %s -- %s", path, exc)
        raise WorkflowError(f"invalid YAML in {path}: {exc}") from exc


def parse_flow(flow_file) -> Flow:
    """Load a workflow file; ``{{.this_file}}`` in its usage becomes the file path."""
    flow_file = os.fspath(flow_file)
    logger.debug("Parsing workflow at: %s", flow_file)
    data = _load_yaml(flow_file)
    try:
        flow = flow_from_dict(data)
    except ValueError as exc:
        raise WorkflowError(f"invalid workflow {flow_file}: {exc}") from exc
    if THIS_FILE in flow.usage:
        flow.usage = flow.usage.replace(THIS_FILE, flow_file)
    return flow


def parse_module(module_file) -> Module:
    """Load a module file and remember where it came from."""
    module_file = os.fspath(module_file)
    logger.debug("Parsing module at: %s", module_file)
    data = _load_yaml(module_file)
    try:
        module = module_from_dict(data)
    except ValueError as exc:
        raise WorkflowError(f"invalid module {module_file}: {exc}") from exc
    module.module_path = module_file
    if THIS_FILE in module.usage:
        module.usage = module.usage.replace(THIS_FILE, module_file)
    return module


def list_flows(options: Options) -> list[str]:
    """All workflow files in the workflow folder."""
    return _glob(_join(options.env.workflows_folder, "*.yaml"))


def _flow_base_name(path: str) -> str:
    return posixpath.basename(path).rstrip("yaml").rstrip(".")


def _single_flow(name: str, flows: list[str]) -> list[str]:
    wanted = name.lower()
    return [flow for flow in flows if _flow_base_name(flow).lower() == wanted]


def select_flow(flow_name: str, options: Options) -> list[str]:
    """Resolve a flow name, a comma separated list of names, or a path to files."""
    flows = list_flows(options)

    if flow_name.endswith(".yaml") and _file_exists(flow_name):
        return [flow_name]

    selected: list[str] = []
    if "," not in flow_name:
        selected.extend(_single_flow(flow_name, flows))
    for item in flow_name.split(","):
        selected.extend(_single_flow(item, flows))

    if not _file_exists(flow_name):
        candidate = _join(options.env.workflows_folder, "default-flows", flow_name)
        if _file_exists(candidate):
            selected.append(candidate)
        elif _file_exists(candidate + ".yaml"):
            selected.append(candidate + ".yaml")

    return _unique(selected)


def list_modules(options: Options) -> list[str]:
    """Module files of the flow's type folder (``general`` by default)."""
    workflows = options.env.workflows_folder
    flow_type = options.flow.type
    pattern = _join(workflows, f"{flow_type}/*.yaml" if flow_type else "general/*.yaml")
    if options.scan.flow.endswith(".yaml"):
        folder = _join(posixpath.dirname(options.scan.flow), flow_type or "general")
        pattern = folder + "/*.yaml"
    return _glob(pattern)


def _module_base_name(path: str) -> str:
    return posixpath.basename(path).rstrip("yaml").strip(".")


def select_modules(module_names, options: Options) -> list[str]:
    """Paths of the modules whose names are given, without duplicates."""
    if "{{." in options.flow.type:
        flow_type = resolve_data(options.flow.type, options.scan.r_options)
        options = replace(options, flow=replace(options.flow, type=flow_type))
    modules = list_modules(options)
    selected: list[str] = []
    for name in module_names:
        wanted = name.lower()
        selected.extend(m for m in modules if _module_base_name(m).lower() == wanted)
    selected = _unique(selected)
    logger.debug("Select module name %s: %s", module_names, selected)
    return selected


def default_workflows(options: Options) -> list[str]:
    """Module files in the ``default-modules`` folder."""
    return _glob(_join(options.env.workflows_folder, "default-modules", "*.yaml"))


def direct_select_module(options: Options, module_name: str) -> str | None:
    """Find a module by path, then in ``cloud-modules``, then in ``default-modules``."""
    if _file_exists(module_name):
        return module_name
    for folder in ("cloud-modules", "default-modules"):
        base = _join(options.env.workflows_folder, folder)
        for candidate in (_join(base, module_name), _join(base, module_name + ".yaml")):
            logger.debug("Load module path: %s", candidate)
            if _file_exists(candidate):
                return candidate
    logger.debug("No plugin found with: %s", module_name)
    return None


def list_scripts(options: Options) -> list[str]:
    """Script files in the script folder and its direct sub-folders."""
    folder = options.env.ose_folder
    return _glob(_join(folder, "*.js")) + _glob(_join(folder, "*", "*.js"))


def select_script(script_name: str, options: Options) -> str | None:
    """Find a script by name, with or without ``.js``, or by a path suffix."""
    for script in list_scripts(options):
        if "/" in script_name and (
            script.endswith(script_name) or script.endswith(script_name + ".js")
        ):
            return script
        base = posixpath.basename(script)
        if base in (script_name, f"{script_name}.js"):
            return script
    return None