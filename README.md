# reconflow

reconflow is a library of building blocks for reconnaissance scans described
as YAML workflows. A *flow* groups *routines*; each routine lists *modules*;
each module is a sequence of *steps* made of commands, scripts, conditions and
report files. The package finds and parses those files, renders their
`{{.Var}}` templates against a target, validates scan input, reads the output
files of common scanning tools into records, lists workspace reports, and
handles backups, queue entries and update metadata.

## Modules

| Module | Purpose |
| --- | --- |
| `reconflow.models` | `Step`, `ModuleReport`, `Module`, `Routine`, `Flow` and the settings `EnvConfig`, `ScanConfig`, `ReportConfig`, `Options`; `step_from_dict`, `module_from_dict`, `flow_from_dict` build them from parsed YAML |
| `reconflow.templating` | `resolve_data` and `resolve_slice` for `{{.Var}}` templates, `alt_resolve_variable` for `[[.var]]` templates |
| `reconflow.target` | `parse_target`, `parse_input`, `parse_input_format`, `parse_params`, `is_root_domain`, `public_suffix` |
| `reconflow.workflow` | `parse_flow`, `parse_module`, `list_flows`, `select_flow`, `list_modules`, `select_modules`, `default_workflows`, `direct_select_module`, `list_scripts`, `select_script`; errors raise `WorkflowError` |
| `reconflow.validate` | `detect_input_type` and `validate_input`, returning a `ValidationResult` or raising `InputValidationError` |
| `reconflow.reports` | `resolve_reports`, `check_resume`, `report_files`, `process_report`, `render_table`, `list_workspaces`, `list_single_workspace` |
| `reconflow.queue` | `InputFormat`, `parse_queue_entry`, `build_command`, `pop_first_line` |
| `reconflow.tmux` | `parse_sessions` and `Tmux` for `tmux ls` listings and captured pane output |
| `reconflow.banner` | `banner(version, author, description)` |
| `reconflow.importers` | readers for subdomains, DNS, technologies, HTTP probes, screenshots, ports and vulnerability findings; `gen_hash` |
| `reconflow.importers_misc` | readers for links, archive URLs, IP ranges, certificates, credentials and cloud bucket results; `scan_notification` |
| `reconflow.update` | `UpdateMetaData`, `load_metadata`, `generate_metadata`, `needs_update`, `check_update`; errors raise `UpdateError` |
| `reconflow.archive` | `backup_workspace` and `extract_backup` for `.tar.gz` workspace backups |

## Parsing a target

```python
from reconflow.target import parse_target

info = parse_target("http://example.com/path?q=1")
info["Domain"]   # "example.com"
info["Port"]     # "80"
info["Path"]     # "/path"
info["URL"]      # "http://example.com/path?q=1"
```

A bare host such as `example.com` is read as `https://example.com`, so its
port is `443`. `parse_input(raw, options)` adds the run's variables on top of
these: folders from `options.env`, `Workspace`, `Output`, `Date` and the
flow's own `params`, each rendered against the values before it.

`parse_params(["threads=10", "wordlist=a=b"])` gives
`{"threads": "10", "wordlist": "a=b"}`.

## Templates

```python
from reconflow.templating import resolve_data, alt_resolve_variable

resolve_data("{{.Output}}/subdomain.txt", {"Output": "/tmp/ws"})
# "/tmp/ws/subdomain.txt"

alt_resolve_variable("echo [[.line]]", {"line": "a.example.com"})
# "echo a.example.com"
```

A missing key renders as `<no value>`. A template that cannot be parsed raises
`reconflow.templating.TemplateError`.

## Loading workflows and modules

```python
from reconflow.models import Options
from reconflow.workflow import select_flow, parse_flow

options = Options()
options.env.workflows_folder = "/path/to/workflow"

for path in select_flow("general", options):
    flow = parse_flow(path)
    print(flow.name, [routine.modules for routine in flow.routines])
```

`select_flow` accepts a path to a `.yaml` file, a flow name, or a comma
separated list of names, and also looks in the `default-flows` folder.
`direct_select_module` looks for a module by path, then in `cloud-modules`,
then in `default-modules`, and returns `None` when nothing is found.

## Validating input

```python
from reconflow.validate import detect_input_type

detect_input_type("sub.example.com")   # "domain"
detect_input_type("1.2.3.4")           # "ip"
detect_input_type("1.2.3.4/24")        # "cidr"
```

`validate_input(raw, required_input, options)` checks an input against the
type a flow or module requires. For a `file` or `*-file` requirement it checks
every line of an existing file, or writes a single matching value to a new file
in the temporary folder and returns that path.

## Reading tool output

Each reader takes a file path, raises `FileNotFoundError` if it is missing,
skips lines it cannot use and returns a list of dataclass records:

```python
from reconflow.importers import read_dns

for record in read_dns("dns.txt"):    # lines like "a.example.com A 192.0.2.1"
    print(record.domain, record.dns_type, record.dns_value, record.dns_checksum)
```

## Reports and workspaces

`list_workspaces(options)` and `list_single_workspace(options, target)` print
a table to standard error and return its rows. `check_resume(module)` is true
when all of a module's final reports already exist.
`backup_workspace(output_dir, backup_folder, workspace)` writes
`<backup_folder>/<workspace>.tar.gz`; `extract_backup` unpacks it and refuses
archives with paths or links that lead outside the destination.

## Queue entries and tmux output

`parse_queue_entry` reads a JSON queue entry into an `InputFormat` (or returns
`None` for a plain target), `build_command(entry, binary)` turns it into a
scan command line, and `pop_first_line(queue_file)` removes and returns the
first target of a queue file.
`Tmux.from_listing(raw, apply_all=True)` builds a `Tmux` from `tmux ls`
output; `selected_windows()` and `tail(raw)` pick sessions and trim captured
text.

## Update metadata

`check_update(metadata_file, metadata_url, current_version, fetch=None)`
fetches released metadata (with `urllib`, or with the given `fetch` callable
returning `(status, body)`), stores it in `metadata_file` and returns whether
the core or workflow version is newer than the installed one.

## What this package does not do

- It does not run scans. There is no component that executes a module's
  commands or scripts, evaluates its conditions, or walks a flow's routines
  step by step; the package supplies the parsed, rendered workflow data and
  the surrounding tools.
- It has no command-line program.
- It does not store anything in a database: the readers return records and
  `scan_notification` returns a `Notification` object for the caller to keep.
- It does not watch a queue file, start tmux, send notifications or install
  updates; it only works on the text, files and metadata it is given.