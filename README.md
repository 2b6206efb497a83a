# reviewpad

A library for describing pull request automation as data. A review file
declares labels, groups, rules and workflows. The engine loads the file,
checks it, and works out which workflows fire. It then builds a program of
actions for an interpreter to run. The `reviewpad.aladino` package holds the
parts of Aladino, a small typed expression language used for rules and
actions: expression trees, types, type inference, built-in tables, diff
parsing and the run report.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The review file

```yaml
api-version: reviewpad.com/v1alpha
edition: professional
mode: silent
labels:
  small:
    color: "f29513"
    description: Small change
rules:
  - name: tautology
    kind: patch
    spec: "1 == 1"
workflows:
  - name: label-small
    always-run: true
    if:
      - rule: tautology
    then:
      - '$addLabel("small")'
```

This YAML maps onto the dataclasses in `reviewpad.engine.lang`:
`ReviewpadFile`, `PadImport`, `PadGroup`, `PadRule`, `PadLabel`,
`PadWorkflow` and `PadWorkflowRule`. Each dataclass has an `equals` method.
`ReviewpadFile` also has `append_labels`, `append_rules`, `append_groups`
and `append_workflows`. The helpers `find_group` and `find_rule` return the
first entry with a given name, or `None`.

## Loading

```python
from reviewpad.engine.loader import load, LoaderError

with open("reviewpad.yml", "rb") as fh:
    review_file = load(fh.read())
```

- `parse(data)` reads the YAML into a `ReviewpadFile`.
- `transform_file(file)` fills in default arguments on every action, using
  `reviewpad.engine.transform.transform_action`:
  - `$merge()` becomes `$merge("merge")`;
  - a one-argument `$assignReviewer(...)` call gets `, 99` appended.
- `load(data)` does both. It then downloads each URL listed under
  `imports` and merges that file's labels, groups, rules and workflows into
  the result, following nested imports. A file imported twice is merged once.

`load` raises `LoaderError` for malformed YAML, wrongly shaped fields, an
import that cannot be fetched, and cyclic imports.

## Linting

```python
from reviewpad.engine.linter import lint, LintError

try:
    lint(review_file)
except LintError as err:
    print(f"invalid review file: {err}")
```

`lint` raises `LintError` at the first problem it finds:

- a group or rule that has no name or repeats another's name;
- a rule whose kind is not `patch` or `author`, or whose spec is empty;
- a workflow that repeats another's name, has no rules, has an empty rule
  entry, or names an unknown rule;
- a rule that is never used;
- a `$rule("...")` or `$group("...")` mention of something undefined.

Workflows and rules that have no actions are only logged as warnings.

## Evaluating

`reviewpad.engine.evaluator.evaluate(file, env)` takes a file that has passed
the linter and an `reviewpad.engine.env.Env`. The `Env` dataclass holds:

- `dry_run`;
- `client`;
- `collector`;
- `pull_request`, a dict in the shape of the GitHub REST API;
- `interpreter`;
- optionally `client_gql` and `event_payload`.

The pull request's `url` must have the form `.../github.com/repos/<project>/pulls/<n>`.

The evaluation runs in this order:

1. **Labels.** For each label, when not a dry run, it calls
   `check_label_exists` and then `create_label` from
   `reviewpad.engine.labels`. These use `client.get_label(owner, repo, name)`
   and `client.create_label(owner, repo, payload)`. A raised exception whose
   `status_code` is 404 means the label does not exist. Label colours are
   checked by `validate_label_color`, which raises `LabelError`.
2. **Registration.** Labels, groups and rules are handed to the interpreter.
3. **Workflows.** It evaluates each workflow's rules and returns a
   `reviewpad.engine.program.Program` of `Statement`s. Each statement carries
   `Metadata` that names its workflow and the rules that fired. Once a
   workflow with `always-run: false` fires, later workflows that are not
   `always-run` are skipped.

Errors raised along the way are reported through `collect_error` and then
re-raised.

`reviewpad.engine.env.Interpreter` is an abstract base class. Its methods are
`process_group`, `process_label`, `process_rule`, `eval_expr`,
`exec_program`, `exec_statement` and `report`. `GroupKind` and `GroupType`
are the enums of group kinds and group types.

## Event collection

`reviewpad.collector.Collector(token, identifier, client=None, endpoint=None)`
tracks named events. `collect(event_name, properties)` adds `runnerId` and an
increasing `order` to the properties and passes the event to the client.

With an empty token it does nothing. With a token it needs either a `client`
that has `track` and `update_user`, or an HTTP `endpoint`. The HTTP client
posts base64-encoded JSON and raises `CollectorError` on failure.

## Aladino building blocks

- `reviewpad.aladino.expr` contains the expression classes:
  - `BoolConst`, `IntConst`, `StringConst` and `Variable`;
  - `UnaryOp` and `BinaryOp`, with the `Operator` enum;
  - `FunctionCall`, `Array`, `TypedExpr` and `Lambda`.

  It also has `build_cmp_op`, `build_time_const` (a date to a UTC Unix
  timestamp), `build_relative_time_const` (for example `"2 weeks"` ago) and
  `build_filter`.
- `reviewpad.aladino.types` contains `StringType`, `IntType`, `BoolType`,
  `FunctionType`, `ArrayType` and `ArrayOfType`, plus `types_equal`.
- `reviewpad.aladino.builtins` contains `BuiltInFunction`, `BuiltInAction`
  and `BuiltIns`. `merge_builtins` combines several of these; later entries
  win.
- `reviewpad.aladino.typeinfer` provides `type_inference(builtins, expr)` and
  `new_type_env(builtins)`. `type_inference` raises `TypeInferenceError` for
  expressions that have no type.
- `reviewpad.aladino.diff` provides `parse_file_patch(patch)`, which splits a
  unified diff into `DiffBlock`s with `DiffSpan`s. It raises `PatchError` for
  a malformed chunk header.
- `reviewpad.aladino.file` provides `new_file(filename, patch)`, which returns
  a `PatchFile`. `PatchFile.query(pattern)` tells whether any added text
  matches a regular expression.
- `reviewpad.aladino.report` provides `Report` and `ReportWorkflowDetails`,
  and renders the Markdown comment with `build_report`, `report_header` and
  `build_verbose_report`.

```python
from reviewpad.aladino.file import new_file

patch = new_file("main.go", "@@ -2,9 +2,11 @@ package main\n- func old() {\n+ func new() {")
print(patch.query(r"func new"))  # True
```

## What this package does not do

- There is no parser for Aladino source text. Expressions are built from the
  classes in `reviewpad.aladino.expr`.
- There is no evaluator for Aladino expressions and no concrete
  `Interpreter`. `evaluate` needs an interpreter supplied by the caller.
- There is no GitHub API client. `Env.client` must be an object you provide
  with `get_label` and `create_label`.
- There is no command-line tool, and nothing posts the report comment to a
  pull request.