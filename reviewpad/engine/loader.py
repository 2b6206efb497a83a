"""Loading of reviewpad configuration files, with their imports inlined."""

from __future__ import annotations

import hashlib
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any

import yaml

from reviewpad.engine.lang import (
    PadGroup,
    PadImport,
    PadLabel,
    PadRule,
    PadWorkflow,
    PadWorkflowRule,
    ReviewpadFile,
)
from reviewpad.engine.transform import transform_action


class LoaderError(Exception):
    """Raised when a configuration or one of its imports cannot be loaded."""


@dataclass
class _LoadEnv:
    visited: set[str] = field(default_factory=set)
    stack: set[str] = field(default_factory=set)


def _as_bytes(data: bytes | str) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def _hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _text(value: Any, where: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise LoaderError(f"loader: {where} must be a scalar")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flag(value: Any, where: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise LoaderError(f"loader: {where} must be a boolean")


def _mapping(value: Any, where: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise LoaderError(f"loader: {where} must be a mapping")
    return value


def _sequence(value: Any, where: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise LoaderError(f"loader: {where} must be a list")
    return value


def _strings(value: Any, where: str) -> list[str]:
    return [_text(item, where) for item in _sequence(value, where)]


def _import(raw: Any) -> PadImport:
    node = _mapping(raw, "import")
    return PadImport(url=_text(node.get("url"), "import url"))


def _group(raw: Any) -> PadGroup:
    node = _mapping(raw, "group")
    return PadGroup(
        name=_text(node.get("name"), "group name"),
        description=_text(node.get("description"), "group description"),
        kind=_text(node.get("kind"), "group kind"),
        type=_text(node.get("type"), "group type"),
        spec=_text(node.get("spec"), "group spec"),
        param=_text(node.get("param"), "group param"),
        where=_text(node.get("where"), "group where"),
    )


def _rule(raw: Any) -> PadRule:
    node = _mapping(raw, "rule")
    return PadRule(
        name=_text(node.get("name"), "rule name"),
        kind=_text(node.get("kind"), "rule kind"),
        description=_text(node.get("description"), "rule description"),
        spec=_text(node.get("spec"), "rule spec"),
    )


def _label(raw: Any) -> PadLabel:
    node = _mapping(raw, "label")
    return PadLabel(
        name=_text(node.get("name"), "label name"),
        color=_text(node.get("color"), "label color"),
        description=_text(node.get("description"), "label description"),
    )


def _workflow_rule(raw: Any) -> PadWorkflowRule:
    node = _mapping(raw, "workflow rule")
    return PadWorkflowRule(
        rule=_text(node.get("rule"), "workflow rule"),
        extra_actions=_strings(node.get("extra-actions"), "extra-actions"),
    )


def _workflow(raw: Any) -> PadWorkflow:
    node = _mapping(raw, "workflow")
    return PadWorkflow(
        name=_text(node.get("name"), "workflow name"),
        description=_text(node.get("description"), "workflow description"),
        always_run=_flag(node.get("always-run"), "always-run"),
        rules=[_workflow_rule(item) for item in _sequence(node.get("if"), "if")],
        actions=_strings(node.get("then"), "then"),
    )


def parse(data: bytes | str) -> ReviewpadFile:
    """Read a configuration from YAML text without inlining its imports."""
    try:
        document = yaml.safe_load(_as_bytes(data))
    except yaml.YAMLError as exc:
        raise LoaderError(f"loader: {exc}") from exc

    node = _mapping(document, "document")
    labels = _mapping(node.get("labels"), "labels")
    return ReviewpadFile(
        version=_text(node.get("api-version"), "api-version"),
        edition=_text(node.get("edition"), "edition"),
        mode=_text(node.get("mode"), "mode"),
        ignore_errors=_flag(node.get("ignore-errors"), "ignore-errors"),
        imports=[_import(item) for item in _sequence(node.get("imports"), "imports")],
        groups=[_group(item) for item in _sequence(node.get("groups"), "groups")],
        rules=[_rule(item) for item in _sequence(node.get("rules"), "rules")],
        labels={_text(key, "label key"): _label(value) for key, value in labels.items()},
        workflows=[
            _workflow(item) for item in _sequence(node.get("workflows"), "workflows")
        ],
    )


def transform_file(file: ReviewpadFile) -> ReviewpadFile:
    """Return a copy of the file with default arguments filled into every action."""
    workflows = [
        PadWorkflow(
            name=workflow.name,
            description=workflow.description,
            always_run=workflow.always_run,
            rules=[
                PadWorkflowRule(
                    rule=rule.rule,
                    extra_actions=[transform_action(a) for a in rule.extra_actions],
                )
                for rule in workflow.rules
            ],
            actions=[transform_action(action) for action in workflow.actions],
        )
        for workflow in file.workflows or []
    ]
    return ReviewpadFile(
        version=file.version,
        edition=file.edition,
        mode=file.mode,
        ignore_errors=file.ignore_errors,
        imports=file.imports,
        groups=file.groups,
        rules=file.rules,
        labels=file.labels,
        workflows=workflows,
    )


def _load_import(pad_import: PadImport) -> tuple[ReviewpadFile, str]:
    try:
        with urllib.request.urlopen(pad_import.url) as response:
            content = response.read()
    except (urllib.error.URLError, OSError, ValueError) as exc:
        raise LoaderError(f"loader: cannot fetch {pad_import.url}: {exc}") from exc
    return transform_file(parse(content)), _hash(content)


def _inline_imports(file: ReviewpadFile, env: _LoadEnv) -> ReviewpadFile:
    for pad_import in file.imports or []:
        imported, digest = _load_import(pad_import)

        if digest in env.stack:
            raise LoaderError("loader: cyclic dependency")
        if digest in env.visited:
            continue

        env.stack.add(digest)
        env.visited.add(digest)
        subtree = _inline_imports(imported, env)
        env.stack.discard(digest)

        file.append_labels(subtree)
        file.append_groups(subtree)
        file.append_rules(subtree)
        file.append_workflows(subtree)

    file.imports = []
    return file


def load(data: bytes | str) -> ReviewpadFile:
    """Parse a configuration and inline everything it imports."""
    raw = _as_bytes(data)
    file = transform_file(parse(raw))
    digest = _hash(raw)
    env = _LoadEnv(visited={digest}, stack={digest})
    return _inline_imports(file, env)