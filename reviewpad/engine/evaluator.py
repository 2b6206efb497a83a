"""Evaluation of a configuration into the program of actions to run."""

from __future__ import annotations

import contextlib
import logging
import re

from reviewpad.collector import CollectorError
from reviewpad.engine.env import Env
from reviewpad.engine.labels import check_label_exists, create_label
from reviewpad.engine.lang import PadRule, PadWorkflowRule, ReviewpadFile
from reviewpad.engine.program import Program

logger = logging.getLogger(__name__)

_PROJECT = re.compile(r"github\.com/repos/(.*)/pulls/\d+\Z")


def _collect(env: Env, event_name: str, properties: dict) -> None:
    with contextlib.suppress(CollectorError):
        env.collector.collect(event_name, properties)


def collect_error(env: Env, error: BaseException) -> None:
    """Report an error event for the pull request."""
    _collect(
        env,
        "Error",
        {"pullRequestUrl": env.pull_request.get("url"), "details": str(error)},
    )


def evaluate(file: ReviewpadFile, env: Env) -> Program:
    """Process labels, groups and rules, then build the program of triggered actions.

    The file is expected to have passed the linter.
    """
    logger.info("file to evaluate:\n%r", file)

    interpreter = env.interpreter
    url = env.pull_request.get("url") or ""
    match = _PROJECT.search(url)
    if match is None:
        raise ValueError(f"reviewpad: cannot find the project in pull request url {url!r}")

    labels = file.labels or {}
    groups = file.groups or []
    file_rules = file.rules or []
    workflows = file.workflows or []

    _collect(
        env,
        "Trigger Analysis",
        {
            "pullRequestUrl": url,
            "project": match.group(1),
            "version": file.version,
            "edition": file.edition,
            "mode": file.mode,
            "totalGroups": len(groups),
            "totalLabels": len(labels),
            "totalRules": len(file_rules),
            "totalWorkflows": len(workflows),
        },
    )

    logger.info("detected %d groups", len(groups))
    logger.info("detected %d labels", len(labels))
    logger.info("detected %d rules", len(file_rules))
    logger.info("detected %d workflows", len(workflows))

    for label_key, label in labels.items():
        # A label has both a key and a name; the name wins when given.
        label_name = label.name or label_key
        if not env.dry_run and not check_label_exists(env, label_name):
            try:
                create_label(env, label_name, label)
            except Exception as exc:
                collect_error(env, exc)
                raise
        interpreter.process_label(label_key, label_name)

    for group in groups:
        try:
            interpreter.process_group(
                group.name, group.kind, group.type, group.spec, group.param, group.where
            )
        except Exception as exc:
            collect_error(env, exc)
            raise

    rules: dict[str, PadRule] = {}
    for rule in file_rules:
        try:
            interpreter.process_rule(rule.name, rule.spec)
        except Exception as exc:
            collect_error(env, exc)
            raise
        rules[rule.name] = rule

    program = Program()
    triggered_exclusive = False

    for workflow in workflows:
        logger.info("evaluating workflow %s:", workflow.name)

        if not workflow.always_run and triggered_exclusive:
            logger.info("\tskipping workflow")
            continue

        activated: list[PadWorkflowRule] = []
        for workflow_rule in workflow.rules:
            definition = rules.get(workflow_rule.rule, PadRule())
            try:
                is_active = interpreter.eval_expr(definition.kind, definition.spec)
            except Exception as exc:
                collect_error(env, exc)
                raise
            if is_active:
                activated.append(workflow_rule)
                logger.info("\trule %s activated", workflow_rule.rule)

        if not activated:
            logger.info("\tno rules activated")
            continue

        program.append(workflow.actions, workflow, activated)
        for workflow_rule in activated:
            program.append(workflow_rule.extra_actions, workflow, [workflow_rule])

        if not workflow.always_run:
            triggered_exclusive = True

    return program