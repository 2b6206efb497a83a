"""Rewrites of action strings that fill in default arguments."""

from __future__ import annotations

import re

_SQUAD_FUNCTIONS = r'(\$(team|group)\("[^"]*"\))'
_REVIEWERS_LIST = r"(\[(.*)\])"
_ASSIGN_REVIEWER = re.compile(
    r"\$assignReviewer\((" + _REVIEWERS_LIST + "|" + _SQUAD_FUNCTIONS + r")\)"
)

DEFAULT_TOTAL_REQUESTED_REVIEWERS = 99


def add_default_total_requested_reviewers(text: str) -> str:
    """Give a one-argument ``$assignReviewer`` call a default reviewer count."""
    match = _ASSIGN_REVIEWER.search(text)
    if match is None:
        return text
    call = match.group(0)
    with_default = f"{call[:-1]}, {DEFAULT_TOTAL_REQUESTED_REVIEWERS})"
    return text.replace(call, with_default)


def add_default_merge_method(text: str) -> str:
    """Make a bare ``$merge()`` use the ``merge`` method."""
    return text.replace("$merge()", '$merge("merge")')


_TRANSFORMATIONS = (add_default_total_requested_reviewers, add_default_merge_method)


def transform_action(text: str) -> str:
    """Apply every default-filling rewrite to an action string."""
    for transformation in _TRANSFORMATIONS:
        text = transformation(text)
    return text