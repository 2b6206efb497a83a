"""Making sure the labels a configuration declares exist in the repository."""

from __future__ import annotations

import re
from typing import Any

from reviewpad.engine.env import Env
from reviewpad.engine.lang import PadLabel

_COLOR = re.compile(r"(?:[0-9A-F]{6}){1,2}", re.IGNORECASE)
_NOT_FOUND = 404


class LabelError(Exception):
    """Raised when a label definition is invalid."""


def _base_repository(pull_request: dict[str, Any]) -> tuple[str, str]:
    repo = pull_request["base"]["repo"]
    return repo["owner"]["login"], repo["name"]


def validate_label_color(label: PadLabel) -> None:
    """Check that a label's colour, when given, is a hexadecimal code."""
    if not label.color or _COLOR.fullmatch(label.color):
        return
    if label.color.startswith("#"):
        raise LabelError(
            "evalLabel: the hexadecimal color code for the label should be "
            "without the leading #"
        )
    raise LabelError("evalLabel: color code not valid")


def create_label(env: Env, name: str, label: PadLabel) -> None:
    """Create the label in the pull request's base repository."""
    validate_label_color(label)

    payload: dict[str, str] = {"name": name, "description": label.description}
    if label.color:
        payload["color"] = label.color

    owner, repo = _base_repository(env.pull_request)
    env.client.create_label(owner, repo, payload)


def check_label_exists(env: Env, name: str) -> bool:
    """Tell whether the base repository has a label called ``name``.

    A failure that is not "not found" propagates.
    """
    owner, repo = _base_repository(env.pull_request)
    try:
        env.client.get_label(owner, repo, name)
    except Exception as exc:
        if getattr(exc, "status_code", None) == _NOT_FOUND:
            return False
        raise
    return True