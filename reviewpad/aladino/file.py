"""A changed file of a pull request together with its parsed diff."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from reviewpad.aladino.diff import DiffBlock, DiffSpan, PatchError, parse_file_patch


@dataclass
class PatchFile:
    """A file's name, its raw patch and the blocks parsed from it."""

    filename: str
    patch: str
    diff: list[DiffBlock] = field(default_factory=list)

    def append_to_diff(
        self,
        is_context: bool,
        old_start: int,
        old_end: int,
        new_start: int,
        new_end: int,
        old_line: str,
        new_line: str,
    ) -> None:
        """Add a block with both an old and a new span."""
        self.diff.append(
            DiffBlock(
                is_context=is_context,
                old=DiffSpan(old_start, old_end),
                new=DiffSpan(new_start, new_end),
                old_line=old_line,
                new_line=new_line,
            )
        )

    def query(self, pattern: str) -> bool:
        """Tell whether the new text of any changed block matches ``pattern``."""
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"query: compile error {exc}") from exc
        return any(
            regex.search(block.new_line) for block in self.diff if not block.is_context
        )


def new_file(filename: str | None, patch: str | None) -> PatchFile:
    """Build a file from its name and patch, parsing the patch."""
    name = filename or ""
    text = patch or ""
    try:
        blocks = parse_file_patch(text)
    except PatchError as exc:
        raise PatchError(f"error in file patch {name}: {exc}") from exc
    return PatchFile(filename=name, patch=text, diff=blocks)