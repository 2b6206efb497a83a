"""Parsing of unified diff patches into blocks of changed and unchanged lines."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

_NUMBER = re.compile(r"[+-]?[0-9]+")


class PatchError(Exception):
    """Raised when a patch cannot be parsed."""


@dataclass
class DiffSpan:
    """A range of line numbers, both ends included."""

    start: int
    end: int


@dataclass
class DiffBlock:
    """A run of context lines, or a run of removed and/or added lines."""

    is_context: bool = False
    old: DiffSpan | None = None
    new: DiffSpan | None = None
    old_line: str = ""
    new_line: str = ""


@dataclass
class _ChunkLines:
    old_line: int
    new_line: int
    num_old: int
    num_new: int


def _parse_number(text: str, what: str) -> int:
    if not _NUMBER.fullmatch(text):
        raise PatchError(f"wrong {what} format ({text}): invalid syntax")
    return int(text)


def _parse_section(section: str) -> tuple[int, int]:
    parts = section.split(",")
    line = abs(_parse_number(parts[0], "line"))
    if len(parts) < 2:
        return line, line
    return line, _parse_number(parts[1], "num old lines")


def _parse_header(line: str) -> _ChunkLines:
    sections = line.split(" ")
    if len(sections) < 3:
        raise PatchError(f"missing lines info: {line}")
    try:
        old_line, num_old = _parse_section(sections[1])
    except PatchError as exc:
        raise PatchError(f"error when parsing old section {sections[1]}: {exc}") from exc
    try:
        new_line, num_new = _parse_section(sections[2])
    except PatchError as exc:
        raise PatchError(f"error when parsing new section {sections[2]}: {exc}") from exc
    return _ChunkLines(old_line, new_line, num_old, num_new)


def _append_unmodified(blocks: list[DiffBlock], lines: _ChunkLines, text: str) -> None:
    last = blocks[-1] if blocks else None
    if (
        last is not None
        and last.is_context
        and last.old is not None
        and last.old.end == lines.old_line - 1
    ):
        block = last
        block.new_line = f"{block.new_line}\n{text}"
        block.old_line = f"{block.old_line}\n{text}"
    else:
        block = DiffBlock(
            is_context=True,
            old=DiffSpan(lines.old_line, 0),
            new=DiffSpan(lines.new_line, 0),
            old_line=text,
            new_line=text,
        )
        blocks.append(block)
    block.old.end = lines.old_line
    block.new.end = lines.new_line
    lines.new_line += 1
    lines.old_line += 1


def _append_added(blocks: list[DiffBlock], lines: _ChunkLines, text: str) -> None:
    if blocks and not blocks[-1].is_context:
        block = blocks[-1]
        if block.new is None:
            block.new = DiffSpan(lines.new_line, 0)
            block.new_line = text
        else:
            block.new_line = f"{block.new_line}\n{text}"
    else:
        block = DiffBlock(new=DiffSpan(lines.new_line, 0), new_line=text)
        blocks.append(block)
    block.new.end = lines.new_line
    lines.new_line += 1


def _append_removed(blocks: list[DiffBlock], lines: _ChunkLines, text: str) -> None:
    if blocks and not blocks[-1].is_context and blocks[-1].new is None:
        block = blocks[-1]
        block.old_line = f"{block.old_line}\n{text}"
    else:
        block = DiffBlock(old=DiffSpan(lines.old_line, 0), old_line=text)
        blocks.append(block)
    block.old.end = lines.old_line
    lines.old_line += 1


def parse_file_patch(patch: str) -> list[DiffBlock]:
    """Split a patch into blocks; lines outside any ``@@`` chunk are ignored."""
    blocks: list[DiffBlock] = []
    numbered: Iterator[tuple[int, str]] = enumerate(patch.split("\n"), start=1)

    for number, line in numbered:
        if not line.startswith("@@"):
            continue
        try:
            chunk = _parse_header(line)
        except PatchError as exc:
            raise PatchError(
                f"error in chunk lines parsing ({number}): {exc}\npatch: {patch}"
            ) from exc

        old_seen = new_seen = 0
        while old_seen < chunk.num_old or new_seen < chunk.num_new:
            entry = next(numbered, None)
            if entry is None:
                break
            chunk_line = entry[1]
            marker, text = chunk_line[:1], chunk_line[1:]
            if marker == " ":
                _append_unmodified(blocks, chunk, text)
                old_seen += 1
                new_seen += 1
            elif marker == "+":
                _append_added(blocks, chunk, text)
                new_seen += 1
            elif marker == "-":
                _append_removed(blocks, chunk, text)
                old_seen += 1

    return blocks