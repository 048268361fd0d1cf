"""
Line-indexed view of one source file.

Lines are numbered from 1 so that they line up with the row numbers reported
by the parser (tree-sitter rows + 1). A LineBuffer never grows or shrinks:
the only mutation is a same-index replacement.
"""

from __future__ import annotations

from typing import Iterator


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_source_lines(text: str) -> list[str]:
    """
    Split already-normalized source text into lines.
    A trailing newline does not produce an extra empty line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def read_source_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="ignore", newline="") as f:
        return normalize_newlines(f.read())


def leading_whitespace(line: str) -> str:
    stripped = line.lstrip()
    return line[: len(line) - len(stripped)]


class LineBuffer:
    def __init__(self, lines: list[str]):
        self._lines = list(lines)

    @classmethod
    def from_text(cls, text: str) -> "LineBuffer":
        return cls(split_source_lines(normalize_newlines(text)))

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def contains(self, line_no: int) -> bool:
        return 1 <= line_no <= len(self._lines)

    def get(self, line_no: int) -> str:
        if not self.contains(line_no):
            raise IndexError(f"line {line_no} outside 1..{len(self._lines)}")
        return self._lines[line_no - 1]

    def indent_of(self, line_no: int) -> str:
        return leading_whitespace(self.get(line_no))

    def replace(self, line_no: int, text: str) -> None:
        if not self.contains(line_no):
            raise IndexError(f"line {line_no} outside 1..{len(self._lines)}")
        self._lines[line_no - 1] = text

    def slice(self, start: int, stop: int) -> list[str]:
        """Plain zero-based list slice ``[start:stop]`` of the current lines."""
        return self._lines[start:stop]

    def snapshot(self) -> list[str]:
        return list(self._lines)
