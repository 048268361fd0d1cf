"""
ConstructRewriter and CleanupPass.

Replacement text per span kind:
    method      <indent>[<access> ]procedure|function <name>(<a,b>) /  <indent>endprocedure|endfunction
    for         <indent>for <init> to <bound>                       /  <indent>next <var>
    for-each    <indent>for <var> in <iterable>                     /  <indent>next <var>
    if          <indent>if <condition> then                         /  <indent>endif
    switch      <indent>switch <selector>                           /  <indent>endswitch

Only the two boundary lines of a span are written; interior lines are left
for the cleanup pass.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .lines import LineBuffer
from .spans import ConstructKind, ConstructSpan, MethodSpan

TERMINATOR = ";"
BLOCK_DELIMITERS = ("{", "}")


def _routine_word(span: MethodSpan) -> str:
    return "procedure" if span.is_void else "function"


def header_text(span: ConstructSpan) -> str:
    """Header line without indentation."""
    kind = span.kind
    if kind is ConstructKind.METHOD_SIGNATURE:
        signature = f"{_routine_word(span)} {span.fragment('name')}({span.fragment('parameters')})"
        # package-private: no access word, and no stray space before the keyword
        return f"{span.access_kind} {signature}" if span.access_kind else signature
    if kind is ConstructKind.FOR_LOOP:
        return f"for {span.fragment('init_expr')} to {span.fragment('upper_bound')}"
    if kind is ConstructKind.FOR_EACH_LOOP:
        return f"for {span.fragment('variable')} in {span.fragment('iterable')}"
    if kind is ConstructKind.CONDITIONAL:
        return f"if {span.fragment('condition')} then"
    if kind is ConstructKind.SWITCH_BLOCK:
        return f"switch {span.fragment('selector')}"
    raise ValueError(f"unknown construct kind: {kind}")


def footer_text(span: ConstructSpan) -> Optional[str]:
    """Footer line without indentation, or None when the span keeps its closing line."""
    kind = span.kind
    if kind is ConstructKind.METHOD_SIGNATURE:
        return f"end{_routine_word(span)}" if span.writes_footer else None
    if kind is ConstructKind.FOR_LOOP:
        return f"next {span.fragment('loop_var')}"
    if kind is ConstructKind.FOR_EACH_LOOP:
        return f"next {span.fragment('variable')}"
    if kind is ConstructKind.CONDITIONAL:
        return "endif"
    if kind is ConstructKind.SWITCH_BLOCK:
        return "endswitch"
    raise ValueError(f"unknown construct kind: {kind}")


def _replace_keeping_indent(buffer: LineBuffer, line_no: int, text: str) -> None:
    buffer.replace(line_no, buffer.indent_of(line_no) + text)


def rewrite_span(buffer: LineBuffer, span: ConstructSpan) -> Optional[str]:
    """
    Apply one span. Returns a diagnostic instead of writing anything when a
    boundary line falls outside the buffer.
    """
    footer = footer_text(span)
    touched = [span.start_line] + ([span.end_line] if footer is not None else [])
    outside = [n for n in touched if not buffer.contains(n)]
    if outside:
        return (
            f"skipped {span.kind.value} span {span.start_line}-{span.end_line}: "
            f"line {outside[0]} outside 1..{len(buffer)}"
        )

    _replace_keeping_indent(buffer, span.start_line, header_text(span))
    if footer is not None:
        _replace_keeping_indent(buffer, span.end_line, footer)
    return None


def rewrite_spans(buffer: LineBuffer, spans: Iterable[ConstructSpan]) -> list[str]:
    diagnostics: list[str] = []
    for span in spans:
        problem = rewrite_span(buffer, span)
        if problem:
            diagnostics.append(problem)
    return diagnostics


def clean_line(line: str) -> str:
    if line.endswith(TERMINATOR):
        line = line[:-1]
    for ch in BLOCK_DELIMITERS:
        line = line.replace(ch, " ")
    return line


def cleanup(buffer: LineBuffer) -> None:
    for line_no in range(1, len(buffer) + 1):
        buffer.replace(line_no, clean_line(buffer.get(line_no)))
