"""
Per-file conversion pipeline and per-method slicing.

    locate spans (unmutated tree) -> rewrite boundary lines -> cleanup -> slice

All spans are located before the first line is rewritten; the buffer never
changes length, so positions taken from the tree stay valid throughout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .java_tree import SourceUnit
from .lines import LineBuffer, split_source_lines
from .locator import locate_spans
from .rewriter import cleanup, rewrite_spans
from .spans import MethodSpan


@dataclass
class ConvertedFile:
    unit: SourceUnit
    buffer: LineBuffer
    methods: list[MethodSpan]
    diagnostics: list[str] = field(default_factory=list)

    def method_lines(self, span: MethodSpan) -> list[str]:
        return slice_method(self.buffer, span)


def slice_method(buffer: LineBuffer, span: MethodSpan) -> list[str]:
    """
    Rendered lines of one method. Empty when the method has no body
    (abstract or interface declaration): nothing to render.

    The slice is ``[start_line - 1, end_line)`` over zero-based indices, i.e.
    the signature line through the closing line that carries the end marker.
    """
    if not span.has_body:
        return []
    return buffer.slice(span.start_line - 1, span.end_line)


def convert_unit(unit: SourceUnit, lines: Optional[list[str]] = None) -> ConvertedFile:
    diagnostics: list[str] = []
    spans = locate_spans(unit, diagnostics)

    buffer = LineBuffer(lines if lines is not None else split_source_lines(unit.text))
    diagnostics.extend(rewrite_spans(buffer, spans))
    cleanup(buffer)

    methods = [s for s in spans if isinstance(s, MethodSpan)]
    return ConvertedFile(unit=unit, buffer=buffer, methods=methods, diagnostics=diagnostics)
