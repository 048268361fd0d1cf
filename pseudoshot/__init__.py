"""Line-aligned pseudocode snapshots of Java methods."""

from .java_tree import ParseFailure, SourceUnit, parse_java_file, parse_java_source
from .lines import LineBuffer, leading_whitespace
from .locator import locate_methods, locate_spans
from .rewriter import cleanup, rewrite_spans
from .slicer import ConvertedFile, convert_unit, slice_method
from .spans import ConstructKind, ConstructSpan, MethodSpan

__all__ = [
    "ConstructKind",
    "ConstructSpan",
    "ConvertedFile",
    "LineBuffer",
    "MethodSpan",
    "ParseFailure",
    "SourceUnit",
    "cleanup",
    "convert_unit",
    "leading_whitespace",
    "locate_methods",
    "locate_spans",
    "parse_java_file",
    "parse_java_source",
    "rewrite_spans",
    "slice_method",
]
