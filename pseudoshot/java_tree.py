"""
tree-sitter adapter for Java sources.

Everything that knows about tree-sitter node types lives here and in
locator.py; the rewriter and slicer only ever see spans and lines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

import tree_sitter_java
from tree_sitter import Language, Node, Parser, Tree

from .lines import normalize_newlines, read_source_text

SUPPORTED_EXT = (".java",)

JAVA_LANGUAGE = Language(tree_sitter_java.language())

# Declarations whose direct members are collected as methods.
CLASS_LIKE_TYPES = (
    "class_declaration",
    "interface_declaration",
    "enum_declaration",
    "record_declaration",
)

# Leaves of canonical text: literals keep their inner spacing verbatim.
_ATOMIC_TYPES = {"string_literal", "character_literal"}
_COMMENT_TYPES = {"line_comment", "block_comment"}

# Node types rendered as "<left> <op> <right>" in canonical text.
_SPACED_TYPES = {
    "binary_expression",
    "assignment_expression",
    "ternary_expression",
    "variable_declarator",
    "local_variable_declaration",
}


class ParseFailure(Exception):
    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass(frozen=True)
class SourceUnit:
    path: str
    text: str
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node


def is_java_file(path: str) -> bool:
    return path.endswith(SUPPORTED_EXT)


def _first_error_line(node: Node) -> Optional[int]:
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error:
            found = _first_error_line(child)
            if found is not None:
                return found
    return None


def parse_java_source(text: str, path: str = "<memory>") -> SourceUnit:
    text = normalize_newlines(text)
    parser = Parser(JAVA_LANGUAGE)
    tree = parser.parse(text.encode("utf-8"))
    if tree.root_node.has_error:
        line = _first_error_line(tree.root_node)
        where = f"line {line}" if line is not None else "unknown line"
        raise ParseFailure(path, f"syntax error near {where}")
    return SourceUnit(path=path, text=text, tree=tree)


def parse_java_file(path: str) -> SourceUnit:
    return parse_java_source(read_source_text(path), path=path)


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal (document order), node included."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def find_all(node: Node, *types: str) -> list[Node]:
    return [n for n in walk(node) if n.type in types]


def start_line(node: Node) -> int:
    return node.start_point[0] + 1


def end_line(node: Node) -> int:
    return node.end_point[0] + 1


def node_text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="ignore")


def child_of_type(node: Node, *types: str) -> Optional[Node]:
    for child in node.children:
        if child.type in types:
            return child
    return None


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == "parenthesized_expression" and node.named_children:
        node = node.named_children[0]
    return node


def _leaf_tokens(node: Node) -> Iterator[Node]:
    if node.type in _COMMENT_TYPES:
        return
    if node.type in _ATOMIC_TYPES or not node.children:
        yield node
        return
    for child in node.children:
        yield from _leaf_tokens(child)


def _joined_tokens(node: Node) -> str:
    """Source tokens of `node`, one space wherever the source had any gap."""
    out: list[str] = []
    prev_end = None
    for leaf in _leaf_tokens(node):
        text = node_text(leaf)
        if not text:
            continue
        if prev_end is not None and leaf.start_byte > prev_end:
            out.append(" ")
        out.append(text)
        prev_end = leaf.end_byte
    return "".join(out)


def canonical_text(node: Optional[Node]) -> str:
    """
    Single-line rendering of an expression or declaration: whitespace runs
    collapsed, operators and declarators spaced, trailing ';' dropped.
    """
    if node is None:
        return ""
    if node.type == "parenthesized_expression" and node.named_children:
        return "(" + canonical_text(node.named_children[0]) + ")"
    if node.type not in _SPACED_TYPES:
        return _joined_tokens(node)

    parts: list[str] = []
    for child in node.children:
        if child.type == ";":
            continue
        if child.type == "," and parts:
            parts[-1] += ","
            continue
        text = canonical_text(child)
        if text:
            parts.append(text)
    return " ".join(parts)


def declaration_name(node: Node) -> str:
    return node_text(node.child_by_field_name("name"))


def member_methods(declaration: Node) -> list[Node]:
    """Methods declared directly in a class-like body (not in nested types)."""
    body = declaration.child_by_field_name("body")
    if body is None:
        return []
    members = list(body.named_children)
    if declaration.type == "enum_declaration":
        extra = child_of_type(body, "enum_body_declarations")
        members = list(extra.named_children) if extra is not None else []
    return [m for m in members if m.type == "method_declaration"]
