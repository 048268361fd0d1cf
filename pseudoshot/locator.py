"""
ConstructLocator: one pass over the unmutated tree, producing every span the
rewriter will apply. Nothing here touches the line buffer.

Constructs the rewriter cannot render (missing condition, initializer that
does not fit the token heuristic, recovery-inserted nodes) are skipped and a
diagnostic is appended instead.
"""

from __future__ import annotations

from typing import Optional

from tree_sitter import Node

from .java_tree import (
    CLASS_LIKE_TYPES,
    SourceUnit,
    canonical_text,
    child_of_type,
    declaration_name,
    end_line,
    find_all,
    member_methods,
    node_text,
    start_line,
    unwrap_parens,
)
from .spans import KIND_ORDER, ConstructKind, ConstructSpan, MethodSpan

ACCESS_KEYWORDS = ("public", "protected", "private")
ANNOTATION_TYPES = ("marker_annotation", "annotation")

# A switch used as a statement sits directly in one of these.
_STATEMENT_PARENTS = {
    "program",
    "block",
    "constructor_body",
    "switch_block_statement_group",
    "switch_rule",
    "labeled_statement",
    "if_statement",
    "for_statement",
    "enhanced_for_statement",
    "while_statement",
    "do_statement",
}


class MissingPosition(Exception):
    """A construct lacks a part needed to render it."""


def _usable(node: Optional[Node]) -> bool:
    return node is not None and not node.is_missing


def _require(node: Optional[Node], what: str) -> Node:
    if not _usable(node):
        raise MissingPosition(f"missing {what}")
    return node


def _token(text: str, index: int, what: str) -> str:
    # Deliberately textual: split on single spaces like the canonical rendering.
    tokens = text.split(" ")
    if len(tokens) <= index:
        raise MissingPosition(f"{what} {text!r} has no token #{index + 1}")
    return tokens[index]


def _parameter_names(method: Node) -> list[str]:
    params = method.child_by_field_name("parameters")
    names: list[str] = []
    if params is None:
        return names
    for p in params.named_children:
        if p.type == "formal_parameter":
            names.append(node_text(p.child_by_field_name("name")))
        elif p.type == "spread_parameter":
            declarator = child_of_type(p, "variable_declarator")
            if declarator is not None:
                names.append(node_text(declarator.child_by_field_name("name")))
    return names


def method_span(method: Node, declaration: Node) -> MethodSpan:
    modifiers = child_of_type(method, "modifiers")
    keywords = [c.type for c in modifiers.children] if modifiers is not None else []
    annotated = any(k in ANNOTATION_TYPES for k in keywords)
    access = next((k for k in keywords if k in ACCESS_KEYWORDS), "")

    begin = start_line(method)
    # Annotated declarations are taken to start one line below their first
    # (annotation) line; unannotated ones on the declaration line itself.
    # Unverified intent, reproduced as found. Clamped so a one-line method
    # never reaches past its own last line.
    header = min(begin + 1, end_line(method)) if annotated else begin
    body = method.child_by_field_name("body")
    has_body = body is not None
    last = end_line(method) if has_body else header

    return_type = method.child_by_field_name("type")
    return MethodSpan(
        kind=ConstructKind.METHOD_SIGNATURE,
        start_line=header,
        end_line=last,
        fragments={
            "name": declaration_name(method),
            "parameters": ",".join(_parameter_names(method)),
        },
        class_name=declaration_name(declaration),
        access_kind=access,
        is_void=return_type is not None and return_type.type == "void_type",
        has_body=has_body,
        is_abstract_or_interface_default=(
            not has_body or "default" in keywords or declaration.type == "interface_declaration"
        ),
    )


def for_span(node: Node) -> ConstructSpan:
    inits = node.children_by_field_name("init")
    init = _require(inits[0] if inits else None, "for initializer")
    compare = _require(node.child_by_field_name("condition"), "for condition")
    init_expr = canonical_text(init)
    return ConstructSpan(
        kind=ConstructKind.FOR_LOOP,
        start_line=start_line(node),
        end_line=end_line(node),
        fragments={
            "init_expr": init_expr,
            "upper_bound": _token(canonical_text(compare), 2, "comparison"),
            "loop_var": _token(init_expr, 1, "initializer"),
        },
    )


def for_each_span(node: Node) -> ConstructSpan:
    variable = _require(node.child_by_field_name("name"), "loop variable")
    iterable = _require(node.child_by_field_name("value"), "iterable")
    return ConstructSpan(
        kind=ConstructKind.FOR_EACH_LOOP,
        start_line=start_line(node),
        end_line=end_line(node),
        fragments={"variable": node_text(variable), "iterable": canonical_text(iterable)},
    )


def conditional_span(node: Node) -> ConstructSpan:
    condition = _require(unwrap_parens(node.child_by_field_name("condition")), "if condition")
    return ConstructSpan(
        kind=ConstructKind.CONDITIONAL,
        start_line=start_line(node),
        end_line=end_line(node),
        fragments={"condition": canonical_text(condition)},
    )


def switch_span(node: Node) -> ConstructSpan:
    selector = _require(unwrap_parens(node.child_by_field_name("condition")), "switch selector")
    return ConstructSpan(
        kind=ConstructKind.SWITCH_BLOCK,
        start_line=start_line(node),
        end_line=end_line(node),
        fragments={"selector": canonical_text(selector)},
    )


def _is_switch_statement(node: Node) -> bool:
    if node.type == "switch_statement":
        return True
    return node.parent is not None and node.parent.type in _STATEMENT_PARENTS


# Statement node types and span builder per block construct kind.
_BLOCK_LOCATORS = {
    ConstructKind.FOR_LOOP: (("for_statement",), for_span),
    ConstructKind.CONDITIONAL: (("if_statement",), conditional_span),
    ConstructKind.FOR_EACH_LOOP: (("enhanced_for_statement",), for_each_span),
    ConstructKind.SWITCH_BLOCK: (("switch_statement", "switch_expression"), switch_span),
}


def _collect(nodes: list[Node], build, spans: list[ConstructSpan], diagnostics: list[str]) -> None:
    for node in nodes:
        try:
            spans.append(build(node))
        except MissingPosition as e:
            diagnostics.append(f"skipped {node.type} at line {start_line(node)}: {e}")


def locate_methods(unit: SourceUnit, diagnostics: Optional[list[str]] = None) -> list[MethodSpan]:
    diagnostics = diagnostics if diagnostics is not None else []
    spans: list = []
    for declaration in find_all(unit.root, *CLASS_LIKE_TYPES):
        _collect(member_methods(declaration), lambda m: method_span(m, declaration), spans, diagnostics)
    return spans


def locate_spans(unit: SourceUnit, diagnostics: Optional[list[str]] = None) -> list[ConstructSpan]:
    """
    Every span in the file, grouped by kind in KIND_ORDER (the rewrite
    order), each group in document order.
    """
    diagnostics = diagnostics if diagnostics is not None else []
    spans: list[ConstructSpan] = []
    for kind in KIND_ORDER:
        if kind is ConstructKind.METHOD_SIGNATURE:
            spans.extend(locate_methods(unit, diagnostics))
            continue
        node_types, build = _BLOCK_LOCATORS[kind]
        nodes = find_all(unit.root, *node_types)
        if kind is ConstructKind.SWITCH_BLOCK:
            nodes = [n for n in nodes if _is_switch_statement(n)]
        _collect(nodes, build, spans, diagnostics)
    return spans
