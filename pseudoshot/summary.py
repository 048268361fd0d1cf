"""
Class variable summary: one record per variable declared inside a class or
interface, with the field's visibility/static/final flags or "Method scope"
for locals.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from typing import Iterable

from tree_sitter import Node

from .java_tree import SourceUnit, child_of_type, declaration_name, find_all, node_text

SUMMARY_HEADER = ["Name", "Data type", "Scope", "Purpose"]
METHOD_SCOPE = "Method scope"
FIELD_TYPES = ("field_declaration", "constant_declaration")


@dataclass(frozen=True)
class FieldRecord:
    name: str
    declared_type: str
    scope: str


@dataclass
class ClassSummary:
    class_name: str
    records: list[FieldRecord]


def _modifier_keywords(node: Node) -> set[str]:
    modifiers = child_of_type(node, "modifiers")
    return {c.type for c in modifiers.children} if modifiers is not None else set()


def field_scope(field_decl: Node) -> str:
    keywords = _modifier_keywords(field_decl)
    return " ".join(
        [
            "Public" if "public" in keywords else "Private",
            "Static" if "static" in keywords else "Non-static",
            "Final" if "final" in keywords else "Non-final",
        ]
    )


def _declared_type(owner: Node, declarator: Node) -> str:
    type_text = " ".join(node_text(owner.child_by_field_name("type")).split())
    dims = declarator.child_by_field_name("dimensions")
    return type_text + node_text(dims) if dims is not None else type_text


def summarize_declaration(declaration: Node) -> ClassSummary:
    fields = find_all(declaration, *FIELD_TYPES)
    scopes: dict[str, str] = {}
    for f in fields:
        declarator = f.child_by_field_name("declarator")
        if declarator is not None:
            # Only the first declarator of a field statement carries the flags.
            scopes[declaration_name(declarator)] = field_scope(f)

    records: list[FieldRecord] = []
    for node in find_all(declaration, "variable_declarator", "enhanced_for_statement"):
        if node.type == "enhanced_for_statement":
            name, declared = declaration_name(node), " ".join(node_text(node.child_by_field_name("type")).split())
        else:
            owner = node.parent
            if owner is None or owner.child_by_field_name("type") is None:
                continue
            name, declared = declaration_name(node), _declared_type(owner, node)
        records.append(FieldRecord(name=name, declared_type=declared, scope=scopes.get(name, METHOD_SCOPE)))
    return ClassSummary(class_name=declaration_name(declaration), records=records)


def summarize_unit(unit: SourceUnit) -> list[ClassSummary]:
    """Summaries for every class/interface (nested ones too) that declares at least one field."""
    summaries = []
    for declaration in find_all(unit.root, "class_declaration", "interface_declaration"):
        if not find_all(declaration, *FIELD_TYPES):
            continue
        summaries.append(summarize_declaration(declaration))
    return summaries


def write_summary_csv(summaries: Iterable[ClassSummary], csv_path: str) -> int:
    rows = 0
    with open(csv_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        for summary in summaries:
            writer.writerow([summary.class_name])
            writer.writerow(SUMMARY_HEADER)
            for rec in summary.records:
                writer.writerow([rec.name, rec.declared_type, rec.scope, ""])
                rows += 1
    return rows
