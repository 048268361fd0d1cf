from __future__ import annotations

import textwrap

import pytest

from pseudoshot.java_tree import ParseFailure, canonical_text, find_all, parse_java_source
from pseudoshot.locator import locate_methods, locate_spans
from pseudoshot.spans import KIND_ORDER, ConstructKind, MethodSpan


def parse(source: str):
    return parse_java_source(textwrap.dedent(source).lstrip("\n"))


def spans_of(unit, kind: ConstructKind):
    return [s for s in locate_spans(unit) if s.kind is kind]


def test_unannotated_method_starts_on_declaration_line() -> None:
    unit = parse(
        """
        public class Counter {
            public void run(int count) {
                tick();
            }
        }
        """
    )

    [method] = locate_methods(unit)

    assert isinstance(method, MethodSpan)
    assert (method.start_line, method.end_line) == (2, 4)
    assert method.name == "run"
    assert method.fragment("parameters") == "count"
    assert method.access_kind == "public"
    assert method.is_void
    assert method.writes_footer
    assert method.label == "Counter run"


def test_annotated_method_starts_one_line_below_first_annotation() -> None:
    unit = parse(
        """
        class A {
            @Override
            public String toString() {
                return "A";
            }
        }
        """
    )

    [method] = locate_methods(unit)

    assert (method.start_line, method.end_line) == (3, 5)
    assert not method.is_void


def test_one_line_annotated_method_stays_on_its_line() -> None:
    unit = parse(
        """
        class A {
            @Override public String toString() { return "A"; }
        }
        """
    )

    [method] = locate_methods(unit)

    assert (method.start_line, method.end_line) == (2, 2)
    assert method.writes_footer


def test_interface_methods_never_write_footer() -> None:
    unit = parse(
        """
        public interface Greeter {
            default String greet(String name, int... times) {
                return name;
            }
            void reset();
        }
        """
    )

    greet, reset = locate_methods(unit)

    assert greet.has_body and greet.is_abstract_or_interface_default
    assert greet.fragment("parameters") == "name,times"
    assert greet.access_kind == ""
    assert not reset.has_body
    assert reset.start_line == reset.end_line == 5


def test_methods_of_nested_and_enum_declarations() -> None:
    unit = parse(
        """
        class Outer {
            void a() {
            }
            static class Inner {
                private int b() {
                    return 1;
                }
            }
            enum Mode {
                ON, OFF;
                boolean on() {
                    return this == ON;
                }
            }
        }
        """
    )

    labels = [m.label for m in locate_methods(unit)]

    assert labels == ["Outer a", "Inner b", "Mode on"]


def test_counted_loop_fragments() -> None:
    unit = parse(
        """
        class L {
            void f(int[] arr) {
                for (int i = 0; i<arr.length; i++) {
                    g(i);
                }
            }
        }
        """
    )

    [loop] = spans_of(unit, ConstructKind.FOR_LOOP)

    assert (loop.start_line, loop.end_line) == (3, 5)
    assert loop.fragments == {"init_expr": "int i = 0", "upper_bound": "arr.length", "loop_var": "i"}


def test_counted_loop_without_condition_is_skipped() -> None:
    unit = parse(
        """
        class L {
            void f() {
                for (int i = 0; ; i++) {
                    g(i);
                }
            }
        }
        """
    )
    diagnostics: list[str] = []

    spans = locate_spans(unit, diagnostics)

    assert not [s for s in spans if s.kind is ConstructKind.FOR_LOOP]
    assert len(diagnostics) == 1
    assert "line 3" in diagnostics[0]


def test_iterator_loop_conditional_and_switch_fragments() -> None:
    unit = parse(
        """
        class M {
            int f(java.util.List<String> items, int x) {
                for (String s : items) {
                    use(s);
                }
                if ((x>0) && ready) {
                    x--;
                }
                switch (x) {
                    case 0:
                        return 0;
                    default:
                        return 1;
                }
            }
        }
        """
    )

    [each] = spans_of(unit, ConstructKind.FOR_EACH_LOOP)
    [cond] = spans_of(unit, ConstructKind.CONDITIONAL)
    [switch] = spans_of(unit, ConstructKind.SWITCH_BLOCK)

    assert each.fragments == {"variable": "s", "iterable": "items"}
    assert (each.start_line, each.end_line) == (3, 5)
    assert cond.fragments == {"condition": "(x > 0) && ready"}
    assert (switch.start_line, switch.end_line) == (9, 14)
    assert switch.fragments == {"selector": "x"}


def test_switch_in_value_position_is_not_a_block() -> None:
    unit = parse(
        """
        class S {
            int f(int x) {
                int y = switch (x) {
                    case 0 -> 1;
                    default -> 2;
                };
                return y;
            }
        }
        """
    )

    assert spans_of(unit, ConstructKind.SWITCH_BLOCK) == []


def test_spans_grouped_in_rewrite_order() -> None:
    unit = parse(
        """
        class O {
            void f(java.util.List<String> xs) {
                for (String s : xs) {
                    if (s.isEmpty()) {
                        continue;
                    }
                }
                for (int i = 0; i < 3; i++) {
                }
                switch (xs.size()) {
                    default:
                        break;
                }
            }
        }
        """
    )

    kinds = [s.kind for s in locate_spans(unit)]

    assert kinds == [
        ConstructKind.METHOD_SIGNATURE,
        ConstructKind.FOR_LOOP,
        ConstructKind.CONDITIONAL,
        ConstructKind.FOR_EACH_LOOP,
        ConstructKind.SWITCH_BLOCK,
    ]
    assert kinds == list(KIND_ORDER)


def test_canonical_text_spaces_operators() -> None:
    unit = parse(
        """
        class C {
            void f() {
                int  a=1,b = 2;
            }
        }
        """
    )

    [decl] = find_all(unit.root, "local_variable_declaration")

    assert canonical_text(decl) == "int a = 1, b = 2"


def test_canonical_text_keeps_literal_spacing() -> None:
    unit = parse(
        """
        class C {
            void f(String s) {
                if (s.equals("  a  b")  ||  c == ' ') {
                    g();
                }
            }
        }
        """
    )

    [conditional] = spans_of(unit, ConstructKind.CONDITIONAL)

    assert conditional.fragment("condition") == "s.equals(\"  a  b\") || c == ' '"


def test_syntax_error_raises_parse_failure() -> None:
    with pytest.raises(ParseFailure) as excinfo:
        parse_java_source("class Broken {\n    void x( {\n}\n", path="Broken.java")

    assert excinfo.value.path == "Broken.java"
