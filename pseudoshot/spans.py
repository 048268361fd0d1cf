from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class ConstructKind(str, Enum):
    METHOD_SIGNATURE = "method_signature"
    FOR_LOOP = "for_loop"
    FOR_EACH_LOOP = "for_each_loop"
    CONDITIONAL = "conditional"
    SWITCH_BLOCK = "switch_block"


# Order in which kinds are located and rewritten; a later kind wins on a shared line.
KIND_ORDER = (
    ConstructKind.METHOD_SIGNATURE,
    ConstructKind.FOR_LOOP,
    ConstructKind.CONDITIONAL,
    ConstructKind.FOR_EACH_LOOP,
    ConstructKind.SWITCH_BLOCK,
)


@dataclass(frozen=True)
class ConstructSpan:
    """
    Boundary lines (1-based, inclusive) of one construct plus the text
    fragments needed to build its pseudocode header/footer.

    Fragment keys per kind:
      for_loop       init_expr, upper_bound, loop_var
      for_each_loop  variable, iterable
      conditional    condition
      switch_block   selector
      method         name, parameters (comma-joined names)
    """

    kind: ConstructKind
    start_line: int
    end_line: int
    fragments: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.start_line > self.end_line:
            raise ValueError(f"{self.kind.value} span starts after it ends: {self.start_line} > {self.end_line}")

    def fragment(self, key: str) -> str:
        return self.fragments.get(key, "")


@dataclass(frozen=True)
class MethodSpan(ConstructSpan):
    class_name: str = ""
    access_kind: str = ""
    is_void: bool = False
    has_body: bool = True
    is_abstract_or_interface_default: bool = False

    @property
    def name(self) -> str:
        return self.fragment("name")

    @property
    def writes_footer(self) -> bool:
        return self.has_body and not self.is_abstract_or_interface_default

    @property
    def label(self) -> str:
        return f"{self.class_name} {self.name}"
