"""
Pydantic models for entry/exit condition trees.

A condition tree is a root group of rules and nested groups. Each group
combines its members with ALL (logical AND) or ANY (logical OR). The models
are immutable; structural edits go through the TreeBuilder, which returns
new trees.
"""

import json
from enum import Enum
from typing import Any, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


SCHEMA_VERSION = "1.0"


class GroupMode(str, Enum):
    """How a group combines its members."""
    ALL = "ALL"   # logical AND
    ANY = "ANY"   # logical OR


class Operator(str, Enum):
    """Reference comparison operators understood by the rule evaluator."""
    GT = "GT"
    LT = "LT"
    GTE = "GTE"
    LTE = "LTE"
    EQ = "EQ"
    NEQ = "NEQ"
    CONTAINS = "CONTAINS"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"


class ValueType(str, Enum):
    """How a rule's value is parsed downstream."""
    NUMBER = "NUMBER"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"


RULE_FIELDS = ("factor", "operator", "value", "type", "nullable")


def coerce_mode(mode: Any) -> str:
    """
    Normalize a group mode to 'ALL' or 'ANY'.

    Accepts GroupMode members and case-insensitive strings. Raises ValueError
    for anything else.
    """
    if isinstance(mode, GroupMode):
        return mode.value
    if isinstance(mode, str) and mode.strip().upper() in GroupMode.__members__:
        return mode.strip().upper()
    raise ValueError(f"mode must be 'ALL' or 'ANY', got {mode!r}")


class ConditionRule(BaseModel):
    """
    A single comparison of a factor against a value.

    Examples:
        - IND.RSI_14 LT 30        (NUMBER)
        - SIG.DIRECTION EQ LONG   (STRING)
        - PX.LAST GT 100, nullable -> passes when the price is missing
    """
    factor: str = Field(..., description="Factor key from the catalog, e.g. 'IND.RSI_14'")
    operator: str = Field(..., description="Comparison operator, e.g. 'LT'")
    value: str = Field("", description="Comparison operand as text")
    type: str = Field(ValueType.NUMBER.value, description="NUMBER, STRING or BOOLEAN")
    nullable: bool = Field(False, description="Treat a missing factor value as satisfying the rule")

    @field_validator('value', mode='before')
    @classmethod
    def value_as_text(cls, v):
        """Stored documents may carry numbers or booleans; keep their JSON text."""
        if v is None:
            return ""
        if isinstance(v, (bool, int, float)):
            return json.dumps(v)
        return v

    @field_validator('type', mode='before')
    @classmethod
    def default_type(cls, v):
        return ValueType.NUMBER.value if v is None else v

    @field_validator('nullable', mode='before')
    @classmethod
    def default_nullable(cls, v):
        return False if v is None else v

    def to_display_string(self) -> str:
        """Convert rule to human-readable string."""
        value = f'"{self.value}"' if self.type == ValueType.STRING.value else self.value
        suffix = "?" if self.nullable is True else ""
        return f"{self.factor}{suffix} {self.operator} {value}"

    model_config = ConfigDict(frozen=True, extra='ignore')


class GroupNode(BaseModel):
    """Shared behavior of the root tree and nested groups."""

    @field_validator('mode', mode='before', check_fields=False)
    @classmethod
    def validate_mode(cls, v):
        if v is None:
            return GroupMode.ALL.value
        return coerce_mode(v)

    @field_validator('rules', 'groups', mode='before', check_fields=False)
    @classmethod
    def none_as_empty(cls, v):
        return () if v is None else v

    def rule_count(self) -> int:
        """Number of rules in this group and all nested groups."""
        return len(self.rules) + sum(g.rule_count() for g in self.groups)

    def depth(self) -> int:
        """Nesting depth below this group (0 when it has no child groups)."""
        if not self.groups:
            return 0
        return 1 + max(g.depth() for g in self.groups)

    def is_empty(self) -> bool:
        return not self.rules and not self.groups

    def to_display_string(self) -> str:
        """
        Convert group to a one-line human-readable string.

        Example:
            ALL(IND.RSI_14 LT 30, ANY(BAR.CLOSE GT 100, PX.LAST GT 99))
        """
        parts = [r.to_display_string() for r in self.rules]
        parts.extend(g.to_display_string() for g in self.groups)
        return f"{self.mode}({', '.join(parts)})"


class ConditionGroup(GroupNode):
    """A nested combinator node."""
    mode: GroupMode = Field(GroupMode.ALL.value, description="ALL (AND) or ANY (OR)")
    rules: Tuple[ConditionRule, ...] = Field(default=(), description="Rules, in display order")
    groups: Tuple["ConditionGroup", ...] = Field(default=(), description="Child groups")

    model_config = ConfigDict(frozen=True, use_enum_values=True, extra='ignore')


class ConditionTree(GroupNode):
    """
    The condition document root.

    The root group's mode, rules and groups are flattened into the document
    next to the schema version. Stored as the entryCondition/exitCondition
    of a strategy.
    """
    version: str = Field(SCHEMA_VERSION, description="Schema version")
    mode: GroupMode = Field(GroupMode.ALL.value, description="ALL (AND) or ANY (OR)")
    rules: Tuple[ConditionRule, ...] = Field(default=(), description="Root rules")
    groups: Tuple[ConditionGroup, ...] = Field(default=(), description="Root child groups")

    @field_validator('version', mode='before')
    @classmethod
    def default_version(cls, v):
        return SCHEMA_VERSION if v is None else v

    @classmethod
    def default(cls) -> "ConditionTree":
        """An empty ALL tree at the current schema version."""
        return cls()

    model_config = ConfigDict(frozen=True, use_enum_values=True, extra='ignore')


ConditionGroup.model_rebuild()
ConditionTree.model_rebuild()


# Either the root tree or a nested group
GroupLike = Union[ConditionTree, ConditionGroup]


def default_tree() -> ConditionTree:
    """Return {version: "1.0", mode: "ALL", rules: [], groups: []}."""
    return ConditionTree.default()
