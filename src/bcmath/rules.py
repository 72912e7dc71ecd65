"""
rules.py — Discount rule table to rule-engine DSL

================================================================================
OUTPUT FORMAT
================================================================================

One block per rule, numbered from 1, each followed by a blank line:

    rule "discount_rule_1" {
      when {
        series <> ("公牛轨道插座")
      }
      then {
        apply_discount(0.15)
      }
    }

A condition whose value is a sequence renders as ("a" || "b" || ...),
a scalar value renders as "a". Evaluation order and wildcard semantics
("*GD6*") belong to the consuming rule engine, not to this module.

================================================================================
KNOWN LIMITATION
================================================================================

convert_to_rules() does not parse its `formula` argument. It returns the
configured rule table (DEFAULT_RULE_TABLE unless another table is injected).

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
import logging


logger = logging.getLogger(__name__)

OPERATORS = ("=", "<>")


# ==============================================================================
# RULE MODEL
# ==============================================================================

@dataclass(frozen=True)
class RuleCondition:
    """
    One predicate: `field operator value`.

    A sequence value means "any of these" and is stored as a tuple.
    """
    field: str
    operator: str
    value: Union[str, Tuple[str, ...]]

    def __post_init__(self) -> None:
        if not self.field:
            raise ValueError("field must not be empty")
        if self.operator not in OPERATORS:
            raise ValueError(f"Unknown operator {self.operator!r}, expected one of {OPERATORS}")
        if not isinstance(self.value, str):
            values = tuple(self.value)
            if not values:
                raise ValueError(f"Condition on {self.field!r} has no values")
            object.__setattr__(self, "value", values)

    @classmethod
    def any_of(cls, field: str, values: Iterable[str], operator: str = "=") -> RuleCondition:
        """Condition matching any of `values`."""
        return cls(field=field, operator=operator, value=tuple(values))

    def to_dict(self) -> Dict[str, Any]:
        value = self.value if isinstance(self.value, str) else list(self.value)
        return {"field": self.field, "operator": self.operator, "value": value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RuleCondition:
        value = data["value"]
        return cls(
            field=data["field"],
            operator=data.get("operator", "="),
            value=value if isinstance(value, str) else tuple(value),
        )


@dataclass(frozen=True)
class RuleAction:
    """
    A complete discount rule: all conditions hold -> apply discount_rate.

    INVARIANTS:
    - 0.0 <= discount_rate <= 1.0
    - at least one condition
    """
    discount_rate: float
    conditions: Tuple[RuleCondition, ...]

    def __post_init__(self) -> None:
        if isinstance(self.discount_rate, bool) or not 0 <= self.discount_rate <= 1:
            raise ValueError(f"discount_rate must be within 0.0-1.0, got {self.discount_rate!r}")
        conditions = tuple(self.conditions)
        if not conditions:
            raise ValueError("A rule needs at least one condition")
        object.__setattr__(self, "conditions", conditions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "discount_rate": self.discount_rate,
            "conditions": [c.to_dict() for c in self.conditions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RuleAction:
        return cls(
            discount_rate=data["discount_rate"],
            conditions=tuple(RuleCondition.from_dict(c) for c in data["conditions"]),
        )


# ==============================================================================
# BUILT-IN TABLE
# ==============================================================================

DEFAULT_RULE_TABLE: Tuple[RuleAction, ...] = (
    # Rail sockets are excluded from the series discounts
    RuleAction(0.15, (RuleCondition.any_of("series", ["公牛轨道插座"], "<>"),)),
    # G series
    RuleAction(0.10, (RuleCondition.any_of("series", ["G59明装大板", "G28系列", "G09明装"]),)),
    # Concealed sockets
    RuleAction(0.15, (RuleCondition.any_of("series", ["隐藏式插座"]),)),
    RuleAction(0.15, (RuleCondition.any_of("series", [
        "G07小面板", "G27加长", "G27定制", "有机玻璃",
        "高晶玻璃", "G67磨砂玻璃", "全屋WIFI6", "置物架插座",
        "公牛漏电开关", "*电箱*", "*G36*", "G28轻智能",
        "语音开关", "语音插座",
    ]),)),
    # Model number patterns
    RuleAction(0.15, (RuleCondition.any_of("model", [
        "*GD6*", "*LB-*", "*LE-*", "*LB12*",
        "*LE12*", "*GD7*", "*GD8*",
    ]),)),
)


# ==============================================================================
# DSL RENDERING
# ==============================================================================

def _format_rate(rate: float) -> str:
    """Shortest decimal form: 0.1 -> "0.1", 1.0 -> "1"."""
    if float(rate).is_integer():
        return str(int(rate))
    return str(rate)


def _format_condition(condition: RuleCondition) -> str:
    if isinstance(condition.value, str):
        rendered = f'"{condition.value}"'
    else:
        rendered = "(" + " || ".join(f'"{v}"' for v in condition.value) + ")"
    return f"    {condition.field} {condition.operator} {rendered}\n"


class RuleFormulaConverter:
    """
    Turns discount rules into DSL text.

    The converter holds only its rule table (immutable); every call builds
    its output from scratch, so one instance can be shared freely.

    USAGE:
        converter = RuleFormulaConverter()
        dsl = converter.convert("")

        custom = RuleFormulaConverter(table=[RuleAction.from_dict(d) for d in rows])
    """

    def __init__(self, table: Optional[Iterable[RuleAction]] = None):
        self._table: Tuple[RuleAction, ...] = (
            DEFAULT_RULE_TABLE if table is None else tuple(table)
        )

    @property
    def table(self) -> Tuple[RuleAction, ...]:
        return self._table

    def convert_to_rules(self, formula: Optional[str] = None) -> List[RuleAction]:
        """
        Rules for `formula`.

        The formula is not parsed: the configured table is returned
        whatever the argument is.
        """
        if formula:
            logger.debug("Formula input is not parsed, using the configured rule table")
        return list(self._table)

    def convert_to_dsl(self, rules: Sequence[RuleAction]) -> str:
        """Render `rules` in order; an empty sequence gives an empty string."""
        blocks = []
        for index, rule in enumerate(rules, start=1):
            block = f'rule "discount_rule_{index}" {{\n'
            block += "  when {\n"
            block += "".join(_format_condition(c) for c in rule.conditions)
            block += "  }\n"
            block += "  then {\n"
            block += f"    apply_discount({_format_rate(rule.discount_rate)})\n"
            block += "  }\n"
            block += "}\n\n"
            blocks.append(block)

        logger.debug("Rendered %d discount rules", len(blocks))
        return "".join(blocks)

    def convert(self, formula: Optional[str] = None) -> str:
        return self.convert_to_dsl(self.convert_to_rules(formula))


# ==============================================================================
# CONVENIENCE FUNCTIONS
# ==============================================================================

_default_converter = RuleFormulaConverter()


def convert_to_rules(formula: Optional[str] = None) -> List[RuleAction]:
    return _default_converter.convert_to_rules(formula)


def convert_to_dsl(rules: Sequence[RuleAction]) -> str:
    return _default_converter.convert_to_dsl(rules)


def convert(formula: Optional[str] = None) -> str:
    """DSL text for the built-in rule table (`formula` is ignored)."""
    return _default_converter.convert(formula)
