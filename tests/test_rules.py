"""
test_rules.py — Tests for the discount rule DSL converter

Tests cover:
- RuleCondition / RuleAction validation and serialization
- DSL block layout for sequence and scalar conditions
- Built-in table output (independent of the formula argument)
- Custom rule tables
"""

import logging
import re

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bcmath import (
    RuleCondition,
    RuleAction,
    RuleFormulaConverter,
    DEFAULT_RULE_TABLE,
    convert,
    convert_to_rules,
    convert_to_dsl,
)


RULE_HEADER = re.compile(r'^rule "discount_rule_(\d+)" \{$', re.MULTILINE)


# ==============================================================================
# Rule model
# ==============================================================================

class TestRuleCondition:
    """Tests for RuleCondition."""

    def test_sequence_value_is_stored_as_tuple(self):
        cond = RuleCondition("series", "=", ["a", "b"])
        assert cond.value == ("a", "b")

    def test_scalar_value_kept(self):
        cond = RuleCondition("series", "<>", "a")
        assert cond.value == "a"

    def test_any_of_defaults_to_equals(self):
        cond = RuleCondition.any_of("model", ["*GD6*"])
        assert cond.operator == "="
        assert cond.value == ("*GD6*",)

    def test_unknown_operator_raises(self):
        with pytest.raises(ValueError):
            RuleCondition("series", ">", "a")

    def test_empty_field_raises(self):
        with pytest.raises(ValueError):
            RuleCondition("", "=", "a")

    def test_empty_values_raise(self):
        with pytest.raises(ValueError):
            RuleCondition.any_of("series", [])

    def test_dict_round_trip(self):
        cond = RuleCondition.any_of("series", ["a", "b"], "<>")
        data = cond.to_dict()
        assert data == {"field": "series", "operator": "<>", "value": ["a", "b"]}
        assert RuleCondition.from_dict(data) == cond


class TestRuleAction:
    """Tests for RuleAction."""

    def test_rate_out_of_range_raises(self):
        cond = RuleCondition("series", "=", "a")
        with pytest.raises(ValueError):
            RuleAction(1.5, (cond,))
        with pytest.raises(ValueError):
            RuleAction(-0.1, (cond,))

    def test_rule_without_conditions_raises(self):
        with pytest.raises(ValueError):
            RuleAction(0.1, ())

    def test_conditions_list_becomes_tuple(self):
        rule = RuleAction(0.1, [RuleCondition("series", "=", "a")])
        assert isinstance(rule.conditions, tuple)

    def test_from_dict(self):
        rule = RuleAction.from_dict({
            "discount_rate": 0.2,
            "conditions": [{"field": "model", "value": ["X1", "X2"]}],
        })
        assert rule.discount_rate == 0.2
        assert rule.conditions == (RuleCondition("model", "=", ("X1", "X2")),)

    def test_built_in_table_survives_dict_round_trip(self):
        for rule in DEFAULT_RULE_TABLE:
            assert RuleAction.from_dict(rule.to_dict()) == rule


# ==============================================================================
# DSL rendering
# ==============================================================================

class TestConvertToDSL:
    """Tests for convert_to_dsl()."""

    def test_single_sequence_rule_layout(self):
        rule = RuleAction(0.1, (RuleCondition.any_of("series", ["G28系列", "G09明装"]),))
        assert convert_to_dsl([rule]) == (
            'rule "discount_rule_1" {\n'
            '  when {\n'
            '    series = ("G28系列" || "G09明装")\n'
            '  }\n'
            '  then {\n'
            '    apply_discount(0.1)\n'
            '  }\n'
            '}\n'
            '\n'
        )

    def test_scalar_condition_is_quoted_without_parentheses(self):
        rule = RuleAction(0.15, (RuleCondition("series", "<>", "公牛轨道插座"),))
        dsl = convert_to_dsl([rule])
        assert '    series <> "公牛轨道插座"\n' in dsl

    def test_conditions_keep_order(self):
        rule = RuleAction(0.05, (
            RuleCondition("series", "=", "A"),
            RuleCondition("model", "<>", ("B", "C")),
        ))
        lines = convert_to_dsl([rule]).splitlines()
        assert lines[2] == '    series = "A"'
        assert lines[3] == '    model <> ("B" || "C")'

    def test_rules_are_numbered_from_one(self):
        cond = RuleCondition("series", "=", "A")
        dsl = convert_to_dsl([RuleAction(0.1, (cond,)), RuleAction(0.2, (cond,))])
        assert RULE_HEADER.findall(dsl) == ["1", "2"]
        assert "}\n\nrule \"discount_rule_2\"" in dsl

    def test_integral_rate_has_no_fraction(self):
        rule = RuleAction(1.0, (RuleCondition("series", "=", "A"),))
        assert "apply_discount(1)" in convert_to_dsl([rule])

    def test_empty_rules(self):
        assert convert_to_dsl([]) == ""


# ==============================================================================
# Built-in table
# ==============================================================================

class TestConvert:
    """Tests for convert() over the built-in table."""

    def test_built_in_table_shape(self):
        rules = convert_to_rules("anything")
        assert len(rules) == 5
        assert [r.discount_rate for r in rules] == [0.15, 0.10, 0.15, 0.15, 0.15]
        assert rules[0].conditions[0].operator == "<>"
        assert rules[4].conditions[0].field == "model"
        assert len(rules[3].conditions[0].value) == 14

    def test_block_count_matches_table(self):
        dsl = convert("")
        assert dsl
        assert len(RULE_HEADER.findall(dsl)) == len(DEFAULT_RULE_TABLE)
        assert dsl.count("}\n\n") == len(DEFAULT_RULE_TABLE)
        assert dsl.endswith("}\n\n")

    def test_sequence_values_joined(self):
        dsl = convert("")
        assert '    series = ("G59明装大板" || "G28系列" || "G09明装")\n' in dsl
        assert '    series <> ("公牛轨道插座")\n' in dsl
        assert '"*GD6*" || "*LB-*"' in dsl

    def test_rates_rendered(self):
        dsl = convert("")
        assert dsl.count("apply_discount(0.15)") == 4
        assert dsl.count("apply_discount(0.1)") == 1

    def test_none_formula(self):
        assert convert(None) == convert("")

    @given(formula=st.text())
    @settings(max_examples=200)
    def test_output_independent_of_formula(self, formula):
        assert convert(formula) == convert("")

    def test_formula_ignored_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="bcmath.rules"):
            convert("price > 100")
        assert "not parsed" in caplog.text

    def test_convert_to_rules_returns_new_list(self):
        first = convert_to_rules("")
        first.clear()
        assert len(convert_to_rules("")) == len(DEFAULT_RULE_TABLE)


class TestCustomTable:
    """Tests for RuleFormulaConverter with an injected table."""

    def test_custom_table_is_used(self):
        table = [
            RuleAction.from_dict({
                "discount_rate": 0.05,
                "conditions": [{"field": "series", "operator": "=", "value": "VIP"}],
            })
        ]
        converter = RuleFormulaConverter(table=table)

        assert converter.table == tuple(table)
        assert converter.convert("ignored") == (
            'rule "discount_rule_1" {\n'
            '  when {\n'
            '    series = "VIP"\n'
            '  }\n'
            '  then {\n'
            '    apply_discount(0.05)\n'
            '  }\n'
            '}\n'
            '\n'
        )

    def test_default_table(self):
        assert RuleFormulaConverter().table is DEFAULT_RULE_TABLE

    def test_empty_table(self):
        assert RuleFormulaConverter(table=[]).convert("x") == ""


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
