"""
bcmath — Exact decimal-string arithmetic for monetary amounts

Add, subtract and multiply decimal strings without a single float in
between, with an explicit number of fractional digits in the result.
Also ships the discount rule table to DSL converter used by the pricing
layer.

================================================================================
QUICK START
================================================================================

Arithmetic (results are strings, truncated or zero-padded to `scale`):

    from bcmath import add, sub, mul

    add("0.1", "0.2", 2)        # "0.30"
    sub("100.00", "99.99", 2)   # "0.01"
    mul("19.99", "3", 2)        # "59.97"
    add("1.999", "0", 1)        # "1.9"   truncation, no rounding

Discount rules:

    from bcmath import convert

    dsl = convert("")           # built-in rule table as rule-engine DSL

================================================================================
"""

import logging

from .core import (
    add,
    sub,
    mul,
    bcadd,
    bcsub,
    bcmul,
    negate,
    normalize,
    DecimalMathError,
    InvalidOperandError,
    InvalidArgumentError,
)

from .rules import (
    RuleCondition,
    RuleAction,
    RuleFormulaConverter,
    DEFAULT_RULE_TABLE,
    convert,
    convert_to_rules,
    convert_to_dsl,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Arithmetic
    "add",
    "sub",
    "mul",
    "bcadd",
    "bcsub",
    "bcmul",
    "negate",
    "normalize",
    "DecimalMathError",
    "InvalidOperandError",
    "InvalidArgumentError",
    # Rules
    "RuleCondition",
    "RuleAction",
    "RuleFormulaConverter",
    "DEFAULT_RULE_TABLE",
    "convert",
    "convert_to_rules",
    "convert_to_dsl",
]
