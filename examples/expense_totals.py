#!/usr/bin/env python3
"""
expense_totals.py — How the expense layer calls bcmath

================================================================================
THE BUG
================================================================================

    >>> 0.1 + 0.2
    0.30000000000000004
    >>> 19.99 * 3
    59.970000000000006

Amounts read from request bodies or aggregation queries are decimal
strings. Converting them to float before summing changes digits.

================================================================================
THE FIX
================================================================================

Keep them as strings and let bcmath do integer arithmetic on the digits:

    from bcmath import add, mul

    add("0.1", "0.2", 2)    # "0.30"
    mul("19.99", "3", 2)    # "59.97"

================================================================================
"""

import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bcmath import add, sub, mul, convert, InvalidOperandError


# Rows as they come back from the expense table (amount column is DECIMAL)
EXPENSES = [
    {"id": 1, "category": "travel", "amount": "1200.50"},
    {"id": 2, "category": "office", "amount": "89.99"},
    {"id": 3, "category": "office", "amount": "0.10"},
    {"id": 4, "category": "travel", "amount": "0.20"},
    {"id": 5, "category": "refund", "amount": "-150.00"},
]


def demonstrate_totals():
    """Category totals, float vs exact."""
    print("=" * 60)
    print("CATEGORY TOTALS")
    print("=" * 60)
    print()

    float_totals: dict = {}
    exact_totals: dict = {}
    for row in EXPENSES:
        category = row["category"]
        float_totals[category] = float_totals.get(category, 0.0) + float(row["amount"])
        exact_totals[category] = add(exact_totals.get(category, "0"), row["amount"], 2)

    for category in exact_totals:
        print(f"  {category:<8} float={float_totals[category]!r:<22} exact={exact_totals[category]}")
    print()

    grand_total = "0"
    for total in exact_totals.values():
        grand_total = add(grand_total, total, 2)
    print(f"Grand total: {grand_total}")
    print()


def demonstrate_discount():
    """Apply a 15% discount rate to a line total."""
    print("=" * 60)
    print("DISCOUNT")
    print("=" * 60)
    print()

    unit_price, quantity, rate = "19.99", "3", "0.15"

    line_total = mul(unit_price, quantity, 2)
    discount = mul(line_total, rate, 2)   # truncated, never rounded up
    payable = sub(line_total, discount, 2)

    print(f"  Line total: {line_total}")
    print(f"  Discount:   {discount}")
    print(f"  Payable:    {payable}")
    print(f"  Check:      {add(discount, payable, 2) == line_total}")
    print()


def demonstrate_errors():
    """Malformed amounts are rejected, not repaired."""
    print("=" * 60)
    print("ERRORS")
    print("=" * 60)
    print()

    print('>>> add("12,50", "1")')
    try:
        add("12,50", "1")
    except InvalidOperandError as e:
        print(f"InvalidOperandError: {e}")
    print()


def demonstrate_rules():
    """Built-in discount table as rule-engine DSL."""
    print("=" * 60)
    print("DISCOUNT RULES DSL")
    print("=" * 60)
    print()
    print(convert(""))


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    demonstrate_totals()
    demonstrate_discount()
    demonstrate_errors()
    demonstrate_rules()


if __name__ == "__main__":
    main()
