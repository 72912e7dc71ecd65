import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from bcmath import add

MONTHLY_EXPENSE = "168.83"
MONTHS = 12

# Summing the same expense twelve times with float drifts away from the
# exact total, the string sum does not.
float_total = 0.0
exact_total = "0"
for _ in range(MONTHS):
    float_total += float(MONTHLY_EXPENSE)
    exact_total = add(exact_total, MONTHLY_EXPENSE, 2)

print("Monthly expense:", MONTHLY_EXPENSE)
print("Float total:    ", float_total)
print("Exact total:    ", exact_total)
print("Same?           ", repr(float_total) == exact_total)
