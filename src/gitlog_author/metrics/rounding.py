"""Half-up rounding for report percentages.

Python's ``round`` rounds ties to even, so 12.5 becomes 12. Report
figures round ties away from zero instead (12.5 -> 13, 0.125 -> 0.13).
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 0):
    """Round ``value`` to ``digits`` places, ties up; int when ``digits`` is 0."""
    # Decimal(float) is exact, so only true binary ties round up
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    if digits == 0:
        return int(rounded)
    return float(rounded)
