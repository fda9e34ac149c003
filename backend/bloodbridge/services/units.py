# bloodbridge/services/units.py
import math

def to_minor_units(amount: float) -> int:
    """Dollars -> cents, nearest integer with halves going up (like JS Math.round)."""
    if amount is None:
        return 0
    return math.floor(amount * 100 + 0.5)
