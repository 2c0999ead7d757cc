"""
Core math modules для commission engine

Денежные примитивы и алгоритмы разделения с точной десятичной арифметикой.
"""

# Money
from src.core.math.money import (
    # Constants
    CENT,
    CENTS_PER_UNIT,
    MAX_AMOUNT,
    PROBABILITY_MAX,
    ZERO,
    # Types
    Number,
    # Conversion
    floor_to_cent,
    from_cents,
    is_valid_number,
    round_money,
    to_cents,
    to_decimal,
    # Validation
    validate_amount,
    validate_probability,
    validate_rate,
)

# Allocation
from src.core.math.allocation import (
    WEIGHT_SUM_TOLERANCE_DEFAULT,
    split_even,
    split_weighted,
    split_weighted_reconciled,
    validate_parts,
    validate_weights,
)

__all__ = [
    # Money — Constants
    "CENT",
    "CENTS_PER_UNIT",
    "MAX_AMOUNT",
    "PROBABILITY_MAX",
    "ZERO",
    # Money — Types
    "Number",
    # Money — Conversion
    "floor_to_cent",
    "from_cents",
    "is_valid_number",
    "round_money",
    "to_cents",
    "to_decimal",
    # Money — Validation
    "validate_amount",
    "validate_probability",
    "validate_rate",
    # Allocation — Constants
    "WEIGHT_SUM_TOLERANCE_DEFAULT",
    # Allocation — Functions
    "split_even",
    "split_weighted",
    "split_weighted_reconciled",
    "validate_parts",
    "validate_weights",
]
