"""
Core math modules

Decimal-примитивы и трансцендентные функции произвольной точности.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    TRAPPED_CONDITIONS,
    Outcome,
    # Context
    make_decimal_context,
    signal_from_exception,
    # Safe division
    safe_divide,
    safe_remainder,
    # NaN/Inf sanitization
    is_signal,
    sanitize_decimal,
    # Epsilon checks
    is_integral,
    is_negligible,
    snap_to_zero,
    # Rounding
    round_to_precision,
    # Validation
    validate_precision,
)

# Transcendental
from src.core.math.transcendental import (
    constant_value,
    evaluate_trigonometric,
    gamma_factorial,
    new_mp_context,
    to_decimal,
    to_mpf,
)

__all__ = [
    # Numerical Safeguards: Types
    "TRAPPED_CONDITIONS",
    "Outcome",
    # Numerical Safeguards: Context
    "make_decimal_context",
    "signal_from_exception",
    # Numerical Safeguards: Safe division
    "safe_divide",
    "safe_remainder",
    # Numerical Safeguards: NaN/Inf sanitization
    "is_signal",
    "sanitize_decimal",
    # Numerical Safeguards: Epsilon checks
    "is_integral",
    "is_negligible",
    "snap_to_zero",
    # Numerical Safeguards: Rounding
    "round_to_precision",
    # Numerical Safeguards: Validation
    "validate_precision",
    # Transcendental
    "constant_value",
    "evaluate_trigonometric",
    "gamma_factorial",
    "new_mp_context",
    "to_decimal",
    "to_mpf",
]
