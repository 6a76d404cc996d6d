import math
from typing import Any, Optional


def to_number(value: Any) -> float:
    """Parse a raw form value the way a browser ``Number()`` call does.

    Blank strings and ``None`` become 0, numeric strings are parsed, booleans
    map to 1/0 and anything else is NaN.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return 0.0
    try:
        return float(text.replace(",", ""))
    except ValueError:
        return math.nan


def is_valid_amount(value: float) -> bool:
    return not math.isnan(value) and not math.isinf(value) and value >= 0


def required_amount(value: Any) -> Optional[float]:
    # Required fields must be present, numeric and non-zero.
    number = to_number(value)
    if not is_valid_amount(number) or number == 0:
        return None
    return number


def optional_amount(value: Any) -> Optional[float]:
    number = to_number(value)
    if not is_valid_amount(number):
        return None
    return number
