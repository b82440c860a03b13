"""Converters from raw CSV cell values to CRM field values."""

import logging
import re
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r'\D')
_NON_NUMERIC = re.compile(r'[^0-9.]')
_RANGE_PATTERN = re.compile(r'(\d[\d,]*)\s*(?:-|–|—|to)\s*(\d[\d,]*)', re.IGNORECASE)


class EmployeeBucket(str, Enum):
    """Employee count categories, smallest first."""

    SMALL = '0-25'
    MEDIUM = '26-100'
    LARGE = '101+'

    @classmethod
    def for_count(cls, count: float) -> 'EmployeeBucket':
        if count <= 25:
            return cls.SMALL
        if count <= 100:
            return cls.MEDIUM
        return cls.LARGE


def canonical_us_phone(raw: Any) -> Optional[str]:
    """Convert a phone number to +1 followed by ten digits.

    Accepts ten digits, or eleven digits with a leading country code 1.
    Anything else is not converted.

    Examples:
        >>> canonical_us_phone("314-555-0101")
        '+13145550101'
        >>> canonical_us_phone("1 (314) 555-0101")
        '+13145550101'
        >>> canonical_us_phone("5550101") is None
        True
    """
    if raw is None:
        return None
    digits = _NON_DIGITS.sub('', str(raw))
    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) == 11 and digits.startswith('1'):
        return f"+1{digits[1:]}"
    if digits:
        logger.debug(f"Phone {raw!r} is not a US number ({len(digits)} digits)")
    return None


def _parse_count(value: Any) -> Optional[float]:
    if value is None:
        return None
    cleaned = _NON_NUMERIC.sub('', str(value))
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def employee_bucket(actual: Any, range_text: Any = None) -> Optional[EmployeeBucket]:
    """Pick the employee count bucket for a CSV row.

    A positive actual count wins. Otherwise a "low-high" or "low to high"
    range is bucketed by its upper bound. Returns None when neither value
    can be read; callers must not substitute a default.

    Args:
        actual: Actual employee count cell
        range_text: Employee size range cell

    Returns:
        EmployeeBucket or None

    Examples:
        >>> employee_bucket("25")
        <EmployeeBucket.SMALL: '0-25'>
        >>> employee_bucket(None, "51-200")
        <EmployeeBucket.LARGE: '101+'>
    """
    count = _parse_count(actual)
    if count is not None and count > 0:
        return EmployeeBucket.for_count(count)

    if range_text is None:
        return None
    match = _RANGE_PATTERN.search(str(range_text))
    if not match:
        return None
    high = int(match.group(2).replace(',', ''))
    return EmployeeBucket.for_count(high)
