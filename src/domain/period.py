"""Evaluation period labels

Monthly periods are labelled ``YYYY-MM``; quarterly periods ``YYYY-Qn``.
"""

import re
from calendar import monthrange
from datetime import date
from enum import Enum
from typing import Tuple

_MONTHLY_LABEL = re.compile(r"^(\d{4})-(\d{2})$")
_QUARTERLY_LABEL = re.compile(r"^(\d{4})-Q([1-4])$")


class PeriodType(str, Enum):
    """Slab evaluation period types"""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


def period_bounds(period_type: PeriodType, label: str) -> Tuple[date, date]:
    """
    Resolve a period label to its first and last day (both inclusive)

    Raises:
        ValueError: If the label does not match the period type format
    """
    if period_type == PeriodType.MONTHLY:
        match = _MONTHLY_LABEL.match(label)
        if not match:
            raise ValueError(f"Invalid monthly period label {label!r}, expected YYYY-MM")
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month in period label {label!r}")
        start_month = end_month = month
    else:
        match = _QUARTERLY_LABEL.match(label)
        if not match:
            raise ValueError(f"Invalid quarterly period label {label!r}, expected YYYY-Qn")
        year, quarter = int(match.group(1)), int(match.group(2))
        start_month = (quarter - 1) * 3 + 1
        end_month = start_month + 2

    _, last_day = monthrange(year, end_month)
    return date(year, start_month, 1), date(year, end_month, last_day)


def previous_period_label(period_type: PeriodType, today: date) -> str:
    """Label of the last complete month or quarter before ``today``"""
    if period_type == PeriodType.MONTHLY:
        if today.month == 1:
            return f"{today.year - 1}-12"
        return f"{today.year}-{today.month - 1:02d}"

    quarter = (today.month - 1) // 3  # previous quarter, 0 means Q4 of last year
    if quarter == 0:
        return f"{today.year - 1}-Q4"
    return f"{today.year}-Q{quarter}"
