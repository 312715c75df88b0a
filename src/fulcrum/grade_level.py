"""Academic grade level computation from quarter codes.

Applicants report their start and expected graduation quarters. A quarter is
encoded as a single integer, ``4 * year + offset`` where the offset orders
the terms within a calendar year (Winter, Spring, Summer, Fall), so quarter
codes compare and subtract naturally.

Summer terms are not counted as instructional quarters: an academic year is
three quarters (Fall, Winter, Spring).

Example:
    >>> start = calculate_quarter(Quarter.FALL, 2023)
    >>> grad = calculate_quarter(Quarter.SPRING, 2027)
    >>> determine_grade_level(start, grad, current_year=2024)
    2
"""

from __future__ import annotations

import enum
import math

# Full four-year programs span 12 instructional quarters; anything under 9
# means the applicant entered with two years of advanced standing.
TRANSFER_QUARTER_THRESHOLD = 9
TRANSFER_YEAR_OFFSET = 2


class Quarter(enum.IntEnum):
    """Term offset within a calendar year."""

    WINTER = 0
    SPRING = 1
    SUMMER = 2
    FALL = 3


def calculate_quarter(quarter: Quarter, year: int) -> int:
    """Encode a (quarter, year) pair as a quarter code."""
    return 4 * year + int(quarter)


def format_quarter(code: int) -> str:
    """Render a quarter code for display, e.g. ``"Fall 2025"``."""
    year, offset = divmod(code, 4)
    return f"{Quarter(offset).name.capitalize()} {year}"


def quarter_diff(start: int, end: int) -> int:
    """Count instructional quarters from ``start`` to ``end`` inclusive.

    One summer quarter is excluded per calendar-year boundary crossed.
    Returns 0 when ``end`` precedes ``start``.
    """
    if end < start:
        return 0
    return end - start - (end // 4 - start // 4) + 1


def determine_grade_level(start_quarter: int, grad_quarter: int, current_year: int) -> int:
    """Return the applicant's academic year for the recruiting cycle.

    The recruiting cycle runs in the fall, so progress is measured up to the
    fall quarter of ``current_year``. Applicants whose program spans fewer
    than nine quarters are treated as transfers and placed two years ahead.

    Args:
        start_quarter: Quarter code of the first enrolled quarter.
        grad_quarter: Quarter code of the expected graduation quarter.
        current_year: Calendar year of the recruiting cycle.

    Returns:
        Grade level, 1 for first-year students.
    """
    total_quarters = quarter_diff(start_quarter, grad_quarter)
    current_quarter = calculate_quarter(Quarter.FALL, current_year)
    years_since_start = math.ceil(quarter_diff(start_quarter, current_quarter) / 3)

    if total_quarters < TRANSFER_QUARTER_THRESHOLD:
        return years_since_start + TRANSFER_YEAR_OFFSET
    return years_since_start


_GRADE_LABELS = {
    1: "1st",
    2: "2nd",
    3: "3rd / 1st transfer",
    4: "4th / 2nd transfer",
}


def format_grade_level(level: int) -> str:
    """Human-readable label for a grade level."""
    return _GRADE_LABELS.get(level, "unknown")
