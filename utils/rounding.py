"""
Deterministic rounding utilities.

Provides round_half_up and the percentage helpers used for category
completion, overall progress and tier scoring, so that every caller
rounds the same way.
"""

from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float) -> int:
    """
    Round a number using "round half up" strategy.

    This ensures deterministic rounding where 0.5 always rounds up,
    avoiding Python's default banker's rounding.

    Args:
        value: Number to round

    Returns:
        Rounded integer

    Examples:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(62.5)
        63
        >>> round_half_up(2.4)
        2
    """
    # Convert to Decimal for precise rounding
    d = Decimal(str(value))
    rounded = d.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(rounded)


def completion_percentage(completed: int, total: int) -> int:
    """
    Compute a whole-number completion percentage.

    Formula:
        percentage = round_half_up(100 × completed / total)

    A total of zero is 0%, never a division error. The result is
    clamped to 0-100.

    Args:
        completed: Number of answered questions
        total: Number of questions

    Returns:
        Percentage as integer (0-100)

    Examples:
        >>> completion_percentage(1, 2)
        50
        >>> completion_percentage(0, 0)
        0
    """
    if total <= 0:
        return 0

    percent = round_half_up(100 * completed / total)
    return max(0, min(100, percent))


def share_percentage(part: int, whole: int) -> float:
    """
    Unrounded percentage of ``part`` in ``whole`` (0.0 when whole is 0).

    Used where thresholds are compared against the exact share, e.g.
    tier level cut-offs.
    """
    if whole <= 0:
        return 0.0
    return part * 100 / whole
