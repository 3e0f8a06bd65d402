"""Attendance arithmetic.

Pure functions shared by the dashboard, the JSON API and the advisor.
Counts are plain non-negative integers; nothing here touches the store.
"""

from attendance.exceptions import InvalidTargetError


def calculate_percentage(present: int, conducted: int) -> float:
    """Calculate attendance percentage.

    Args:
        present: Classes attended.
        conducted: Classes held.

    Returns:
        ``present / conducted * 100``, or ``0`` when no class was held.
    """
    if not conducted:
        return 0.0
    return (present / conducted) * 100


def calculate_projection(present: int, conducted: int, target: int) -> int:
    """Calculate how many consecutive classes must be attended to reach target.

    Every future class is assumed to be both held and attended, so the answer
    is the smallest ``n >= 0`` with ``(present + n) / (conducted + n)`` at or
    above ``target / 100``. Solved in integers:
    ``n = ceil((target * conducted - 100 * present) / (100 - target))``.

    Args:
        present: Classes attended so far.
        conducted: Classes held so far.
        target: Target percentage, 0 <= target < 100.

    Returns:
        Number of classes still needed, 0 if the target is already met.

    Raises:
        InvalidTargetError: If target is negative or 100 and above.
    """
    if target < 0 or target >= 100:
        raise InvalidTargetError(target)

    if conducted > 0 and present * 100 >= target * conducted:
        return 0

    numerator = target * conducted - 100 * present
    denominator = 100 - target
    needed = -(-numerator // denominator)
    return needed if needed > 0 else 0


def calculate_absent(present: int, conducted: int) -> int:
    """Absent count as displayed, clamped at zero when present exceeds conducted."""
    absent = conducted - present
    return absent if absent > 0 else 0
