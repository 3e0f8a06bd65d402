"""Rule-based attendance advice.

The advice is a deterministic templated message built from the current
summary, a target percentage and an optional note about upcoming
commitments. It is produced on demand, never on every edit.
"""

from typing import Iterable, Optional

from attendance.core.calculator import calculate_projection
from attendance.core.summary import SUPPORTED_TARGETS, Summary
from attendance.exceptions import InvalidTargetError

COMMITMENT_TEMPLATE = (
    'Remember to account for your upcoming commitment: "{commitments}". '
    "This might require extra focus on other classes to maintain your percentage."
)
GENERIC_REMINDER = (
    "Prioritize your upcoming classes and plan your schedule "
    "to avoid any unnecessary absences."
)


def validate_target(target: int, allowed: Iterable[int] = SUPPORTED_TARGETS) -> int:
    """Return target if it is one of the allowed choices.

    Raises:
        InvalidTargetError: If target is not offered.
    """
    allowed = tuple(allowed)
    if target not in allowed:
        raise InvalidTargetError(target, allowed)
    return target


def build_advice(
    summary: Summary,
    target: int,
    future_commitments: Optional[str] = None,
) -> str:
    """Compose the advisory message.

    The first paragraph reports the overall percentage and either
    congratulates or states how many classes must be attended without fail.
    The second paragraph echoes the commitments verbatim when given,
    otherwise it carries a generic reminder.

    Args:
        summary: Current totals.
        target: Target percentage, one of SUPPORTED_TARGETS.
        future_commitments: Free-text note, optional.

    Returns:
        Two-paragraph advice separated by a newline.

    Raises:
        InvalidTargetError: If target is not supported.
    """
    validate_target(target)

    message = (
        f"Your current overall attendance is {summary.overall_percentage:.2f}%. "
    )
    if summary.overall_percentage >= target:
        message += (
            f"Great job! You've met your {target}% target. "
            "Keep up the consistent effort."
        )
    else:
        needed = calculate_projection(
            summary.total_present, summary.total_conducted, target
        )
        message += (
            f"To reach your {target}% goal, you need to attend the next "
            f"{needed} classes without fail. "
        )

    if future_commitments and future_commitments.strip():
        message += "\n" + COMMITMENT_TEMPLATE.format(commitments=future_commitments)
    else:
        message += "\n" + GENERIC_REMINDER

    return message
