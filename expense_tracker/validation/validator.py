"""
Expense Input Validation

DESIGN DECISION: Only presence and positivity are checked.
- Category must be non-empty (after trimming whitespace)
- Amount must parse to an integer greater than zero
- Date must be non-empty

Anything beyond that (date format, category vocabulary, upper limits)
is deliberately left alone.

Every failure produces the SAME user-facing message. The individual
issues are still collected so the audit log says what was wrong.
"""

import math
import re
from numbers import Real
from typing import Any, Optional

from expense_tracker.config import get_settings
from expense_tracker.models.expense import (
    AddExpense,
    ValidationIssue,
    ValidationResult,
)


# Leading integer, as typed into a number field: "12.9" -> 12, "7kg" -> 7
_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_amount(value: Any) -> Optional[int]:
    """
    Parse a raw amount by integer truncation.

    Returns None when no integer can be read. Sign is kept, so the
    caller still has to reject zero and negative values.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, Real):
        as_float = float(value)
        if not math.isfinite(as_float):
            return None
        return int(as_float)

    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return None
        return int(match.group(1))

    return None


class ExpenseValidator:
    """Checks an AddExpense command before anything is written."""

    def __init__(self, message: Optional[str] = None):
        """
        Initialize validator.

        Args:
            message: The combined message shown for any failure.
                     Defaults to the configured display message.
        """
        self._message = message or get_settings().display.validation_message

    @property
    def message(self) -> str:
        return self._message

    def validate(self, command: AddExpense) -> ValidationResult:
        issues = []

        category = (command.category or "").strip()
        if not category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
            ))

        amount = parse_amount(command.amount)
        if amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing" if command.amount in (None, "") else "invalid_value",
                message=f"Amount {command.amount!r} is not a number",
            ))
        elif amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=f"Amount must be greater than zero, got {amount}",
            ))

        date = (command.date or "").strip()
        if not date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
            ))

        if issues:
            return ValidationResult(
                is_valid=False,
                issues=issues,
                message=self._message,
            )

        return ValidationResult(
            is_valid=True,
            category=category,
            amount=amount,
            date=date,
            memo=command.memo or "",
        )
