"""
Core Data Models for Expense Tracker

These models define the schemas for everything flowing through the system:
1. The persisted Expense record
2. The commands a user can issue (add, delete)
3. The view model handed to whatever renders the list
4. Validation outcomes for rejected input

DESIGN DECISION: Expenses are frozen Pydantic models.
An expense is created once and deleted by id; it is never edited in place.
"""

from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# PERSISTED MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A single recorded spending entry.

    The serialized field order (id, category, amount, date, memo) is
    the layout of each object in the persisted JSON array.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(
        ...,
        description="Creation timestamp in epoch milliseconds, unique in the list"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Free-text category, e.g. 'Food'"
    )
    amount: int = Field(
        ...,
        gt=0,
        description="Amount in whole currency units"
    )
    date: str = Field(
        ...,
        min_length=1,
        description="Spending date as YYYY-MM-DD"
    )
    memo: str = Field(
        default="",
        description="Optional note, empty when not given"
    )

    @field_validator("memo", mode="before")
    @classmethod
    def memo_none_to_empty(cls, v):
        """Older records may carry memo: null."""
        return "" if v is None else v


# =============================================================================
# COMMANDS
# =============================================================================

class AddExpense(BaseModel):
    """
    Raw form input for a new expense.

    Nothing is validated here - the amount may still be the text the
    user typed. ExpenseValidator decides whether it becomes an Expense.
    """

    category: Optional[str] = None
    amount: Any = None
    date: Optional[str] = None
    memo: Optional[str] = None


class DeleteExpense(BaseModel):
    """Remove the expense with this id (no-op if absent)."""

    expense_id: int


# =============================================================================
# VIEW MODELS
# =============================================================================

class ExpenseRow(BaseModel):
    """One rendered line of the expense list."""

    id: int
    date: str
    category: str
    memo: str = ""
    amount_display: str


class ExpenseListView(BaseModel):
    """Everything a view needs to draw the list and the total."""

    rows: list[ExpenseRow] = Field(default_factory=list)
    total: int = 0
    total_display: str = "0"
    empty_message: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.rows


# =============================================================================
# VALIDATION
# =============================================================================

class ValidationIssue(BaseModel):
    """A single failed input check."""

    field: str = Field(
        ...,
        description="Form field the issue relates to"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (missing, invalid_value)"
    )
    message: str = Field(
        ...,
        description="Diagnostic description, not shown to the user"
    )


class ValidationResult(BaseModel):
    """
    Outcome of validating an AddExpense command.

    The user only ever sees `message`; the individual issues
    are kept for logging.
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    message: Optional[str] = None

    # Normalized values, set only when is_valid
    category: Optional[str] = None
    amount: Optional[int] = None
    date: Optional[str] = None
    memo: str = ""

    @property
    def failed_fields(self) -> list[str]:
        return [issue.field for issue in self.issues]
