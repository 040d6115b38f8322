"""Formatting and date helpers."""

from expense_tracker.utils.currency import format_amount, group_digits
from expense_tracker.utils.time import today_iso, utc_now

__all__ = ["format_amount", "group_digits", "today_iso", "utc_now"]
