"""
Audit Models for Expense Tracker

Every change to the expense list, and every recovered failure,
is described by an AuditEvent and written to the diagnostic log.
This provides:
1. Traceability of adds and deletes
2. Debugging information when storage turns out to be corrupt
3. A record of rejected submissions

DESIGN DECISION: Events are plain values. Building one never touches
storage; the AuditLogger decides where it goes.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Mutations
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    DELETE_IGNORED = "delete_ignored"

    # Input
    VALIDATION_FAILED = "validation_failed"

    # Storage
    STORAGE_READ_CORRUPTED = "storage_read_corrupted"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which expense is this about?
    entity_id: Optional[int] = Field(
        default=None,
        description="Id of the expense this event relates to"
    )

    # Correlation - all events caused by one user action share this
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id=..., ...)
        audit_logger.log(event)
    """

    @staticmethod
    def expense_added(
        expense_id: int,
        category: str,
        amount: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_id=expense_id,
            correlation_id=correlation_id,
            description="Expense added",
            details={"category": category, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: int,
        remaining: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense {expense_id} deleted",
            details={"remaining": remaining},
            is_user_action=True,
        )

    @staticmethod
    def delete_ignored(
        expense_id: Union[int, str, None],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_IGNORED,
            severity=AuditSeverity.DEBUG,
            entity_id=expense_id if isinstance(expense_id, int) else None,
            correlation_id=correlation_id,
            description="No matching expense; nothing deleted",
            details={"requested_id": str(expense_id)[:100]},
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        fields: list[str],
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Submission rejected: {', '.join(fields)}",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def storage_read_corrupted(
        key: str,
        reason: str,
        skipped: int = 0,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_CORRUPTED,
            severity=AuditSeverity.WARNING,
            description="Stored data could not be read as an expense list",
            details={"key": key, "skipped_entries": skipped},
            error_message=reason,
        )

    @staticmethod
    def save_failed(
        error_message: str,
        expense_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_id=expense_id,
            correlation_id=correlation_id,
            description="Writing the expense list failed",
            error_message=error_message,
        )
