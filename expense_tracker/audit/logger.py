"""
Audit Logger

DESIGN DECISION: Every change to the expense list is logged, and so is
every failure the system recovers from on its own (corrupt storage,
rejected input, a write that did not go through). The user never sees
these; they exist for diagnostics.

The audit logger:
- Writes structured JSON lines through structlog
- Never raises (logging must not break an add or delete)
- Supports correlation IDs to trace the events of one user action
"""

import logging
from collections.abc import Callable
from typing import Optional, Union
from uuid import UUID, uuid4

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output to stderr at the given level.

    structlog renders the message itself, so the stdlib
    handler only needs to print it verbatim. Existing root
    handlers are kept; only the level is changed.
    """
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger().setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Events are emitted at the log level matching their severity.
    """

    def __init__(self, logger_name: str = "expense_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its own severity."""
        try:
            log_dict = event.to_log_dict()
            severity = event.severity.value

            if severity == "error":
                self._logger.error("audit_event", **log_dict)
            elif severity == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif severity == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            self._report_failure(e, getattr(event, "event_type", None))

    def _emit(self, build: Callable[..., AuditEvent], **kwargs) -> None:
        """Build an event and log it; a builder that fails is reported, not raised."""
        try:
            event = build(**kwargs)
        except Exception as e:
            self._report_failure(e, build.__name__)
            return
        self.log(event)

    def _report_failure(self, error: Exception, source) -> None:
        try:
            self._logger.error(
                "audit_log_failed",
                error=str(error),
                error_type=type(error).__name__,
                source=str(source),
            )
        except Exception:
            logging.getLogger(__name__).exception("audit logging failed")

    def log_expense_added(
        self,
        expense_id: int,
        category: str,
        amount: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new expense."""
        self._emit(
            AuditEventBuilder.expense_added,
            expense_id=expense_id,
            category=category,
            amount=amount,
            correlation_id=correlation_id,
        )

    def log_expense_deleted(
        self,
        expense_id: int,
        remaining: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a deletion."""
        self._emit(
            AuditEventBuilder.expense_deleted,
            expense_id=expense_id,
            remaining=remaining,
            correlation_id=correlation_id,
        )

    def log_delete_ignored(
        self,
        expense_id: Union[int, str, None],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a delete request for an id that is not in the list."""
        self._emit(
            AuditEventBuilder.delete_ignored,
            expense_id=expense_id,
            correlation_id=correlation_id,
        )

    def log_validation_failed(
        self,
        fields: list[str],
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected submission."""
        self._emit(
            AuditEventBuilder.validation_failed,
            fields=fields,
            issues=issues,
            correlation_id=correlation_id,
        )

    def log_storage_read_corrupted(
        self,
        key: str,
        reason: str,
        skipped: int = 0,
    ) -> None:
        """Log stored data that had to be discarded on load."""
        self._emit(
            AuditEventBuilder.storage_read_corrupted,
            key=key,
            reason=reason,
            skipped=skipped,
        )

    def log_save_failed(
        self,
        error_message: str,
        expense_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a write the backend refused."""
        self._emit(
            AuditEventBuilder.save_failed,
            error_message=error_message,
            expense_id=expense_id,
            correlation_id=correlation_id,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a form submit).
    Pass it through all subsequent operations.
    """
    return uuid4()
