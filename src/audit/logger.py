"""
Audit Logger

Every significant action in the system is logged as a structured event:
mutations of the transaction list, storage failures, rejected form
submissions, exports, preference changes and reminders.

The audit logger:
- Is synchronous, like the store it reports on
- Never raises into the caller
- Logs at the severity carried by the event
"""

import logging
from typing import Any, Optional

import structlog

from src.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


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

_fallback_logger = logging.getLogger(__name__)


class AuditLogger:
    """
    Central audit logging service.

    Turns AuditEvents into structured log lines. Components receive an
    AuditLogger instead of logging on their own so every event carries
    the same shape.
    """

    def __init__(self, logger: Optional[Any] = None):
        """
        Initialize audit logger.

        Args:
            logger: structlog-compatible logger. Defaults to the
                    package's "src.audit" logger.
        """
        self._logger = logger or structlog.get_logger("src.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its own severity."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            emit = self._logger.error
        elif event.severity == AuditSeverity.WARNING:
            emit = self._logger.warning
        elif event.severity == AuditSeverity.DEBUG:
            emit = self._logger.debug
        else:
            emit = self._logger.info

        try:
            emit("audit_event", **log_dict)
        except Exception:
            # Log failure but don't raise
            _fallback_logger.exception(
                "audit_logging_failed: %s %s",
                log_dict["event_type"],
                log_dict["event_id"],
            )

    def log_transactions_loaded(self, count: int) -> None:
        self.log(AuditEventBuilder.transactions_loaded(count))

    def log_transaction_saved(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: float,
        replaced: bool,
    ) -> None:
        """Log an add or an in-place update."""
        if replaced:
            event = AuditEventBuilder.transaction_updated(
                transaction_id=transaction_id,
                transaction_type=transaction_type,
                amount=amount,
            )
        else:
            event = AuditEventBuilder.transaction_added(
                transaction_id=transaction_id,
                transaction_type=transaction_type,
                amount=amount,
            )
        self.log(event)

    def log_transaction_deleted(self, transaction_id: str, found: bool) -> None:
        self.log(AuditEventBuilder.transaction_deleted(transaction_id, found))

    def log_storage_read_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_read_failed(key, error_message))

    def log_storage_data_corrupt(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_data_corrupt(key, error_message))

    def log_storage_write_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_write_failed(key, error_message))

    def log_validation_failed(self, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.validation_failed(issues))

    def log_csv_exported(self, filename: str, row_count: int) -> None:
        self.log(AuditEventBuilder.csv_exported(filename, row_count))

    def log_theme_changed(self, theme: str) -> None:
        self.log(AuditEventBuilder.theme_changed(theme))

    def log_reminder_toggled(self, enabled: bool) -> None:
        self.log(AuditEventBuilder.reminder_toggled(enabled))

    def log_reminder_scheduled(self, fire_at) -> None:
        self.log(AuditEventBuilder.reminder_scheduled(fire_at))

    def log_reminder_fired(self, title: str) -> None:
        self.log(AuditEventBuilder.reminder_fired(title))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
