"""
Audit Models for Expense Manager

Every significant action in the system is described by an AuditEvent:
1. Transactions added, updated and deleted
2. Storage read/write failures
3. Rejected form submissions
4. Exports, preference changes and reminders

Events are emitted as structured log lines by AuditLogger.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transaction store
    TRANSACTIONS_LOADED = "transactions_loaded"
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Storage
    STORAGE_READ_FAILED = "storage_read_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"
    STORAGE_DATA_CORRUPT = "storage_data_corrupt"

    # Form input
    VALIDATION_FAILED = "validation_failed"

    # Export
    CSV_EXPORTED = "csv_exported"

    # Preferences
    THEME_CHANGED = "theme_changed"
    REMINDER_ENABLED = "reminder_enabled"
    REMINDER_DISABLED = "reminder_disabled"

    # Reminder schedule
    REMINDER_SCHEDULED = "reminder_scheduled"
    REMINDER_FIRED = "reminder_fired"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


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
        default_factory=_utcnow,
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

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'storage', 'preference')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID or key of the entity this event relates to"
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

    # Error information (if applicable)
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
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, "expense", 12.5)
        event = AuditEventBuilder.storage_write_failed(key, error)
    """

    @staticmethod
    def transactions_loaded(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_LOADED,
            entity_type="storage",
            description=f"Loaded {count} transactions from storage",
            details={"count": count},
        )

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {transaction_type} {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(
        transaction_id: str,
        transaction_type: str,
        amount: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction updated: {transaction_type} {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: str, found: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=(
                "Transaction deleted"
                if found
                else "Delete requested for unknown transaction"
            ),
            details={"found": found},
            is_user_action=True,
        )

    @staticmethod
    def storage_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Failed to read '{key}' from storage",
            error_message=error_message,
        )

    @staticmethod
    def storage_data_corrupt(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_DATA_CORRUPT,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Stored value for '{key}' is malformed, starting empty",
            error_message=error_message,
        )

    @staticmethod
    def storage_write_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Failed to write '{key}' to storage",
            error_message=error_message,
        )

    @staticmethod
    def validation_failed(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="draft",
            description=f"Transaction form rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def csv_exported(filename: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CSV_EXPORTED,
            entity_type="export",
            entity_id=filename,
            description=f"Exported {row_count} transactions to {filename}",
            details={"row_count": row_count},
            is_user_action=True,
        )

    @staticmethod
    def theme_changed(theme: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.THEME_CHANGED,
            entity_type="preference",
            entity_id="theme",
            description=f"Theme set to {theme}",
            details={"theme": theme},
            is_user_action=True,
        )

    @staticmethod
    def reminder_toggled(enabled: bool) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.REMINDER_ENABLED
                if enabled
                else AuditEventType.REMINDER_DISABLED
            ),
            entity_type="preference",
            entity_id="daily_reminder",
            description=f"Daily reminder {'enabled' if enabled else 'disabled'}",
            is_user_action=True,
        )

    @staticmethod
    def reminder_scheduled(fire_at: datetime) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_SCHEDULED,
            severity=AuditSeverity.DEBUG,
            entity_type="reminder",
            description=f"Next reminder at {fire_at.isoformat()}",
            details={"fire_at": fire_at.isoformat()},
        )

    @staticmethod
    def reminder_fired(title: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_FIRED,
            entity_type="reminder",
            description=f"Reminder delivered: {title}",
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
