"""
Audit Models for SpendMate

Every change to the expense store and every call to the AI service
produces an audit event. The events go to the structured log, which
gives us:
1. A trail of what changed and when
2. Debugging information when an AI call fails
3. A record of silent resets caused by unreadable saved data
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Expense mutations
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    BULK_DELETED = "bulk_deleted"
    BULK_RECATEGORIZED = "bulk_recategorized"

    # Budgets and preferences
    BUDGET_UPDATED = "budget_updated"
    CATEGORY_BUDGET_UPDATED = "category_budget_updated"
    THEME_CHANGED = "theme_changed"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_RESET = "state_reset"

    # Manual entry
    VALIDATION_FAILED = "validation_failed"

    # AI adapters
    RECEIPT_PARSED = "receipt_parsed"
    RECEIPT_PARSE_FAILED = "receipt_parse_failed"
    INSIGHTS_GENERATED = "insights_generated"
    INSIGHTS_FAILED = "insights_failed"

    # Export
    EXPORT_GENERATED = "export_generated"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
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

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'budget', 'receipt')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., scan then save)"
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
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
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
        event = AuditEventBuilder.expense_added(expense_id, merchant, amount)
        event = AuditEventBuilder.bulk_deleted(requested=3, removed=2)
    """

    @staticmethod
    def expense_added(
        expense_id: UUID,
        merchant: str,
        amount: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense added: {merchant} - {amount}",
            details={
                "merchant": merchant,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_updated(
        expense_id: UUID,
        merchant: str,
        amount: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense updated: {merchant} - {amount}",
            details={
                "merchant": merchant,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense deleted",
            is_user_action=True,
        )

    @staticmethod
    def bulk_deleted(
        requested: int,
        removed: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BULK_DELETED,
            entity_type="expense",
            description=f"Bulk delete removed {removed} of {requested} selected expenses",
            details={
                "requested": requested,
                "removed": removed,
            },
            is_user_action=True,
        )

    @staticmethod
    def bulk_recategorized(
        category: str,
        requested: int,
        changed: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BULK_RECATEGORIZED,
            entity_type="expense",
            description=f"Moved {changed} expenses to {category}",
            details={
                "category": category,
                "requested": requested,
                "changed": changed,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_updated(amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_UPDATED,
            entity_type="budget",
            description=f"Overall budget set to {amount}",
            details={"amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def category_budget_updated(category: str, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_BUDGET_UPDATED,
            entity_type="budget",
            description=f"{category} budget set to {amount}",
            details={"category": category, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def theme_changed(theme: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.THEME_CHANGED,
            entity_type="preference",
            description=f"Theme changed to {theme}",
            details={"theme": theme},
            is_user_action=True,
        )

    @staticmethod
    def state_loaded(expense_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            entity_type="store",
            description=f"Loaded {expense_count} saved expenses",
            details={"expense_count": expense_count},
        )

    @staticmethod
    def state_reset(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_RESET,
            severity=AuditSeverity.WARNING,
            entity_type="store",
            description=f"Saved data under '{key}' was unreadable and was reset",
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def validation_failed(
        fields: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            correlation_id=correlation_id,
            description=f"Expense entry rejected: {len(fields)} fields need attention",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def receipt_parsed(
        merchant: str,
        amount: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECEIPT_PARSED,
            entity_type="receipt",
            correlation_id=correlation_id,
            description=f"Receipt scanned: {merchant} - {amount}",
            details={"merchant": merchant, "amount": amount},
        )

    @staticmethod
    def receipt_parse_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECEIPT_PARSE_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="receipt",
            correlation_id=correlation_id,
            description="Receipt scan failed, falling back to manual entry",
            error_message=error_message,
        )

    @staticmethod
    def insights_generated(expense_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_GENERATED,
            entity_type="insight",
            description=f"Insights generated from {expense_count} expenses",
            details={"expense_count": expense_count},
        )

    @staticmethod
    def insights_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="insight",
            description="Insight generation failed",
            error_message=error_message,
        )

    @staticmethod
    def export_generated(export_format: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="export",
            description=f"{export_format.upper()} export with {row_count} rows",
            details={"format": export_format, "row_count": row_count},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
