"""
Audit Models for BizBoard

Every ledger mutation and every call to the categorization service
is described by an audit event. This provides:
1. Traceability of what was added and when
2. Debugging information when the categorization service misbehaves
3. A record of rejected input

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger mutations
    REVENUE_ADDED = "revenue_added"
    EXPENSE_ADDED = "expense_added"
    APPOINTMENT_ADDED = "appointment_added"
    VALIDATION_FAILED = "validation_failed"
    SUBSCRIBER_FAILED = "subscriber_failed"

    # Categorization
    CATEGORY_SUGGESTED = "category_suggested"
    CATEGORIZATION_FAILED = "categorization_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


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

    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Record kind (e.g., 'revenue', 'expense', 'appointment')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Ledger identifier of the record this event relates to"
    )

    # Event details
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


_ADDED_EVENT_TYPES = {
    "revenue": AuditEventType.REVENUE_ADDED,
    "expense": AuditEventType.EXPENSE_ADDED,
    "appointment": AuditEventType.APPOINTMENT_ADDED,
}


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added("revenue", "4", "Logo Design")
        event = AuditEventBuilder.categorization_failed("taxi", "timeout", "Uncategorized")
    """

    @staticmethod
    def record_added(
        kind: str,
        record_id: str,
        summary: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_ADDED_EVENT_TYPES[kind],
            entity_type=kind,
            entity_id=record_id,
            description=f"{kind.capitalize()} added: {summary}"[:500],
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        kind: str,
        issues: list[dict],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=kind,
            description=f"{kind.capitalize()} rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def subscriber_failed(
        kind: str,
        record_id: str,
        subscriber: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIBER_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=kind,
            entity_id=record_id,
            description=f"Ledger subscriber failed: {subscriber}",
            error_message=error_message,
            details={
                "subscriber": subscriber,
            },
        )

    @staticmethod
    def category_suggested(
        description: str,
        category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_SUGGESTED,
            entity_type="expense",
            description=f"Category suggested: {category}"[:500],
            details={
                "expense_description": description,
                "category": category,
            },
        )

    @staticmethod
    def categorization_failed(
        description: str,
        error_message: str,
        fallback: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORIZATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            description=f"Categorization unavailable, using '{fallback}'"[:500],
            error_message=error_message,
            details={
                "expense_description": description,
                "fallback": fallback,
            },
        )

