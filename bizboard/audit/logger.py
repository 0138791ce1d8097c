"""
Audit Logger

DESIGN DECISION: Every ledger mutation and categorization attempt is logged.
This provides:
1. Complete traceability of what entered the ledger
2. Debugging capability for the categorization service
3. A trail of rejected input

The audit logger:
- Is synchronous, like the ledger it observes
- Gracefully handles failures (doesn't crash the app if logging fails)
"""

import logging

import structlog

from bizboard.models.audit import AuditEvent, AuditEventBuilder


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
    Route structured logs to stderr at the given stdlib level.

    Call once at startup with ``AppSettings.log_level``.
    """
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Writes every event to the structured local log at the level
    matching its severity.
    """

    def __init__(self, logger_name: str = "bizboard.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written. Never raises.
        """
        try:
            log_dict = event.to_log_dict()
            severity = event.severity.value

            if severity in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif severity == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif severity == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Log failure but don't raise
            return False

        return True

    def log_record_added(self, kind: str, record_id: str, summary: str) -> None:
        """Log a record admitted to the ledger."""
        self.log(AuditEventBuilder.record_added(kind, record_id, summary))

    def log_validation_failed(self, kind: str, issues: list[dict]) -> None:
        """Log rejected input."""
        self.log(AuditEventBuilder.validation_failed(kind, issues))

    def log_subscriber_failed(
        self,
        kind: str,
        record_id: str,
        subscriber: str,
        error_message: str,
    ) -> None:
        self.log(AuditEventBuilder.subscriber_failed(
            kind, record_id, subscriber, error_message,
        ))

    def log_category_suggested(self, description: str, category: str) -> None:
        self.log(AuditEventBuilder.category_suggested(description, category))

    def log_categorization_failed(
        self,
        description: str,
        error_message: str,
        fallback: str,
    ) -> None:
        """Log a categorization attempt that fell back."""
        self.log(AuditEventBuilder.categorization_failed(
            description, error_message, fallback,
        ))
