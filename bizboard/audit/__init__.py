"""Audit logging package."""

from bizboard.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
