"""Audit logging package."""

from spendmate.audit.logger import AuditLogger, create_correlation_id, get_audit_logger

__all__ = ["AuditLogger", "create_correlation_id", "get_audit_logger"]
