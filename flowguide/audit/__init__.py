"""Audit logging package."""

from flowguide.audit.logger import AuditLogger, get_logger

__all__ = ["AuditLogger", "get_logger"]
