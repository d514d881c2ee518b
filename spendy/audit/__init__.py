"""Audit logging package."""

from spendy.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
