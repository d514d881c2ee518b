"""
Audit Logger

DESIGN DECISION: Every ledger mutation and persistence outcome is logged.
This provides:
1. Traceability of changes to the ledger and categories
2. A record of save failures, which are never surfaced as blocking errors
3. A short in-memory history the UI can show

The audit logger:
- Is synchronous, because every ledger mutation is
- Never raises into the mutating caller
"""

from collections import deque
from typing import Optional

import structlog

from spendy.models.audit import AuditEvent, AuditSeverity


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


class AuditLogger:
    """
    Central audit logging service.
    
    Logs events both to:
    1. Structured local log (for debugging)
    2. A bounded in-memory history (for display)
    """
    
    def __init__(self, history_size: Optional[int] = None):
        """
        Initialize audit logger.
        
        Args:
            history_size: How many events to keep in memory.
                          If None, the configured size is used.
        """
        if history_size is None:
            from spendy.config import get_settings
            history_size = get_settings().ledger.audit_history_size
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("spendy.audit")
    
    def log(self, event: AuditEvent) -> None:
        """Log an audit event locally and record it in the history."""
        log_dict = event.to_log_dict()
        
        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)
        
        self._history.append(event)
    
    def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(self._history)
        events.reverse()
        return events[:limit]
    
    def errors(self) -> list[AuditEvent]:
        """Error-level events still in the history, oldest first."""
        return [
            event for event in self._history
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL)
        ]
