"""Tests for the audit logger."""

from spendy.audit import AuditLogger
from spendy.models.audit import AuditEventBuilder, AuditEventType


class TestAuditLogger:
    """Tests for AuditLogger history."""

    def test_recent_events_newest_first(self):
        logger = AuditLogger(history_size=10)
        logger.log(AuditEventBuilder.category_added("Expense", "Travel"))
        logger.log(AuditEventBuilder.theme_changed("dark"))

        events = logger.recent_events()
        assert [e.event_type for e in events] == [
            AuditEventType.THEME_CHANGED,
            AuditEventType.CATEGORY_ADDED,
        ]
        assert len(logger.recent_events(limit=1)) == 1

    def test_history_is_bounded(self):
        """Test old events fall off once the history is full."""
        logger = AuditLogger(history_size=3)
        for index in range(5):
            logger.log(AuditEventBuilder.transaction_removed(str(index)))
        assert [e.entity_id for e in logger.recent_events()] == ["4", "3", "2"]

    def test_errors(self):
        """Test only error-level events are returned."""
        logger = AuditLogger(history_size=10)
        logger.log(AuditEventBuilder.theme_changed("dark"))
        logger.log(AuditEventBuilder.save_failed("@tracker_app_theme", "disk full"))
        logger.log(AuditEventBuilder.load_failed("bad json", "@tracker_app_categories"))
        assert [e.event_type for e in logger.errors()] == [
            AuditEventType.SAVE_FAILED,
            AuditEventType.LOAD_FAILED,
        ]

    def test_debug_events_are_kept(self):
        """Test low-severity events still reach the history."""
        logger = AuditLogger(history_size=10)
        logger.log(AuditEventBuilder.category_deletion_cancelled("Expense", "Food"))
        assert logger.recent_events()[0].event_type == AuditEventType.CATEGORY_DELETION_CANCELLED
