from sqlalchemy import Boolean, Column, DateTime, String
from datetime import datetime
import pytz
import config


def local_now():
    return datetime.now(pytz.timezone(config.APP_TIMEZONE))


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Not used by the append-only ledgers: inventory logs carry a single
    `timestamp` and journal posts are dated by their page.
    """
    # Timezone-aware timestamps in the configured business timezone.
    created_at = Column(DateTime(timezone=True), default=local_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=local_now)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)


class SoftDeleteMixin:
    """Mixin for the `disabled` soft-delete flag.

    Rows are never physically removed once referenced. The session-level
    filter in `database.py` hides disabled rows from ordinary queries.
    """
    disabled = Column(Boolean, default=False, nullable=False, index=True)
    disabled_at = Column(DateTime(timezone=True), nullable=True)
    disabled_by = Column(String, nullable=True)

    def mark_disabled(self, user_id=None):
        self.disabled = True
        self.disabled_at = local_now()
        self.disabled_by = user_id


class AuditMixin(TimestampMixin, SoftDeleteMixin):
    """Timestamps + soft-delete, used by the lookup tables and documents."""
    pass
