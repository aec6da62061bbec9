"""
Column types shared by the ORM tables.
"""

from datetime import timezone
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp column.
    
    Values are stored in UTC. SQLite has no offset support, so the offset is
    dropped on write and re-attached on read; records from the sql store then
    compare equal to those from the memory store.
    """
    
    impl = DateTime(timezone=True)
    cache_ok = True
    
    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
            if dialect.name == "sqlite":
                value = value.replace(tzinfo=None)
        return value
    
    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
