# storefront/data/models/kv_entry.py
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime

from storefront.data.database import Base


class KVEntryModel(Base):
    __tablename__ = "kv_entries"

    # np. "cart:guest", "orders:42:last"
    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
