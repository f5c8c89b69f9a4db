"""Key-value entry model (durable side of the storage cache)."""
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from app.database import Base


class StorageEntry(Base):
    """
    One persisted storage key.

    Values are the raw strings held by the in-memory cache (JSON documents,
    "true"/"false" flags or numbers), stored verbatim.
    """
    __tablename__ = 'kv_entry'

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f'<StorageEntry key={self.key}>'
