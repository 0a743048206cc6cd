"""SQLAlchemy database models for charmlens."""

from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, JSON

from charmlens.database.database import Base


class CollectionItemDB(Base):
    """One item of a keyed, ordered collection.

    Collections are identified by `collection_key` (e.g. "audit.entries" or
    "history.<user_id>"). The autoincrement `seq` column is the storage order,
    so the oldest item of a collection is the one with the smallest `seq`.
    """

    __tablename__ = "collection_items"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    collection_key = Column(String, nullable=False, index=True)

    # Item's own id (if it has one), for point lookups
    item_id = Column(String, nullable=True, index=True)

    # Item body (pydantic model dumped in JSON mode)
    payload = Column(JSON, nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
