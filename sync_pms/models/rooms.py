from sqlalchemy import Column, Integer, String

from sync_pms.config import SCHEMA
from sync_pms.models.base import Base, created_at_column, updated_at_column


class Room(Base):
    """ORM model for physical rooms. The room number is a label, not a key."""

    __tablename__ = "rooms"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=False)  # PMS room ID
    number = Column(String, nullable=False)
    floor = Column(Integer, nullable=False)
    created_at = created_at_column()
    updated_at = updated_at_column()
