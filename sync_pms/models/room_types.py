from sqlalchemy import Column, Integer, String, Text

from sync_pms.config import SCHEMA
from sync_pms.models.base import Base, created_at_column, updated_at_column


class RoomType(Base):
    """
    ORM model for PMS room types (e.g. "Deluxe Suite").

    Referenced by bookings through room_type_id.
    """

    __tablename__ = "room_types"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=False)  # PMS room type ID
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()
