from sqlalchemy import Column, Integer, String

from sync_pms.config import SCHEMA
from sync_pms.models.base import Base, created_at_column, updated_at_column


class Guest(Base):
    __tablename__ = "guests"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=False)  # PMS guest ID
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    created_at = created_at_column()
    updated_at = updated_at_column()
