from sqlalchemy import Column, DateTime
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every synced table lives in the "pms" schema and is keyed by the
    identifier assigned by the PMS, never by a local sequence.
    """

    pass


def created_at_column() -> Column:
    return Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


def updated_at_column() -> Column:
    return Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
