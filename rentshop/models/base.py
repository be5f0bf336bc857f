from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base shared by every table of the shop store."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
