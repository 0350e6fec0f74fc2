"""Declarative base and column mixins shared by the cart and catalog tables"""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import DeclarativeBase, declared_attr
from sqlalchemy.sql import func
import uuid

class Base(DeclarativeBase):
    pass

class TimestampedModel:
    """
    created_at / updated_at columns.
    Writers stamp both explicitly; the server default only covers raw inserts.
    """

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    @declared_attr
    def updated_at(cls):
        return Column(DateTime(timezone=True), nullable=False, server_default=func.now())

class UUIDModel:
    """UUID primary key kept as its canonical string so SQLite and PostgreSQL agree"""

    @declared_attr
    def id(cls):
        return Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

class StatusModel:
    """Catalog rows are only shown while active"""

    ACTIVE = "active"

    @declared_attr
    def status(cls):
        return Column(String(50), nullable=False, default=StatusModel.ACTIVE, index=True)

def table_names():
    """Tables this service creates on startup"""
    return sorted(Base.metadata.tables)

__all__ = [
    "Base",
    "TimestampedModel",
    "UUIDModel",
    "StatusModel",
    "table_names",
]
