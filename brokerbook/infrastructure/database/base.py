"""Declarative base shared by the record tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Registry for ``records`` and ``record_counters``."""
