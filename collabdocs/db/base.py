from sqlalchemy import BigInteger, Column
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


class TimestampMixin:
    """Unix-second timestamps shared by documents and pages."""

    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)
