"""
SQLAlchemy ORM models for the lead qualification service.

Only finalized classifications are persisted; live conversations stay in the
conversation store.
"""

from sqlalchemy import Column, DateTime, Float, Index, JSON, String
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class ClassificationRecordModel(Base):
    """Append-only classification ledger. Rows are never updated."""

    __tablename__ = "classification_records"

    id = Column(String(36), primary_key=True)  # conversation id
    timestamp = Column(DateTime(timezone=True), nullable=False)
    industry_id = Column(String(50), nullable=False, index=True)
    status = Column(String(10), nullable=False)  # Hot, Cold, Invalid
    confidence = Column(Float, nullable=False)
    lead_json = Column(JSON, nullable=False)
    reasons_json = Column(JSON, default=list)
    metadata_json = Column(JSON, default=dict)
    transcript_json = Column(JSON, default=list)

    __table_args__ = (
        Index("ix_classification_timestamp", "timestamp"),
    )
