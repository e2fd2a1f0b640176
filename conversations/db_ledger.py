"""
Database-backed ClassificationLedger.

Implements the ClassificationLedger protocol using the repository layer. Each
append runs in its own transaction.
"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.models import ClassificationRecordModel
from database.repositories import ClassificationRecordRepository
from lead_scoring.exceptions import PersistenceError

from .models import ClassificationRecord

logger = logging.getLogger(__name__)


class DbClassificationLedger:
    """Persistent classification ledger backed by SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def append(self, record: ClassificationRecord) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await ClassificationRecordRepository(session).add(
                        id=record.id,
                        timestamp=record.timestamp,
                        industry_id=record.industry_id,
                        status=record.status,
                        confidence=record.confidence,
                        lead_json=dict(record.lead),
                        reasons_json=list(record.reasons),
                        metadata_json=dict(record.metadata),
                        transcript_json=[dict(entry) for entry in record.transcript],
                    )
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to store classification record {record.id}: {e}")
            raise PersistenceError(f"Failed to store classification record {record.id}") from e

        logger.info(f"Classification record stored for {record.id}: {record.status}")

    async def recent(self, limit: int) -> List[ClassificationRecord]:
        try:
            async with self._session_factory() as session:
                rows = await ClassificationRecordRepository(session).get_recent(limit=limit)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to read classification records: {e}")
            raise PersistenceError("Failed to read classification records") from e

        return [self._to_record(row) for row in rows]

    @staticmethod
    def _to_record(row: ClassificationRecordModel) -> ClassificationRecord:
        return ClassificationRecord(
            id=row.id,
            timestamp=row.timestamp,
            lead=dict(row.lead_json or {}),
            industry_id=row.industry_id,
            status=row.status,
            confidence=row.confidence,
            reasons=tuple(row.reasons_json or ()),
            metadata=dict(row.metadata_json or {}),
            transcript=tuple(row.transcript_json or ()),
        )
