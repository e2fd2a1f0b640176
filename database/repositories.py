"""
Repository classes for the lead qualification data access layer.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import ClassificationRecordModel

logger = logging.getLogger(__name__)


class ClassificationRecordRepository:
    """Data access for the classification ledger."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, **kwargs) -> ClassificationRecordModel:
        record = ClassificationRecordModel(**kwargs)
        self.session.add(record)
        await self.session.flush()
        return record

    async def get_recent(self, limit: int = 50) -> List[ClassificationRecordModel]:
        result = await self.session.execute(
            select(ClassificationRecordModel)
            .order_by(ClassificationRecordModel.timestamp.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
