"""
Classification ledger protocol and in-memory implementation.

The ledger is the only state shared between conversations: an append-only
collection of ClassificationRecords with a newest-first reporting query.
"""

import asyncio
import logging
from typing import List, Protocol, runtime_checkable

from .models import ClassificationRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class ClassificationLedger(Protocol):
    """Protocol for classification record persistence."""

    async def append(self, record: ClassificationRecord) -> None:
        """Durably store a record. Raises PersistenceError on failure."""
        ...

    async def recent(self, limit: int) -> List[ClassificationRecord]:
        """Most recent records, newest first."""
        ...


class InMemoryClassificationLedger:
    """Process-local ledger; appends are serialized by a lock."""

    def __init__(self):
        self._records: List[ClassificationRecord] = []
        self._lock = asyncio.Lock()

    async def append(self, record: ClassificationRecord) -> None:
        async with self._lock:
            self._records.append(record)
        logger.info(f"Classification record stored for {record.id}: {record.status}")

    async def recent(self, limit: int) -> List[ClassificationRecord]:
        async with self._lock:
            ordered = sorted(self._records, key=lambda r: r.timestamp, reverse=True)
        return ordered[:limit]
