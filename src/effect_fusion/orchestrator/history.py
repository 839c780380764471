import asyncio
import logging
from collections import OrderedDict
from typing import List, Optional

from ..models.fusion import FusionRecord

logger = logging.getLogger(__name__)


class FusionHistory:
    """In-memory store of completed fusions, keyed by fusion id.

    Inserting an id that is already present is a no-op. With a positive
    ``limit`` the oldest records are evicted first.
    """

    def __init__(self, limit: int = 0):
        if limit < 0:
            raise ValueError("limit must be >= 0")
        self._records: "OrderedDict[str, FusionRecord]" = OrderedDict()
        self._limit = limit
        self._lock = asyncio.Lock()

    async def put(self, record: FusionRecord) -> bool:
        async with self._lock:
            if record.fusion_id in self._records:
                return False
            self._records[record.fusion_id] = record
            while self._limit and len(self._records) > self._limit:
                evicted, _ = self._records.popitem(last=False)
                logger.debug("Evicted fusion %s from history", evicted)
            return True

    async def get(self, fusion_id: str) -> Optional[FusionRecord]:
        async with self._lock:
            return self._records.get(fusion_id)

    async def records(self) -> List[FusionRecord]:
        async with self._lock:
            return list(self._records.values())

    async def size(self) -> int:
        async with self._lock:
            return len(self._records)
