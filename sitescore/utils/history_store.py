"""
sitescore/utils/history_store.py — bounded analysis history.
Keeps the most recent N records. Uses MongoDB when connected,
otherwise an in-memory deque.
"""
import logging
from collections import deque
from typing import Deque, List, Optional

from ..config import get_settings
from ..models import AnalysisRecord, HistoryEntry, HistoryStats

logger = logging.getLogger(__name__)


def _clean(doc: dict) -> dict:
    doc.pop("_id", None)
    return doc


class HistoryStore:
    def __init__(self, limit: int = 10):
        self._limit = limit
        self._mem: Deque[AnalysisRecord] = deque(maxlen=limit)  # newest first
        self._collection = None

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def backend(self) -> str:
        return "mongodb" if self._collection is not None else "in-memory"

    def init(self, db=None, limit: Optional[int] = None) -> None:
        """(Re)bind the store. Clears the in-memory buffer."""
        if limit is not None:
            self._limit = limit
        self._mem = deque(maxlen=self._limit)
        self._collection = db.analysis_history if db is not None else None

    async def append(self, record: AnalysisRecord) -> None:
        if self._collection is None:
            self._mem.appendleft(record)
            return
        await self._collection.insert_one(record.model_dump(mode="json"))
        await self._evict()

    async def _evict(self) -> None:
        cursor = (
            self._collection.find({}, {"id": 1})
            .sort("analyzed_at", -1)
            .skip(self._limit)
        )
        stale = [doc["id"] async for doc in cursor]
        if stale:
            await self._collection.delete_many({"id": {"$in": stale}})
            logger.debug("Evicted %d history record(s)", len(stale))

    async def list_records(self, limit: Optional[int] = None) -> List[AnalysisRecord]:
        limit = self._limit if limit is None else min(limit, self._limit)
        if self._collection is None:
            return list(self._mem)[:limit]
        cursor = self._collection.find({}).sort("analyzed_at", -1).limit(limit)
        return [AnalysisRecord.model_validate(_clean(doc)) async for doc in cursor]

    async def get(self, record_id: str) -> Optional[AnalysisRecord]:
        if self._collection is None:
            return next((r for r in self._mem if r.id == record_id), None)
        doc = await self._collection.find_one({"id": record_id})
        return AnalysisRecord.model_validate(_clean(doc)) if doc else None

    async def delete(self, record_id: str) -> bool:
        if self._collection is None:
            for r in list(self._mem):
                if r.id == record_id:
                    self._mem.remove(r)
                    return True
            return False
        res = await self._collection.delete_one({"id": record_id})
        return res.deleted_count > 0

    async def clear(self) -> int:
        if self._collection is None:
            count = len(self._mem)
            self._mem.clear()
            return count
        res = await self._collection.delete_many({})
        return res.deleted_count

    async def entries(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        return [
            HistoryEntry(
                id=r.id,
                url=r.metrics.url,
                score=r.metrics.score,
                date=r.analyzed_at,
                is_demo=r.metrics.is_demo,
            )
            for r in await self.list_records(limit)
        ]

    async def stats(self) -> HistoryStats:
        """Latest score, average score and change versus the previous analysis."""
        records = await self.list_records()
        if not records:
            return HistoryStats()
        scores = [r.metrics.score for r in records]
        return HistoryStats(
            total=len(scores),
            latest_score=scores[0],
            average_score=round(sum(scores) / len(scores), 1),
            trend=scores[0] - scores[1] if len(scores) > 1 else 0,
        )


history = HistoryStore(get_settings().history_limit)
