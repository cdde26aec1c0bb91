"""
History router — list, inspect and delete recent analyses.
"""
from typing import List

from fastapi import APIRouter, HTTPException, Query

from ..models import AnalysisRecord, HistoryEntry, HistoryStats
from ..utils.history_store import history

router = APIRouter(prefix="/history", tags=["History"])


@router.get("/stats", response_model=HistoryStats)
async def get_stats():
    """Latest score, average score and trend versus the previous analysis."""
    return await history.stats()


@router.get("/", response_model=List[HistoryEntry])
async def list_history(limit: int = Query(10, ge=1, le=100)):
    return await history.entries(limit)


@router.get("/{record_id}", response_model=AnalysisRecord)
async def get_record(record_id: str):
    record = await history.get(record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return record


@router.delete("/{record_id}")
async def delete_record(record_id: str):
    if not await history.delete(record_id):
        raise HTTPException(status_code=404, detail="Analysis not found")
    return {"success": True, "message": f"Analysis {record_id} deleted"}


@router.delete("/")
async def clear_history():
    deleted = await history.clear()
    return {"success": True, "deleted": deleted}
