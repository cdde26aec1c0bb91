"""
sitescore/routers/export_router.py
Download an analysis as a JSON report file.
"""
import io

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from ..services.export import build_export_document, export_filename, render_export
from ..utils.history_store import history

router = APIRouter(prefix="/export", tags=["Export"])


@router.get("/{record_id}")
async def export_report(record_id: str):
    record = await history.get(record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Analysis not found")

    doc = build_export_document(record.metrics, analyzed_at=record.analyzed_at)
    filename = export_filename(record.metrics.url)
    return StreamingResponse(
        io.BytesIO(render_export(doc).encode("utf-8")),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
