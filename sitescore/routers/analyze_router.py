"""
sitescore/routers/analyze_router.py — run an SEO analysis for a URL.
"""
from fastapi import APIRouter, HTTPException

from ..config import get_settings
from ..errors import InvalidUrl
from ..models import AnalysisRecord, AnalyzeRequest
from ..services.analysis import run_analysis
from ..utils.urls import is_public_url_async, normalize_url

router = APIRouter(tags=["Analyze"])


async def _assert_safe(url: str):
    if get_settings().block_private_hosts and not await is_public_url_async(url):
        raise HTTPException(status_code=400, detail="URL blocked by SSRF protection.")


@router.post("/analyze", response_model=AnalysisRecord)
async def analyze_site(req: AnalyzeRequest):
    """
    Fetch the page and score it. If the page cannot be fetched the response
    still succeeds, with ``metrics.isDemo`` set and ``metrics.fallbackReason``
    explaining why.
    """
    try:
        url = normalize_url(req.url)
    except InvalidUrl as e:
        raise HTTPException(status_code=400, detail=e.message)
    await _assert_safe(url)
    return await run_analysis(url)
