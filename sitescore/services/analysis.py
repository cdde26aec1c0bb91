"""
Runs one analysis request: normalize → fetch → analyze (or flagged fallback) → record.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

import aiohttp

from ..config import Settings, get_settings
from ..errors import FetchFailed
from ..models import AnalysisRecord, SEOMetrics
from ..utils.history_store import HistoryStore, history
from ..utils.urls import normalize_url
from .action_plan import build_action_plan
from .fallback import build_fallback_metrics
from .fetcher import fetch_page
from .score_calculator import generate_summary
from .seo_extractor import analyze

logger = logging.getLogger(__name__)


async def analyze_url(
    url: str,
    session: Optional[aiohttp.ClientSession] = None,
    settings: Optional[Settings] = None,
) -> SEOMetrics:
    """
    Metrics for an already-normalized URL. A failed fetch yields demo metrics
    (``is_demo=True``) instead of an error.
    """
    try:
        page = await fetch_page(url, session=session, settings=settings)
    except FetchFailed as e:
        logger.warning("Fetch failed for %s: %s — using demo data", url, e.message)
        return build_fallback_metrics(url, reason=e.message)
    return analyze(page)


async def run_analysis(
    raw_url: str,
    store: Optional[HistoryStore] = None,
    session: Optional[aiohttp.ClientSession] = None,
    settings: Optional[Settings] = None,
) -> AnalysisRecord:
    """Raises InvalidUrl for empty/malformed input; never fails on fetch errors."""
    settings = settings or get_settings()
    store = store if store is not None else history
    url = normalize_url(raw_url)

    logger.info("Analyzing %s (mode=%s)", url, settings.fetch_mode)
    metrics = await analyze_url(url, session=session, settings=settings)

    record = AnalysisRecord(
        id=str(uuid.uuid4()),
        analyzed_at=datetime.now(timezone.utc),
        metrics=metrics,
        summary=generate_summary(metrics),
        action_plan=build_action_plan(metrics),
    )
    await store.append(record)
    logger.info(
        "Analysis %s done: %s score=%d demo=%s",
        record.id, url, metrics.score, metrics.is_demo,
    )
    return record
