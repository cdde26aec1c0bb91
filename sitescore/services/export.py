"""
JSON export of an analysis: the metrics record plus export timestamp and data-source label.
"""
import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..models import SEOMetrics

LIVE_SOURCE = "Live Analysis"
DEMO_SOURCE = "Demo Data (fetch failed)"


def data_source_label(metrics: SEOMetrics) -> str:
    return DEMO_SOURCE if metrics.is_demo else LIVE_SOURCE


def build_export_document(
    metrics: SEOMetrics,
    analyzed_at: Optional[datetime] = None,
    exported_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    exported_at = exported_at or datetime.now(timezone.utc)
    doc = metrics.model_dump(mode="json", by_alias=True)
    if analyzed_at is not None:
        doc["analysisDate"] = analyzed_at.isoformat()
    doc["exportDate"] = exported_at.isoformat()
    doc["dataSource"] = data_source_label(metrics)
    return doc


def export_filename(url: str, now: Optional[datetime] = None) -> str:
    """``seo-report-<url, non-alphanumerics as _>-<epoch ms>.json``"""
    now = now or datetime.now(timezone.utc)
    safe_url = re.sub(r"[^a-z0-9]", "_", url, flags=re.IGNORECASE)
    return f"seo-report-{safe_url}-{int(now.timestamp() * 1000)}.json"


def render_export(doc: Dict[str, Any]) -> str:
    return json.dumps(doc, indent=2)
