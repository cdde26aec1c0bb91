"""
sitescore/services/score_calculator.py
Combines on-page, content and load-time factors into the 0–100 SEO score.
Also generates a human-readable summary string.
"""
import math
from typing import Dict, List, Optional

from ..models import ContentMetrics, OnPageMetrics, SEOMetrics

# Points awarded when a factor crosses its "good" threshold.
# Fixed heuristic weights; the load-time bonus is added on top.
WEIGHTS: Dict[str, int] = {
    "title_length":       15,
    "description_length": 15,
    "single_h1":          10,
    "has_h2":             5,
    "all_alt_text":       10,
    "has_links":          5,
    "word_count":         10,
    "readability":        10,
    "keywords":           10,
}

TITLE_RANGE = (30, 60)
DESCRIPTION_RANGE = (120, 160)
MIN_WORD_COUNT = 300
MIN_READABILITY = 60
MAX_LOAD_BONUS = 10
LOAD_BONUS_STEP_MS = 200


def in_range(length: int, bounds: tuple) -> bool:
    low, high = bounds
    return low <= length <= high


def load_time_bonus(load_time_ms: float) -> float:
    """10 points at 0ms, one point less per 200ms. Goes negative for slow pages."""
    return min(MAX_LOAD_BONUS, MAX_LOAD_BONUS - load_time_ms / LOAD_BONUS_STEP_MS)


def passed_factors(
    on_page: OnPageMetrics,
    content: ContentMetrics,
    readability: Optional[float] = None,
) -> List[str]:
    """
    Names of the WEIGHTS entries whose threshold is met. ``readability`` is the
    unrounded score when the caller has it; the stored value is rounded.
    """
    if readability is None:
        readability = content.readability_score
    checks = {
        "title_length":       in_range(on_page.title.length, TITLE_RANGE),
        "description_length": in_range(on_page.meta_description.length, DESCRIPTION_RANGE),
        "single_h1":          on_page.headings.h1 == 1,
        "has_h2":             on_page.headings.h2 > 0,
        "all_alt_text":       on_page.images.missing_alt == 0,
        "has_links":          on_page.links.total > 0,
        "word_count":         content.word_count > MIN_WORD_COUNT,
        "readability":        readability > MIN_READABILITY,
        "keywords":           len(content.keywords) > 0,
    }
    return [name for name, ok in checks.items() if ok]


def calculate_score(
    on_page: OnPageMetrics,
    content: ContentMetrics,
    load_time_ms: int,
    readability: Optional[float] = None,
) -> int:
    """
    Sum the weights of every passed factor plus the load-time bonus,
    round half up and clamp to 0–100.
    """
    score = sum(WEIGHTS[name] for name in passed_factors(on_page, content, readability))
    score += load_time_bonus(load_time_ms)
    return max(0, min(100, math.floor(score + 0.5)))


def score_label(score: int) -> str:
    if score >= 80:
        return "excellent"
    elif score >= 60:
        return "good"
    elif score >= 40:
        return "fair"
    return "poor"


def generate_summary(metrics: SEOMetrics) -> str:
    """Generate a short human-readable summary of an analysis."""
    score = metrics.score
    on_page = metrics.on_page
    issues = []

    if on_page.headings.h1 == 0:
        issues.append("no H1 heading")
    elif on_page.headings.h1 > 1:
        issues.append(f"{on_page.headings.h1} H1 headings")

    if on_page.images.missing_alt:
        issues.append(f"{on_page.images.missing_alt} image(s) missing alt text")

    if metrics.content.word_count <= MIN_WORD_COUNT:
        issues.append(f"thin content ({metrics.content.word_count} words)")

    if metrics.technical.load_time > 3000:
        issues.append(f"slow load time ({metrics.technical.load_time}ms)")

    if on_page.links.total == 0:
        issues.append("no links")

    summary = f"SEO health is {score_label(score)} ({score}/100)."
    if issues:
        summary += f" Key issues: {', '.join(issues)}."
    else:
        summary += " No critical issues detected."
    if metrics.is_demo:
        summary += " Demo data: the live page could not be fetched."
    return summary
