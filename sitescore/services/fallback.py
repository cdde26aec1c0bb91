"""
Synthetic metrics shown when the live page could not be fetched.
Every record built here is flagged ``is_demo`` and carries the failure reason.
"""
import random
from typing import Optional

from ..models import (
    ContentMetrics, FactorStatus, HeadingsFactor, ImagesFactor, KeywordDensity,
    LinksFactor, OnPageMetrics, SEOMetrics, TechnicalMetrics, TextFactor,
)
from ..utils.urls import domain_label
from .score_calculator import DESCRIPTION_RANGE, TITLE_RANGE, calculate_score, in_range


def _status(ok: bool) -> FactorStatus:
    return FactorStatus.GOOD if ok else FactorStatus.WARNING


def _text_factor(content: str, bounds: tuple) -> TextFactor:
    return TextFactor(content=content, length=len(content), status=_status(in_range(len(content), bounds)))


def build_fallback_metrics(
    url: str,
    reason: str,
    rng: Optional[random.Random] = None,
) -> SEOMetrics:
    """Plausible random-within-range metrics for ``url``; not a measurement."""
    rng = rng or random.Random()
    domain = domain_label(url)

    h1, h2, h3 = 1, rng.randint(2, 5), rng.randint(2, 7)
    total_images = rng.randint(4, 11)
    missing_alt = rng.randint(0, 2)
    internal, external = rng.randint(8, 22), rng.randint(1, 4)

    on_page = OnPageMetrics(
        title=_text_factor(f"{domain.capitalize()} - Home", TITLE_RANGE),
        meta_description=_text_factor(
            f"Welcome to {domain}. We provide quality services and solutions for your needs.",
            DESCRIPTION_RANGE,
        ),
        headings=HeadingsFactor(h1=h1, h2=h2, h3=h3, status=_status(h1 == 1)),
        images=ImagesFactor(total=total_images, missing_alt=missing_alt, status=_status(missing_alt == 0)),
        links=LinksFactor(internal=internal, external=external, status=FactorStatus.GOOD),
    )

    word_count = rng.randint(400, 1199)
    content = ContentMetrics(
        word_count=word_count,
        readability_score=float(rng.randint(65, 84)),
        keywords=[
            KeywordDensity(keyword=domain, density=rng.uniform(1.0, 3.0)),
            KeywordDensity(keyword="services", density=rng.uniform(0.5, 2.0)),
            KeywordDensity(keyword="business", density=rng.uniform(0.5, 2.0)),
        ],
    )

    technical = TechnicalMetrics(
        has_robots_txt=rng.random() > 0.3,
        has_xml_sitemap=rng.random() > 0.4,
        load_time=rng.randint(800, 2299),
    )

    return SEOMetrics(
        score=calculate_score(on_page, content, technical.load_time),
        url=url,
        on_page=on_page,
        content=content,
        technical=technical,
        is_demo=True,
        fallback_reason=reason,
    )
