"""
sitescore/services/seo_extractor.py
Derives on-page, content and technical SEO metrics from raw HTML and scores them.
Pure: no network access, no clock, no randomness.
"""
import re
from collections import Counter
from typing import List, Tuple

from bs4 import BeautifulSoup

from ..models import (
    ContentMetrics, FactorStatus, HeadingsFactor, ImagesFactor, KeywordDensity,
    LinksFactor, OnPageMetrics, RawPage, SEOMetrics, TechnicalMetrics, TextFactor,
)
from ..utils.urls import domain_label, hostname_of
from .score_calculator import DESCRIPTION_RANGE, TITLE_RANGE, calculate_score, in_range

STOP_WORDS = frozenset([
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "is", "are", "was", "were", "be", "been", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should",
])

MAX_KEYWORDS = 5
MAX_READABILITY = 100.0
TARGET_SENTENCE_WORDS = 15

# Used when the fetch path did not probe the well-known files
ASSUMED_ROBOTS_TXT = True
ASSUMED_XML_SITEMAP = False

_NON_TEXT_TAGS = ["script", "style", "noscript", "template"]
_SENTENCE_END = re.compile(r"[.!?]+")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _status(ok: bool) -> FactorStatus:
    return FactorStatus.GOOD if ok else FactorStatus.WARNING


# ── Extraction helpers ─────────────────────────────────────────────────────────

def _title(soup: BeautifulSoup, domain: str) -> TextFactor:
    tag = soup.find("title")
    title = tag.get_text(strip=True) if tag else ""
    if not title:
        title = f"{domain} - Website"
    return TextFactor(
        content=title,
        length=len(title),
        status=_status(in_range(len(title), TITLE_RANGE)),
    )


def _meta_description(soup: BeautifulSoup, domain: str) -> TextFactor:
    tag = soup.find("meta", attrs={"name": re.compile(r"^description$", re.I)})
    desc = (tag.get("content") or "").strip() if tag else ""
    if not desc:
        desc = f"Welcome to {domain}"
    return TextFactor(
        content=desc,
        length=len(desc),
        status=_status(in_range(len(desc), DESCRIPTION_RANGE)),
    )


def _headings(soup: BeautifulSoup) -> HeadingsFactor:
    h1 = len(soup.find_all("h1"))
    return HeadingsFactor(
        h1=h1,
        h2=len(soup.find_all("h2")),
        h3=len(soup.find_all("h3")),
        status=_status(h1 == 1),
    )


def _images(soup: BeautifulSoup) -> ImagesFactor:
    # alt="" marks a decorative image and counts as present
    imgs = soup.find_all("img")
    missing = sum(1 for img in imgs if not img.has_attr("alt"))
    return ImagesFactor(total=len(imgs), missing_alt=missing, status=_status(missing == 0))


def _is_external(href: str, hostname: str) -> bool:
    return href.startswith("http") and hostname not in href


def _links(soup: BeautifulSoup, hostname: str) -> LinksFactor:
    hrefs = [a["href"].strip() for a in soup.find_all("a", href=True)]
    external = sum(1 for href in hrefs if _is_external(href, hostname))
    return LinksFactor(
        internal=len(hrefs) - external,
        external=external,
        status=_status(len(hrefs) > 0),
    )


def _visible_text(soup: BeautifulSoup) -> str:
    """Tag-stripped text with whitespace collapsed. Mutates ``soup``."""
    for tag in soup(_NON_TEXT_TAGS):
        tag.decompose()
    text = soup.get_text(separator=" ")
    return re.sub(r"\s+", " ", text).strip()


# ── Content metrics ────────────────────────────────────────────────────────────

def count_words(text: str) -> int:
    return len([w for w in text.split(" ") if w])


def raw_readability(text: str, word_count: int) -> float:
    """
    Sentence-length proxy: 100 at <=15 words per sentence, minus 2 per extra word.
    Text without any sentence scores the maximum.
    """
    sentences = [s for s in _SENTENCE_END.split(text) if s.strip()]
    if not sentences:
        return MAX_READABILITY
    avg_words = word_count / len(sentences)
    score = MAX_READABILITY - (avg_words - TARGET_SENTENCE_WORDS) * 2
    return max(0.0, min(MAX_READABILITY, score))


def readability_score(text: str, word_count: int) -> float:
    """Readability rounded to one decimal for display."""
    return round(raw_readability(text, word_count), 1)


def extract_keywords(text: str, word_count: int, limit: int = MAX_KEYWORDS) -> List[KeywordDensity]:
    """Top terms by frequency (first occurrence breaks ties), as % of word_count."""
    freq: Counter = Counter()
    for token in text.lower().split():
        word = _NON_ALNUM.sub("", token)
        if len(word) > 2 and word not in STOP_WORDS:
            freq[word] += 1
    if not freq or word_count <= 0:
        return []
    # Counter keeps insertion order and sorted() is stable
    top: List[Tuple[str, int]] = sorted(freq.items(), key=lambda kv: -kv[1])[:limit]
    return [
        KeywordDensity(keyword=word, density=count / word_count * 100)
        for word, count in top
    ]


# ── Entry point ────────────────────────────────────────────────────────────────

def analyze(page: RawPage) -> SEOMetrics:
    """
    Derive SEOMetrics from a fetched page. Never raises for a valid RawPage:
    missing title/description fall back to text built from the domain.
    """
    hostname = hostname_of(page.source_url)
    domain = domain_label(page.source_url)
    soup = BeautifulSoup(page.html, "lxml")

    on_page = OnPageMetrics(
        title=_title(soup, domain),
        meta_description=_meta_description(soup, domain),
        headings=_headings(soup),
        images=_images(soup),
        links=_links(soup, hostname),
    )

    text = _visible_text(soup)
    word_count = count_words(text)
    readability = raw_readability(text, word_count)
    content = ContentMetrics(
        word_count=word_count,
        readability_score=round(readability, 1),
        keywords=extract_keywords(text, word_count),
    )

    technical = TechnicalMetrics(
        has_robots_txt=ASSUMED_ROBOTS_TXT if page.has_robots_txt is None else page.has_robots_txt,
        has_xml_sitemap=ASSUMED_XML_SITEMAP if page.has_xml_sitemap is None else page.has_xml_sitemap,
        load_time=page.fetch_duration_ms,
    )

    return SEOMetrics(
        score=calculate_score(on_page, content, technical.load_time, readability),
        url=page.source_url,
        on_page=on_page,
        content=content,
        technical=technical,
    )
