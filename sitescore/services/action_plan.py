"""
Turns a metrics record into a prioritized checklist of SEO fixes.
"""
from typing import List

from ..models import ActionItem, ActionPriority, FactorStatus, SEOMetrics

MAX_ACTIONS = 10
_PRIORITY_ORDER = {ActionPriority.HIGH: 0, ActionPriority.MEDIUM: 1, ActionPriority.LOW: 2}

HIGH, MEDIUM = ActionPriority.HIGH, ActionPriority.MEDIUM


def _item(title: str, priority: ActionPriority, completed: bool) -> ActionItem:
    return ActionItem(title=title, priority=priority, completed=completed)


def build_action_plan(metrics: SEOMetrics) -> List[ActionItem]:
    """Open items first, then by priority; at most MAX_ACTIONS entries."""
    on_page, content, tech = metrics.on_page, metrics.content, metrics.technical
    actions: List[ActionItem] = []

    title = on_page.title
    if title.status == FactorStatus.ERROR:
        actions.append(_item("Add a title tag to your page", HIGH, False))
    elif title.status == FactorStatus.WARNING:
        actions.append(_item(f"Optimize title length (current: {title.length} chars)", HIGH, False))
    else:
        actions.append(_item("Title tag is optimized", HIGH, True))

    desc = on_page.meta_description
    if desc.status == FactorStatus.ERROR:
        actions.append(_item("Add a meta description", HIGH, False))
    elif desc.status == FactorStatus.WARNING:
        actions.append(_item(f"Optimize meta description length (current: {desc.length} chars)", MEDIUM, False))
    else:
        actions.append(_item("Meta description is optimized", HIGH, True))

    h1 = on_page.headings.h1
    if h1 == 0:
        actions.append(_item("Add an H1 heading to your page", HIGH, False))
    elif h1 > 1:
        actions.append(_item(f"Fix duplicate H1 tags (found {h1})", HIGH, False))
    else:
        actions.append(_item("H1 heading structure is correct", HIGH, True))

    missing_alt = on_page.images.missing_alt
    if missing_alt > 0:
        actions.append(_item(f"Add alt text to {missing_alt} images", HIGH, False))
    else:
        actions.append(_item("All images have alt text", HIGH, True))

    if content.word_count < 300:
        actions.append(_item("Increase content length (target: 1000+ words)", HIGH, False))
    elif content.word_count < 1000:
        actions.append(_item(f"Add more detailed content (current: {content.word_count} words)", MEDIUM, False))
    else:
        actions.append(_item("Content length is optimal", HIGH, True))

    if content.readability_score < 60:
        actions.append(_item("Improve content readability (simplify language)", MEDIUM, False))
    else:
        actions.append(_item("Content readability is good", MEDIUM, True))

    if not tech.has_robots_txt:
        actions.append(_item("Create and upload robots.txt file", MEDIUM, False))
    else:
        actions.append(_item("Robots.txt file exists", MEDIUM, True))

    if not tech.has_xml_sitemap:
        actions.append(_item("Create XML sitemap and submit to Google", MEDIUM, False))
    else:
        actions.append(_item("XML sitemap exists", MEDIUM, True))

    if tech.load_time > 3000:
        actions.append(_item(f"Optimize page load speed (current: {tech.load_time / 1000:.1f}s)", HIGH, False))
    else:
        actions.append(_item("Page load speed is optimal", HIGH, True))

    if on_page.links.internal < 5:
        actions.append(_item("Improve internal linking structure", MEDIUM, False))
    else:
        actions.append(_item("Internal linking is good", MEDIUM, True))

    actions.sort(key=lambda a: (a.completed, _PRIORITY_ORDER[a.priority]))
    return actions[:MAX_ACTIONS]
