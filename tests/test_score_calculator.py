"""
Score composition tests — fixed weights plus the load-time bonus.
"""
import pytest

from sitescore.models import (
    ContentMetrics, FactorStatus, HeadingsFactor, ImagesFactor, KeywordDensity,
    LinksFactor, OnPageMetrics, SEOMetrics, TechnicalMetrics, TextFactor,
)
from sitescore.services.score_calculator import (
    WEIGHTS, calculate_score, generate_summary, load_time_bonus, passed_factors, score_label,
)

W = FactorStatus.WARNING


def make_on_page(title_len=10, desc_len=10, h1=0, h2=0, images=0, missing_alt=0,
                 internal=0, external=0) -> OnPageMetrics:
    return OnPageMetrics(
        title=TextFactor(content="t" * title_len, length=title_len, status=W),
        meta_description=TextFactor(content="d" * desc_len, length=desc_len, status=W),
        headings=HeadingsFactor(h1=h1, h2=h2, h3=0, status=W),
        images=ImagesFactor(total=images, missing_alt=missing_alt, status=W),
        links=LinksFactor(internal=internal, external=external, status=W),
    )


def make_content(word_count=0, readability=0.0, keywords=0) -> ContentMetrics:
    return ContentMetrics(
        word_count=word_count,
        readability_score=readability,
        keywords=[KeywordDensity(keyword=f"kw{i}", density=1.0) for i in range(keywords)],
    )


def perfect():
    return (
        make_on_page(title_len=45, desc_len=140, h1=1, h2=2, images=3, internal=5, external=1),
        make_content(word_count=800, readability=75.0, keywords=5),
    )


class TestWeights:

    def test_weights_without_load_bonus_sum_to_90(self):
        assert sum(WEIGHTS.values()) == 90

    def test_perfect_page_at_zero_load_scores_100(self):
        on_page, content = perfect()
        assert calculate_score(on_page, content, 0) == 100

    def test_nothing_passing_except_alt_text(self):
        # zero images → zero missing alt → +10
        on_page = make_on_page()
        content = make_content()
        assert passed_factors(on_page, content) == ["all_alt_text"]
        assert calculate_score(on_page, content, 2000) == 10

    @pytest.mark.parametrize("title_len,ok", [(29, False), (30, True), (60, True), (61, False)])
    def test_title_range_bounds(self, title_len, ok):
        on_page = make_on_page(title_len=title_len)
        assert ("title_length" in passed_factors(on_page, make_content())) is ok

    @pytest.mark.parametrize("desc_len,ok", [(119, False), (120, True), (160, True), (161, False)])
    def test_description_range_bounds(self, desc_len, ok):
        on_page = make_on_page(desc_len=desc_len)
        assert ("description_length" in passed_factors(on_page, make_content())) is ok

    def test_two_h1_do_not_earn_single_h1_points(self):
        on_page = make_on_page(h1=2)
        assert "single_h1" not in passed_factors(on_page, make_content())

    def test_word_count_must_exceed_300(self):
        assert "word_count" not in passed_factors(make_on_page(), make_content(word_count=300))
        assert "word_count" in passed_factors(make_on_page(), make_content(word_count=301))

    def test_readability_must_exceed_60(self):
        assert "readability" not in passed_factors(make_on_page(), make_content(readability=60.0))
        assert "readability" in passed_factors(make_on_page(), make_content(readability=60.1))

    def test_unrounded_readability_decides_threshold(self):
        content = make_content(readability=60.0)
        assert "readability" not in passed_factors(make_on_page(), content)
        assert "readability" in passed_factors(make_on_page(), content, readability=60.04)
        assert calculate_score(make_on_page(), content, 2000, readability=60.04) == 20

    def test_external_links_alone_count_as_links(self):
        assert "has_links" in passed_factors(make_on_page(external=1), make_content())


class TestLoadTimeBonus:

    def test_bonus_caps_at_ten(self):
        assert load_time_bonus(0) == 10

    def test_bonus_decreases_per_200ms(self):
        assert load_time_bonus(200) == 9
        assert load_time_bonus(1000) == 5

    def test_slow_pages_lose_points(self):
        assert load_time_bonus(4000) == -10
        on_page, content = perfect()
        assert calculate_score(on_page, content, 4000) == 80

    def test_score_never_goes_below_zero(self):
        assert calculate_score(make_on_page(), make_content(), 60000) == 0

    def test_score_never_exceeds_100(self):
        on_page, content = perfect()
        assert calculate_score(on_page, content, 0) <= 100

    def test_rounds_half_up(self):
        # 10 (alt) + 8.5 → 18.5 rounds to 19, not banker's 18
        assert calculate_score(make_on_page(), make_content(), 300) == 19
        # 10 + 9.25 → 19
        assert calculate_score(make_on_page(), make_content(), 150) == 19
        # 10 + 9.75 → 20
        assert calculate_score(make_on_page(), make_content(), 50) == 20


class TestSummary:

    def _metrics(self, score=85, h1=1, missing_alt=0, words=800, load=500, is_demo=False):
        on_page = make_on_page(title_len=45, desc_len=140, h1=h1, h2=1, images=2,
                               missing_alt=missing_alt, internal=4)
        return SEOMetrics(
            score=score,
            url="https://example.com",
            on_page=on_page,
            content=make_content(word_count=words, readability=70.0, keywords=2),
            technical=TechnicalMetrics(has_robots_txt=True, has_xml_sitemap=True, load_time=load),
            is_demo=is_demo,
            fallback_reason="HTTP 503" if is_demo else None,
        )

    @pytest.mark.parametrize("score,label", [(95, "excellent"), (80, "excellent"), (79, "good"),
                                             (60, "good"), (45, "fair"), (10, "poor")])
    def test_labels(self, score, label):
        assert score_label(score) == label

    def test_clean_page_summary(self):
        summary = generate_summary(self._metrics())
        assert summary == "SEO health is excellent (85/100). No critical issues detected."

    def test_issues_are_listed(self):
        summary = generate_summary(self._metrics(score=40, h1=0, missing_alt=2, words=120, load=4200))
        assert "fair (40/100)" in summary
        assert "no H1 heading" in summary
        assert "2 image(s) missing alt text" in summary
        assert "thin content (120 words)" in summary
        assert "slow load time (4200ms)" in summary

    def test_demo_data_is_called_out(self):
        summary = generate_summary(self._metrics(is_demo=True))
        assert "Demo data" in summary
