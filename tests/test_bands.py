"""
Tests for band resolution.

Tests verify:
    - First matching band wins, bounds inclusive
    - Global and per-category band sets resolve independently
    - A whole-number partition of 0-100 resolves every whole percentage exactly once
"""

import pytest
from surveycore.bands import (
    category_bands,
    global_bands,
    resolve_band,
    resolve_category_band,
    resolve_category_bands,
)
from surveycore.model import CategoryScore, ScoreBand, ScoringResult, SurveyScoreConfig

BANDS = [
    ScoreBand(id="low", min=0, max=40, label="Low"),
    ScoreBand(id="mid", min=41, max=74, label="Mid"),
    ScoreBand(id="high", min=75, max=100, label="High"),
]


def test_scenario_mid_band():
    assert resolve_band(60, BANDS).id == "mid"


@pytest.mark.parametrize("pct,expected", [(0, "low"), (40, "low"), (41, "mid"), (74, "mid"), (75, "high"), (100, "high")])
def test_inclusive_bounds(pct, expected):
    assert resolve_band(pct, BANDS).id == expected


def test_no_bands():
    assert resolve_band(50, []) is None
    assert resolve_band(50, None) is None


def test_no_match():
    assert resolve_band(40.5, BANDS) is None
    assert resolve_band(101, BANDS) is None


def test_first_match_wins():
    bands = [ScoreBand(id="a", min=0, max=60), ScoreBand(id="b", min=50, max=100)]
    assert resolve_band(55, bands).id == "a"


def test_config_source():
    config = SurveyScoreConfig(enabled=True, score_ranges=BANDS)
    assert resolve_band(90, config).id == "high"


def test_partition_resolves_every_percentage_once():
    for pct in range(0, 101):
        matches = [b for b in BANDS if b.min <= pct <= b.max]
        assert len(matches) == 1
        assert resolve_band(pct, BANDS) is matches[0]


class TestCategoryBands:

    BANDS = BANDS + [
        ScoreBand(id="eng-low", min=0, max=59, label="Low", category="engagement"),
        ScoreBand(id="eng-high", min=60, max=100, label="High", category="engagement"),
    ]

    def test_sets_are_separate(self):
        assert [b.id for b in global_bands(self.BANDS)] == ["low", "mid", "high"]
        assert [b.id for b in category_bands(self.BANDS, "engagement")] == ["eng-low", "eng-high"]

    def test_global_resolution_ignores_category_bands(self):
        assert resolve_band(30, self.BANDS).id == "low"

    def test_category_resolution(self):
        assert resolve_category_band(65, self.BANDS, "engagement").id == "eng-high"

    def test_category_without_bands(self):
        assert resolve_category_band(65, self.BANDS, "enablement") is None

    def test_resolve_all_categories_with_fallback(self):
        result = ScoringResult(
            total_score=7,
            max_score=10,
            percentage=70,
            by_category={
                "engagement": CategoryScore(score=3, max_score=5, label="Engagement"),
                "enablement": CategoryScore(score=4, max_score=5, label="Enablement"),
                "empty": CategoryScore(score=0, max_score=0, label="Empty"),
            },
        )
        resolved = resolve_category_bands(result, self.BANDS)
        assert resolved["engagement"].id == "eng-high"
        assert resolved["enablement"].id == "high"
        assert resolved["empty"].id == "low"
