"""
Tests for the scoring configuration validator.

Tests verify:
    - Disabled scoring produces no issues
    - Band range, overlap and gap checks, per band group
    - Category usage and scorable question checks
    - Weight distribution checks within a category
"""

from surveycore.config import Settings
from surveycore.issues import IssueCode, Severity, can_publish, filter_by_code
from surveycore.model import Question, QuestionType, ScoreBand, ScoreCategory, SurveyScoreConfig
from surveycore.scoring_validator import validate_score_config

FULL_BANDS = [
    ScoreBand(id="low", min=0, max=40, label="Low"),
    ScoreBand(id="mid", min=41, max=74, label="Mid"),
    ScoreBand(id="high", min=75, max=100, label="High"),
]


def scorable(qid, category="engagement", weight=1):
    return Question(id=qid, type=QuestionType.RATING, text=f"Question {qid}", scorable=True,
                    scoring_category=category, score_weight=weight, rating_scale=5)


def config(bands=FULL_BANDS, categories=("engagement",)):
    return SurveyScoreConfig(
        enabled=True,
        categories=[ScoreCategory(id=c, name=c.title()) for c in categories],
        score_ranges=list(bands),
    )


def test_disabled_scoring():
    config_off = SurveyScoreConfig(enabled=False, score_ranges=[ScoreBand(id="x", min=50, max=10)])
    assert validate_score_config([scorable("q1")], config_off) == []
    assert validate_score_config([scorable("q1")], None) == []


def test_valid_configuration():
    questions = [scorable("q1"), scorable("q2")]
    assert validate_score_config(questions, config()) == []


class TestBandChecks:

    def test_gap(self):
        """0-30 and 70-100 leave 31-69 uncovered."""
        bands = [ScoreBand(id="low", min=0, max=30, label="Low"), ScoreBand(id="high", min=70, max=100, label="High")]
        gaps = filter_by_code(validate_score_config([scorable("q1")], config(bands)), IssueCode.BAND_GAP)

        assert len(gaps) == 1
        assert gaps[0].severity is Severity.ERROR
        assert gaps[0].details == {"gapStart": 31, "gapEnd": 69}

    def test_gap_at_edges(self):
        bands = [ScoreBand(id="mid", min=10, max=90, label="Mid")]
        gaps = filter_by_code(validate_score_config([scorable("q1")], config(bands)), IssueCode.BAND_GAP)
        assert [g.details for g in gaps] == [{"gapStart": 0, "gapEnd": 9}, {"gapStart": 91, "gapEnd": 100}]

    def test_adjacent_bands_have_no_gap(self):
        results = validate_score_config([scorable("q1")], config())
        assert filter_by_code(results, IssueCode.BAND_GAP) == []

    def test_no_bands(self):
        results = validate_score_config([scorable("q1")], config(bands=[]))
        assert [(i.code, i.severity) for i in results] == [(IssueCode.NO_BANDS_DEFINED, Severity.WARNING)]

    def test_overlap(self):
        bands = [ScoreBand(id="low", min=0, max=50, label="Low"), ScoreBand(id="mid", min=40, max=70, label="Mid")]
        overlaps = filter_by_code(validate_score_config([scorable("q1")], config(bands)), IssueCode.BAND_OVERLAP)

        assert len(overlaps) == 1
        assert overlaps[0].severity is Severity.ERROR
        assert overlaps[0].details["overlapRange"] == {"start": 40, "end": 50}

    def test_overlap_is_order_independent(self):
        a = ScoreBand(id="low", min=0, max=50, label="Low")
        b = ScoreBand(id="mid", min=40, max=70, label="Mid")
        forward = filter_by_code(validate_score_config([scorable("q1")], config([a, b])), IssueCode.BAND_OVERLAP)
        backward = filter_by_code(validate_score_config([scorable("q1")], config([b, a])), IssueCode.BAND_OVERLAP)
        assert forward[0].details["overlapRange"] == backward[0].details["overlapRange"]

    def test_shared_endpoint_overlaps(self):
        bands = [ScoreBand(id="a", min=0, max=50), ScoreBand(id="b", min=50, max=100)]
        overlaps = filter_by_code(validate_score_config([scorable("q1")], config(bands)), IssueCode.BAND_OVERLAP)
        assert overlaps[0].details["overlapRange"] == {"start": 50, "end": 50}

    def test_invalid_range(self):
        bands = FULL_BANDS + [ScoreBand(id="bad", min=60, max=60, label="Bad", category="engagement")]
        invalid = filter_by_code(validate_score_config([scorable("q1")], config(bands)), IssueCode.INVALID_BAND_RANGE)
        assert [i.band_id for i in invalid] == ["bad"]
        assert invalid[0].severity is Severity.ERROR

    def test_out_of_range(self):
        bands = [ScoreBand(id="low", min=-10, max=50, label="Low"), ScoreBand(id="high", min=51, max=120, label="High")]
        out = filter_by_code(validate_score_config([scorable("q1")], config(bands)), IssueCode.BAND_OUT_OF_RANGE)
        assert [i.band_id for i in out] == ["low", "high"]
        assert all(i.severity is Severity.ERROR for i in out)

    def test_category_bands_checked_separately(self):
        """Category bands are not compared against global bands."""
        bands = FULL_BANDS + [
            ScoreBand(id="eng-low", min=0, max=49, category="engagement"),
            ScoreBand(id="eng-high", min=50, max=100, category="engagement"),
        ]
        assert validate_score_config([scorable("q1")], config(bands)) == []

    def test_category_band_gap(self):
        bands = FULL_BANDS + [ScoreBand(id="eng-high", min=50, max=100, category="engagement")]
        gaps = filter_by_code(validate_score_config([scorable("q1")], config(bands)), IssueCode.BAND_GAP)
        assert len(gaps) == 1
        assert gaps[0].category_id == "engagement"
        assert gaps[0].details == {"gapStart": 0, "gapEnd": 49}


class TestCategoryChecks:

    def test_unused_category(self):
        results = validate_score_config([scorable("q1")], config(categories=("engagement", "wellbeing")))
        unused = filter_by_code(results, IssueCode.UNUSED_CATEGORY)
        assert [i.category_id for i in unused] == ["wellbeing"]
        assert unused[0].severity is Severity.WARNING

    def test_category_used_only_by_non_scorable_question(self):
        q = Question(id="q2", type=QuestionType.RATING, scoring_category="wellbeing")
        results = validate_score_config([scorable("q1"), q], config(categories=("engagement", "wellbeing")))
        assert [i.category_id for i in filter_by_code(results, IssueCode.UNUSED_CATEGORY)] == ["wellbeing"]

    def test_scorable_without_category(self):
        results = validate_score_config([scorable("q1", category=None)], config(categories=()))
        missing = filter_by_code(results, IssueCode.SCORABLE_NO_CATEGORY)
        assert [i.question_id for i in missing] == ["q1"]
        assert missing[0].severity is Severity.WARNING

    def test_invalid_category_ref(self):
        results = validate_score_config([scorable("q1", category="nonexistent")], config())
        invalid = filter_by_code(results, IssueCode.INVALID_CATEGORY_REF)
        assert len(invalid) == 1
        assert invalid[0].severity is Severity.ERROR
        assert invalid[0].category_id == "nonexistent"
        assert not can_publish(results)

    def test_invalid_category_ref_without_declared_categories(self):
        results = validate_score_config([scorable("q1", category="engagement")], config(categories=()))
        assert len(filter_by_code(results, IssueCode.INVALID_CATEGORY_REF)) == 1

    def test_missing_option_scores(self):
        q = Question(id="q1", type=QuestionType.MULTIPLE_CHOICE, scorable=True, scoring_category="engagement",
                     options=["A", "B"])
        missing = filter_by_code(validate_score_config([q], config()), IssueCode.MISSING_OPTION_SCORES)
        assert [i.question_id for i in missing] == ["q1"]
        assert missing[0].severity is Severity.WARNING

    def test_rating_needs_no_option_scores(self):
        results = validate_score_config([scorable("q1")], config())
        assert filter_by_code(results, IssueCode.MISSING_OPTION_SCORES) == []


class TestWeightChecks:

    def test_dominant_weight(self):
        questions = [scorable("q1", weight=1), scorable("q2", weight=1), scorable("q3", weight=10)]
        results = validate_score_config(questions, config())

        imbalance = filter_by_code(results, IssueCode.WEIGHT_IMBALANCE)
        assert [i.question_id for i in imbalance] == ["q3"]
        assert imbalance[0].severity is Severity.WARNING

        variance = filter_by_code(results, IssueCode.EXTREME_WEIGHT_VARIANCE)
        assert len(variance) == 1
        assert variance[0].details["ratio"] == 10
        assert variance[0].severity is Severity.WARNING
        assert can_publish(results)

    def test_reasonable_weights(self):
        questions = [scorable("q1", weight=1), scorable("q2", weight=2), scorable("q3", weight=1)]
        results = validate_score_config(questions, config())
        assert filter_by_code(results, IssueCode.WEIGHT_IMBALANCE) == []
        assert filter_by_code(results, IssueCode.EXTREME_WEIGHT_VARIANCE) == []

    def test_too_few_questions(self):
        questions = [scorable("q1", weight=1), scorable("q2", weight=20)]
        assert validate_score_config(questions, config()) == []

    def test_weights_compared_within_category(self):
        """A heavy question in one category does not unbalance another."""
        questions = [
            scorable("a1", "a", 1), scorable("a2", "a", 1), scorable("a3", "a", 1),
            scorable("b1", "b", 10), scorable("b2", "b", 10), scorable("b3", "b", 10),
        ]
        assert validate_score_config(questions, config(categories=("a", "b"))) == []

    def test_thresholds_from_settings(self):
        questions = [scorable("q1", weight=1), scorable("q2", weight=1), scorable("q3", weight=3)]
        strict = Settings(weight_variance_ratio=2.0)
        results = validate_score_config(questions, config(), strict)
        assert len(filter_by_code(results, IssueCode.EXTREME_WEIGHT_VARIANCE)) == 1
