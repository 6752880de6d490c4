"""
Tests for the survey model objects and validation issue helpers.
"""

import dataclasses

import pytest
from surveycore.issues import (
    IssueCode,
    Severity,
    ValidationIssue,
    can_publish,
    filter_by_code,
    filter_by_severity,
    issues_for_question,
    summarize_issues,
)
from surveycore.model import (
    LogicResult,
    LogicRule,
    Question,
    QuestionType,
    RuleAction,
    ScoreBand,
    ScoreCategory,
    Survey,
    SurveyScoreConfig,
)


class TestQuestion:

    def test_defaults(self):
        q = Question(id="q1")
        assert q.type is QuestionType.TEXT
        assert q.scorable is False
        assert q.score_weight == 1
        assert q.logic_rules == []
        assert q.option_scores == {}

    def test_type_tag_known(self):
        assert Question(id="q1", type=QuestionType.LIKERT).type_tag == "likert"

    def test_type_tag_unknown(self):
        assert Question(id="q1", type="hologram").type_tag == "hologram"

    def test_mutable_defaults_not_shared(self):
        a, b = Question(id="a"), Question(id="b")
        a.logic_rules.append(LogicRule(id="r1"))
        assert b.logic_rules == []


def test_question_type_is_str():
    assert QuestionType("yes_no") is QuestionType.YES_NO
    assert QuestionType.YES_NO == "yes_no"


def test_score_band_is_frozen():
    band = ScoreBand(id="low", min=0, max=40)
    with pytest.raises(dataclasses.FrozenInstanceError):
        band.min = 10


def test_get_category():
    config = SurveyScoreConfig(categories=[ScoreCategory(id="a", name="Alpha")])
    assert config.get_category("a").name == "Alpha"
    assert config.get_category("b") is None


def test_survey_get_question():
    survey = Survey(id="s1", questions=[Question(id="q1"), Question(id="q2")])
    assert survey.get_question("q2").id == "q2"
    assert survey.get_question("missing") is None


def test_logic_result_matched():
    assert not LogicResult().matched
    rule = LogicRule(id="r1", action=RuleAction.END)
    assert LogicResult(action=RuleAction.END, matched_rule=rule).matched


class TestIssues:

    ISSUES = [
        ValidationIssue(IssueCode.MISSING_TARGET, Severity.ERROR, "missing", question_id="q1"),
        ValidationIssue(IssueCode.BACKWARDS_JUMP, Severity.WARNING, "back", question_id="q2"),
        ValidationIssue(IssueCode.NO_BANDS_DEFINED, Severity.WARNING, "no bands"),
    ]

    def test_summary(self):
        summary = summarize_issues(self.ISSUES)
        assert (summary.error_count, summary.warning_count) == (1, 2)
        assert not summary.is_valid

    def test_can_publish(self):
        assert not can_publish(self.ISSUES)
        assert can_publish(self.ISSUES[1:])
        assert can_publish([])

    def test_filters(self):
        assert len(filter_by_severity(self.ISSUES, Severity.WARNING)) == 2
        assert len(filter_by_severity(self.ISSUES, "error")) == 1
        assert filter_by_code(self.ISSUES, "BACKWARDS_JUMP") == [self.ISSUES[1]]
        assert issues_for_question(self.ISSUES, "q1") == [self.ISSUES[0]]
