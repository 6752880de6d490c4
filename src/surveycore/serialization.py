"""
Serialization helpers for survey core objects (Question, LogicRule, scoring config, Survey).

Maps between model objects and the application's camelCase dict shape,
with JSON/YAML round-trip via that intermediate dict representation.
Results and validation issues are serialized outbound only.

This is the one layer that raises on malformed input (SerializationError).
"""
from __future__ import annotations

import json
import warnings
from typing import Any, Dict, List, Optional

import yaml

from surveycore.errors import SerializationError
from surveycore.issues import ValidationIssue
from surveycore.model import (
    LogicRule,
    LogicVersion,
    Question,
    QuestionType,
    RuleAction,
    ScoreBand,
    ScoreCategory,
    ScoringResult,
    Survey,
    SurveyResults,
    SurveyScoreConfig,
)


def _require(d: Any, key: str, kind: str) -> Any:
    if not isinstance(d, dict):
        raise SerializationError(f"Expected a mapping for {kind}, got {type(d).__name__}")
    if d.get(key) in (None, ""):
        raise SerializationError(f"{kind} is missing required field '{key}'")
    return d[key]


def _list(d: Dict[str, Any], key: str, kind: str) -> List[Any]:
    value = d.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise SerializationError(f"{kind}.{key} must be a list, got {type(value).__name__}")
    return value


def rule_to_dict(r: LogicRule) -> Dict[str, Any]:
    return {
        "id": r.id,
        "condition": r.condition,
        "action": RuleAction(r.action).value,
        "targetQuestionId": r.target_question_id,
    }


def rule_from_dict(d: Dict[str, Any]) -> LogicRule:
    rule_id = _require(d, "id", "LogicRule")
    try:
        action = RuleAction(d.get("action", "skip"))
    except ValueError:
        raise SerializationError(f"LogicRule {rule_id!r} has unknown action {d.get('action')!r}")
    return LogicRule(
        id=rule_id,
        condition=d.get("condition") or "",
        action=action,
        target_question_id=d.get("targetQuestionId"),
    )


def _question_type(value: Any, question_id: str):
    try:
        return QuestionType(value)
    except ValueError:
        warnings.warn(f"Unknown question type for {question_id}: {value!r}", UserWarning)
        return str(value)


def question_to_dict(q: Question) -> Dict[str, Any]:
    return {
        "id": q.id,
        "type": q.type_tag,
        "question": q.text,
        "order": q.order,
        "options": list(q.options),
        "scorable": q.scorable,
        "scoreWeight": q.score_weight,
        "scoringCategory": q.scoring_category,
        "optionScores": dict(q.option_scores),
        "ratingScale": q.rating_scale,
        "likertPoints": q.likert_points,
        "min": q.min,
        "max": q.max,
        "logicRules": [rule_to_dict(r) for r in q.logic_rules],
    }


def question_from_dict(d: Dict[str, Any], order: int = 0) -> Question:
    question_id = _require(d, "id", "Question")
    option_scores = d.get("optionScores") or {}
    if not isinstance(option_scores, dict):
        raise SerializationError(f"Question {question_id!r} optionScores must be a mapping")
    weight = d.get("scoreWeight")
    return Question(
        id=question_id,
        type=_question_type(d.get("type", "text"), question_id),
        text=d.get("question") or d.get("text") or "",
        order=d.get("order", order),
        options=list(d.get("options") or []),
        scorable=d.get("scorable") is True,
        score_weight=1 if weight is None else weight,
        scoring_category=d.get("scoringCategory") or None,
        option_scores=dict(option_scores),
        rating_scale=d.get("ratingScale"),
        likert_points=d.get("likertPoints"),
        min=d.get("min"),
        max=d.get("max"),
        logic_rules=[rule_from_dict(r) for r in _list(d, "logicRules", "Question")],
    )


def category_to_dict(c: ScoreCategory) -> Dict[str, Any]:
    return {"id": c.id, "name": c.name}


def category_from_dict(d: Dict[str, Any]) -> ScoreCategory:
    return ScoreCategory(id=_require(d, "id", "ScoreCategory"), name=d.get("name") or "")


def band_to_dict(b: ScoreBand) -> Dict[str, Any]:
    return {
        "id": b.id,
        "min": b.min,
        "max": b.max,
        "label": b.label,
        "category": b.category,
        "description": b.description,
    }


def band_from_dict(d: Dict[str, Any]) -> ScoreBand:
    band_id = _require(d, "id", "ScoreBand")
    try:
        low, high = float(d["min"]), float(d["max"])
    except (KeyError, TypeError, ValueError):
        raise SerializationError(f"ScoreBand {band_id!r} needs numeric min and max")
    return ScoreBand(
        id=band_id,
        min=int(low) if low.is_integer() else low,
        max=int(high) if high.is_integer() else high,
        label=d.get("label") or "",
        category=d.get("category") or None,
        description=d.get("description"),
    )


def score_config_to_dict(c: Optional[SurveyScoreConfig]) -> Optional[Dict[str, Any]]:
    if c is None:
        return None
    return {
        "enabled": c.enabled,
        "categories": [category_to_dict(cat) for cat in c.categories],
        "scoreRanges": [band_to_dict(b) for b in c.score_ranges],
    }


def score_config_from_dict(d: Optional[Dict[str, Any]]) -> Optional[SurveyScoreConfig]:
    if d is None:
        return None
    if not isinstance(d, dict):
        raise SerializationError(f"Expected a mapping for SurveyScoreConfig, got {type(d).__name__}")
    return SurveyScoreConfig(
        enabled=d.get("enabled") is True,
        categories=[category_from_dict(c) for c in _list(d, "categories", "SurveyScoreConfig")],
        score_ranges=[band_from_dict(b) for b in _list(d, "scoreRanges", "SurveyScoreConfig")],
    )


def survey_to_dict(s: Survey) -> Dict[str, Any]:
    return {
        "id": s.id,
        "questions": [question_to_dict(q) for q in s.questions],
        "scoreConfig": score_config_to_dict(s.score_config),
        "logicVersion": s.logic_version.value,
        "scoringEngineId": s.scoring_engine_id,
        "tags": list(s.tags),
    }


def survey_from_dict(d: Dict[str, Any]) -> Survey:
    survey_id = _require(d, "id", "Survey")
    try:
        logic_version = LogicVersion(d.get("logicVersion") or LogicVersion.V2.value)
    except ValueError:
        raise SerializationError(f"Survey {survey_id!r} has unknown logic version {d.get('logicVersion')!r}")
    return Survey(
        id=survey_id,
        questions=[question_from_dict(q, i) for i, q in enumerate(_list(d, "questions", "Survey"))],
        score_config=score_config_from_dict(d.get("scoreConfig")),
        logic_version=logic_version,
        scoring_engine_id=d.get("scoringEngineId") or "engagement_v1",
        tags=list(d.get("tags") or []),
    )


def survey_to_json(s: Survey) -> str:
    return json.dumps(survey_to_dict(s), sort_keys=True)


def survey_from_json(s: str) -> Survey:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid survey JSON: {e}")
    return survey_from_dict(d)


def survey_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_to_dict(s), sort_keys=False)


def survey_from_yaml(s: str) -> Survey:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise SerializationError(f"Invalid survey YAML: {e}")
    return survey_from_dict(d)


# =============================================================================
# OUTBOUND PAYLOADS
# =============================================================================

def scoring_result_to_dict(r: Optional[ScoringResult]) -> Optional[Dict[str, Any]]:
    if r is None:
        return None
    return {
        "totalScore": r.total_score,
        "maxScore": r.max_score,
        "percentage": r.percentage,
        "byCategory": {
            category_id: {"score": c.score, "maxScore": c.max_score, "label": c.label}
            for category_id, c in r.by_category.items()
        },
    }


def results_to_dict(r: Optional[SurveyResults]) -> Optional[Dict[str, Any]]:
    if r is None:
        return None
    payload = scoring_result_to_dict(r.scoring)
    payload["band"] = band_to_dict(r.band) if r.band else None
    payload["categoryBands"] = {
        category_id: band_to_dict(b) if b else None
        for category_id, b in r.category_bands.items()
    }
    return payload


def issue_to_dict(i: ValidationIssue) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "code": i.code.value,
        "severity": i.severity.value,
        "message": i.message,
    }
    for key, value in (
        ("questionId", i.question_id),
        ("ruleId", i.rule_id),
        ("categoryId", i.category_id),
        ("bandId", i.band_id),
    ):
        if value is not None:
            d[key] = value
    if i.details:
        d["details"] = dict(i.details)
    return d
