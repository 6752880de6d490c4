"""
Score Calculator.

Computes per-question contributions and aggregates them into a
ScoringResult. A question contributes only when it is ``scorable`` and
its type belongs to a scoring family:

    single_select   multiple_choice, dropdown, yes_no
    multi_select    checkbox
    numeric_scale   rating, likert, opinion_scale, slider

Every other type contributes (0, 0).

Scoring engines are registered by id. ``engagement_v1`` is the only one
today. Published engines are frozen: new behavior means a new id.

Disabled scoring returns None, never a zero result, so callers can tell
"show a thank-you screen" apart from "show a score of 0".
"""

import math
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from surveycore.bands import resolve_band, resolve_category_bands
from surveycore.config import DEFAULT_SETTINGS, Settings
from surveycore.logging import get_logger
from surveycore.model import (
    AnswerValue,
    Answers,
    CategoryScore,
    Question,
    QuestionScore,
    QuestionType,
    ScoreCategory,
    ScoringResult,
    SurveyResults,
    SurveyScoreConfig,
)
from surveycore.values import answer_text, leading_number

logger = get_logger(__name__)

SINGLE_SELECT = "single_select"
MULTI_SELECT = "multi_select"
NUMERIC_SCALE = "numeric_scale"

TYPE_FAMILIES: Dict[str, str] = {
    QuestionType.MULTIPLE_CHOICE.value: SINGLE_SELECT,
    QuestionType.DROPDOWN.value: SINGLE_SELECT,
    QuestionType.YES_NO.value: SINGLE_SELECT,
    QuestionType.CHECKBOX.value: MULTI_SELECT,
    QuestionType.RATING.value: NUMERIC_SCALE,
    QuestionType.LIKERT.value: NUMERIC_SCALE,
    QuestionType.OPINION_SCALE.value: NUMERIC_SCALE,
    QuestionType.SLIDER.value: NUMERIC_SCALE,
}

# Choice types that need option scores to produce anything
CHOICE_TYPES = {tag for tag, family in TYPE_FAMILIES.items() if family in (SINGLE_SELECT, MULTI_SELECT)}


def _as_number(answer: AnswerValue) -> float:
    # Leading numeric prefix, as the player reads it; anything else scores 0
    if answer is None:
        return 0
    if isinstance(answer, (int, float)) and not isinstance(answer, bool):
        return answer if math.isfinite(answer) else 0
    number = leading_number(answer_text(answer))
    return number if number is not None and math.isfinite(number) else 0


def _score_single_select(question: Question, answer: AnswerValue, weight: float) -> Tuple[float, float]:
    option_scores = question.option_scores or {}
    selected = answer if isinstance(answer, str) else answer_text(answer)
    score = option_scores[selected] * weight if selected in option_scores else 0
    max_score = max(option_scores.values()) * weight if option_scores else 0
    return score, max_score


def _score_multi_select(question: Question, answer: AnswerValue, weight: float) -> Tuple[float, float]:
    option_scores = question.option_scores or {}
    selected = answer if isinstance(answer, (list, tuple)) else []
    keys = [answer_text(opt) for opt in selected]
    score = sum(option_scores[key] * weight for key in keys if key in option_scores)
    max_score = sum(value * weight for value in option_scores.values() if value > 0)
    return score, max_score


def scale_max(question: Question) -> float:
    """Upper bound of a numeric question's scale; 0 when not configured."""
    tag = question.type_tag
    if tag in (QuestionType.RATING.value, QuestionType.OPINION_SCALE.value):
        return question.rating_scale or 0
    if tag == QuestionType.LIKERT.value:
        return question.likert_points or 0
    if tag == QuestionType.SLIDER.value:
        if question.min is not None and question.max is not None:
            return question.max
    return 0


def _score_numeric_scale(question: Question, answer: AnswerValue, weight: float) -> Tuple[float, float]:
    return _as_number(answer) * weight, scale_max(question) * weight


SCORING_STRATEGIES: Dict[str, Callable[[Question, AnswerValue, float], Tuple[float, float]]] = {
    SINGLE_SELECT: _score_single_select,
    MULTI_SELECT: _score_multi_select,
    NUMERIC_SCALE: _score_numeric_scale,
}


def score_question(question: Question, answer: AnswerValue) -> QuestionScore:
    """
    Score one question.

    Returns:
        QuestionScore; (0, 0) unless the question is scorable and of a
        scoring family
    """
    category = question.scoring_category
    if question.scorable is not True:
        return QuestionScore(0, 0, category)

    family = TYPE_FAMILIES.get(question.type_tag)
    if family is None:
        return QuestionScore(0, 0, category)

    weight = question.score_weight if question.score_weight is not None else 1
    score, max_score = SCORING_STRATEGIES[family](question, answer, weight)
    return QuestionScore(score, max_score, category)


def category_label(category_id: str, categories: Iterable[ScoreCategory]) -> str:
    """
    Display label for a category.

    Uses the declared category name when there is one, otherwise the id
    with its first letter capitalized.
    """
    for category in categories:
        if category.id == category_id and category.name:
            return category.name
    return category_id[:1].upper() + category_id[1:] if category_id else category_id


def engagement_scoring_v1(
    questions: Sequence[Question],
    answers: Answers,
    config: Optional[SurveyScoreConfig],
) -> ScoringResult:
    total_score = 0
    max_score = 0
    buckets: Dict[str, List[float]] = {}
    categories = config.categories if config else []

    for question in questions:
        result = score_question(question, answers.get(question.id))
        total_score += result.score
        max_score += result.max_score

        if result.category:
            bucket = buckets.setdefault(result.category, [0, 0])
            bucket[0] += result.score
            bucket[1] += result.max_score

    percentage = (total_score / max_score) * 100 if max_score > 0 else 0

    return ScoringResult(
        total_score=total_score,
        max_score=max_score,
        percentage=percentage,
        by_category={
            category_id: CategoryScore(score=s, max_score=m, label=category_label(category_id, categories))
            for category_id, (s, m) in buckets.items()
        },
    )


ScoringEngine = Callable[[Sequence[Question], Answers, Optional[SurveyScoreConfig]], ScoringResult]

SCORING_ENGINES: Dict[str, ScoringEngine] = {
    "engagement_v1": engagement_scoring_v1,
}

DEFAULT_SCORING_ENGINE = "engagement_v1"


def calculate_survey_score(
    questions: Sequence[Question],
    answers: Optional[Answers],
    config: Optional[SurveyScoreConfig],
    engine_id: Optional[str] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> Optional[ScoringResult]:
    """
    Score a response.

    Args:
        questions: Survey questions
        answers: questionId -> answer
        config: Survey scoring configuration
        engine_id: Registered scoring engine; None uses
            settings.default_scoring_engine, unknown ids fall back to engagement_v1
        settings: Supplies the default engine

    Returns:
        ScoringResult, or None when scoring is disabled or absent
    """
    if config is None or not config.enabled:
        return None

    engine_id = engine_id or settings.default_scoring_engine
    engine = SCORING_ENGINES.get(engine_id)
    if engine is None:
        logger.warning("Unknown scoring engine %r, using %s", engine_id, DEFAULT_SCORING_ENGINE)
        engine = SCORING_ENGINES[DEFAULT_SCORING_ENGINE]

    return engine(questions, answers or {}, config)


def build_results(
    questions: Sequence[Question],
    answers: Optional[Answers],
    config: Optional[SurveyScoreConfig],
    engine_id: Optional[str] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> Optional[SurveyResults]:
    """
    Score a response and resolve its overall and per-category bands.

    Returns:
        SurveyResults, or None when scoring is disabled
    """
    scoring = calculate_survey_score(questions, answers, config, engine_id, settings)
    if scoring is None:
        return None
    return SurveyResults(
        scoring=scoring,
        band=resolve_band(scoring.percentage, config),
        category_bands=resolve_category_bands(scoring, config),
    )


# =============================================================================
# RESULTS MODE
# =============================================================================

RESULTS_MODE_INDEX = "index"
RESULTS_MODE_SELF_ASSESSMENT = "self_assessment"
RESULTS_MODE_NONE = "none"

INDEX_ENGINE_IDS = ("engagement_v1", "5d_wellbeing_v1", "5d_engagement_v1", "evalia_5d_v1")
INDEX_TAGS = ("engagement", "5d", "organizational-index", "team-index")
INDEX_CATEGORY_IDS = (
    "leadership-effectiveness",
    "team-wellbeing",
    "burnout-risk",
    "psychological-safety",
    "engagement",
)


def resolve_results_mode(
    config: Optional[SurveyScoreConfig],
    engine_id: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
) -> str:
    """
    Pick how results are presented.

    Returns:
        "none" when scoring is disabled, "index" for organisational index
        surveys, otherwise "self_assessment"
    """
    if config is None or not config.enabled:
        return RESULTS_MODE_NONE

    if engine_id and engine_id in INDEX_ENGINE_IDS:
        return RESULTS_MODE_INDEX

    if any(tag.lower() in INDEX_TAGS for tag in (tags or [])):
        return RESULTS_MODE_INDEX

    category_ids = [c.id for c in config.categories]
    if len(category_ids) >= 3 and any(c in category_ids for c in INDEX_CATEGORY_IDS):
        return RESULTS_MODE_INDEX

    return RESULTS_MODE_SELF_ASSESSMENT
