"""
Scoring Config Validator: authoring-time checks on a scoring configuration.

Band checks run once per band group: the untagged global bands, then the
bands of each category tag in order of first appearance. Bands of
different groups are never compared with each other.

Check order:
    1. Bands: range sanity, overlaps, coverage gaps (per group)
    2. Categories: declared but unused
    3. Scorable questions: missing/unknown category, missing option scores
    4. Weights: dominance and variance within a category

Returns an empty list when scoring is disabled.
"""

from typing import Dict, List, Optional, Sequence

from surveycore.config import DEFAULT_SETTINGS, Settings
from surveycore.issues import IssueCode, Severity, ValidationIssue
from surveycore.model import Question, ScoreBand, SurveyScoreConfig
from surveycore.scoring import CHOICE_TYPES

SCALE_MIN = 0
SCALE_MAX = 100


def _band_groups(bands: Sequence[ScoreBand]) -> Dict[Optional[str], List[ScoreBand]]:
    groups: Dict[Optional[str], List[ScoreBand]] = {}
    for band in bands:
        groups.setdefault(band.category or None, []).append(band)
    return groups


def _check_band_range(band: ScoreBand) -> List[ValidationIssue]:
    issues = []
    if band.min >= band.max:
        issues.append(ValidationIssue(
            code=IssueCode.INVALID_BAND_RANGE,
            severity=Severity.ERROR,
            message=f'Band "{band.label}" has invalid range: min ({band.min}) >= max ({band.max})',
            band_id=band.id,
            category_id=band.category,
            details={"min": band.min, "max": band.max},
        ))
    if band.min < SCALE_MIN:
        issues.append(ValidationIssue(
            code=IssueCode.BAND_OUT_OF_RANGE,
            severity=Severity.ERROR,
            message=f'Band "{band.label}" has negative min value ({band.min})',
            band_id=band.id,
            category_id=band.category,
            details={"min": band.min},
        ))
    if band.max > SCALE_MAX:
        issues.append(ValidationIssue(
            code=IssueCode.BAND_OUT_OF_RANGE,
            severity=Severity.ERROR,
            message=f'Band "{band.label}" max value ({band.max}) exceeds {SCALE_MAX}',
            band_id=band.id,
            category_id=band.category,
            details={"max": band.max},
        ))
    return issues


def _check_overlaps(bands: Sequence[ScoreBand]) -> List[ValidationIssue]:
    issues = []
    for i in range(len(bands)):
        for j in range(i + 1, len(bands)):
            a, b = bands[i], bands[j]
            if a.min <= b.max and b.min <= a.max:
                start = max(a.min, b.min)
                end = min(a.max, b.max)
                issues.append(ValidationIssue(
                    code=IssueCode.BAND_OVERLAP,
                    severity=Severity.ERROR,
                    message=f'Bands "{a.label}" and "{b.label}" overlap in range {start}-{end}',
                    band_id=a.id,
                    category_id=a.category,
                    details={
                        "band1": {"id": a.id, "label": a.label, "min": a.min, "max": a.max},
                        "band2": {"id": b.id, "label": b.label, "min": b.min, "max": b.max},
                        "overlapRange": {"start": start, "end": end},
                    },
                ))
    return issues


def _gap(start: float, end: float, category: Optional[str]) -> ValidationIssue:
    return ValidationIssue(
        code=IssueCode.BAND_GAP,
        severity=Severity.ERROR,
        message=f"Score range {start}-{end} has no assigned band",
        category_id=category,
        details={"gapStart": start, "gapEnd": end},
    )


def _check_gaps(bands: Sequence[ScoreBand], category: Optional[str]) -> List[ValidationIssue]:
    # Bands are whole-number ranges: 0-40 and 41-74 are adjacent.
    issues = []
    covered_to = SCALE_MIN
    for band in sorted(bands, key=lambda b: (b.min, b.max)):
        if band.min > covered_to and covered_to <= SCALE_MAX:
            issues.append(_gap(covered_to, min(band.min - 1, SCALE_MAX), category))
        covered_to = max(covered_to, band.max + 1)
    if covered_to <= SCALE_MAX:
        issues.append(_gap(covered_to, SCALE_MAX, category))
    return issues


def _check_bands(config: SurveyScoreConfig) -> List[ValidationIssue]:
    bands = config.score_ranges
    if not bands:
        return [ValidationIssue(
            code=IssueCode.NO_BANDS_DEFINED,
            severity=Severity.WARNING,
            message="Scoring is enabled but no score bands are defined",
        )]

    issues: List[ValidationIssue] = []
    for band in bands:
        issues.extend(_check_band_range(band))
    for category, group in _band_groups(bands).items():
        issues.extend(_check_overlaps(group))
        issues.extend(_check_gaps(group, category))
    return issues


def _check_category_usage(questions: Sequence[Question], config: SurveyScoreConfig) -> List[ValidationIssue]:
    used = {q.scoring_category for q in questions if q.scorable and q.scoring_category}
    issues = []
    for category in config.categories:
        if category.id not in used:
            issues.append(ValidationIssue(
                code=IssueCode.UNUSED_CATEGORY,
                severity=Severity.WARNING,
                message=f'Category "{category.name or category.id}" is defined but no questions are assigned to it',
                category_id=category.id,
            ))
    return issues


def _check_scorable_questions(questions: Sequence[Question], config: SurveyScoreConfig) -> List[ValidationIssue]:
    declared = {c.id for c in config.categories}
    issues = []
    for question in questions:
        if not question.scorable:
            continue

        if not question.scoring_category:
            issues.append(ValidationIssue(
                code=IssueCode.SCORABLE_NO_CATEGORY,
                severity=Severity.WARNING,
                message=f'Scorable question "{(question.text or question.id)[:50]}" has no category assigned',
                question_id=question.id,
            ))
        elif question.scoring_category not in declared:
            issues.append(ValidationIssue(
                code=IssueCode.INVALID_CATEGORY_REF,
                severity=Severity.ERROR,
                message=f'Question references non-existent category "{question.scoring_category}"',
                question_id=question.id,
                category_id=question.scoring_category,
            ))

        if question.type_tag in CHOICE_TYPES and not question.option_scores:
            issues.append(ValidationIssue(
                code=IssueCode.MISSING_OPTION_SCORES,
                severity=Severity.WARNING,
                message=f"Scorable {question.type_tag} question has no option scores defined",
                question_id=question.id,
            ))
    return issues


def _check_weights(questions: Sequence[Question], settings: Settings) -> List[ValidationIssue]:
    groups: Dict[Optional[str], List[Question]] = {}
    for question in questions:
        if question.scorable:
            groups.setdefault(question.scoring_category or None, []).append(question)

    issues = []
    for category, group in groups.items():
        if len(group) < settings.min_questions_for_weight_check:
            continue

        weights = [q.score_weight if q.score_weight is not None else 1 for q in group]
        total = sum(weights)
        if total > 0:
            for question, weight in zip(group, weights):
                share = (weight / total) * 100
                if share > settings.weight_dominance_percent:
                    issues.append(ValidationIssue(
                        code=IssueCode.WEIGHT_IMBALANCE,
                        severity=Severity.WARNING,
                        message=f"Question has {share:.0f}% of total weight ({weight} of {total})",
                        question_id=question.id,
                        category_id=category,
                        details={"weight": weight, "totalWeight": total, "percentage": share},
                    ))

        highest, lowest = max(weights), min(weights)
        if lowest > 0 and highest > lowest * settings.weight_variance_ratio:
            issues.append(ValidationIssue(
                code=IssueCode.EXTREME_WEIGHT_VARIANCE,
                severity=Severity.WARNING,
                message=(
                    f"Weight variance is high: max weight ({highest}) is "
                    f"{highest / lowest:.1f}x the min weight ({lowest})"
                ),
                category_id=category,
                details={"maxWeight": highest, "minWeight": lowest, "ratio": highest / lowest},
            ))
    return issues


def validate_score_config(
    questions: Sequence[Question],
    config: Optional[SurveyScoreConfig],
    settings: Settings = DEFAULT_SETTINGS,
) -> List[ValidationIssue]:
    """
    Run every scoring configuration check.

    Args:
        questions: Survey questions
        config: Scoring configuration (None or disabled means nothing to check)
        settings: Thresholds for the weight checks

    Returns:
        List of ValidationIssue
    """
    if config is None or not config.enabled:
        return []

    issues: List[ValidationIssue] = []
    issues.extend(_check_bands(config))
    issues.extend(_check_category_usage(questions, config))
    issues.extend(_check_scorable_questions(questions, config))
    issues.extend(_check_weights(questions, settings))
    return issues
