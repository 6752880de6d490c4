"""
Validation issue types shared by the logic and scoring validators.

Issues are recomputed on every validation pass and never persisted.
Severity ERROR blocks publishing; WARNING is advisory.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class IssueCode(str, Enum):
    # Logic
    MISSING_TARGET = "MISSING_TARGET"
    BACKWARDS_JUMP = "BACKWARDS_JUMP"
    CONFLICTING_RULES = "CONFLICTING_RULES"
    UNREACHABLE_QUESTION = "UNREACHABLE_QUESTION"

    # Bands
    INVALID_BAND_RANGE = "INVALID_BAND_RANGE"
    BAND_OUT_OF_RANGE = "BAND_OUT_OF_RANGE"
    BAND_OVERLAP = "BAND_OVERLAP"
    BAND_GAP = "BAND_GAP"
    NO_BANDS_DEFINED = "NO_BANDS_DEFINED"

    # Categories and questions
    UNUSED_CATEGORY = "UNUSED_CATEGORY"
    SCORABLE_NO_CATEGORY = "SCORABLE_NO_CATEGORY"
    INVALID_CATEGORY_REF = "INVALID_CATEGORY_REF"
    MISSING_OPTION_SCORES = "MISSING_OPTION_SCORES"

    # Weights
    WEIGHT_IMBALANCE = "WEIGHT_IMBALANCE"
    EXTREME_WEIGHT_VARIANCE = "EXTREME_WEIGHT_VARIANCE"


@dataclass(frozen=True)
class ValidationIssue:
    """
    One finding from a validator.

    Properties:
        code: IssueCode
        severity: Severity
        message: Human-readable message for the authoring UI
        question_id / rule_id / category_id / band_id: What the issue is about
        details: Extra context (targetId, overlapRange, gapStart, ...)
    """

    code: IssueCode
    severity: Severity
    message: str
    question_id: Optional[str] = None
    rule_id: Optional[str] = None
    category_id: Optional[str] = None
    band_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


@dataclass(frozen=True)
class IssueSummary:
    error_count: int
    warning_count: int

    @property
    def is_valid(self) -> bool:
        return self.error_count == 0


def summarize_issues(issues: List[ValidationIssue]) -> IssueSummary:
    """Count issues by severity."""
    errors = sum(1 for i in issues if i.severity is Severity.ERROR)
    return IssueSummary(error_count=errors, warning_count=len(issues) - errors)


def can_publish(issues: List[ValidationIssue]) -> bool:
    """A survey can be published when no issue is an error."""
    return not any(i.is_error for i in issues)


def filter_by_severity(issues: List[ValidationIssue], severity: Severity) -> List[ValidationIssue]:
    return [i for i in issues if i.severity is Severity(severity)]


def filter_by_code(issues: List[ValidationIssue], code: IssueCode) -> List[ValidationIssue]:
    return [i for i in issues if i.code is IssueCode(code)]


def issues_for_question(issues: List[ValidationIssue], question_id: str) -> List[ValidationIssue]:
    return [i for i in issues if i.question_id == question_id]
