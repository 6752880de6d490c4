"""
Publish gate: runs the logic and scoring validators over a whole survey.

Logic issues come first, then scoring issues.
"""

from typing import List

from surveycore.config import DEFAULT_SETTINGS, Settings
from surveycore.issues import ValidationIssue, can_publish
from surveycore.logic_validator import validate_survey_logic
from surveycore.logging import get_logger
from surveycore.model import Survey
from surveycore.scoring_validator import validate_score_config

logger = get_logger(__name__)


def validate_survey(survey: Survey, settings: Settings = DEFAULT_SETTINGS) -> List[ValidationIssue]:
    issues = validate_survey_logic(survey.questions)
    issues.extend(validate_score_config(survey.questions, survey.score_config, settings))
    logger.debug("Validated survey %s: %d issue(s)", survey.id, len(issues))
    return issues


def survey_can_publish(survey: Survey, settings: Settings = DEFAULT_SETTINGS) -> bool:
    return can_publish(validate_survey(survey, settings))
