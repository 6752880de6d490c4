"""
Demo: validate the example engagement survey, walk one respondent
through it and print the results payload.
"""

import json

from surveycore.conditions import next_question
from surveycore.config import Settings
from surveycore.examples import build_example_engagement_survey
from surveycore.issues import summarize_issues
from surveycore.logging import set_survey_id, setup_logging
from surveycore.scoring import build_results
from surveycore.serialization import issue_to_dict, results_to_dict, survey_to_yaml
from surveycore.validation import validate_survey


def walk(survey, answers, settings):
    """Return the question ids the player would show for these answers."""
    shown = []
    current = survey.questions[0].id if survey.questions else None
    while current is not None:
        shown.append(current)
        current = next_question(survey.questions, current, answers, survey.logic_version, settings)
    return shown


if __name__ == "__main__":
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_json)

    survey = build_example_engagement_survey()
    set_survey_id(survey.id)

    print()
    print("=" * 70)
    print(f"SURVEY: {survey.id}")
    print("=" * 70)

    issues = validate_survey(survey, settings)
    summary = summarize_issues(issues)
    print(f"  Errors:    {summary.error_count}")
    print(f"  Warnings:  {summary.warning_count}")
    print(f"  Publish:   {'YES' if summary.is_valid else 'NO'}")
    for issue in issues:
        print(f"    {json.dumps(issue_to_dict(issue))}")
    print()

    answers = {"q1": "No", "q3": "4", "q4": "Often", "q5": ["Training", "Wiki"]}
    print(f"  Path:      {' -> '.join(walk(survey, answers, settings))}")

    results = build_results(survey.questions, answers, survey.score_config, survey.scoring_engine_id, settings)
    print("  Results:")
    print(json.dumps(results_to_dict(results), indent=2))

    with open("example_survey_output.yaml", "w") as f:
        f.write(survey_to_yaml(survey))
    print("Survey exported to example_survey_output.yaml")
