"""
Example survey builder: a short engagement pulse survey.

Used by tests and the demo script. It exercises every scoring family,
a skip rule, an end rule and a two-category scoring configuration with
bands covering 0-100.
"""
from surveycore.model import (
    LogicRule,
    LogicVersion,
    Question,
    QuestionType,
    RuleAction,
    ScoreBand,
    ScoreCategory,
    Survey,
    SurveyScoreConfig,
)


def build_example_engagement_survey(logic_version: LogicVersion = LogicVersion.V2) -> Survey:
    survey = Survey(id="engagement-pulse", logic_version=logic_version, tags=["engagement"])

    # V3 literals may be quoted; V2 literals may not
    no = '"No"' if logic_version is LogicVersion.V3 else "No"
    never = '"Never"' if logic_version is LogicVersion.V3 else "Never"

    survey.questions = [
        Question(
            id="q1",
            type=QuestionType.YES_NO,
            text="Do you manage a team?",
            order=0,
            options=["Yes", "No"],
            logic_rules=[
                LogicRule(id="r1", condition=f'answer("q1") == {no}', action=RuleAction.SKIP, target_question_id="q3"),
            ],
        ),
        Question(
            id="q2",
            type=QuestionType.RATING,
            text="How supported do you feel as a manager?",
            order=1,
            scorable=True,
            scoring_category="enablement",
            rating_scale=5,
        ),
        Question(
            id="q3",
            type=QuestionType.LIKERT,
            text="I feel engaged at work",
            order=2,
            scorable=True,
            scoring_category="engagement",
            likert_points=5,
        ),
        Question(
            id="q4",
            type=QuestionType.MULTIPLE_CHOICE,
            text="How often would you recommend us as an employer?",
            order=3,
            options=["Never", "Sometimes", "Often"],
            scorable=True,
            scoring_category="engagement",
            option_scores={"Never": 0, "Sometimes": 3, "Often": 5},
            logic_rules=[
                LogicRule(id="r2", condition=f'answer("q4") == {never}', action=RuleAction.END),
            ],
        ),
        Question(
            id="q5",
            type=QuestionType.CHECKBOX,
            text="Which resources do you use?",
            order=4,
            options=["Training", "Mentoring", "Wiki"],
            scorable=True,
            scoring_category="enablement",
            option_scores={"Training": 2, "Mentoring": 2, "Wiki": 1},
        ),
        Question(
            id="q6",
            type=QuestionType.TEXTAREA,
            text="Anything else you would like to share?",
            order=5,
        ),
    ]

    survey.score_config = SurveyScoreConfig(
        enabled=True,
        categories=[
            ScoreCategory(id="engagement", name="Engagement"),
            ScoreCategory(id="enablement", name="Enablement"),
        ],
        score_ranges=[
            ScoreBand(id="low", min=0, max=40, label="Low"),
            ScoreBand(id="mid", min=41, max=74, label="Mid"),
            ScoreBand(id="high", min=75, max=100, label="High"),
        ],
    )

    return survey
