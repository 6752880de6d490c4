"""
Core Survey Model Objects

Defines the data structures the logic and scoring core operates on.

These are pure data classes representing:
    - Questions (nodes of the survey flow)
    - Logic rules (conditional branching attached to a question)
    - Scoring configuration (categories and score bands)
    - Results (scores and logic outcomes)
    - Surveys (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about UI, storage or export
        - Are immutable once a response references them
        - Are fully serializable
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


class QuestionType(str, Enum):
    """
    Question type tags understood by the builder and the player.

    Only a handful of these are scorable (see scoring.TYPE_FAMILIES).
    Everything else contributes nothing to a score, whatever its
    ``scorable`` flag says.
    """

    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    NUMBER = "number"
    MULTIPLE_CHOICE = "multiple_choice"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"
    IMAGE_CHOICE = "image_choice"
    YES_NO = "yes_no"
    RATING = "rating"
    NPS = "nps"
    LIKERT = "likert"
    OPINION_SCALE = "opinion_scale"
    SLIDER = "slider"
    EMOJI_RATING = "emoji_rating"
    MATRIX = "matrix"
    RANKING = "ranking"
    CONSTANT_SUM = "constant_sum"
    CALCULATION = "calculation"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    FILE_UPLOAD = "file_upload"
    SIGNATURE = "signature"
    VIDEO = "video"
    AUDIO_CAPTURE = "audio_capture"
    SECTION = "section"
    STATEMENT = "statement"
    LEGAL = "legal"
    HIDDEN = "hidden"


class RuleAction(str, Enum):
    """What happens when a rule's condition matches."""

    SKIP = "skip"
    SHOW = "show"
    END = "end"


class LogicVersion(str, Enum):
    """
    Condition grammar versions.

    A survey stores the version it was published with. Versions are
    frozen: a new grammar is a new member, never an edit of an old one.
    """

    V2 = "logicEngineV2"
    V3 = "logicEngineV3"


# Answer values as supplied by the player runtime
AnswerValue = Union[str, int, float, bool, List[str], None]
Answers = Dict[str, AnswerValue]


@dataclass
class LogicRule:
    """
    A conditional branch attached to a source question.

    Properties:
        id:
            Rule identifier, unique within its question

        condition:
            Condition DSL string, e.g. ``answer("q1") == "Yes"``
            An empty condition never fires.

        action:
            RuleAction (skip, show or end)

        target_question_id:
            Question to jump to. Required unless action is END.
    """

    id: str
    condition: str = ""
    action: RuleAction = RuleAction.SKIP
    target_question_id: Optional[str] = None


@dataclass
class Question:
    """
    A single survey question as authored in the builder.

    Properties:
        id:
            Unique identifier (stable across edits)

        type:
            QuestionType tag, or the raw string for types this core
            does not know about

        order:
            Position in the survey (the list position is authoritative
            for flow; ``order`` is kept for display and serialization)

        scorable / score_weight / scoring_category / option_scores:
            Scoring metadata. Only read when the survey has scoring enabled.

        rating_scale / likert_points / min / max:
            Scale bounds for numeric question families

        logic_rules:
            Ordered list of LogicRule; first match wins at runtime
    """

    id: str
    type: Union[QuestionType, str] = QuestionType.TEXT
    text: str = ""
    order: int = 0
    options: List[str] = field(default_factory=list)
    scorable: bool = False
    score_weight: float = 1
    scoring_category: Optional[str] = None
    option_scores: Dict[str, float] = field(default_factory=dict)
    rating_scale: Optional[int] = None
    likert_points: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None
    logic_rules: List[LogicRule] = field(default_factory=list)

    @property
    def type_tag(self) -> str:
        """Type as a plain string, whether or not it is a known QuestionType."""
        if isinstance(self.type, QuestionType):
            return self.type.value
        return str(self.type)


@dataclass(frozen=True)
class ScoreCategory:
    """A named grouping of scorable questions."""

    id: str
    name: str = ""


@dataclass(frozen=True)
class ScoreBand:
    """
    A labeled sub-range of the 0-100 percentage scale.

    Properties:
        id: Band identifier
        min / max: Inclusive bounds
        label: Display label (e.g. "High")
        category: Category id for per-category bands, None for overall bands
    """

    id: str
    min: float
    max: float
    label: str = ""
    category: Optional[str] = None
    description: Optional[str] = None


@dataclass
class SurveyScoreConfig:
    """
    Scoring configuration owned by a survey.

    INVARIANTS (checked by scoring_validator, not enforced here):
        - Category ids are unique
        - Bands of one group partition [0, 100] without gaps or overlaps
    """

    enabled: bool = False
    categories: List[ScoreCategory] = field(default_factory=list)
    score_ranges: List[ScoreBand] = field(default_factory=list)

    def get_category(self, category_id: str) -> Optional[ScoreCategory]:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None


@dataclass(frozen=True)
class QuestionScore:
    """Contribution of one question to the survey score."""

    score: float = 0
    max_score: float = 0
    category: Optional[str] = None


@dataclass(frozen=True)
class CategoryScore:
    score: float
    max_score: float
    label: str


@dataclass(frozen=True)
class ScoringResult:
    """
    Aggregated score for one response.

    percentage is 0 when max_score is 0.
    by_category only holds categories that at least one question named.
    """

    total_score: float
    max_score: float
    percentage: float
    by_category: Dict[str, CategoryScore] = field(default_factory=dict)


@dataclass(frozen=True)
class SurveyResults:
    """Results payload handed to the results screen."""

    scoring: ScoringResult
    band: Optional[ScoreBand] = None
    category_bands: Dict[str, Optional[ScoreBand]] = field(default_factory=dict)


@dataclass(frozen=True)
class LogicResult:
    """
    Outcome of evaluating a question's rules against the answers.

    All fields None means no rule matched and the player falls through
    to the next question.
    """

    next_question_id: Optional[str] = None
    action: Optional[RuleAction] = None
    matched_rule: Optional[LogicRule] = None

    @property
    def matched(self) -> bool:
        return self.matched_rule is not None


@dataclass
class Survey:
    """
    Root container for one survey as published.

    Properties:
        id: Survey identifier
        questions: Ordered questions; list order is flow order
        score_config: Optional scoring configuration
        logic_version: Condition grammar the survey was published with
        scoring_engine_id: Scoring engine the survey was published with
        tags: Free-form tags (used for results mode resolution)
    """

    id: str
    questions: List[Question] = field(default_factory=list)
    score_config: Optional[SurveyScoreConfig] = None
    logic_version: LogicVersion = LogicVersion.V2
    scoring_engine_id: str = "engagement_v1"
    tags: List[str] = field(default_factory=list)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Args:
            question_id: Question identifier

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None
