"""
Condition Evaluator (logic engines V2 and V3).

Parses LogicRule condition strings into the AST defined in
``surveycore.expressions`` and evaluates them against a respondent's
answer map.

Two grammar versions exist:

    V2  one comparison atom, matched against the whole condition.
        Literals are NOT quote-stripped: ``answer("q1") == Yes`` matches
        the answer "Yes", ``answer("q1") == "Yes"`` does not.

    V3  OR-of-AND groups (``||`` / ``&&``), the ``contains()`` atom,
        and quote stripping on literals.

A survey stores the version it was published with. Both versions are
frozen; changing behavior means adding a version.

The evaluator never raises for respondent data or authored text.
Anything that does not parse evaluates false (the rule never fires).
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

from surveycore.config import DEFAULT_SETTINGS, Settings
from surveycore.errors import ConditionParseError, UnknownEngineError
from surveycore.expressions import (
    AndGroup,
    Comparison,
    ComparisonOperator,
    Contains,
    Expression,
    Invalid,
    OrGroup,
)
from surveycore.logging import get_logger
from surveycore.model import (
    AnswerValue,
    Answers,
    LogicResult,
    LogicRule,
    LogicVersion,
    Question,
    RuleAction,
)
from surveycore.values import answer_text, to_number

logger = get_logger(__name__)


# V2 matches the id greedily, V3 lazily. Both are kept as published.
_V2_COMPARISON_RE = re.compile(r'answer\("(.+)"\)\s*(==|!=|<=|>=|<|>)\s*(.+)')
_V3_COMPARISON_RE = re.compile(r'answer\("(.+?)"\)\s*(==|!=|<=|>=|<|>)\s*(.+)')
_V3_CONTAINS_RE = re.compile(r'contains\("(.+?)"\s*,\s*"(.+?)"\)')

_OPERATORS = {op.value: op for op in ComparisonOperator}


@dataclass(frozen=True)
class LogicEngine:
    """Registry entry shown in the builder's engine picker."""

    id: str
    name: str
    status: str
    notes: str = ""


LOGIC_ENGINES: List[LogicEngine] = [
    LogicEngine(
        id=LogicVersion.V2.value,
        name="Logic Engine V2",
        status="default",
        notes="Single comparison per rule. Runtime default.",
    ),
    LogicEngine(
        id=LogicVersion.V3.value,
        name="Logic Engine V3",
        status="available",
        notes="Adds && / || groups and contains() for multi-select answers.",
    ),
]

DEFAULT_LOGIC_VERSION = LogicVersion.V2

# Builder-side alias for V3
_ENGINE_ALIASES = {"LogicV3": LogicVersion.V3}


def resolve_logic_version(
    version: Union[LogicVersion, str, None],
    settings: Settings = DEFAULT_SETTINGS,
) -> LogicVersion:
    """
    Map a stored version flag onto a LogicVersion.

    None selects settings.default_logic_engine. Unknown flags raise
    UnknownEngineError: a survey must never be silently evaluated with a
    different grammar.
    """
    if version is None:
        version = settings.default_logic_engine
    if isinstance(version, LogicVersion):
        return version
    if version in _ENGINE_ALIASES:
        return _ENGINE_ALIASES[version]
    try:
        return LogicVersion(version)
    except ValueError:
        raise UnknownEngineError(f"Unknown logic engine: {version!r}")


# =============================================================================
# VALUE COERCION
# =============================================================================

def coerce_value(
    value: AnswerValue,
    strip_quotes: bool = False,
    numeric_bools: bool = False,
) -> Union[int, float, str]:
    """
    Normalize an answer or literal for comparison.

    Numbers stay numbers. Text that parses cleanly as a number becomes one.
    Anything else is trimmed text; missing values become "".
    With strip_quotes, one pair of surrounding quotes is removed.
    With numeric_bools (V2), True and False become 1 and 0; otherwise
    they are the text "true" and "false".
    """
    if isinstance(value, bool):
        if numeric_bools:
            return int(value)
    elif isinstance(value, (int, float)):
        return value
    text = answer_text(value).strip()
    number = to_number(text)
    if number is not None:
        return number
    if strip_quotes and len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


# =============================================================================
# PARSING
# =============================================================================

def _parse_comparison(text: str, pattern, strip_quotes: bool) -> Comparison:
    match = pattern.search(text)
    if not match:
        raise ConditionParseError(f"Not a comparison: {text!r}")
    question_id, op, raw_value = match.groups()
    return Comparison(
        question_id=question_id,
        operator=_OPERATORS[op],
        value=coerce_value(raw_value, strip_quotes=strip_quotes),
    )


def parse_atom(text: str, version: Union[LogicVersion, str, None] = None) -> Union[Comparison, Contains]:
    """
    Parse one atom.

    Raises:
        ConditionParseError: If the text is not an atom of the given grammar
    """
    version = resolve_logic_version(version)
    if version is LogicVersion.V2:
        return _parse_comparison(text, _V2_COMPARISON_RE, strip_quotes=False)

    contains = _V3_CONTAINS_RE.search(text)
    if contains:
        question_id, value = contains.groups()
        return Contains(question_id=question_id, value=value)
    return _parse_comparison(text, _V3_COMPARISON_RE, strip_quotes=True)


def _atom_or_invalid(text: str, version: LogicVersion, strict: bool):
    try:
        return parse_atom(text, version)
    except ConditionParseError as e:
        if strict:
            raise
        logger.debug("Unparsable condition atom %r: %s", text, e)
        return Invalid(source=text, reason=str(e))


def parse_condition(
    condition: Optional[str],
    version: Union[LogicVersion, str, None] = None,
    strict: bool = False,
    settings: Settings = DEFAULT_SETTINGS,
) -> OrGroup:
    """
    Parse a condition string into an OrGroup.

    Args:
        condition: Condition DSL text
        version: Grammar version (None uses the configured default)
        strict: Raise on unparsable atoms instead of keeping Invalid nodes
        settings: Supplies the default grammar when version is None

    Returns:
        OrGroup; empty when the condition is empty

    Raises:
        ConditionParseError: Only when strict is set
    """
    version = resolve_logic_version(version, settings)
    if not condition or not condition.strip():
        return OrGroup(())

    if version is LogicVersion.V2:
        atom = _atom_or_invalid(condition, version, strict)
        return OrGroup((AndGroup((atom,)),))

    groups = []
    for part in condition.split("||"):
        part = part.strip()
        if not part:
            continue
        terms = tuple(
            _atom_or_invalid(term.strip(), version, strict)
            for term in part.split("&&")
            if term.strip()
        )
        groups.append(AndGroup(terms))
    return OrGroup(tuple(groups))


# =============================================================================
# EVALUATION
# =============================================================================

def _compare(answer, operator: ComparisonOperator, target) -> bool:
    same_kind = isinstance(answer, str) == isinstance(target, str)
    if operator is ComparisonOperator.EQUALS:
        return same_kind and answer == target
    if operator is ComparisonOperator.NOT_EQUALS:
        return not (same_kind and answer == target)
    if not same_kind:
        # against a number, blank text orders as 0 and other text never orders
        answer = 0 if answer == "" else answer
        target = 0 if target == "" else target
        if isinstance(answer, str) or isinstance(target, str):
            return False
    if operator is ComparisonOperator.LESS_THAN:
        return answer < target
    if operator is ComparisonOperator.LESS_EQUAL:
        return answer <= target
    if operator is ComparisonOperator.GREATER_THAN:
        return answer > target
    if operator is ComparisonOperator.GREATER_EQUAL:
        return answer >= target
    return False


def _contains(answer: AnswerValue, target: str) -> bool:
    if isinstance(answer, (list, tuple)):
        return target in [answer_text(v) for v in answer]
    if isinstance(answer, str):
        return target in [v.strip() for v in answer.split(",")] or answer == target
    return False


def evaluate_expression(expr: Expression, answers: Answers, version: LogicVersion = DEFAULT_LOGIC_VERSION) -> bool:
    """Evaluate a parsed AST node against the answers."""
    if isinstance(expr, OrGroup):
        return any(evaluate_expression(g, answers, version) for g in expr.groups)

    if isinstance(expr, AndGroup):
        if not expr.terms:
            return False
        return all(evaluate_expression(t, answers, version) for t in expr.terms)

    if isinstance(expr, Comparison):
        v2 = version is LogicVersion.V2
        answer = coerce_value(answers.get(expr.question_id), strip_quotes=not v2, numeric_bools=v2)
        return _compare(answer, expr.operator, expr.value)

    if isinstance(expr, Contains):
        return _contains(answers.get(expr.question_id), expr.value)

    # Invalid and anything unknown fail closed
    return False


def evaluate_condition(
    condition: Optional[str],
    answers: Answers,
    version: Union[LogicVersion, str, None] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> bool:
    """
    Evaluate a condition string against the answers.

    Empty conditions are false. Unparsable atoms are false.
    """
    version = resolve_logic_version(version, settings)
    if not isinstance(condition, str):
        return False
    tree = parse_condition(condition, version)
    return evaluate_expression(tree, answers or {}, version)


def evaluate_logic_rules(
    rules: Optional[Sequence[LogicRule]],
    answers: Answers,
    version: Union[LogicVersion, str, None] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> LogicResult:
    """
    Walk rules in order and return the first match.

    Returns:
        LogicResult for the first rule whose condition is true,
        or an empty LogicResult when nothing matched
    """
    version = resolve_logic_version(version, settings)
    if not rules:
        return LogicResult()

    for rule in rules:
        try:
            action = RuleAction(rule.action)
        except ValueError:
            logger.debug("Rule %r has unknown action %r", rule.id, rule.action)
            continue
        if evaluate_condition(rule.condition, answers, version):
            return LogicResult(
                next_question_id=rule.target_question_id,
                action=action,
                matched_rule=rule,
            )
    return LogicResult()


def next_question(
    questions: Iterable[Question],
    current_question_id: str,
    answers: Answers,
    version: Union[LogicVersion, str, None] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> Optional[str]:
    """
    Pick the question the player shows after current_question_id.

    A matched END rule finishes the survey. A matched skip/show rule jumps
    to its target. Otherwise the next question in order is shown.

    Returns:
        Next question id, or None when the survey is finished
    """
    ordered = list(questions)
    index = next((i for i, q in enumerate(ordered) if q.id == current_question_id), None)
    if index is None:
        logger.debug("Current question %r not in survey", current_question_id)
        return None

    result = evaluate_logic_rules(ordered[index].logic_rules, answers, version, settings)
    if result.matched:
        if result.action is RuleAction.END:
            return None
        if result.next_question_id:
            return result.next_question_id

    if index + 1 < len(ordered):
        return ordered[index + 1].id
    return None
