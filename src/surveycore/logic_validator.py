"""
Logic Validator: authoring-time checks over questions and their rules.

Checks:
    - MISSING_TARGET (error): a non-end rule points at no existing question
    - BACKWARDS_JUMP (warning): a rule jumps to an earlier (or the same)
      question, which can loop
    - CONFLICTING_RULES (warning): rules on one question share a condition
      but jump to different questions
    - UNREACHABLE_QUESTION (warning): a question the flow graph cannot reach

Issues are ordered by question order, then rule order within a question.

KNOWN LIMITATION:
    Reachability is a heuristic over the flow graph. Every question has a
    fallthrough edge from its predecessor, so a question hidden behind an
    unconditional skip rule is still considered reachable. This check is
    not exhaustive reachability analysis.

IMPORTANT: This is a read-only pass. It does not modify questions.
"""

from typing import Dict, List, Optional, Sequence

from surveycore.graph import LogicGraph, build_logic_graph
from surveycore.issues import IssueCode, Severity, ValidationIssue
from surveycore.model import LogicRule, Question, RuleAction

UNCONDITIONAL = "__unconditional__"


def _check_rule_target(question: Question, rule: LogicRule, graph: LogicGraph) -> List[ValidationIssue]:
    if rule.action == RuleAction.END:
        return []

    target = rule.target_question_id
    if not target or target not in graph.nodes:
        return [ValidationIssue(
            code=IssueCode.MISSING_TARGET,
            severity=Severity.ERROR,
            message=(
                f'Rule targets non-existent question "{target}"' if target
                else f'Rule "{rule.id}" has no target question'
            ),
            question_id=question.id,
            rule_id=rule.id,
            details={"targetId": target},
        )]

    if graph.order[target] <= graph.order[question.id]:
        return [ValidationIssue(
            code=IssueCode.BACKWARDS_JUMP,
            severity=Severity.WARNING,
            message=(
                f'Rule creates a backwards jump from "{question.id}" to "{target}" '
                f'which could create a loop'
            ),
            question_id=question.id,
            rule_id=rule.id,
            details={"targetId": target},
        )]

    return []


def _check_conflicting_rules(question: Question) -> List[ValidationIssue]:
    if len(question.logic_rules) < 2:
        return []

    by_condition: Dict[str, List[LogicRule]] = {}
    for rule in question.logic_rules:
        key = rule.condition if rule.condition and rule.condition.strip() else UNCONDITIONAL
        by_condition.setdefault(key, []).append(rule)

    issues = []
    for condition, rules in by_condition.items():
        targets: List[str] = []
        for rule in rules:
            if rule.action == RuleAction.END or not rule.target_question_id:
                continue
            if rule.target_question_id not in targets:
                targets.append(rule.target_question_id)
        if len(targets) > 1:
            issues.append(ValidationIssue(
                code=IssueCode.CONFLICTING_RULES,
                severity=Severity.WARNING,
                message=f'Multiple rules with same condition "{condition}" have different targets',
                question_id=question.id,
                rule_id=rules[0].id,
                details={
                    "condition": condition,
                    "targets": targets,
                    "ruleIds": [r.id for r in rules],
                },
            ))
    return issues


def _check_reachable(question: Question, graph: LogicGraph, reachable: set, incoming: dict) -> Optional[ValidationIssue]:
    if question.id == graph.entry_node:
        return None
    if question.id in reachable and incoming.get(question.id):
        return None
    text = question.text[:50] if question.text else question.id
    return ValidationIssue(
        code=IssueCode.UNREACHABLE_QUESTION,
        severity=Severity.WARNING,
        message=f'Question "{text}" may never be shown due to logic rules',
        question_id=question.id,
        details={"questionOrder": graph.order.get(question.id)},
    )


def validate_survey_logic(questions: Sequence[Question], graph: Optional[LogicGraph] = None) -> List[ValidationIssue]:
    """
    Run every logic check.

    Args:
        questions: Questions in flow order, rules attached
        graph: Prebuilt graph for these questions (built when omitted)

    Returns:
        List of ValidationIssue; empty for an empty survey
    """
    if not questions:
        return []

    if graph is None:
        graph = build_logic_graph(questions)
    reachable = graph.reachable_from_entry()
    incoming = graph.incoming()

    issues: List[ValidationIssue] = []
    for question in questions:
        for rule in question.logic_rules:
            issues.extend(_check_rule_target(question, rule, graph))
        issues.extend(_check_conflicting_rules(question))
        unreachable = _check_reachable(question, graph, reachable, incoming)
        if unreachable:
            issues.append(unreachable)

    return issues
