"""
Logic Graph Builder.

Turns an ordered list of questions and their logic rules into a directed
flow graph:

    - every question falls through to the next one in order
    - skip/show rules add a jump edge to their target
    - end rules add a terminal edge (target None)

The graph records what the rules CAN do, not what they will do for a
given respondent. Conditions are not evaluated here.

IMPORTANT: This module does NOT validate targets. A jump edge may point
at an id that is not a node; logic_validator reports that.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set

from surveycore.model import Question, RuleAction


class EdgeType(str, Enum):
    SKIP = "skip"
    END = "end"
    FALLTHROUGH = "fallthrough"


@dataclass(frozen=True)
class FlowEdge:
    """
    Directed edge between two questions.

    Properties:
        source: Question the edge leaves
        target: Question the edge enters; None for END edges
        type: EdgeType
        rule_id: Rule that created the edge; None for fallthrough edges
    """

    source: str
    target: Optional[str]
    type: EdgeType
    rule_id: Optional[str] = None


@dataclass
class LogicGraph:
    """Flow graph of a survey."""

    nodes: Set[str] = field(default_factory=set)
    edges: List[FlowEdge] = field(default_factory=list)
    entry_node: Optional[str] = None
    exit_nodes: Set[str] = field(default_factory=set)
    order: Dict[str, int] = field(default_factory=dict)

    def outgoing(self) -> Dict[str, List[str]]:
        """Adjacency list over edges with a target."""
        adjacency: Dict[str, List[str]] = defaultdict(list)
        for edge in self.edges:
            if edge.target is not None:
                adjacency[edge.source].append(edge.target)
        return adjacency

    def incoming(self) -> Dict[str, List[str]]:
        adjacency: Dict[str, List[str]] = defaultdict(list)
        for edge in self.edges:
            if edge.target is not None:
                adjacency[edge.target].append(edge.source)
        return adjacency

    def reachable_from_entry(self) -> Set[str]:
        """Nodes reachable from the entry node over any edge, ignoring conditions."""
        if self.entry_node is None:
            return set()
        outgoing = self.outgoing()
        reachable: Set[str] = set()
        stack = [self.entry_node]
        while stack:
            node = stack.pop()
            if node in reachable or node not in self.nodes:
                continue
            reachable.add(node)
            for neighbor in outgoing.get(node, []):
                if neighbor not in reachable:
                    stack.append(neighbor)
        return reachable


def build_logic_graph(questions: Sequence[Question]) -> LogicGraph:
    """
    Build the flow graph for questions in flow order.

    Edge order is deterministic: for each question, its rule edges in rule
    order, then its fallthrough edge.
    """
    graph = LogicGraph()
    if not questions:
        return graph

    for index, question in enumerate(questions):
        graph.nodes.add(question.id)
        graph.order.setdefault(question.id, index)

    for index, question in enumerate(questions):
        for rule in question.logic_rules:
            if rule.action == RuleAction.END:
                graph.edges.append(FlowEdge(question.id, None, EdgeType.END, rule.id))
                graph.exit_nodes.add(question.id)
            elif rule.target_question_id:
                graph.edges.append(FlowEdge(question.id, rule.target_question_id, EdgeType.SKIP, rule.id))

        if index + 1 < len(questions):
            graph.edges.append(FlowEdge(question.id, questions[index + 1].id, EdgeType.FALLTHROUGH))

    graph.entry_node = questions[0].id
    graph.exit_nodes.add(questions[-1].id)
    return graph
