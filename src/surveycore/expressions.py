"""
Condition AST

Logic rule conditions are authored as strings but evaluated as
Abstract Syntax Trees. The grammar is deliberately flat:

    condition   := and_group ( "||" and_group )*
    and_group   := atom ( "&&" atom )*
    atom        := answer("<id>") <op> <value>
                 | contains("<id>", "<value>")

There are no parentheses. OR binds loosest, AND binds tighter, and
evaluation is left to right. The shape of the tree (OrGroup of AndGroups
of atoms) makes that precedence structural rather than a parsing accident.

ARCHITECTURAL RULE:
    These nodes are structure only.
    Parsing and evaluation live in the conditions module.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


class Expression(ABC):
    """
    Base class for all condition AST nodes.

    This class is structure only.
    """
    pass


class ComparisonOperator(Enum):
    """Comparison operators allowed in an answer() atom."""

    EQUALS = "=="
    NOT_EQUALS = "!="
    LESS_THAN = "<"
    LESS_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_EQUAL = ">="


@dataclass(frozen=True)
class Comparison(Expression):
    """
    ``answer("q1") >= 4``

    Properties:
        question_id: Question whose answer is compared
        operator: ComparisonOperator
        value: Coerced literal (number when it parses cleanly, else string)
    """

    question_id: str
    operator: ComparisonOperator
    value: Union[int, float, str]


@dataclass(frozen=True)
class Contains(Expression):
    """
    ``contains("q3", "Email")``

    True when the answer (a list, or a comma-joined string) includes value.
    """

    question_id: str
    value: str


@dataclass(frozen=True)
class Invalid(Expression):
    """
    Text that did not parse as an atom.

    Kept in the tree so that the rest of the condition can still be
    evaluated; always evaluates false.
    """

    source: str
    reason: str = ""


Atom = Union[Comparison, Contains, Invalid]


@dataclass(frozen=True)
class AndGroup(Expression):
    """Conjunction of atoms. True when every term is true; empty is false."""

    terms: Tuple[Atom, ...] = ()


@dataclass(frozen=True)
class OrGroup(Expression):
    """Disjunction of AND groups. Root of every parsed condition; empty is false."""

    groups: Tuple[AndGroup, ...] = ()
