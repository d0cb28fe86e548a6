from dataclasses import dataclass
from typing import List, Any, Optional, Union

from .tokens import Token, TokenType


# --- Base Classes for AST Nodes ---
#
# The node set is closed: consumers dispatch with a `match` over the concrete
# classes below and treat anything else as a programming error. Nodes hold
# their children directly and never point back at a parent.

class Expr:
    """Base class for expression nodes."""


class Stmt:
    """Base class for statement nodes."""


# --- Concrete Expression Nodes ---

@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Grouping(Expr):
    expression: Expr


@dataclass
class Literal(Expr):
    value: Any


@dataclass
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass
class Variable(Expr):
    name: Token


@dataclass
class Assign(Expr):
    name: Token
    value: Expr


@dataclass
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


# --- Concrete Statement Nodes ---

@dataclass
class Expression(Stmt):
    expression: Expr


@dataclass
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]
    keyword: Optional[Token] = None

    @property
    def is_const(self) -> bool:
        return self.keyword is not None and self.keyword.token_type == TokenType.CONST


@dataclass
class Block(Stmt):
    statements: List[Stmt]


AnyExpr = Union[Binary, Grouping, Literal, Unary, Variable, Assign, Logical]
AnyStmt = Union[Expression, If, Var, Block]


def left_spine(expr: Union[Binary, Logical]) -> List[Union[Binary, Logical]]:
    """
    Returns `expr` followed by each left operand of the same node type, outermost first.
    The last entry's `left` is the first operand of the whole chain.
    """
    spine = [expr]
    while type(spine[-1].left) is type(expr):
        spine.append(spine[-1].left)
    return spine
