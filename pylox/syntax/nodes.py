"""Abstract syntax tree for Lox.

Nodes are plain immutable records: they hold no traversal logic. Passes over the tree (Resolver, Interpreter,
AstPrinter) dispatch on the node type themselves, so adding a pass never touches this module.

Nodes compare and hash by identity (eq=False). The Resolver keys binding distances by node, and two syntactically
identical expressions at different places in the source must stay distinct keys.
"""

from dataclasses import dataclass
from typing import List, Optional

from pylox.syntax.tokens import Token


class Expr:
    """Superclass of all expression nodes."""


class Stmt:
    """Superclass of all statement nodes."""


# expressions

@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: object


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    """Short-circuiting 'and'/'or'."""
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used to locate runtime errors
    arguments: List[Expr]


@dataclass(frozen=True, eq=False)
class Get(Expr):
    obj: Expr
    name: Token


@dataclass(frozen=True, eq=False)
class Set(Expr):
    obj: Expr
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class This(Expr):
    keyword: Token


@dataclass(frozen=True, eq=False)
class ListLiteral(Expr):
    bracket: Token  # opening bracket
    elements: List[Expr]


# statements

@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True, eq=False)
class Break(Stmt):
    keyword: Token


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None


@dataclass(frozen=True, eq=False)
class Class(Stmt):
    name: Token
    methods: List[Function]
