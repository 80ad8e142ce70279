"""Abstract syntax tree for the Nox language. Two closed sets of node variants: expressions (Expr subclasses) and
statements (Stmt subclasses). Nodes are frozen dataclasses holding the exact tokens they were parsed from; consumers
(Interpreter, AstPrinter) dispatch on them with `match`.

Sequences inside nodes are tuples so that trees stay immutable once built.
"""

from dataclasses import dataclass
from typing import Optional

from noxlang.tokens import Token


class Expr:
    """Superclass for all expression nodes."""


class Stmt:
    """Superclass for all statement nodes."""


# Expr variants

@dataclass(frozen=True)
class Literal(Expr):
    value: object  # float, str, bool or None


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used for error positions
    arguments: tuple


@dataclass(frozen=True)
class Get(Expr):
    object: Expr
    name: Token


@dataclass(frozen=True)
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@dataclass(frozen=True)
class This(Expr):
    keyword: Token


# Stmt variants

@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class Block(Stmt):
    statements: tuple


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: tuple  # of IDENTIFIER Tokens
    body: tuple    # of Stmts


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None


@dataclass(frozen=True)
class Class(Stmt):
    name: Token
    parents: tuple  # of Variable exprs, in declared order
    fields: tuple   # of Var stmts
    methods: tuple  # of Function stmts
