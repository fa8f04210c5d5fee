"""Abstract syntax tree for lox. Two closed sets of node variants:

```
Expr ::= Assign | Binary | Call | Get | Grouping | Literal | Logical | Set | Super | This | Unary | Variable
Stmt ::= Expression | Print | Var | Block | Class | Function | If | Return | While
```

Nodes are built once by the Parser and never mutated. Every node gets a stable integer uid on construction; the
Resolver's distance table is keyed by it, so trees can be copied between phases without losing their bindings.
"""

from dataclasses import dataclass
from itertools import count
from typing import Any, List, Optional

from lox.grammar.tokens import Token


_uids = count()


class Node:
    """Base AST node."""

    def __post_init__(self):
        self.uid = next(_uids)


class Expr(Node):
    """Expression base class."""


class Stmt(Node):
    """Statement base class."""


# ==================== EXPRESSIONS ====================

@dataclass(eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, for error locations
    arguments: List[Expr]


@dataclass(eq=False)
class Get(Expr):
    object: Expr
    name: Token


@dataclass(eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(eq=False)
class Literal(Expr):
    value: Any


@dataclass(eq=False)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@dataclass(eq=False)
class Super(Expr):
    keyword: Token
    method: Token


@dataclass(eq=False)
class This(Expr):
    keyword: Token


@dataclass(eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(eq=False)
class Variable(Expr):
    name: Token


# ==================== STATEMENTS ====================

@dataclass(eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(eq=False)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(eq=False)
class Function(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass(eq=False)
class Class(Stmt):
    name: Token
    superclass: Optional[Variable]
    methods: List[Function]


@dataclass(eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]


@dataclass(eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt
