"""Text renderings of the lox syntax tree, useful for debugging the parser (see `lox --ast`).

- to_lisp: fully parenthesized prefix form, e.g. `-123 * (45.67)` becomes `(* (- 123) (group 45.67))`
- to_rpn: reverse Polish notation for expressions, e.g. `(1 + 2) * (4 - 3)` becomes `1 2 + 4 3 - *`
"""

from functools import singledispatch

from lox.grammar import ast


def literal_text(value):
    """Renders a literal value the way it is written in source."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = str(value)
        return text[:-2] if text.endswith(".0") else text
    return f"\"{value}\""


def parenthesize(name, *parts):
    rendered = [part if isinstance(part, str) else to_lisp(part) for part in parts]
    return "(" + " ".join([name] + rendered) + ")"


@singledispatch
def to_lisp(node):
    raise TypeError(f"cannot print {type(node).__name__}")


@to_lisp.register(ast.Assign)
def _(expr):
    return parenthesize("=", expr.name.lexeme, expr.value)


@to_lisp.register(ast.Binary)
@to_lisp.register(ast.Logical)
def _(expr):
    return parenthesize(expr.operator.lexeme, expr.left, expr.right)


@to_lisp.register(ast.Call)
def _(expr):
    return parenthesize("call", expr.callee, *expr.arguments)


@to_lisp.register(ast.Get)
def _(expr):
    return parenthesize(".", expr.object, expr.name.lexeme)


@to_lisp.register(ast.Grouping)
def _(expr):
    return parenthesize("group", expr.expression)


@to_lisp.register(ast.Literal)
def _(expr):
    return literal_text(expr.value)


@to_lisp.register(ast.Set)
def _(expr):
    return parenthesize("=", parenthesize(".", expr.object, expr.name.lexeme), expr.value)


@to_lisp.register(ast.Super)
def _(expr):
    return parenthesize("super", expr.method.lexeme)


@to_lisp.register(ast.This)
def _(expr):
    return "this"


@to_lisp.register(ast.Unary)
def _(expr):
    return parenthesize(expr.operator.lexeme, expr.right)


@to_lisp.register(ast.Variable)
def _(expr):
    return expr.name.lexeme


@to_lisp.register(ast.Expression)
def _(stmt):
    return parenthesize(";", stmt.expression)


@to_lisp.register(ast.Print)
def _(stmt):
    return parenthesize("print", stmt.expression)


@to_lisp.register(ast.Var)
def _(stmt):
    if stmt.initializer is None:
        return parenthesize("var", stmt.name.lexeme)
    return parenthesize("var", stmt.name.lexeme, "=", stmt.initializer)


@to_lisp.register(ast.Block)
def _(stmt):
    return parenthesize("block", *stmt.statements)


@to_lisp.register(ast.Function)
def _(stmt):
    params = "(" + " ".join(param.lexeme for param in stmt.params) + ")"
    return parenthesize("fun", stmt.name.lexeme, params, *stmt.body)


@to_lisp.register(ast.Class)
def _(stmt):
    parts = [stmt.name.lexeme]
    if stmt.superclass is not None:
        parts += ["<", stmt.superclass]
    return parenthesize("class", *parts, *stmt.methods)


@to_lisp.register(ast.If)
def _(stmt):
    if stmt.else_branch is None:
        return parenthesize("if", stmt.condition, stmt.then_branch)
    return parenthesize("if-else", stmt.condition, stmt.then_branch, stmt.else_branch)


@to_lisp.register(ast.Return)
def _(stmt):
    if stmt.value is None:
        return "(return)"
    return parenthesize("return", stmt.value)


@to_lisp.register(ast.While)
def _(stmt):
    return parenthesize("while", stmt.condition, stmt.body)


@singledispatch
def to_rpn(expr):
    raise TypeError(f"cannot print {type(expr).__name__} in RPN")


def _postfix(op, *operands):
    return " ".join([to_rpn(operand) for operand in operands] + [op])


@to_rpn.register(ast.Assign)
def _(expr):
    return f"{to_rpn(expr.value)} {expr.name.lexeme} ="


@to_rpn.register(ast.Binary)
@to_rpn.register(ast.Logical)
def _(expr):
    return _postfix(expr.operator.lexeme, expr.left, expr.right)


@to_rpn.register(ast.Call)
def _(expr):
    return _postfix(f"call/{len(expr.arguments)}", *expr.arguments, expr.callee)


@to_rpn.register(ast.Get)
def _(expr):
    return f"{to_rpn(expr.object)} .{expr.name.lexeme}"


@to_rpn.register(ast.Grouping)
def _(expr):
    return to_rpn(expr.expression)


@to_rpn.register(ast.Literal)
def _(expr):
    return literal_text(expr.value)


@to_rpn.register(ast.Set)
def _(expr):
    return f"{to_rpn(expr.value)} {to_rpn(expr.object)} .{expr.name.lexeme} ="


@to_rpn.register(ast.Super)
def _(expr):
    return f"super .{expr.method.lexeme}"


@to_rpn.register(ast.This)
def _(expr):
    return "this"


@to_rpn.register(ast.Unary)
def _(expr):
    # unary minus is written "neg" so it can't be confused with subtraction
    op = "neg" if expr.operator.lexeme == "-" else expr.operator.lexeme
    return f"{to_rpn(expr.right)} {op}"


@to_rpn.register(ast.Variable)
def _(expr):
    return expr.name.lexeme
