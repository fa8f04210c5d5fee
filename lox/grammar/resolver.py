"""Static resolution pass for lox.

Walks the tree once before evaluation and, for every local variable reference, tells the Interpreter how many
enclosing scopes separate the reference from its declaration. References that match no scope are left out of the
table and resolve as globals at runtime. Also enforces the lexical rules the parser can't: no reading a local in its
own initializer, no same-scope redeclaration, and `return`/`this`/`super` only where they make sense.

Errors are reported and resolution continues, so one pass can report several of them.
"""

from enum import Enum, auto
from functools import singledispatchmethod

from lox.grammar import ast


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    INITIALIZER = auto()
    METHOD = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:
    """scopes is a stack of {name: defined} dicts, innermost last. The global scope is never pushed."""

    def __init__(self, interpreter, error_handler):
        self.interpreter = interpreter
        self.error_handler = error_handler

        self.scopes = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, statements):
        for statement in statements:
            self._resolve(statement)

    # ==================== SCOPES ====================

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error_handler.error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr, name):
        for depth, scope in enumerate(reversed(self.scopes)):
            if name in scope:
                self.interpreter.resolve(expr, depth)
                return
        # not found: global

    def resolve_function(self, function, function_type):
        enclosing_function = self.current_function
        self.current_function = function_type

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve(function.body)
        self.end_scope()

        self.current_function = enclosing_function

    # ==================== STATEMENTS ====================

    @singledispatchmethod
    def _resolve(self, node):
        raise TypeError(f"cannot resolve {type(node).__name__}")

    @_resolve.register(ast.Block)
    def _(self, stmt):
        self.begin_scope()
        self.resolve(stmt.statements)
        self.end_scope()

    @_resolve.register(ast.Class)
    def _(self, stmt):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self.error_handler.error(stmt.superclass.name, "A class can't inherit from itself.")
            else:
                self.current_class = ClassType.SUBCLASS
                self._resolve(stmt.superclass)

            self.begin_scope()
            self.scopes[-1]["super"] = True

        self.begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            function_type = FunctionType.INITIALIZER if method.name.lexeme == "init" else FunctionType.METHOD
            self.resolve_function(method, function_type)

        self.end_scope()
        if stmt.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class

    @_resolve.register(ast.Expression)
    @_resolve.register(ast.Print)
    def _(self, stmt):
        self._resolve(stmt.expression)

    @_resolve.register(ast.Function)
    def _(self, stmt):
        # defined eagerly so the function can refer to itself recursively
        self.declare(stmt.name)
        self.define(stmt.name)
        self.resolve_function(stmt, FunctionType.FUNCTION)

    @_resolve.register(ast.If)
    def _(self, stmt):
        self._resolve(stmt.condition)
        self._resolve(stmt.then_branch)
        if stmt.else_branch is not None:
            self._resolve(stmt.else_branch)

    @_resolve.register(ast.Return)
    def _(self, stmt):
        if self.current_function is FunctionType.NONE:
            self.error_handler.error(stmt.keyword, "Can't return from top-level code.")

        if stmt.value is not None:
            if self.current_function is FunctionType.INITIALIZER:
                self.error_handler.error(stmt.keyword, "Can't return a value from an initializer.")
            self._resolve(stmt.value)

    @_resolve.register(ast.Var)
    def _(self, stmt):
        self.declare(stmt.name)
        if stmt.initializer is not None:
            self._resolve(stmt.initializer)
        self.define(stmt.name)

    @_resolve.register(ast.While)
    def _(self, stmt):
        self._resolve(stmt.condition)
        self._resolve(stmt.body)

    # ==================== EXPRESSIONS ====================

    @_resolve.register(ast.Assign)
    def _(self, expr):
        self._resolve(expr.value)
        self.resolve_local(expr, expr.name.lexeme)

    @_resolve.register(ast.Binary)
    @_resolve.register(ast.Logical)
    def _(self, expr):
        self._resolve(expr.left)
        self._resolve(expr.right)

    @_resolve.register(ast.Call)
    def _(self, expr):
        self._resolve(expr.callee)
        for argument in expr.arguments:
            self._resolve(argument)

    @_resolve.register(ast.Get)
    def _(self, expr):
        self._resolve(expr.object)

    @_resolve.register(ast.Grouping)
    def _(self, expr):
        self._resolve(expr.expression)

    @_resolve.register(ast.Literal)
    def _(self, expr):
        pass

    @_resolve.register(ast.Set)
    def _(self, expr):
        self._resolve(expr.value)
        self._resolve(expr.object)

    @_resolve.register(ast.Super)
    def _(self, expr):
        if self.current_class is ClassType.NONE:
            self.error_handler.error(expr.keyword, "Can't use 'super' outside of a class.")
        elif self.current_class is not ClassType.SUBCLASS:
            self.error_handler.error(expr.keyword, "Can't use 'super' in a class with no superclass.")
        self.resolve_local(expr, "super")

    @_resolve.register(ast.This)
    def _(self, expr):
        if self.current_class is ClassType.NONE:
            self.error_handler.error(expr.keyword, "Can't use 'this' outside of a class.")
            return
        self.resolve_local(expr, "this")

    @_resolve.register(ast.Unary)
    def _(self, expr):
        self._resolve(expr.right)

    @_resolve.register(ast.Variable)
    def _(self, expr):
        if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
            self.error_handler.error(expr.name, "Can't read local variable in its own initializer.")
        self.resolve_local(expr, expr.name.lexeme)
