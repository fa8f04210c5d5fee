"""Tree-walking evaluator for lox.

Statements are executed against a chain of Environments rooted at `globals`, which is seeded with the native
functions. Local variable references use the distances computed by the Resolver (`locals`, keyed by node uid) to jump
straight to the right environment; anything the Resolver left out is looked up as a global.
"""

import sys
from functools import singledispatchmethod

from lox.grammar import ast
from lox.grammar.tokens import TokenType
from lox.lang.error import (ArityError, DivisionByZeroError, LoxRuntimeError, NotCallableError, OperandError,
                            UndefinedPropertyError)
from lox.runtime.environment import UNINITIALIZED, Environment
from lox.runtime.natives import define_natives
from lox.runtime.objects import (LoxCallable, LoxClass, LoxFunction, LoxInstance, ReturnSignal, is_equal, is_truthy,
                                 stringify)


def check_number_operand(operator, operand):
    if not isinstance(operand, float):
        raise OperandError(operator, "Operand must be a number.")


def check_number_operands(operator, left, right):
    if not isinstance(left, float) or not isinstance(right, float):
        raise OperandError(operator, "Operands must be numbers.")


class Interpreter:

    def __init__(self, error_handler, out=None):
        self.error_handler = error_handler
        self.out = out if out is not None else sys.stdout

        self.globals = Environment()
        define_natives(self.globals)
        self.environment = self.globals
        self.locals = {}  # node uid: resolved distance

    def interpret(self, statements):
        """Executes statements in order. Returns the value of the last one executed (the value of an expression
        statement, None for anything else), or None after reporting a runtime error, which aborts the rest.
        """
        result = None
        try:
            for statement in statements:
                result = self.execute(statement)
        except LoxRuntimeError as error:
            self.error_handler.runtime_error(error)
            return None
        return result

    def resolve(self, expr, depth):
        """Called by the Resolver for every local reference."""
        self.locals[expr.uid] = depth

    def execute(self, stmt):
        return self._execute(stmt)

    def evaluate(self, expr):
        return self._evaluate(expr)

    def execute_block(self, statements, env):
        """Runs statements in env, restoring the current environment however the block is left."""
        previous = self.environment
        try:
            self.environment = env
            for statement in statements:
                self.execute(statement)
        finally:
            self.environment = previous

    def look_up_variable(self, name, expr):
        distance = self.locals.get(expr.uid)
        if distance is not None:
            return self.environment.get_at(distance, name)
        return self.globals.get(name)

    # ==================== STATEMENTS ====================

    @singledispatchmethod
    def _execute(self, stmt):
        raise TypeError(f"cannot execute {type(stmt).__name__}")

    @_execute.register(ast.Block)
    def _(self, stmt):
        self.execute_block(stmt.statements, Environment(self.environment))

    @_execute.register(ast.Class)
    def _(self, stmt):
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise OperandError(stmt.superclass.name, "Superclass must be a class.")

        self.environment.define(stmt.name.lexeme, None)

        env = self.environment
        if superclass is not None:
            env = Environment(env)
            env.define("super", superclass)

        methods = {}
        for method in stmt.methods:
            methods[method.name.lexeme] = LoxFunction(method, env, is_initializer=method.name.lexeme == "init")

        self.environment.assign(stmt.name, LoxClass(stmt.name.lexeme, superclass, methods))

    @_execute.register(ast.Expression)
    def _(self, stmt):
        return self.evaluate(stmt.expression)

    @_execute.register(ast.Function)
    def _(self, stmt):
        self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))

    @_execute.register(ast.If)
    def _(self, stmt):
        if is_truthy(self.evaluate(stmt.condition)):
            self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            self.execute(stmt.else_branch)

    @_execute.register(ast.Print)
    def _(self, stmt):
        print(stringify(self.evaluate(stmt.expression)), file=self.out)

    @_execute.register(ast.Return)
    def _(self, stmt):
        value = None if stmt.value is None else self.evaluate(stmt.value)
        raise ReturnSignal(value)

    @_execute.register(ast.Var)
    def _(self, stmt):
        value = UNINITIALIZED if stmt.initializer is None else self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)

    @_execute.register(ast.While)
    def _(self, stmt):
        while is_truthy(self.evaluate(stmt.condition)):
            self.execute(stmt.body)

    # ==================== EXPRESSIONS ====================

    @singledispatchmethod
    def _evaluate(self, expr):
        raise TypeError(f"cannot evaluate {type(expr).__name__}")

    @_evaluate.register(ast.Assign)
    def _(self, expr):
        value = self.evaluate(expr.value)

        distance = self.locals.get(expr.uid)
        if distance is not None:
            self.environment.assign_at(distance, expr.name, value)
        else:
            self.globals.assign(expr.name, value)

        return value

    @_evaluate.register(ast.Binary)
    def _(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator
        op = operator.type

        if op is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if op is TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise OperandError(operator, "Operands must be two numbers or two strings.")

        check_number_operands(operator, left, right)

        if op is TokenType.MINUS:
            return left - right
        if op is TokenType.STAR:
            return left * right
        if op is TokenType.SLASH:
            if right == 0:
                raise DivisionByZeroError(operator, "Division by zero.")
            return left / right
        if op is TokenType.GREATER:
            return left > right
        if op is TokenType.GREATER_EQUAL:
            return left >= right
        if op is TokenType.LESS:
            return left < right
        if op is TokenType.LESS_EQUAL:
            return left <= right

        raise AssertionError(f"unknown binary operator {operator.lexeme}")

    @_evaluate.register(ast.Call)
    def _(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise NotCallableError(expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise ArityError(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        return callee.call(self, arguments)

    @_evaluate.register(ast.Get)
    def _(self, expr):
        obj = self.evaluate(expr.object)
        if isinstance(obj, LoxInstance):
            return obj.get(expr.name)
        raise OperandError(expr.name, "Only instances have properties.")

    @_evaluate.register(ast.Grouping)
    def _(self, expr):
        return self.evaluate(expr.expression)

    @_evaluate.register(ast.Literal)
    def _(self, expr):
        return expr.value

    @_evaluate.register(ast.Logical)
    def _(self, expr):
        left = self.evaluate(expr.left)

        if expr.operator.type is TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left

        return self.evaluate(expr.right)

    @_evaluate.register(ast.Set)
    def _(self, expr):
        obj = self.evaluate(expr.object)
        if not isinstance(obj, LoxInstance):
            raise OperandError(expr.name, "Only instances have fields.")

        value = self.evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    @_evaluate.register(ast.Super)
    def _(self, expr):
        distance = self.locals[expr.uid]
        superclass = self.environment.get_at(distance, "super")
        instance = self.environment.get_at(distance - 1, "this")  # always one scope inside "super"

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise UndefinedPropertyError(expr.method, f"Undefined property '{expr.method.lexeme}'.")
        return method.bind(instance)

    @_evaluate.register(ast.This)
    def _(self, expr):
        return self.look_up_variable(expr.keyword, expr)

    @_evaluate.register(ast.Unary)
    def _(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.MINUS:
            check_number_operand(expr.operator, right)
            return -right
        return not is_truthy(right)

    @_evaluate.register(ast.Variable)
    def _(self, expr):
        return self.look_up_variable(expr.name, expr)
