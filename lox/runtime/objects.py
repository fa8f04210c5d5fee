"""Runtime values and the object model of lox.

Values are represented by Python objects: nil is None, booleans are bool, numbers are float, strings are str, and
functions/classes are LoxCallables. Instances are LoxInstances.
"""

from abc import ABC, abstractmethod

from lox.runtime.environment import Environment
from lox.lang.error import UndefinedPropertyError


class ReturnSignal(Exception):
    """Non-local exit of a `return` statement. Not an error: always caught at the enclosing call boundary."""

    def __init__(self, value):
        super().__init__()
        self.value = value


def is_truthy(value):
    """nil and false are falsey, everything else (including 0 and "") is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a, b):
    """Structural equality with no coercion between kinds. Callables and instances compare by identity."""
    if a is None or b is None:
        return a is b
    if type(a) is not type(b):
        return False
    if isinstance(a, (bool, float, str)):
        return a == b
    return a is b


def stringify(value):
    """Human readable rendering used by `print` and the interactive shell."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = str(value)
        return text[:-2] if text.endswith(".0") else text
    if isinstance(value, str):
        return f"\"{value}\""
    return str(value)


class LoxCallable(ABC):
    """Anything that can appear as the callee of a call expression."""

    @abstractmethod
    def arity(self):
        """Exact number of arguments call expects."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes the callable. arguments has already been checked against arity."""


class NativeFunction(LoxCallable):
    """Host-provided function, indistinguishable from a user function at call sites."""

    def __init__(self, name, arity, fn):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.fn(*arguments)

    def __str__(self):
        return f"<native fn {self.name}>"


class LoxFunction(LoxCallable):
    """User-defined function or method. closure is the environment active where it was declared."""

    def __init__(self, declaration, closure, is_initializer=False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def bind(self, instance):
        """Returns a copy of this method whose closure additionally defines `this` as instance."""
        env = Environment(self.closure)
        env.define("this", instance)
        return LoxFunction(self.declaration, env, self.is_initializer)

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        env = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            env.define(param.lexeme, argument)

        try:
            interpreter.execute_block(self.declaration.body, env)
        except ReturnSignal as signal:
            if self.is_initializer:
                return self.closure.get_at(0, "this")
            return signal.value

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        return None

    def __str__(self):
        return f"<fn {self.declaration.name.lexeme}>"


class LoxClass(LoxCallable):
    """Calling a class makes a new instance and runs its `init` method, if any, on it."""

    def __init__(self, name, superclass, methods):
        self.name = name
        self.superclass = superclass
        self.methods = methods  # name: LoxFunction

    def find_method(self, name):
        """Looks name up in this class, then up the superclass chain. Returns None if nowhere to be found."""
        klass = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self):
        initializer = self.find_method("init")
        return initializer.arity() if initializer is not None else 0

    def call(self, interpreter, arguments):
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self):
        return self.name


class LoxInstance:

    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, name):
        """Own fields shadow methods. Methods come back bound to this instance, a fresh closure on every access."""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise UndefinedPropertyError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name, value):
        self.fields[name.lexeme] = value

    def __str__(self):
        return f"{self.klass.name} instance"
