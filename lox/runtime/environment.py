"""Lexical environments for lox: a mutable name -> value mapping plus a link to the enclosing environment. The chain
is rooted at the global environment. Closures share environments by reference, so a mutation through one holder is
visible to every other.
"""

from lox.lang.error import UndefinedVariableError, UninitializedVariableError


class _Uninitialized:
    """Marker held by variables declared without an initializer. Distinct from nil; reading it is an error."""

    def __repr__(self):
        return "<uninitialized>"


UNINITIALIZED = _Uninitialized()


class Environment:

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this environment. Redefinition silently overwrites."""
        self.values[name] = value

    def get(self, name):
        """Looks up name (a Token) through the chain."""
        env = self
        while env is not None:
            if name.lexeme in env.values:
                return self._checked(env.values[name.lexeme], name)
            env = env.enclosing

        raise UndefinedVariableError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name, value):
        env = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing

        raise UndefinedVariableError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance):
        env = self
        for __ in range(distance):
            env = env.enclosing
        assert env is not None, "resolved distance exceeds environment depth"
        return env

    def get_at(self, distance, name):
        """Looks up name exactly distance hops out, as computed by the Resolver. name is a Token, or a plain str for
        the synthetic "this" and "super" bindings.
        """
        if isinstance(name, str):
            return self.ancestor(distance).values[name]
        return self._checked(self.ancestor(distance).values[name.lexeme], name)

    def assign_at(self, distance, name, value):
        self.ancestor(distance).values[name.lexeme] = value

    @staticmethod
    def _checked(value, name):
        if value is UNINITIALIZED:
            raise UninitializedVariableError(name, f"Uninitialized variable '{name.lexeme}'.")
        return value

    def __repr__(self):
        return f"Environment({self.values}, enclosing={self.enclosing!r})"
