"""Scope chain for the Nox language. Each Environment maps names to runtime values and links to its enclosing
Environment; nested blocks shadow outer names, and functions capture the Environment they were declared in.
"""

from noxlang.lang.error import NoxRuntimeError


class Environment:
    RECEIVER = "this"  # reserved name the receiver is bound under in method frames

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name (a Token) in this scope. Raises NoxRuntimeError if it is already bound in this exact scope."""
        if name.lexeme in self.values:
            raise NoxRuntimeError(name, f"Variable '{name.lexeme}' is already defined in this scope.")
        self.values[name.lexeme] = value

    def assign(self, name, value):
        """Rebinds the nearest existing binding of name, searching outwards from this scope."""
        environment = self.resolve(name)
        environment.values[name.lexeme] = value

    def get(self, name):
        environment = self.resolve(name)
        return environment.values[name.lexeme]

    def bind(self, instance):
        """Installs instance as the receiver of this scope."""
        self.values[Environment.RECEIVER] = instance

    def find(self, lexeme):
        """Returns the innermost Environment in the chain binding lexeme, or None."""
        environment = self
        while environment is not None:
            if lexeme in environment.values:
                return environment
            environment = environment.enclosing
        return None

    def resolve(self, name):
        environment = self.find(name.lexeme)
        if environment is None:
            raise NoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
        return environment

    def __repr__(self):
        depth = 0
        environment = self.enclosing
        while environment is not None:
            depth += 1
            environment = environment.enclosing
        return f"Environment(names={sorted(self.values)}, depth={depth})"
