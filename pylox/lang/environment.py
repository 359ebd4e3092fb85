"""Variable scopes. Environments form a chain towards the globals: every Environment holds a reference (never a copy)
to its enclosing one, so a closure that keeps an Environment alive sees every later mutation made through it.
"""

from pylox.lang.error import LoxRuntimeError


class Environment:

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this scope, overwriting any previous binding. Redefinition is legal at global scope."""
        self.values[name] = value

    def get(self, name):
        """Looks name (a Token) up dynamically through the chain. Only used for globals: locals are resolved
        statically and read with get_at.
        """
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name, value):
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return
        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance):
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance, name):
        """name is a str here: the Resolver has already proven the binding exists."""
        return self.ancestor(distance).values[name]

    def assign_at(self, distance, name, value):
        self.ancestor(distance).values[name.lexeme] = value

    def __repr__(self):
        return f"Environment({self.values}, enclosing={self.enclosing is not None})"
