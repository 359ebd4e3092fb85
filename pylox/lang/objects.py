"""Runtime object model: functions and closures, classes and their instances."""

from abc import ABC, abstractmethod

from pylox.lang.completion import Flow
from pylox.lang.environment import Environment
from pylox.lang.error import LoxRuntimeError


def stringify(value):
    """Text form of a Lox value, as shown by print and the shell. Integral numbers lose their trailing '.0'."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


class LoxCallable(ABC):
    """Anything that can appear on the left of a call expression."""

    @abstractmethod
    def arity(self):
        """Number of arguments a call must pass."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Calls self with arguments (already evaluated and arity-checked) and returns the result."""


class LoxFunction(LoxCallable):
    """A function declaration paired with the Environment it was declared in. Immutable once built."""

    def __init__(self, declaration, closure, is_initializer=False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        completion = interpreter.execute_block(self.declaration.body, environment)

        # initializers always return the instance, however they exit
        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if completion.flow is Flow.RETURN:
            return completion.value
        return None

    def bind(self, instance):
        """Returns a copy of self whose closure defines 'this' as instance."""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def __str__(self):
        return f"<fn {self.declaration.name.lexeme}>"


class LoxClass(LoxCallable):
    """Calling a class creates an instance and runs its initializer, if any, on it."""

    def __init__(self, name, methods):
        self.name = name
        self.methods = methods

    def find_method(self, name):
        return self.methods.get(name)

    def arity(self):
        initializer = self.find_method("init")
        return initializer.arity() if initializer else 0

    def call(self, interpreter, arguments):
        instance = LoxInstance(self)

        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)

        return instance

    def __str__(self):
        return self.name


class LoxInstance:
    """Fields live on the instance and are created on first assignment; methods live on the class."""

    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, name):
        """Fields shadow methods."""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name, value):
        self.fields[name.lexeme] = value

    def __str__(self):
        return f"{self.klass.name} instance"
