"""Built-in globals, implemented in Python rather than Lox:

- `clock()`: seconds since the epoch, as a number
- `List`: a native class of minimal mutable sequences. `List()` creates an empty one, and list literals (`[1, 2]`)
  evaluate to instances of it. Methods: `length()`, `get(i)`, `append(x)`, `set(i, x)`, `remove(i)`.

Natives don't know where they were called from, so they raise NativeErrors and the Interpreter locates them.
"""

import time

from pylox.lang.error import NativeError
from pylox.lang.objects import LoxCallable, LoxClass, LoxInstance, stringify


class NativeFunction(LoxCallable):
    """Wraps a Python function taking exactly `arity` positional arguments."""

    def __init__(self, name, arity, function):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.function(*arguments)

    def __str__(self):
        return "<native fn>"


def clock():
    return time.time()


class ListClass(LoxClass):
    """The `List` global. Has no Lox-level methods: its instances provide them natively."""

    def __init__(self):
        super().__init__("List", {})

    def arity(self):
        return 0

    def call(self, interpreter, arguments):
        return ListInstance(self)


class ListInstance(LoxInstance):

    def __init__(self, klass, elements=None):
        super().__init__(klass)
        self.elements = list(elements) if elements is not None else []
        self.methods = {
            "length": NativeFunction("length", 0, self.length),
            "get": NativeFunction("get", 1, self.get_item),
            "append": NativeFunction("append", 1, self.append),
            "set": NativeFunction("set", 2, self.set_item),
            "remove": NativeFunction("remove", 1, self.remove),
        }

    def get(self, name):
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        if name.lexeme in self.methods:
            return self.methods[name.lexeme]
        return super().get(name)

    def _index(self, index):
        """Converts a Lox number to a valid Python index into self.elements."""
        if not isinstance(index, float) or not index.is_integer():
            raise NativeError("List index must be an integer.")

        index = int(index)
        if not 0 <= index < len(self.elements):
            raise NativeError("List index out of range.")
        return index

    def length(self):
        return float(len(self.elements))

    def get_item(self, index):
        return self.elements[self._index(index)]

    def append(self, value):
        self.elements.append(value)

    def set_item(self, index, value):
        self.elements[self._index(index)] = value

    def remove(self, index):
        return self.elements.pop(self._index(index))

    def __str__(self):
        return "[" + ", ".join(stringify(element) for element in self.elements) + "]"


def define_globals(environment):
    """Defines every native in environment (normally an Interpreter's globals)."""
    environment.define("clock", NativeFunction("clock", 0, clock))
    environment.define("List", ListClass())
