"""How a statement finished executing. `return` and `break` are not exceptions: executing a statement returns a
Completion, and every place that sequences statements (blocks, loop bodies, function bodies) checks it and stops early
when it isn't NORMAL.
"""

from dataclasses import dataclass
from enum import Enum, auto


class Flow(Enum):
    NORMAL = auto()
    BREAK = auto()
    RETURN = auto()


@dataclass(frozen=True)
class Completion:
    flow: Flow
    value: object = None    # returned value, if flow is RETURN
    keyword: object = None  # the 'break'/'return' token, for error reporting

    @property
    def is_normal(self):
        return self.flow is Flow.NORMAL

    @classmethod
    def returned(cls, keyword, value):
        return cls(Flow.RETURN, value, keyword)

    @classmethod
    def broken(cls, keyword):
        return cls(Flow.BREAK, None, keyword)


NORMAL = Completion(Flow.NORMAL)
