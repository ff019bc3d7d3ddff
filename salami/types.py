"""Runtime values for the Salami interpreter.

Values form a small tagged union: ``IntegerVal``, ``BooleanVal`` and
``FunctionVal``. The language has no null; an expression without a result
(an ``if`` whose branch did not run, for instance) evaluates to Python
``None`` and never reaches user-visible bindings.

``ReturnSignal`` and ``ExitSignal`` are not values. They travel back up
through the evaluator to tell every enclosing step to stop: a return stops
at the nearest call boundary, an exit stops the whole run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional

from .ast import Block, Identifier

if TYPE_CHECKING:
    from .environment import Environment


INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


def wrap_int64(value: int) -> int:
    """Fold an arbitrary Python int into signed 64-bit two's complement."""
    value &= (1 << 64) - 1
    if value > INT64_MAX:
        value -= 1 << 64
    return value


@dataclass(frozen=True)
class IntegerVal:
    value: int

    def __post_init__(self):
        object.__setattr__(self, 'value', wrap_int64(self.value))

    def __repr__(self) -> str:
        return f"Integer({self.value})"


@dataclass(frozen=True)
class BooleanVal:
    value: bool

    def __repr__(self) -> str:
        return f"Boolean({'true' if self.value else 'false'})"


@dataclass(eq=False)
class FunctionVal:
    """A function together with the environment it closes over.

    The environment is shared with the defining scope, not copied, so
    bindings added there later are visible when the function runs.
    """
    parameters: List[Identifier]
    body: Block
    env: 'Environment' = field(repr=False)
    name: Optional[str] = None

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def __repr__(self) -> str:
        return f"<func {self.name}>" if self.name else '<func>'


class Signal:
    """Base class for control-flow signals."""
    __slots__ = ()


@dataclass(frozen=True)
class ReturnSignal(Signal):
    value: Any


@dataclass(frozen=True)
class ExitSignal(Signal):
    code: int


def type_name(value: Any) -> str:
    """Return the Salami type name of a runtime value."""
    if isinstance(value, IntegerVal):
        return 'Integer'
    if isinstance(value, BooleanVal):
        return 'Boolean'
    if isinstance(value, FunctionVal):
        return 'Function'
    if value is None:
        return 'nothing'
    raise TypeError(f"not a Salami value: {value!r}")


def inspect(value: Any) -> str:
    """Render a runtime value the way the CLI prints it."""
    if isinstance(value, IntegerVal):
        return str(value.value)
    if isinstance(value, BooleanVal):
        return 'true' if value.value else 'false'
    if isinstance(value, FunctionVal):
        return repr(value)
    if value is None:
        return ''
    raise TypeError(f"not a Salami value: {value!r}")
