"""
Statement assembly and type-directed parameter binding.

`StatementBuilder` accumulates SQL text and, in lockstep, the values for each
positional placeholder. The only way to add a `?` is `append_placeholder`,
which appends the marker and its value together, so a built statement always
has exactly as many placeholders as bind values.

`CompiledStatement` is the immutable result. Binding it against a prepared
statement handle dispatches each value on its runtime scalar kind:

    value -> ScalarKind -> handle.bind_<kind>(position, value)

Anything without a dedicated kind goes through `bind_object`.
"""
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from typing import Any, Protocol, Self, TypeVar
from urllib.parse import ParseResult, SplitResult

import numpy as np
from sqlcommand.exceptions import BindError

logger = logging.getLogger(__name__)

T = TypeVar('T')

PLACEHOLDER = '?'

INT32_MIN, INT32_MAX = -2**31, 2**31 - 1
INT64_MIN, INT64_MAX = -2**63, 2**63 - 1


class ScalarKind(Enum):
    """Scalar kinds that have a dedicated bind primitive."""
    DECIMAL = auto()
    BOOLEAN = auto()
    INT = auto()
    BYTE = auto()
    URL = auto()
    LONG = auto()
    DOUBLE = auto()
    SHORT = auto()
    STRING = auto()
    OBJECT = auto()


_SCALAR_KINDS: dict[type, ScalarKind] = {
    Decimal: ScalarKind.DECIMAL,
    bool: ScalarKind.BOOLEAN,
    np.bool_: ScalarKind.BOOLEAN,
    int: ScalarKind.INT,
    ParseResult: ScalarKind.URL,
    SplitResult: ScalarKind.URL,
    float: ScalarKind.DOUBLE,
    np.float64: ScalarKind.DOUBLE,
    str: ScalarKind.STRING,
    np.str_: ScalarKind.STRING,
    }

# numpy signed integers by itemsize, covering `intc` and `longlong`
_SIGNED_KINDS_BY_SIZE: dict[int, ScalarKind] = {
    1: ScalarKind.BYTE,
    2: ScalarKind.SHORT,
    4: ScalarKind.INT,
    8: ScalarKind.LONG,
    }

BIND_METHODS: dict[ScalarKind, str] = {
    ScalarKind.DECIMAL: 'bind_decimal',
    ScalarKind.BOOLEAN: 'bind_boolean',
    ScalarKind.INT: 'bind_int',
    ScalarKind.BYTE: 'bind_byte',
    ScalarKind.URL: 'bind_url',
    ScalarKind.LONG: 'bind_long',
    ScalarKind.DOUBLE: 'bind_double',
    ScalarKind.SHORT: 'bind_short',
    ScalarKind.STRING: 'bind_string',
    ScalarKind.OBJECT: 'bind_object',
    }


def _python_int_kind(value: int) -> ScalarKind:
    if INT32_MIN <= value <= INT32_MAX:
        return ScalarKind.INT
    if INT64_MIN <= value <= INT64_MAX:
        return ScalarKind.LONG
    return ScalarKind.OBJECT


def scalar_kind(value: Any) -> ScalarKind:
    """Classify a value by its runtime type.

    The type's MRO is walked so subclasses take their base's kind; `bool` is
    listed before `int` in every bool MRO so it never binds as an integer.
    Python ints are sized by value: 32-bit range binds as INT, 64-bit range
    as LONG, anything larger is left to the driver. numpy signed integers
    take the kind matching their width.
    """
    if isinstance(value, np.signedinteger):
        return _SIGNED_KINDS_BY_SIZE.get(value.itemsize, ScalarKind.OBJECT)
    for klass in type(value).__mro__:
        kind = _SCALAR_KINDS.get(klass)
        if kind is None:
            continue
        if klass is int:
            return _python_int_kind(value)
        return kind
    return ScalarKind.OBJECT


class PreparedHandle(Protocol):
    """Positional bind primitives of a prepared statement.

    Positions are 1-based.
    """

    def bind_decimal(self, position: int, value: Decimal) -> None: ...
    def bind_boolean(self, position: int, value: bool) -> None: ...
    def bind_int(self, position: int, value: int) -> None: ...
    def bind_byte(self, position: int, value: int) -> None: ...
    def bind_url(self, position: int, value: ParseResult | SplitResult) -> None: ...
    def bind_long(self, position: int, value: int) -> None: ...
    def bind_double(self, position: int, value: float) -> None: ...
    def bind_short(self, position: int, value: int) -> None: ...
    def bind_string(self, position: int, value: str) -> None: ...
    def bind_object(self, position: int, value: Any) -> None: ...


H = TypeVar('H', bound=PreparedHandle)


@dataclass(frozen=True, slots=True)
class CompiledStatement:
    """SQL text and the ordered values for its placeholders.
    """
    text: str
    args: tuple[Any, ...] = ()

    @property
    def parameter_count(self) -> int:
        return len(self.args)

    def bind(self, handle: H) -> H:
        """Bind every value to `handle`, in order, through its scalar kind.

        Raises BindError when the handle rejects a value.
        """
        for position, value in enumerate(self.args, start=1):
            kind = scalar_kind(value)
            try:
                getattr(handle, BIND_METHODS[kind])(position, value)
            except BindError:
                raise
            except Exception as err:
                raise BindError(
                    f'Failed to bind {type(value).__name__} at position {position} '
                    f'of "{self.text}"', err) from err
        logger.debug(f'Bound {len(self.args)} parameters')
        return handle


class StatementBuilder:
    """Accumulates SQL text and placeholder values.

    A builder belongs to the command compiling it and is used for exactly one
    statement: appending after `build()` raises RuntimeError.
    """

    def __init__(self, start: str = '') -> None:
        self._parts: list[str] = [start] if start else []
        self._args: list[Any] = []
        self._built = False

    def _check_open(self) -> None:
        if self._built:
            raise RuntimeError('StatementBuilder has already been built')

    def append(self, fragment: str) -> Self:
        """Append literal SQL text."""
        self._check_open()
        self._parts.append(fragment)
        return self

    def append_placeholder(self, value: Any) -> Self:
        """Append a `?` and the value it stands for."""
        self._check_open()
        self._parts.append(PLACEHOLDER)
        self._args.append(value)
        return self

    def append_separated(self, items: Iterable[T], separator: str,
                         render: Callable[[Self, T], Any]) -> Self:
        """Render each item, with `separator` between consecutive items.

        No separator follows the last item.
        """
        for index, item in enumerate(items):
            if index:
                self.append(separator)
            render(self, item)
        return self

    @property
    def text(self) -> str:
        return ''.join(self._parts)

    @property
    def args(self) -> list[Any]:
        return list(self._args)

    def build(self) -> CompiledStatement:
        """Snapshot the text and bind values into a CompiledStatement."""
        self._built = True
        return CompiledStatement(self.text, tuple(self._args))
