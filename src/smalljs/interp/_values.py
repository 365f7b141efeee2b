"""Runtime value model for the interpreter.

Values are Python ``int`` and ``str`` for primitives, the ``UNDEFINED``
singleton, and ``JSObject`` for everything mutable: records, lexical
scopes and functions all share the one class.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence


class Failure(Exception):
    """Runtime error raised while evaluating a program."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"at line {self.line_number}, {self.message}"


class _Undefined:
    """Type of the ``UNDEFINED`` sentinel; also marks absent bindings."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"


UNDEFINED = _Undefined()


class JSObject:
    """A dynamic object: field-bearing record, optionally invokable.

    Parameters
    ----------
    name : str
        Diagnostic name (``"lambda"`` for anonymous functions).
    parent : JSObject | None
        Fallback for ``lookup``; set for lexical scopes only.
    body : FunctionBody | None
        Native implementation, called as ``body(self, receiver, args)``.
        Objects without a body are plain records.
    """

    def __init__(
        self,
        name: str,
        parent: JSObject | None = None,
        body: FunctionBody | None = None,
    ) -> None:
        self.name = name
        self.parent = parent
        self._body = body
        self._fields: dict[str, object] = {}

    @classmethod
    def new_env(cls, parent: JSObject | None) -> JSObject:
        return cls("env", parent)

    @classmethod
    def new_object(cls) -> JSObject:
        return cls("object")

    @classmethod
    def new_function(cls, name: str, body: FunctionBody) -> JSObject:
        return cls(name, None, body)

    @property
    def is_function(self) -> bool:
        return self._body is not None

    def lookup(self, key: str) -> object:
        """Value bound to *key* here or in the nearest parent, else UNDEFINED."""
        obj: JSObject | None = self
        while obj is not None:
            if key in obj._fields:
                return obj._fields[key]
            obj = obj.parent
        return UNDEFINED

    def register(self, key: str, value: object) -> None:
        """Bind *key* in this object only, overwriting any previous value."""
        self._fields[key] = value

    def keys(self) -> list[str]:
        return list(self._fields)

    def invoke(self, receiver: object, args: Sequence[object]) -> object:
        if self._body is None:
            raise Failure(f"type error {display(self)} is not a function")
        return self._body(self, receiver, args)

    def __repr__(self) -> str:
        return display(self)


FunctionBody = Callable[[JSObject, object, Sequence[object]], object]


# ---------------------------------------------------------------------------
# Display and kind helpers
# ---------------------------------------------------------------------------

def kind_name(value: object) -> str:
    """Short name of a value's kind, as used in error messages."""
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, str):
        return "string"
    if isinstance(value, JSObject):
        return "function" if value.is_function else "object"
    return type(value).__name__


def _display_nested(value: object) -> str:
    if isinstance(value, JSObject):
        return f"function {value.name}" if value.is_function else "[object]"
    return display(value)


def display(value: object) -> str:
    """String form of a value, as written by ``print``."""
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, JSObject):
        if value.is_function:
            return f"function {value.name}"
        fields = ", ".join(
            f"{key}: {_display_nested(value.lookup(key))}" for key in value.keys()
        )
        return "{" + fields + "}"
    return str(value)
