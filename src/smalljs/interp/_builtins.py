"""Global environment: ``print``, ``global`` and the operator functions.

Operators are ordinary two-argument functions registered under their
symbol, so ``a + b`` reaches the evaluator as ``FunCall("+", [a, b])``.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Sequence

from ._config import InterpreterConfig
from ._sinks import LineWriter
from ._values import UNDEFINED, Failure, JSObject, display, kind_name

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Operand checks
# ---------------------------------------------------------------------------

def _operands(name: str, args: Sequence[object]) -> tuple[object, object]:
    if len(args) != 2:
        raise Failure(f"operator {name} expects 2 arguments, got {len(args)}")
    return args[0], args[1]


def _integer(name: str, value: object) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise Failure(
            f"type error {display(value)} is not a integer (operand of {name})"
        )
    return value


def _comparable(name: str, left: object, right: object) -> None:
    if isinstance(left, int) and isinstance(right, int):
        return
    if isinstance(left, str) and isinstance(right, str):
        return
    raise Failure(
        f"type error {display(left)} ({kind_name(left)}) and "
        f"{display(right)} ({kind_name(right)}) are not comparable (operand of {name})"
    )


# ---------------------------------------------------------------------------
# Integer arithmetic
# ---------------------------------------------------------------------------

def truncating_div(left: int, right: int) -> int:
    """Integer division rounding toward zero."""
    if right == 0:
        raise Failure("division by zero")
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def truncating_rem(left: int, right: int) -> int:
    """Remainder matching ``truncating_div``: takes the sign of *left*."""
    if right == 0:
        raise Failure("remainder by zero")
    return left - right * truncating_div(left, right)


def _arithmetic(name: str, op: Callable[[int, int], int]) -> JSObject:
    def body(function: JSObject, receiver: object, args: Sequence[object]) -> object:
        left, right = _operands(name, args)
        return op(_integer(name, left), _integer(name, right))

    return JSObject.new_function(name, body)


def _equality(name: str, negate: bool) -> JSObject:
    def body(function: JSObject, receiver: object, args: Sequence[object]) -> object:
        left, right = _operands(name, args)
        # ints and strs compare by value, objects and UNDEFINED by identity
        same = type(left) is type(right) and left == right
        return 1 if same != negate else 0

    return JSObject.new_function(name, body)


def _ordering(name: str, op: Callable[[object, object], bool]) -> JSObject:
    def body(function: JSObject, receiver: object, args: Sequence[object]) -> object:
        left, right = _operands(name, args)
        _comparable(name, left, right)
        return 1 if op(left, right) else 0

    return JSObject.new_function(name, body)


def _print(out: LineWriter) -> JSObject:
    def body(function: JSObject, receiver: object, args: Sequence[object]) -> object:
        logger.debug("print called with %r", list(args))
        out.write_line(" ".join(display(arg) for arg in args))
        return UNDEFINED

    return JSObject.new_function("print", body)


# ---------------------------------------------------------------------------
# Root environment
# ---------------------------------------------------------------------------

def make_global_env(out: LineWriter, config: InterpreterConfig | None = None) -> JSObject:
    """Build a fresh root environment writing ``print`` output to *out*."""
    if config is None:
        config = InterpreterConfig()

    env = JSObject.new_env(None)
    env.register("global", env)
    env.register("print", _print(out))

    env.register("+", _arithmetic("+", operator.add))
    env.register("-", _arithmetic("-", operator.sub))
    env.register("/", _arithmetic("/", truncating_div))
    env.register("*", _arithmetic("*", operator.mul))
    if config.legacy_modulo:
        env.register("%", _arithmetic("%", operator.mul))
    else:
        env.register("%", _arithmetic("%", truncating_rem))

    env.register("==", _equality("==", negate=False))
    env.register("!=", _equality("!=", negate=True))
    env.register("<", _ordering("<", operator.lt))
    env.register("<=", _ordering("<=", operator.le))
    env.register(">", _ordering(">", operator.gt))
    env.register(">=", _ordering(">=", operator.ge))
    return env
