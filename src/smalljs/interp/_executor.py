"""Evaluator: tree-walking interpreter over smalljs expression nodes.

``Evaluator.evaluate`` walks an expression against an environment
(a ``JSObject`` scope) and produces a value.  Early return from a
function body is not an exception: handlers hand back a ``_Returning``
wrapper, every handler passes one produced by a sub-expression upward
untouched, and only the function-call boundary unwraps it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from smalljs.model.expressions import (
    Block,
    Expression,
    FieldAccess,
    FieldAssignment,
    Fun,
    FunCall,
    If,
    LiteralExpr,
    LocalVarAccess,
    LocalVarAssignment,
    MethodCall,
    New,
    Return,
)

from ._config import InterpreterConfig
from ._values import UNDEFINED, Failure, JSObject, display

logger = logging.getLogger(__name__)


class _Returning:
    """Result of evaluating a ``return``: carries the value to the caller."""

    __slots__ = ("value",)

    def __init__(self, value: object) -> None:
        self.value = value


class Evaluator:
    """Tree-walking interpreter for one program run.

    Parameters
    ----------
    config : InterpreterConfig | None
        Run options; only ``trace_calls`` is consulted here.
    """

    def __init__(self, config: InterpreterConfig | None = None) -> None:
        self.config = config or InterpreterConfig()

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def evaluate(self, expr: Expression, env: JSObject) -> object:
        """Evaluate *expr* in *env* and return its value."""
        result = self._eval(expr, env)
        if isinstance(result, _Returning):
            raise Failure("return outside of a function", expr.line_number)
        return result

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _eval(self, expr: Expression, env: JSObject) -> object:
        handler = self._EXPR_DISPATCH.get(expr.kind)
        if handler is None:
            raise Failure(f"unsupported expression kind: {expr.kind}", expr.line_number)
        return handler(self, expr, env)

    def _args(self, args: list[Expression], env: JSObject) -> list[object] | _Returning:
        """Evaluate arguments left to right, stopping at the first ``return``."""
        values: list[object] = []
        for arg in args:
            value = self._eval(arg, env)
            if isinstance(value, _Returning):
                return value
            values.append(value)
        return values

    @staticmethod
    def _as_object(value: object, expr: Expression) -> JSObject:
        if not isinstance(value, JSObject):
            raise Failure(f"type error {display(value)} is not a object", expr.line_number)
        return value

    @staticmethod
    def _as_function(value: object, expr: Expression) -> JSObject:
        if not isinstance(value, JSObject) or not value.is_function:
            raise Failure(f"type error {display(value)} is not a function", expr.line_number)
        return value

    @staticmethod
    def _as_integer(value: object, expr: Expression) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise Failure(f"type error {display(value)} is not a integer", expr.line_number)
        return value

    def _invoke(
        self,
        fn: JSObject,
        receiver: object,
        args: Sequence[object],
        expr: Expression,
    ) -> object:
        if self.config.trace_calls:
            logger.debug(
                "line %s: calling %s with %r", expr.line_number, fn.name, list(args),
            )
        try:
            return fn.invoke(receiver, args)
        except Failure as exc:
            # Native failures carry no line; report the call site.
            if exc.line_number is None:
                exc.line_number = expr.line_number
            raise

    # -----------------------------------------------------------------------
    # Expression handlers
    # -----------------------------------------------------------------------

    def _eval_block(self, block: Block, env: JSObject) -> object:
        for instr in block.instrs:
            result = self._eval(instr, env)
            if isinstance(result, _Returning):
                return result
        return UNDEFINED

    def _eval_literal(self, literal: LiteralExpr, env: JSObject) -> object:
        return literal.value

    def _eval_local_var_access(self, access: LocalVarAccess, env: JSObject) -> object:
        return env.lookup(access.name)

    def _eval_local_var_assignment(
        self, assignment: LocalVarAssignment, env: JSObject,
    ) -> object:
        name = assignment.name
        value = self._eval(assignment.expr, env)
        if isinstance(value, _Returning):
            return value
        if not assignment.declaration and env.lookup(name) is UNDEFINED:
            raise Failure(f"unknown variable {name!r}", assignment.line_number)
        # Always the current scope: assigning an outer variable shadows it.
        env.register(name, value)
        return UNDEFINED

    def _eval_fun(self, fun: Fun, env: JSObject) -> object:
        name = fun.name if fun.name is not None else "lambda"
        parameters = fun.parameters

        def body(function: JSObject, receiver: object, args: Sequence[object]) -> object:
            if len(args) != len(parameters):
                raise Failure(
                    f"function {name} expects {len(parameters)} argument(s), "
                    f"got {len(args)}",
                    fun.line_number,
                )
            call_env = JSObject.new_env(env)
            call_env.register("this", receiver)
            for param, arg in zip(parameters, args):
                call_env.register(param, arg)
            result = self._eval(fun.body, call_env)
            if isinstance(result, _Returning):
                return result.value
            return UNDEFINED

        fn = JSObject.new_function(name, body)
        if fun.name is not None:
            env.register(name, fn)
        return fn

    def _eval_return(self, ret: Return, env: JSObject) -> object:
        value = self._eval(ret.expr, env)
        if isinstance(value, _Returning):
            return value
        return _Returning(value)

    def _eval_if(self, if_expr: If, env: JSObject) -> object:
        value = self._eval(if_expr.condition, env)
        if isinstance(value, _Returning):
            return value
        condition = self._as_integer(value, if_expr)
        block = if_expr.true_block if condition != 0 else if_expr.false_block
        return self._eval_block(block, env)

    def _eval_new(self, new: New, env: JSObject) -> object:
        obj = JSObject.new_object()
        for field, init in new.init_map.items():
            value = self._eval(init, env)
            if isinstance(value, _Returning):
                return value
            obj.register(field, value)
        return obj

    def _eval_field_access(self, access: FieldAccess, env: JSObject) -> object:
        value = self._eval(access.receiver, env)
        if isinstance(value, _Returning):
            return value
        return self._as_object(value, access).lookup(access.name)

    def _eval_field_assignment(self, assignment: FieldAssignment, env: JSObject) -> object:
        value = self._eval(assignment.receiver, env)
        if isinstance(value, _Returning):
            return value
        receiver = self._as_object(value, assignment)
        value = self._eval(assignment.expr, env)
        if isinstance(value, _Returning):
            return value
        receiver.register(assignment.name, value)
        return UNDEFINED

    def _eval_fun_call(self, call: FunCall, env: JSObject) -> object:
        value = self._eval(call.qualifier, env)
        if isinstance(value, _Returning):
            return value
        fn = self._as_function(value, call)
        args = self._args(call.args, env)
        if isinstance(args, _Returning):
            return args
        return self._invoke(fn, UNDEFINED, args, call)

    def _eval_method_call(self, call: MethodCall, env: JSObject) -> object:
        value = self._eval(call.receiver, env)
        if isinstance(value, _Returning):
            return value
        receiver = self._as_object(value, call)
        fn = self._as_function(receiver.lookup(call.name), call)
        args = self._args(call.args, env)
        if isinstance(args, _Returning):
            return args
        return self._invoke(fn, receiver, args, call)

    # Expression dispatch table
    _EXPR_DISPATCH: dict[str, Callable[[Evaluator, Expression, JSObject], object]] = {
        "block": _eval_block,
        "literal": _eval_literal,
        "local_var_access": _eval_local_var_access,
        "local_var_assignment": _eval_local_var_assignment,
        "fun": _eval_fun,
        "return": _eval_return,
        "if": _eval_if,
        "new": _eval_new,
        "field_access": _eval_field_access,
        "field_assignment": _eval_field_assignment,
        "fun_call": _eval_fun_call,
        "method_call": _eval_method_call,
    }
