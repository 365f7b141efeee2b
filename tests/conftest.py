"""Shared test helpers for the smalljs test suite."""

from smalljs.interp import InterpreterConfig, ListWriter, interpret
from smalljs.model.expressions import (
    Block,
    FunCall,
    LiteralExpr,
    LocalVarAccess,
    LocalVarAssignment,
)
from smalljs.model.script import Script


def lit(value):
    """Shorthand for LiteralExpr(value=...)."""
    return LiteralExpr(value=value)


def var(name):
    """Shorthand for LocalVarAccess(name=...)."""
    return LocalVarAccess(name=name)


def let(name, expr):
    """Declaring assignment: ``var name = expr``."""
    return LocalVarAssignment(name=name, expr=expr, declaration=True)


def call(name, *args, line=None):
    """Call a function bound to *name* (operators included)."""
    return FunCall(qualifier=var(name), args=list(args), line_number=line)


def prints(*args):
    return call("print", *args)


def block(*instrs):
    return Block(instrs=list(instrs))


def run_script(*instrs, config=None):
    """Run top-level expressions and return (printed lines, global env)."""
    out = ListWriter()
    env = interpret(Script(body=block(*instrs)), out, config or InterpreterConfig())
    return out.lines, env
