"""Tests for the interpret() entry point, script loading and run options."""

import io
import json
import logging
import sys

import pytest
from pydantic import ValidationError

from conftest import block, call, let, lit, prints, run_script, var

from smalljs.interp import (
    UNDEFINED,
    Failure,
    InterpreterConfig,
    JSObject,
    ListWriter,
    StreamWriter,
    interpret,
    load_script,
)
from smalljs.model.expressions import Fun, If, LocalVarAssignment, Return
from smalljs.model.script import Script


def _node(kind, **fields):
    return {"kind": kind, **fields}


def _call(name, *args, line=None):
    return _node(
        "fun_call",
        qualifier=_node("local_var_access", name=name),
        args=list(args),
        line_number=line,
    )


def _lit(value):
    return _node("literal", value=value)


# ---------------------------------------------------------------------------
# interpret()
# ---------------------------------------------------------------------------

class TestInterpretAPI:
    def test_returns_global_env(self):
        _, env = run_script(let("x", lit(1)))
        assert isinstance(env, JSObject)
        assert env.lookup("x") == 1
        assert env.lookup("global") is env

    def test_runs_are_independent(self):
        _, first = run_script(let("x", lit(1)))
        _, second = run_script(prints(var("x")))
        assert first is not second
        assert second.lookup("x") is UNDEFINED

    def test_stream_writer(self):
        stream = io.StringIO()
        interpret(Script(body=block(prints(lit("a")), prints(lit(1), lit(2)))), StreamWriter(stream))
        assert stream.getvalue() == "a\n1 2\n"

    def test_rejects_non_writer(self):
        with pytest.raises(TypeError, match="interpret\\(\\) expects"):
            interpret(Script(body=block()), io.StringIO())

    def test_failure_propagates(self):
        with pytest.raises(Failure, match="unknown variable"):
            run_script(LocalVarAssignment(name="ghost", expr=lit(0)))


# ---------------------------------------------------------------------------
# load_script()
# ---------------------------------------------------------------------------

class TestLoadScript:
    def test_hello_world(self):
        doc = {"body": _node("block", instrs=[_call("print", _lit("hello"), _lit(42))])}
        script = load_script(json.dumps(doc))
        out = ListWriter()
        interpret(script, out)
        assert out.lines == ["hello 42"]

    def test_function_program(self):
        square = _node(
            "fun",
            name="square",
            parameters=["n"],
            body=_node("block", instrs=[
                _node("return", expr=_call("*", _node("local_var_access", name="n"), _node("local_var_access", name="n"))),
            ]),
        )
        doc = {"body": _node("block", instrs=[
            square,
            _call("print", _call("square", _lit(7))),
        ])}
        out = ListWriter()
        interpret(load_script(json.dumps(doc)), out)
        assert out.lines == ["49"]

    def test_line_numbers_survive_loading(self):
        doc = {"body": _node("block", instrs=[_call("/", _lit(1), _lit(0), line=8)])}
        with pytest.raises(Failure) as exc_info:
            interpret(load_script(json.dumps(doc)), ListWriter())
        assert str(exc_info.value) == "at line 8, division by zero"

    def test_unknown_kind_rejected(self):
        doc = {"body": _node("block", instrs=[_node("while", condition=_lit(1))])}
        with pytest.raises(ValidationError):
            load_script(json.dumps(doc))

    def test_boolean_literal_rejected(self):
        doc = {"body": _node("block", instrs=[_node("literal", value=True)])}
        with pytest.raises(ValidationError):
            load_script(json.dumps(doc))

    def test_round_trip_through_json(self):
        script = Script(body=block(let("x", lit(3)), prints(var("x"))))
        reloaded = load_script(script.model_dump_json())
        assert reloaded == script


# ---------------------------------------------------------------------------
# InterpreterConfig
# ---------------------------------------------------------------------------

def _forever():
    return Fun(
        name="forever",
        parameters=["n"],
        body=block(Return(expr=call("forever", call("+", var("n"), lit(1))))),
    )


def _countdown():
    return Fun(
        name="down",
        parameters=["n"],
        body=block(If(
            condition=call("==", var("n"), lit(0)),
            true_block=block(Return(expr=lit(0))),
            false_block=block(Return(expr=call("down", call("-", var("n"), lit(1))))),
        )),
    )


class TestConfig:
    def test_defaults(self):
        config = InterpreterConfig()
        assert config.legacy_modulo is False
        assert config.recursion_limit == 50_000
        assert config.trace_calls is False

    def test_recursion_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            InterpreterConfig(recursion_limit=0)

    def test_legacy_modulo_in_program(self):
        lines, _ = run_script(prints(call("%", lit(7), lit(3))))
        assert lines == ["1"]
        lines, _ = run_script(
            prints(call("%", lit(7), lit(3))),
            config=InterpreterConfig(legacy_modulo=True),
        )
        assert lines == ["21"]

    def test_default_limit_allows_deep_recursion(self):
        before = sys.getrecursionlimit()
        lines, _ = run_script(_countdown(), prints(call("down", lit(1000))))
        assert lines == ["0"]
        assert sys.getrecursionlimit() == before

    def test_lower_limit_keeps_host_limit(self):
        before = sys.getrecursionlimit()
        lines, _ = run_script(
            _countdown(), prints(call("down", lit(20))),
            config=InterpreterConfig(recursion_limit=10),
        )
        assert lines == ["0"]
        assert sys.getrecursionlimit() == before

    def test_unbounded_recursion_is_a_failure(self):
        with pytest.raises(Failure, match="maximum recursion depth exceeded"):
            run_script(_forever(), call("forever", lit(0)))

    def test_recursion_limit_restored(self):
        before = sys.getrecursionlimit()
        config = InterpreterConfig(recursion_limit=before + 60_000)
        lines, _ = run_script(_countdown(), prints(call("down", lit(2000))), config=config)
        assert lines == ["0"]
        assert sys.getrecursionlimit() == before

    def test_recursion_limit_restored_after_failure(self):
        before = sys.getrecursionlimit()
        with pytest.raises(Failure):
            run_script(call("/", lit(1), lit(0)), config=InterpreterConfig(recursion_limit=before + 100))
        assert sys.getrecursionlimit() == before


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

class TestLogging:
    def test_print_logs_arguments(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="smalljs.interp._builtins"):
            run_script(prints(lit("x"), lit(1)))
        assert "print called with ['x', 1]" in caplog.text

    def test_trace_calls(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="smalljs.interp._executor"):
            run_script(call("+", lit(1), lit(2), line=5), config=InterpreterConfig(trace_calls=True))
        assert "line 5: calling + with [1, 2]" in caplog.text

    def test_no_trace_by_default(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="smalljs.interp._executor"):
            run_script(call("+", lit(1), lit(2)))
        assert "calling" not in caplog.text
