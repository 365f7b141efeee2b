"""smalljs interpreter — run a parsed program.

Entry point::

    from smalljs.interp import ListWriter, interpret

    out = ListWriter()
    interpret(script, out)
    assert out.lines == ["hello"]
"""

from __future__ import annotations

import logging
import sys

from smalljs.model.script import Script, load_script

from ._builtins import make_global_env
from ._config import InterpreterConfig
from ._executor import Evaluator
from ._sinks import LineWriter, ListWriter, StreamWriter
from ._values import UNDEFINED, Failure, JSObject, display

logger = logging.getLogger(__name__)


def interpret(
    script: Script,
    out: LineWriter,
    config: InterpreterConfig | None = None,
) -> JSObject:
    """Execute *script*, writing ``print`` output to *out*.

    Parameters
    ----------
    script
        The parsed program.
    out
        Sink receiving one call per printed line.
    config
        Run options (see ``InterpreterConfig``).

    Returns
    -------
    JSObject
        The root environment after the run, for inspection.

    Raises
    ------
    Failure
        On any runtime error. Lines printed before the failure have
        already been written to *out*.
    """
    if config is None:
        config = InterpreterConfig()
    if not isinstance(out, LineWriter):
        raise TypeError(
            f"interpret() expects an object with write_line(), "
            f"got {type(out).__name__}"
        )

    global_env = make_global_env(out, config)
    evaluator = Evaluator(config)

    previous_limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous_limit, config.recursion_limit))

    logger.debug("running script with %d top-level expressions", len(script.body.instrs))
    try:
        evaluator.evaluate(script.body, global_env)
    except RecursionError as exc:
        raise Failure("maximum recursion depth exceeded") from exc
    finally:
        sys.setrecursionlimit(previous_limit)
    logger.debug("script finished")
    return global_env


__all__ = [
    "interpret",
    "load_script",
    "make_global_env",
    "Evaluator",
    "Failure",
    "InterpreterConfig",
    "JSObject",
    "LineWriter",
    "ListWriter",
    "StreamWriter",
    "UNDEFINED",
    "display",
]
