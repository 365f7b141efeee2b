"""Per-run interpreter options."""

from __future__ import annotations

from pydantic import BaseModel, Field


class InterpreterConfig(BaseModel):
    """Options for a single ``interpret()`` run.

    Parameters
    ----------
    legacy_modulo : bool
        Make ``%`` multiply its operands, as older smalljs runtimes did.
        The default computes the truncating remainder.
    recursion_limit : int
        Raise the host recursion limit to at least this value while the
        program runs. Every script-level call costs about a dozen host
        frames, so the default allows a few thousand nested calls.
    trace_calls : bool
        Log every function invocation at DEBUG level.
    """

    legacy_modulo: bool = False
    recursion_limit: int = Field(default=50_000, gt=0)
    trace_calls: bool = False
