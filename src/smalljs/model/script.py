"""Top-level program container."""

from __future__ import annotations

from pydantic import BaseModel

from .expressions import Block


class Script(BaseModel):
    """A parsed program: a single root block."""

    body: Block


def load_script(text: str | bytes) -> Script:
    """Validate a JSON-serialized AST into a ``Script``.

    Raises ``pydantic.ValidationError`` when the document does not
    describe a well-formed tree.
    """
    return Script.model_validate_json(text)
