"""Expression AST nodes for smalljs programs.

Every construct of the language is an expression; statements are just
expressions evaluated for their side effects inside a ``Block``.  Each
node records the source line it came from so runtime failures can point
back at the program text.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, StrictInt, StrictStr


class Node(BaseModel):
    """Common base: the source line of the node, if the parser knew it."""

    line_number: int | None = None


class Block(Node):
    """A sequence of expressions evaluated in the same scope."""

    kind: Literal["block"] = "block"
    instrs: list[Expression] = []


class LiteralExpr(Node):
    """An integer or string constant."""

    kind: Literal["literal"] = "literal"
    value: StrictInt | StrictStr


class LocalVarAccess(Node):
    kind: Literal["local_var_access"] = "local_var_access"
    name: str


class LocalVarAssignment(Node):
    """``var name = expr`` when *declaration* is set, ``name = expr`` otherwise."""

    kind: Literal["local_var_assignment"] = "local_var_assignment"
    name: str
    expr: Expression
    declaration: bool = False


class Fun(Node):
    """A function expression; *name* is None for anonymous functions."""

    kind: Literal["fun"] = "fun"
    name: str | None = None
    parameters: list[str] = []
    body: Block


class Return(Node):
    kind: Literal["return"] = "return"
    expr: Expression


class If(Node):
    kind: Literal["if"] = "if"
    condition: Expression
    true_block: Block
    false_block: Block = Field(default_factory=Block)


class New(Node):
    """Object literal: ``{ a: expr, b: expr }``.

    *init_map* keeps declaration order, which is also evaluation order.
    """

    kind: Literal["new"] = "new"
    init_map: dict[str, Expression] = {}


class FieldAccess(Node):
    kind: Literal["field_access"] = "field_access"
    receiver: Expression
    name: str


class FieldAssignment(Node):
    kind: Literal["field_assignment"] = "field_assignment"
    receiver: Expression
    name: str
    expr: Expression


class FunCall(Node):
    """Plain call ``qualifier(args...)``; operators are calls too."""

    kind: Literal["fun_call"] = "fun_call"
    qualifier: Expression
    args: list[Expression] = []


class MethodCall(Node):
    """Method call ``receiver.name(args...)``."""

    kind: Literal["method_call"] = "method_call"
    receiver: Expression
    name: str
    args: list[Expression] = []


Expression = Annotated[
    Union[
        Block,
        LiteralExpr,
        LocalVarAccess,
        LocalVarAssignment,
        Fun,
        Return,
        If,
        New,
        FieldAccess,
        FieldAssignment,
        FunCall,
        MethodCall,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Expression references.
Block.model_rebuild()
LocalVarAssignment.model_rebuild()
Fun.model_rebuild()
Return.model_rebuild()
If.model_rebuild()
New.model_rebuild()
FieldAccess.model_rebuild()
FieldAssignment.model_rebuild()
FunCall.model_rebuild()
MethodCall.model_rebuild()
