"""
Defines the abstract syntax tree (AST) node model for the MinSwift language.

The node set is closed: `Node` is a union over exactly seven frozen dataclasses,
so a consumer can dispatch on it exhaustively (`match node: case NumberLiteral(): ...`).
Every node owns its children outright; nothing is shared between parents and no
node is modified after the parser returns it.

Classes:
    ASTNode: Common base providing `to_dict()` and child iteration.
    NumberLiteral, VariableReference, CallExpression, BinaryExpression,
    FunctionDefinition, ReturnStatement, IfElse: The node variants.
    Argument: One declared function parameter.
    BinaryOperator: The binary operators the grammar knows about.
    ReturnType: The closed set of function return types.

Each node also tracks:
    line (int): Source line of the node's first token, for error messages.
    col (int): Source column of the node's first token.
Positions take no part in equality, so trees built by hand in tests compare
equal to parsed trees.

Example:
    node = BinaryExpression(BinaryOperator.ADD, NumberLiteral(1.0), NumberLiteral(2.0))
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, TypedDict, Union


class ASTDict(TypedDict, total=False):
    """
    Serialized form of a node, suitable for JSON output or debugging.

    Only the keys that belong to the node's variant are present, plus
    `kind`, `line` and `col` which every node has.
    """

    kind: str
    line: int
    col: int
    value: float
    name: str
    callee: str
    arguments: list[Any]
    operator: str
    lhs: "ASTDict"
    rhs: "ASTDict"
    return_type: str
    body: "ASTDict | None"
    condition: "ASTDict"
    then_branch: "ASTDict"
    else_branch: "ASTDict"


class BinaryOperator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    LESS_THAN = "<"


class ReturnType(Enum):
    INT = "Int"
    DOUBLE = "Double"
    VOID = "Void"


class ASTNode:
    """Base class of every node variant."""

    kind: ClassVar[str] = "node"

    def iter_children(self) -> Iterator[Node]:
        """Yield the direct child nodes, left to right."""
        return iter(())

    def to_dict(self) -> ASTDict:
        raise NotImplementedError  # pragma: no cover

    def _header(self) -> ASTDict:
        return {
            "kind": self.kind,
            "line": getattr(self, "line", 0),
            "col": getattr(self, "col", 0),
        }


@dataclass(frozen=True)
class NumberLiteral(ASTNode):
    kind: ClassVar[str] = "number"

    value: float
    line: int = field(default=0, compare=False, repr=False)
    col: int = field(default=0, compare=False, repr=False)

    def to_dict(self) -> ASTDict:
        d = self._header()
        d["value"] = self.value
        return d


@dataclass(frozen=True)
class VariableReference(ASTNode):
    kind: ClassVar[str] = "variable"

    name: str
    line: int = field(default=0, compare=False, repr=False)
    col: int = field(default=0, compare=False, repr=False)

    def to_dict(self) -> ASTDict:
        d = self._header()
        d["name"] = self.name
        return d


@dataclass(frozen=True)
class CallExpression(ASTNode):
    kind: ClassVar[str] = "call"

    callee: str
    arguments: tuple[Node, ...] = ()
    line: int = field(default=0, compare=False, repr=False)
    col: int = field(default=0, compare=False, repr=False)

    def iter_children(self) -> Iterator[Node]:
        return iter(self.arguments)

    def to_dict(self) -> ASTDict:
        d = self._header()
        d["callee"] = self.callee
        d["arguments"] = [a.to_dict() for a in self.arguments]
        return d


@dataclass(frozen=True)
class BinaryExpression(ASTNode):
    kind: ClassVar[str] = "binary"

    operator: BinaryOperator
    lhs: Node
    rhs: Node
    line: int = field(default=0, compare=False, repr=False)
    col: int = field(default=0, compare=False, repr=False)

    def iter_children(self) -> Iterator[Node]:
        yield self.lhs
        yield self.rhs

    def to_dict(self) -> ASTDict:
        d = self._header()
        d["operator"] = self.operator.value
        d["lhs"] = self.lhs.to_dict()
        d["rhs"] = self.rhs.to_dict()
        return d


@dataclass(frozen=True)
class Argument:
    """A declared parameter: `label [variable_name]: type_name`."""

    label: str
    variable_name: str
    type_name: str | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, str | None]:
        return {
            "label": self.label,
            "variable_name": self.variable_name,
            "type_name": self.type_name,
        }


@dataclass(frozen=True)
class FunctionDefinition(ASTNode):
    kind: ClassVar[str] = "function"

    name: str
    arguments: tuple[Argument, ...]
    return_type: ReturnType
    body: Node
    line: int = field(default=0, compare=False, repr=False)
    col: int = field(default=0, compare=False, repr=False)

    def iter_children(self) -> Iterator[Node]:
        yield self.body

    def to_dict(self) -> ASTDict:
        d = self._header()
        d["name"] = self.name
        d["arguments"] = [a.to_dict() for a in self.arguments]
        d["return_type"] = self.return_type.value
        d["body"] = self.body.to_dict()
        return d


@dataclass(frozen=True)
class ReturnStatement(ASTNode):
    kind: ClassVar[str] = "return"

    body: Node | None = None
    line: int = field(default=0, compare=False, repr=False)
    col: int = field(default=0, compare=False, repr=False)

    def iter_children(self) -> Iterator[Node]:
        if self.body is not None:
            yield self.body

    def to_dict(self) -> ASTDict:
        d = self._header()
        d["body"] = self.body.to_dict() if self.body is not None else None
        return d


@dataclass(frozen=True)
class IfElse(ASTNode):
    kind: ClassVar[str] = "if"

    condition: Node
    then_branch: Node
    else_branch: Node
    line: int = field(default=0, compare=False, repr=False)
    col: int = field(default=0, compare=False, repr=False)

    def iter_children(self) -> Iterator[Node]:
        yield self.condition
        yield self.then_branch
        yield self.else_branch

    def to_dict(self) -> ASTDict:
        d = self._header()
        d["condition"] = self.condition.to_dict()
        d["then_branch"] = self.then_branch.to_dict()
        d["else_branch"] = self.else_branch.to_dict()
        return d


Node = Union[
    NumberLiteral,
    VariableReference,
    CallExpression,
    BinaryExpression,
    FunctionDefinition,
    ReturnStatement,
    IfElse,
]
"""The closed set of AST node variants."""


def walk(node: Node) -> Iterator[Node]:
    """Yield `node` and all of its descendants in pre-order."""
    yield node
    for child in node.iter_children():
        yield from walk(child)


__all__ = [
    "ASTDict",
    "ASTNode",
    "Argument",
    "BinaryExpression",
    "BinaryOperator",
    "CallExpression",
    "FunctionDefinition",
    "IfElse",
    "Node",
    "NumberLiteral",
    "ReturnStatement",
    "ReturnType",
    "VariableReference",
    "walk",
]
