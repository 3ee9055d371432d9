"""Syntax tree for the Go code genmock writes.

This is deliberately small: only the expressions, statements and declarations
that mock files use. Type positions reuse the `model` type expressions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .model import FuncType, ImportSpec, Param, TypeExpr


# Expressions


@dataclass(frozen=True)
class Ident:
    name: str


@dataclass(frozen=True)
class PackageRef:
    """An imported package name used as a selector base, as in `fmt.Errorf`."""

    name: str


@dataclass(frozen=True)
class Selector:
    x: "Expr"
    sel: str


@dataclass(frozen=True)
class Call:
    fun: "Expr"
    args: tuple["Expr", ...] = ()
    # Spread the last argument: f(a, xs...)
    spread: bool = False


@dataclass(frozen=True)
class Index:
    x: "Expr"
    index: "Expr"


@dataclass(frozen=True)
class TypeAssert:
    x: "Expr"
    type: TypeExpr


@dataclass(frozen=True)
class Binary:
    x: "Expr"
    op: str
    y: "Expr"


@dataclass(frozen=True)
class Unary:
    op: str
    x: "Expr"


@dataclass(frozen=True)
class IntLit:
    value: int


@dataclass(frozen=True)
class StringLit:
    value: str


@dataclass(frozen=True)
class CompositeLit:
    type: TypeExpr
    elts: tuple["Expr", ...] = ()


@dataclass(frozen=True)
class TypeArg:
    """A type used in expression position, as in `make([]T, n)`."""

    type: TypeExpr


Expr = Union[
    Ident, PackageRef, Selector, Call, Index, TypeAssert, Binary, Unary, IntLit, StringLit, CompositeLit, TypeArg
]


# Statements


@dataclass(frozen=True)
class ExprStmt:
    x: Expr


@dataclass(frozen=True)
class Define:
    """`lhs := rhs`"""

    names: tuple[str, ...]
    values: tuple[Expr, ...]


@dataclass(frozen=True)
class Assign:
    lhs: tuple[Expr, ...]
    rhs: tuple[Expr, ...]


@dataclass(frozen=True)
class VarDecl:
    name: str
    type: TypeExpr


@dataclass(frozen=True)
class If:
    cond: Expr
    body: tuple["Stmt", ...]


@dataclass(frozen=True)
class RangeFor:
    key: str
    value: str
    x: Expr
    body: tuple["Stmt", ...]


@dataclass(frozen=True)
class CaseClause:
    # None is the default clause.
    values: tuple[Expr, ...] | None
    body: tuple["Stmt", ...] = ()


@dataclass(frozen=True)
class Switch:
    tag: Expr
    clauses: tuple[CaseClause, ...]


@dataclass(frozen=True)
class Return:
    results: tuple[Expr, ...] = ()


Stmt = Union[ExprStmt, Define, Assign, VarDecl, If, RangeFor, Switch, Return]


# Declarations


@dataclass(frozen=True)
class StructField:
    # None for an embedded field.
    name: str | None
    type: TypeExpr


@dataclass(frozen=True)
class StructDecl:
    name: str
    fields: tuple[StructField, ...]


@dataclass(frozen=True)
class FuncDecl:
    name: str
    type: FuncType
    body: tuple[Stmt, ...]
    recv: Param | None = None


Decl = Union[StructDecl, FuncDecl]


@dataclass(frozen=True)
class GoFile:
    package: str
    imports: tuple[ImportSpec, ...]
    decls: tuple[Decl, ...]
    header: str | None = None
