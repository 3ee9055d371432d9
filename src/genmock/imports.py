"""Work out which imports the generated file needs."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .errors import ImportConflictError
from .gosource.model import (
    ArrayType,
    ChanType,
    FuncType,
    GenericType,
    ImportSpec,
    InlineType,
    MapType,
    PointerType,
    SliceType,
    TypeExpr,
    TypeName,
)
from .gosource.syntax import (
    Assign,
    Binary,
    Call,
    CompositeLit,
    Decl,
    Define,
    Expr,
    ExprStmt,
    FuncDecl,
    Ident,
    If,
    Index,
    IntLit,
    PackageRef,
    RangeFor,
    Return,
    Selector,
    Stmt,
    StringLit,
    StructDecl,
    Switch,
    TypeArg,
    TypeAssert,
    Unary,
    VarDecl,
)

logger = logging.getLogger(__name__)


def used_qualifiers(decls: Iterable[Decl]) -> set[str]:
    """Collect every identifier used as a package qualifier in `decls`.

    That is the `pkg` in `pkg.Type` type references and every `PackageRef`
    selector base. Selectors on the receiver, parameters and locals are not
    package uses.
    """
    names: set[str] = set()
    for d in decls:
        if isinstance(d, StructDecl):
            for f in d.fields:
                _type_qualifiers(f.type, names)
        elif isinstance(d, FuncDecl):
            if d.recv is not None:
                _type_qualifiers(d.recv.type, names)
            _type_qualifiers(d.type, names)
            for s in d.body:
                _stmt_qualifiers(s, names)
    return names


def type_qualifiers(*types: TypeExpr) -> set[str]:
    """Return the package qualifiers referenced by `types`."""
    names: set[str] = set()
    for t in types:
        _type_qualifiers(t, names)
    return names


def _type_qualifiers(t: TypeExpr, out: set[str]) -> None:
    if isinstance(t, TypeName):
        if t.package:
            out.add(t.package)
    elif isinstance(t, (PointerType, SliceType, ArrayType)):
        _type_qualifiers(t.elem, out)
    elif isinstance(t, MapType):
        _type_qualifiers(t.key, out)
        _type_qualifiers(t.value, out)
    elif isinstance(t, ChanType):
        _type_qualifiers(t.value, out)
    elif isinstance(t, FuncType):
        for p in t.params:
            _type_qualifiers(p.type, out)
        for r in t.results:
            _type_qualifiers(r.type, out)
    elif isinstance(t, GenericType):
        _type_qualifiers(t.base, out)
        for a in t.args:
            _type_qualifiers(a, out)
    elif isinstance(t, InlineType):
        out.update(t.packages)


def _expr_qualifiers(e: Expr, out: set[str]) -> None:
    if isinstance(e, PackageRef):
        out.add(e.name)
    elif isinstance(e, Selector):
        _expr_qualifiers(e.x, out)
    elif isinstance(e, Call):
        _expr_qualifiers(e.fun, out)
        for a in e.args:
            _expr_qualifiers(a, out)
    elif isinstance(e, Index):
        _expr_qualifiers(e.x, out)
        _expr_qualifiers(e.index, out)
    elif isinstance(e, TypeAssert):
        _expr_qualifiers(e.x, out)
        _type_qualifiers(e.type, out)
    elif isinstance(e, Binary):
        _expr_qualifiers(e.x, out)
        _expr_qualifiers(e.y, out)
    elif isinstance(e, Unary):
        _expr_qualifiers(e.x, out)
    elif isinstance(e, CompositeLit):
        _type_qualifiers(e.type, out)
        for x in e.elts:
            _expr_qualifiers(x, out)
    elif isinstance(e, TypeArg):
        _type_qualifiers(e.type, out)
    elif isinstance(e, (Ident, IntLit, StringLit)):
        pass


def _stmt_qualifiers(s: Stmt, out: set[str]) -> None:
    if isinstance(s, ExprStmt):
        _expr_qualifiers(s.x, out)
    elif isinstance(s, Define):
        for v in s.values:
            _expr_qualifiers(v, out)
    elif isinstance(s, Assign):
        for x in (*s.lhs, *s.rhs):
            _expr_qualifiers(x, out)
    elif isinstance(s, VarDecl):
        _type_qualifiers(s.type, out)
    elif isinstance(s, If):
        _expr_qualifiers(s.cond, out)
        for b in s.body:
            _stmt_qualifiers(b, out)
    elif isinstance(s, RangeFor):
        _expr_qualifiers(s.x, out)
        for b in s.body:
            _stmt_qualifiers(b, out)
    elif isinstance(s, Switch):
        _expr_qualifiers(s.tag, out)
        for clause in s.clauses:
            for v in clause.values or ():
                _expr_qualifiers(v, out)
            for b in clause.body:
                _stmt_qualifiers(b, out)
    elif isinstance(s, Return):
        for r in s.results:
            _expr_qualifiers(r, out)


class _ImportSet:
    def __init__(self) -> None:
        self.by_path: dict[str, ImportSpec] = {}
        self.by_name: dict[str, str] = {}

    def add(self, spec: ImportSpec) -> None:
        spec = spec.normalized()
        existing = self.by_path.get(spec.path)
        if existing is not None:
            if existing.local_name != spec.local_name:
                raise ImportConflictError(
                    f"{spec.path!r} is needed both as {existing.local_name} and as {spec.local_name}"
                )
            return
        other = self.by_name.get(spec.local_name)
        if other is not None:
            raise ImportConflictError(f"{spec.local_name} would refer to both {other!r} and {spec.path!r}")
        self.by_path[spec.path] = spec
        self.by_name[spec.local_name] = spec.path


def resolve_imports(
    original: Sequence[ImportSpec],
    decls: Sequence[Decl],
    *,
    required: Sequence[ImportSpec] = (),
    always: Sequence[ImportSpec] = (),
) -> list[ImportSpec]:
    """Return the minimal, path-sorted import list for `decls`.

    `always` imports are kept unconditionally. `required` imports (ones the
    generator itself introduces) and the `original` imports of the source
    file are kept only when their local name is used in `decls`.
    """
    used = used_qualifiers(decls)
    out = _ImportSet()
    for spec in always:
        out.add(spec)
    for spec in (*required, *original):
        if spec.alias == "_":
            continue
        if spec.alias == ".":
            logger.warning("dot import of %s ignored; its names cannot be qualified", spec.path)
            continue
        if spec.local_name in used:
            out.add(spec)
        else:
            logger.debug("dropping unused import %s", spec.path)
    return sorted(out.by_path.values(), key=lambda s: s.path)
