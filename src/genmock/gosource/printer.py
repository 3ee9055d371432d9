"""Render model types and generated syntax trees as gofmt-style Go source."""

from __future__ import annotations

import json
from typing import Sequence

from .model import (
    ArrayType,
    ChanDir,
    ChanType,
    FuncType,
    GenericType,
    ImportSpec,
    InlineType,
    MapType,
    MethodSignature,
    Param,
    PointerType,
    Result,
    SliceType,
    TypeExpr,
    TypeName,
)
from .syntax import (
    Assign,
    Binary,
    Call,
    CompositeLit,
    Decl,
    Define,
    Expr,
    ExprStmt,
    FuncDecl,
    GoFile,
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

_INDENT = "\t"

# Additive and multiplicative operators; gofmt drops the blanks around these
# inside argument lists (`make(T, 0, n+1)`).
_TIGHT_OPS = frozenset({"+", "-", "|", "^", "*", "/", "%", "<<", ">>", "&", "&^"})


def format_type(t: TypeExpr) -> str:
    if isinstance(t, TypeName):
        return f"{t.package}.{t.name}" if t.package else t.name
    if isinstance(t, PointerType):
        return "*" + format_type(t.elem)
    if isinstance(t, SliceType):
        return "[]" + format_type(t.elem)
    if isinstance(t, ArrayType):
        return f"[{t.length}]" + format_type(t.elem)
    if isinstance(t, MapType):
        return f"map[{format_type(t.key)}]{format_type(t.value)}"
    if isinstance(t, ChanType):
        inner = format_type(t.value)
        if t.dir is ChanDir.RECV:
            return "<-chan " + inner
        if t.dir is ChanDir.SEND:
            return "chan<- " + inner
        # `chan <-chan T` would bind the arrow to the outer channel.
        if isinstance(t.value, ChanType) and t.value.dir is ChanDir.RECV:
            inner = f"({inner})"
        return "chan " + inner
    if isinstance(t, FuncType):
        return "func" + format_params(t.params) + format_results(t.results)
    if isinstance(t, GenericType):
        return format_type(t.base) + "[" + ", ".join(format_type(a) for a in t.args) + "]"
    if isinstance(t, InlineType):
        return t.text
    raise TypeError(f"not a type expression: {t!r}")


def _param_type(p: Param) -> str:
    ty = format_type(p.type)
    return "..." + ty if p.variadic else ty


def _format_fields(fields: Sequence[Param | Result]) -> str:
    parts: list[str] = []
    i = 0
    while i < len(fields):
        f = fields[i]
        ty = _param_type(f) if isinstance(f, Param) else format_type(f.type)
        if f.name is None:
            parts.append(ty)
            i += 1
            continue
        names = [f.name]
        j = i + 1
        # Collapse `a T, b T` back to `a, b T` when declared together.
        while (
            j < len(fields)
            and f.group
            and fields[j].group == f.group
            and fields[j].name is not None
            and fields[j].type == f.type
        ):
            names.append(fields[j].name)  # type: ignore[arg-type]
            j += 1
        parts.append(f"{', '.join(names)} {ty}")
        i = j
    return ", ".join(parts)


def format_params(params: Sequence[Param]) -> str:
    return "(" + _format_fields(params) + ")"


def format_results(results: Sequence[Result]) -> str:
    if not results:
        return ""
    if len(results) == 1 and results[0].name is None:
        return " " + format_type(results[0].type)
    return " (" + _format_fields(results) + ")"


def format_signature(sig: MethodSignature) -> str:
    """Render a method as it appears inside an interface body."""
    return sig.name + format_params(sig.params) + format_results(sig.results)


def format_expr(e: Expr) -> str:
    if isinstance(e, (Ident, PackageRef)):
        return e.name
    if isinstance(e, Selector):
        return f"{format_expr(e.x)}.{e.sel}"
    if isinstance(e, Call):
        args = [_format_arg(a) for a in e.args]
        if e.spread and args:
            args[-1] += "..."
        return f"{format_expr(e.fun)}({', '.join(args)})"
    if isinstance(e, Index):
        return f"{format_expr(e.x)}[{format_expr(e.index)}]"
    if isinstance(e, TypeAssert):
        return f"{format_expr(e.x)}.({format_type(e.type)})"
    if isinstance(e, Binary):
        return f"{format_expr(e.x)} {e.op} {format_expr(e.y)}"
    if isinstance(e, Unary):
        return e.op + format_expr(e.x)
    if isinstance(e, IntLit):
        return str(e.value)
    if isinstance(e, StringLit):
        return json.dumps(e.value)
    if isinstance(e, CompositeLit):
        return format_type(e.type) + "{" + ", ".join(format_expr(x) for x in e.elts) + "}"
    if isinstance(e, TypeArg):
        return format_type(e.type)
    raise TypeError(f"not an expression: {e!r}")


def _format_arg(e: Expr) -> str:
    if isinstance(e, Binary) and e.op in _TIGHT_OPS:
        return f"{_format_arg(e.x)}{e.op}{_format_arg(e.y)}"
    return format_expr(e)


def _format_block(stmts: Sequence[Stmt], depth: int, out: list[str]) -> None:
    for s in stmts:
        _format_stmt(s, depth, out)


def _format_stmt(s: Stmt, depth: int, out: list[str]) -> None:
    pad = _INDENT * depth
    if isinstance(s, ExprStmt):
        out.append(pad + format_expr(s.x))
    elif isinstance(s, Define):
        out.append(f"{pad}{', '.join(s.names)} := {', '.join(format_expr(v) for v in s.values)}")
    elif isinstance(s, Assign):
        lhs = ", ".join(format_expr(x) for x in s.lhs)
        rhs = ", ".join(format_expr(x) for x in s.rhs)
        out.append(f"{pad}{lhs} = {rhs}")
    elif isinstance(s, VarDecl):
        out.append(f"{pad}var {s.name} {format_type(s.type)}")
    elif isinstance(s, If):
        out.append(f"{pad}if {format_expr(s.cond)} {{")
        _format_block(s.body, depth + 1, out)
        out.append(pad + "}")
    elif isinstance(s, RangeFor):
        out.append(f"{pad}for {s.key}, {s.value} := range {format_expr(s.x)} {{")
        _format_block(s.body, depth + 1, out)
        out.append(pad + "}")
    elif isinstance(s, Switch):
        out.append(f"{pad}switch {format_expr(s.tag)} {{")
        for clause in s.clauses:
            if clause.values is None:
                out.append(pad + "default:")
            else:
                out.append(f"{pad}case {', '.join(format_expr(v) for v in clause.values)}:")
            _format_block(clause.body, depth + 1, out)
        out.append(pad + "}")
    elif isinstance(s, Return):
        if s.results:
            out.append(f"{pad}return {', '.join(format_expr(r) for r in s.results)}")
        else:
            out.append(pad + "return")
    else:
        raise TypeError(f"not a statement: {s!r}")


def format_decl(d: Decl) -> str:
    out: list[str] = []
    if isinstance(d, StructDecl):
        out.append(f"type {d.name} struct {{")
        for f in d.fields:
            ty = format_type(f.type)
            out.append(_INDENT + (f"{f.name} {ty}" if f.name else ty))
        out.append("}")
    elif isinstance(d, FuncDecl):
        recv = ""
        if d.recv is not None:
            recv = f"({d.recv.name} {format_type(d.recv.type)}) "
        out.append(f"func {recv}{d.name}{format_params(d.type.params)}{format_results(d.type.results)} {{")
        _format_block(d.body, 1, out)
        out.append("}")
    else:
        raise TypeError(f"not a declaration: {d!r}")
    return "\n".join(out)


def format_import(spec: ImportSpec) -> str:
    path = json.dumps(spec.path)
    return f"{spec.alias} {path}" if spec.alias else path


def format_file(f: GoFile) -> str:
    """Render a whole file: header, package clause, one import block, declarations."""
    parts: list[str] = []
    if f.header:
        parts.append("\n".join("// " + line if line else "//" for line in f.header.splitlines()))
    parts.append(f"package {f.package}")
    if f.imports:
        lines = ["import ("]
        lines.extend(_INDENT + format_import(s) for s in f.imports)
        lines.append(")")
        parts.append("\n".join(lines))
    parts.extend(format_decl(d) for d in f.decls)
    return "\n\n".join(parts) + "\n"
