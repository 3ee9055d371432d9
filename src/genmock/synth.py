"""Build the body of each mock method.

Every generated method funnels its arguments into an `[]interface{}`, hands
them to the tracker with the method name, and narrows whatever the tracker
returns back to the declared result types:

    func (m *MockFred) donit(blah, fah string, rest ...int) (int, error) {
        params := make([]interface{}, 0, 2+len(rest))
        params = append(params, blah, fah)
        for _, p := range rest {
            params = append(params, p)
        }
        r := m.TrackCall("donit", params...)
        var r_0 int
        if len(r) > 0 && r[0] != nil {
            r_0 = r[0].(int)
        }
        var r_1 error
        if len(r) > 1 && r[1] != nil {
            r_1 = r[1].(error)
        }
        return r_0, r_1
    }

Results the test never set keep their zero value.
"""

from __future__ import annotations

from dataclasses import dataclass

from .gosource.model import FuncType, InlineType, MethodSignature, Param, PointerType, Result, SliceType, TypeName
from .gosource.syntax import (
    Assign,
    Binary,
    Call,
    Define,
    Expr,
    ExprStmt,
    FuncDecl,
    Ident,
    If,
    Index,
    IntLit,
    RangeFor,
    Return,
    Selector,
    Stmt,
    StringLit,
    TypeArg,
    TypeAssert,
    VarDecl,
)
from .imports import type_qualifiers

EMPTY_INTERFACE = InlineType(kind="interface", text="interface{}")

# Builtins the generated body calls; a parameter with one of these names
# would shadow it.
_BODY_BUILTINS = frozenset({"append", "len", "make", "nil"})


@dataclass(frozen=True)
class MethodImpl:
    signature: MethodSignature
    receiver: Param
    collect: tuple[Stmt, ...]
    track: Stmt
    extract: tuple[Stmt, ...]
    ret: Return | None

    @property
    def body(self) -> tuple[Stmt, ...]:
        stmts = [*self.collect, self.track, *self.extract]
        if self.ret is not None:
            stmts.append(self.ret)
        return tuple(stmts)

    def decl(self) -> FuncDecl:
        return FuncDecl(
            name=self.signature.name,
            type=FuncType(params=self.signature.params, results=self.signature.results),
            body=self.body,
            recv=self.receiver,
        )


class _Names:
    def __init__(self, taken: set[str]):
        self._taken = set(taken)

    def fresh(self, base: str) -> str:
        name = base
        while name in self._taken:
            name += "_"
        self._taken.add(name)
        return name


def emitted_params(params: tuple[Param, ...], *, reserved: frozenset[str] = frozenset()) -> tuple[Param, ...]:
    """Give every parameter a usable name.

    Go parameters are either all named or all unnamed. Unnamed and blank
    parameters become `p0`, `p1`, ...; names that would shadow a builtin the
    body calls, or one of the `reserved` package names the body's types
    refer to, get a trailing underscore.
    """
    avoid = _BODY_BUILTINS | reserved
    if all(p.name is None for p in params):
        positional = _Names(set(avoid))
        return tuple(
            Param(name=positional.fresh(f"p{i}"), type=p.type, variadic=p.variadic, group=p.group)
            for i, p in enumerate(params)
        )

    names = _Names({p.name for p in params if p.name and p.name != "_"} | avoid)
    out: list[Param] = []
    for i, p in enumerate(params):
        name = p.name
        if name is None or name == "_":
            name = names.fresh(f"p{i}")
        elif name in avoid:
            name = names.fresh(name + "_")
        out.append(Param(name=name, type=p.type, variadic=p.variadic, group=p.group))
    return tuple(out)


def synthesize_method(sig: MethodSignature, *, mock_name: str, receiver: str = "m") -> MethodImpl:
    # `url *url.URL` is legal in the interface, but inside the body the
    # parameter would hide the package the result types are spelled with.
    packages = frozenset(type_qualifiers(*(p.type for p in sig.params), *(r.type for r in sig.results)))
    params = emitted_params(sig.params, reserved=packages)
    results = tuple(Result(name=None, type=r.type) for r in sig.results)
    out_sig = MethodSignature(name=sig.name, params=params, results=results, location=sig.location)

    names = _Names({p.name for p in params if p.name} | packages)
    recv_name = names.fresh(receiver)
    params_var = names.fresh("params")
    collect = _collect_params(out_sig, params_var, names)

    result_var = names.fresh("r") if results else None
    track = _track_call(out_sig, recv_name, params_var, result_var=result_var)
    extract: tuple[Stmt, ...] = ()
    ret: Return | None = None
    if result_var is not None:
        extract, ret = _extract_results(out_sig, result_var, names)

    return MethodImpl(
        signature=out_sig,
        receiver=Param(name=recv_name, type=PointerType(elem=TypeName(mock_name))),
        collect=collect,
        track=track,
        extract=extract,
        ret=ret,
    )


def _collect_params(sig: MethodSignature, params_var: str, names: _Names) -> tuple[Stmt, ...]:
    fixed = sig.fixed_params
    variadic = sig.variadic

    capacity: Expr = IntLit(len(fixed))
    if variadic is not None:
        var_len = Call(Ident("len"), (Ident(variadic.name or ""),))
        capacity = var_len if not fixed else Binary(IntLit(len(fixed)), "+", var_len)

    stmts: list[Stmt] = [
        Define(
            names=(params_var,),
            values=(Call(Ident("make"), (TypeArg(SliceType(EMPTY_INTERFACE)), IntLit(0), capacity)),),
        )
    ]
    if fixed:
        stmts.append(
            Assign(
                lhs=(Ident(params_var),),
                rhs=(Call(Ident("append"), (Ident(params_var), *(Ident(p.name or "") for p in fixed))),),
            )
        )
    if variadic is not None:
        elem = names.fresh("p")
        stmts.append(
            RangeFor(
                key="_",
                value=elem,
                x=Ident(variadic.name or ""),
                body=(
                    Assign(
                        lhs=(Ident(params_var),),
                        rhs=(Call(Ident("append"), (Ident(params_var), Ident(elem))),),
                    ),
                ),
            )
        )
    return tuple(stmts)


def _track_call(sig: MethodSignature, recv: str, params_var: str, *, result_var: str | None) -> Stmt:
    call = Call(
        Selector(Ident(recv), "TrackCall"),
        (StringLit(sig.name), Ident(params_var)),
        spread=True,
    )
    if result_var is None:
        return ExprStmt(call)
    return Define(names=(result_var,), values=(call,))


def _extract_results(sig: MethodSignature, result_var: str, names: _Names) -> tuple[tuple[Stmt, ...], Return]:
    stmts: list[Stmt] = []
    locals_: list[Ident] = []
    r = Ident(result_var)
    for i, res in enumerate(sig.results):
        local = names.fresh(f"{result_var}_{i}")
        locals_.append(Ident(local))
        stmts.append(VarDecl(name=local, type=res.type))
        stmts.append(
            If(
                cond=Binary(
                    Binary(Call(Ident("len"), (r,)), ">", IntLit(i)),
                    "&&",
                    Binary(Index(r, IntLit(i)), "!=", Ident("nil")),
                ),
                body=(Assign(lhs=(Ident(local),), rhs=(TypeAssert(Index(r, IntLit(i)), res.type),)),),
            )
        )
    return tuple(stmts), Return(results=tuple(locals_))
