"""Qualify references to types declared next to the interface.

A mock generated into another package cannot say `Widget`; it must say
`shop.Widget`. Each type expression in a signature is rebuilt recursively and
every node carries an explicit `Attachment` naming where it hangs in its
parent, so a rewritten reference always lands in the right slot.

Which types count as local:
    - a bare identifier naming a type declared at the top level of the same
      file (struct, interface, alias or defined type);
    - not a built-in (`int`, `error`, ...) unless the file redeclares it;
    - never an already package-qualified reference (`io.Reader`).
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from .errors import UnsupportedTypeShapeError
from .gosource.model import (
    ArrayType,
    ChanType,
    FuncType,
    GenericType,
    InlineType,
    MapType,
    MethodSignature,
    Param,
    PointerType,
    Result,
    SliceType,
    SourceUnit,
    TypeExpr,
    TypeName,
)

logger = logging.getLogger(__name__)


class Attachment(enum.Enum):
    PARAM = "parameter"
    VARIADIC = "variadic parameter"
    RESULT = "result"
    POINTER = "pointer target"
    ELEMENT = "slice or array element"
    MAP_KEY = "map key"
    MAP_VALUE = "map value"
    CHANNEL = "channel element"
    TYPE_ARG = "type argument"
    GENERIC_BASE = "generic type"
    INLINE_LITERAL = "inline struct or interface literal"


# Slots a qualified reference can be attached to.
_SUPPORTED = frozenset(Attachment) - {Attachment.INLINE_LITERAL}


@dataclass(frozen=True)
class LocalTypes:
    """Type names declared in the interface's own file scope."""

    names: frozenset[str]

    @classmethod
    def from_unit(cls, unit: SourceUnit) -> "LocalTypes":
        return cls(names=unit.type_names)

    def is_local(self, t: TypeName) -> bool:
        return t.package is None and t.name in self.names


@dataclass(frozen=True)
class Qualified:
    signatures: list[MethodSignature]
    # True when at least one reference was rewritten, so the generated file
    # must import the interface's package.
    added: bool


def qualify_signatures(
    signatures: list[MethodSignature], *, scope: LocalTypes, qualifier: str | None
) -> Qualified:
    """Return copies of `signatures` with local type references qualified.

    With no qualifier (the mock shares the interface's package) the input is
    returned as is.
    """
    if qualifier is None:
        return Qualified(signatures=list(signatures), added=False)

    q = _Qualifier(scope=scope, qualifier=qualifier)
    out = [q.signature(sig) for sig in signatures]
    if q.rewrites:
        logger.debug("qualified %d local type references with %s", q.rewrites, qualifier)
    return Qualified(signatures=out, added=q.rewrites > 0)


class _Qualifier:
    def __init__(self, *, scope: LocalTypes, qualifier: str):
        self.scope = scope
        self.qualifier = qualifier
        self.rewrites = 0
        self._method = ""

    def signature(self, sig: MethodSignature) -> MethodSignature:
        self._method = sig.name
        return MethodSignature(
            name=sig.name,
            params=self._params(sig.params),
            results=self._results(sig.results),
            location=sig.location,
        )

    def _params(self, params: tuple[Param, ...]) -> tuple[Param, ...]:
        return tuple(
            Param(
                name=p.name,
                type=self.type(p.type, Attachment.VARIADIC if p.variadic else Attachment.PARAM),
                variadic=p.variadic,
                group=p.group,
            )
            for p in params
        )

    def _results(self, results: tuple[Result, ...]) -> tuple[Result, ...]:
        return tuple(
            Result(name=r.name, type=self.type(r.type, Attachment.RESULT), group=r.group) for r in results
        )

    def type(self, t: TypeExpr, at: Attachment) -> TypeExpr:
        if isinstance(t, TypeName):
            if not self.scope.is_local(t):
                return t
            return self._attach(t, at)
        if isinstance(t, PointerType):
            return PointerType(elem=self.type(t.elem, Attachment.POINTER))
        if isinstance(t, SliceType):
            return SliceType(elem=self.type(t.elem, Attachment.ELEMENT))
        if isinstance(t, ArrayType):
            return ArrayType(length=t.length, elem=self.type(t.elem, Attachment.ELEMENT))
        if isinstance(t, MapType):
            return MapType(key=self.type(t.key, Attachment.MAP_KEY), value=self.type(t.value, Attachment.MAP_VALUE))
        if isinstance(t, ChanType):
            return ChanType(value=self.type(t.value, Attachment.CHANNEL), dir=t.dir)
        if isinstance(t, FuncType):
            return FuncType(params=self._params(t.params), results=self._results(t.results))
        if isinstance(t, GenericType):
            base = self.type(t.base, Attachment.GENERIC_BASE)
            assert isinstance(base, TypeName)
            return GenericType(base=base, args=tuple(self.type(a, Attachment.TYPE_ARG) for a in t.args))
        if isinstance(t, InlineType):
            local = sorted(n for n in t.refs if n in self.scope.names)
            if local:
                return self._attach(TypeName(local[0]), Attachment.INLINE_LITERAL)
            return t
        raise TypeError(f"not a type expression: {t!r}")

    def _attach(self, t: TypeName, at: Attachment) -> TypeName:
        if at not in _SUPPORTED:
            raise UnsupportedTypeShapeError(
                f"method {self._method}: local type {t.name} used in an {at.value}; "
                "cannot qualify it for another package"
            )
        self.rewrites += 1
        return TypeName(name=t.name, package=self.qualifier)
