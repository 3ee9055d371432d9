"""Typed model of the Go declarations genmock reads.

Only what mock generation needs is modelled: the package clause, imports and
type declarations. Everything is frozen; stages build new values instead of
editing these in place.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Union

_MAJOR_VERSION_RE = re.compile(r"^v[0-9]+$")
_DOT_VERSION_RE = re.compile(r"\.v[0-9]+$")


@dataclass(frozen=True)
class SourceLocation:
    line: int
    column: int


@dataclass(frozen=True)
class TypeName:
    name: str
    package: str | None = None


@dataclass(frozen=True)
class PointerType:
    elem: "TypeExpr"


@dataclass(frozen=True)
class SliceType:
    elem: "TypeExpr"


@dataclass(frozen=True)
class ArrayType:
    length: str
    elem: "TypeExpr"


@dataclass(frozen=True)
class MapType:
    key: "TypeExpr"
    value: "TypeExpr"


class ChanDir(enum.Enum):
    BOTH = "both"
    SEND = "send"  # chan<- T
    RECV = "recv"  # <-chan T


@dataclass(frozen=True)
class ChanType:
    value: "TypeExpr"
    dir: ChanDir = ChanDir.BOTH


@dataclass(frozen=True)
class FuncType:
    params: tuple["Param", ...] = ()
    results: tuple["Result", ...] = ()


@dataclass(frozen=True)
class GenericType:
    base: TypeName
    args: tuple["TypeExpr", ...]


@dataclass(frozen=True)
class InlineType:
    """An inline ``struct{...}`` or ``interface{...}`` literal, kept as source text.

    ``refs`` holds the unqualified type identifiers used inside the literal so
    the qualifier can tell whether it refers to local types; ``packages`` holds
    the package qualifiers it uses.
    """

    kind: str
    text: str
    refs: frozenset[str] = frozenset()
    packages: frozenset[str] = frozenset()


TypeExpr = Union[
    TypeName,
    PointerType,
    SliceType,
    ArrayType,
    MapType,
    ChanType,
    FuncType,
    GenericType,
    InlineType,
]


@dataclass(frozen=True)
class Param:
    name: str | None
    type: TypeExpr
    variadic: bool = False
    # Params declared together (`a, b int`) share a group and print as one.
    group: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Result:
    name: str | None
    type: TypeExpr
    group: int = field(default=0, compare=False)


@dataclass(frozen=True)
class MethodSignature:
    name: str
    params: tuple[Param, ...] = ()
    results: tuple[Result, ...] = ()
    location: SourceLocation | None = field(default=None, compare=False)

    @property
    def variadic(self) -> Param | None:
        if self.params and self.params[-1].variadic:
            return self.params[-1]
        return None

    @property
    def fixed_params(self) -> tuple[Param, ...]:
        if self.variadic is not None:
            return self.params[:-1]
        return self.params


def default_import_name(path: str) -> str:
    """Return the conventional package name for an import path.

    This is the last path element, skipping a trailing major-version element
    (`example.com/mod/v2` -> `mod`) and dropping a `.vN` suffix
    (`gopkg.in/yaml.v3` -> `yaml`).
    """
    parts = [p for p in path.split("/") if p]
    if not parts:
        return path
    name = parts[-1]
    if _MAJOR_VERSION_RE.match(name) and len(parts) > 1:
        name = parts[-2]
    return _DOT_VERSION_RE.sub("", name)


@dataclass(frozen=True)
class ImportSpec:
    path: str
    alias: str | None = None

    @property
    def default_name(self) -> str:
        return default_import_name(self.path)

    @property
    def local_name(self) -> str:
        return self.alias or self.default_name

    def normalized(self) -> "ImportSpec":
        """Drop an alias that only repeats the default name."""
        if self.alias is not None and self.alias == self.default_name:
            return ImportSpec(path=self.path)
        return self


class DeclKind(enum.Enum):
    INTERFACE = "interface"
    STRUCT = "struct"
    ALIAS = "alias"
    TYPE = "type"


@dataclass(frozen=True)
class Declaration:
    name: str
    kind: DeclKind
    location: SourceLocation | None = field(default=None, compare=False)
    type_params: tuple[str, ...] = ()
    # Interfaces only: embedded type references and own methods, each in
    # declaration order.
    embeds: tuple[TypeExpr, ...] = ()
    methods: tuple[MethodSignature, ...] = ()


@dataclass(frozen=True)
class SourceUnit:
    package: str
    imports: tuple[ImportSpec, ...] = ()
    declarations: tuple[Declaration, ...] = ()
    filename: str | None = None

    def lookup(self, name: str) -> Declaration | None:
        for d in self.declarations:
            if d.name == name:
                return d
        return None

    @property
    def type_names(self) -> frozenset[str]:
        return frozenset(d.name for d in self.declarations)
