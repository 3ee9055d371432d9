"""Resolve an interface and everything it embeds into one method list."""

from __future__ import annotations

import logging

from .errors import InterfaceNotFoundError, UnresolvedEmbedError, UnsupportedTypeShapeError
from .gosource.model import DeclKind, GenericType, InlineType, MethodSignature, Result, SourceUnit, TypeName
from .gosource.printer import format_type

logger = logging.getLogger(__name__)

# Predeclared interfaces that may be embedded without a local declaration.
_PREDECLARED = {
    "error": (MethodSignature(name="Error", results=(Result(name=None, type=TypeName("string")),)),),
}


def flatten_interface(unit: SourceUnit, name: str) -> list[MethodSignature]:
    """Return every method of interface `name`, embedded interfaces first.

    Embedded interfaces are expanded depth-first in declaration order, then the
    interface's own methods follow. Nothing is reordered or deduplicated.
    """
    decl = unit.lookup(name)
    if decl is None or decl.kind is not DeclKind.INTERFACE:
        raise InterfaceNotFoundError(f"interface {name} not found in {unit.filename or 'source'}")
    if decl.type_params:
        raise UnsupportedTypeShapeError(f"generic interface {name} is not supported")
    methods = _flatten(unit, name, stack=())
    logger.debug("interface %s flattened to %d methods", name, len(methods))
    return methods


def _flatten(unit: SourceUnit, name: str, *, stack: tuple[str, ...]) -> list[MethodSignature]:
    decl = unit.lookup(name)
    assert decl is not None

    out: list[MethodSignature] = []
    for embed in decl.embeds:
        if isinstance(embed, InlineType):
            raise UnsupportedTypeShapeError(
                f"interface {name} has a type-set element {embed.text!r}; constraint interfaces cannot be mocked"
            )
        if isinstance(embed, GenericType):
            raise UnsupportedTypeShapeError(
                f"interface {name} embeds generic interface {format_type(embed)}, which is not supported"
            )
        if not isinstance(embed, TypeName) or embed.package is not None:
            raise UnresolvedEmbedError(
                f"interface {name} embeds {format_type(embed)}, which is not declared in this file"
            )
        if embed.name in stack or embed.name == name:
            raise UnresolvedEmbedError(f"interface {name} embeds itself via {embed.name}")
        target = unit.lookup(embed.name)
        if target is None and embed.name in _PREDECLARED:
            out.extend(_PREDECLARED[embed.name])
            continue
        if target is None:
            raise UnresolvedEmbedError(
                f"interface {name} embeds {embed.name}, which is not declared in this file"
            )
        if target.kind is not DeclKind.INTERFACE:
            raise UnresolvedEmbedError(f"interface {name} embeds {embed.name}, which is not an interface")
        out.extend(_flatten(unit, embed.name, stack=stack + (name,)))
    out.extend(decl.methods)
    return out


def duplicate_method_names(methods: list[MethodSignature]) -> list[str]:
    seen: set[str] = set()
    dups: list[str] = []
    for m in methods:
        if m.name in seen and m.name not in dups:
            dups.append(m.name)
        seen.add(m.name)
    return dups
