from __future__ import annotations

import logging

import pytest

from genmock.errors import ImportConflictError
from genmock.gosource.model import FuncType, ImportSpec, InlineType, MethodSignature, Param, Result, SliceType, TypeName
from genmock.gosource.syntax import FuncDecl
from genmock.imports import resolve_imports, used_qualifiers
from genmock.synth import synthesize_method


def _method_decl(*params: Param, results: tuple[Result, ...] = ()):
    sig = MethodSignature("M", params=params, results=results)
    return synthesize_method(sig, mock_name="Mock").decl()


def test_used_qualifiers_sees_variadic_and_result_types():
    variadic_only = _method_decl(Param("rs", TypeName("Reader", package="io"), variadic=True))
    result_only = _method_decl(results=(Result(None, TypeName("Duration", package="time")),))
    used = used_qualifiers([variadic_only, result_only])
    assert {"io", "time"} <= used


def test_used_qualifiers_sees_inline_literal_packages():
    d = FuncDecl(
        name="F",
        type=FuncType(params=(Param("x", InlineType("struct", "struct{ T time.Time }", packages=frozenset({"time"}))),)),
        body=(),
    )
    assert used_qualifiers([d]) == {"time"}


def test_resolve_imports_drops_unused_and_sorts():
    decl = _method_decl(
        Param("w", TypeName("Writer", package="io")),
        results=(Result(None, SliceType(TypeName("Duration", package="time"))),),
    )
    original = [ImportSpec("time"), ImportSpec("strings"), ImportSpec("io")]
    out = resolve_imports(original, [decl], always=[ImportSpec("github.com/philpearl/ut")])
    assert out == [ImportSpec("github.com/philpearl/ut"), ImportSpec("io"), ImportSpec("time")]


def test_resolve_imports_keeps_aliases_and_drops_redundant_ones():
    decl = _method_decl(
        Param("a", TypeName("Node", package="yml")),
        Param("b", TypeName("Context", package="context")),
    )
    original = [ImportSpec("gopkg.in/yaml.v3", alias="yml"), ImportSpec("context", alias="context")]
    assert resolve_imports(original, [decl]) == [
        ImportSpec("context"),
        ImportSpec("gopkg.in/yaml.v3", alias="yml"),
    ]


def test_resolve_imports_skips_blank_and_dot_imports(caplog):
    decl = _method_decl(Param("x", TypeName("int")))
    original = [ImportSpec("embed", alias="_"), ImportSpec("example.com/dsl", alias=".")]
    with caplog.at_level(logging.WARNING, logger="genmock.imports"):
        assert resolve_imports(original, [decl]) == []
    assert "dot import of example.com/dsl ignored" in caplog.text


def test_resolve_imports_dedupes_required_and_original():
    decl = _method_decl(Param("t", TypeName("T", package="testing")))
    out = resolve_imports([ImportSpec("testing")], [decl], required=[ImportSpec("testing")])
    assert out == [ImportSpec("testing")]


def test_resolve_imports_name_conflict():
    decl = _method_decl(Param("x", TypeName("Thing", package="shop")))
    with pytest.raises(ImportConflictError, match=r"shop would refer to both"):
        resolve_imports(
            [ImportSpec("example.com/other/shop")],
            [decl],
            required=[ImportSpec("example.com/shop")],
        )


def test_resolve_imports_path_conflict():
    decl = _method_decl(Param("x", TypeName("Thing", package="s")), Param("y", TypeName("Thing", package="shop")))
    with pytest.raises(ImportConflictError, match=r"needed both as s and as shop"):
        resolve_imports(
            [ImportSpec("example.com/shop")],
            [decl],
            required=[ImportSpec("example.com/shop", alias="s")],
        )


def test_used_qualifiers_ignores_receiver_and_locals():
    decl = _method_decl(Param("x", TypeName("int")), results=(Result(None, TypeName("int")),))
    used = used_qualifiers([decl])
    assert used.isdisjoint({"m", "params", "r", "x"})


def test_resolve_imports_drops_import_aliased_like_receiver():
    decl = _method_decl(Param("x", TypeName("int")), results=(Result(None, TypeName("int")),))
    assert resolve_imports([ImportSpec("math", alias="m")], [decl]) == []
