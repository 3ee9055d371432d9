from __future__ import annotations

from pathlib import Path

import pytest

from genmock import GenerateOptions, Visibility, generate_mock, render_mock, write_mock
from genmock.config import TrackerRuntime
from genmock.errors import ConfigError, InputError, InterfaceNotFoundError, UnsupportedTypeShapeError
from genmock.gosource.model import ImportSpec


def test_generate_fred_matches_golden(testdata):
    opts = GenerateOptions(filename=testdata / "fred.go", interface="Fred", package="example")
    expected = (testdata / "mockfred.golden").read_text(encoding="utf-8")
    assert render_mock(opts) == expected


def test_generate_is_idempotent(testdata):
    opts = GenerateOptions(filename=testdata / "shop.go", interface="Store", package="shop")
    assert render_mock(opts) == render_mock(opts)


def test_generate_fred_summary(testdata):
    mock = generate_mock(GenerateOptions(filename=testdata / "fred.go", interface="Fred", package="example"))
    assert mock.mock_name == "MockFred"
    assert mock.constructor == "NewMockFred"
    assert mock.tracker == "CallTracker"
    assert [m.signature.name for m in mock.methods] == ["sanit", "iit", "many", "doit", "donit", "adonit"]
    assert [i.path for i in mock.imports] == ["fmt", "github.com/philpearl/ut", "testing"]


def test_write_mock_defaults_outfile_to_lowercased_interface(testdata, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = write_mock(GenerateOptions(filename=testdata / "fred.go", interface="Fred", package="example"))
    assert out == Path("mockfred.go")
    assert (tmp_path / "mockfred.go").read_text(encoding="utf-8") == (testdata / "mockfred.golden").read_text(
        encoding="utf-8"
    )


def test_generate_nested_interface_unexported(testdata, tmp_path):
    outfile = tmp_path / "mock_interface4_test.go"
    write_mock(
        GenerateOptions(
            filename=testdata / "interfaces.go",
            interface="Interface4",
            package="testcode",
            outfile=outfile,
            mock_name="mockInterface4",
            visibility=Visibility.UNEXPORTED,
        )
    )
    text = outfile.read_text(encoding="utf-8")
    assert "func newMockInterface4(t *testing.T) *mockInterface4 {" in text
    assert '\tcase "Method1", "Method2", "Method3", "Method4":\n' in text
    for n in range(1, 5):
        assert f"func (m *mockInterface4) Method{n}(value{n} string) error {{" in text


def test_generate_same_package_keeps_local_types_bare(testdata):
    text = render_mock(GenerateOptions(filename=testdata / "shop.go", interface="Store", package="shop"))
    assert "func (m *MockStore) Get(ctx context.Context, id string) (*Widget, error) {" in text
    assert "\t\tr_0 = r[0].(*Widget)" in text
    assert "shop." not in text


def test_generate_other_package_qualifies_and_imports_source(testdata):
    mock = generate_mock(
        GenerateOptions(
            filename=testdata / "shop.go",
            interface="Store",
            package="shopmock",
            source_import="example.com/app/shop",
        )
    )
    assert [i.path for i in mock.imports] == [
        "context",
        "example.com/app/shop",
        "fmt",
        "github.com/philpearl/ut",
        "io",
        "testing",
        "time",
    ]
    sigs = {m.signature.name: m for m in mock.methods}
    assert sigs["List"].signature.results[0].type.elem.package == "shop"


def test_generate_other_package_custom_qualifier(testdata):
    text = render_mock(
        GenerateOptions(
            filename=testdata / "shop.go",
            interface="Store",
            package="shopmock",
            source_import="example.com/app/shop",
            qualifier="sh",
        )
    )
    assert '\tsh "example.com/app/shop"\n' in text
    assert "func (m *MockStore) List(filter map[string]sh.Colour) []sh.Widget {" in text
    assert "\t\tr_0 = r[0].(<-chan sh.Widget)" in text
    assert "func (m *MockStore) Export(w io.Writer, widgets ...*sh.Widget) error {" in text


def test_generate_other_package_without_local_types_needs_no_source_import(testdata):
    mock = generate_mock(
        GenerateOptions(filename=testdata / "interfaces.go", interface="Interface4", package="mocks")
    )
    assert ImportSpec("testing") in mock.imports
    assert all("testcode" not in i.path for i in mock.imports)


def test_generate_other_package_requires_source_import(testdata):
    opts = GenerateOptions(filename=testdata / "shop.go", interface="Store", package="shopmock")
    with pytest.raises(ConfigError, match=r"--source-import"):
        generate_mock(opts)


def test_generate_imports_only_used_in_variadic_loop(tmp_path):
    src = tmp_path / "sink.go"
    src.write_text(
        "\n".join(
            [
                "package sink",
                "",
                'import (',
                '\t"io"',
                '\t"net/http"',
                ")",
                "",
                "type Sink interface {",
                "\tWrite(ws ...io.Writer)",
                "}",
                "",
            ]
        ),
        encoding="utf-8",
    )
    mock = generate_mock(GenerateOptions(filename=src, interface="Sink", package="sink"))
    paths = [i.path for i in mock.imports]
    assert "io" in paths
    assert "net/http" not in paths


def test_generate_custom_tracker(testdata):
    text = render_mock(
        GenerateOptions(
            filename=testdata / "fred.go",
            interface="Fred",
            package="example",
            tracker=TrackerRuntime(import_path="example.com/calls"),
        )
    )
    assert '\t"example.com/calls"\n' in text
    assert "\tcalls.CallTracker\n" in text
    assert "philpearl" not in text


def test_generate_tracker_from_environment(testdata, monkeypatch):
    monkeypatch.setenv("GENMOCK_TRACKER_IMPORT", "example.com/track")
    mock = generate_mock(GenerateOptions(filename=testdata / "fred.go", interface="Fred", package="example"))
    assert ImportSpec("example.com/track") in mock.imports


def test_generate_duplicate_methods_warn(tmp_path, caplog):
    src = tmp_path / "dup.go"
    src.write_text(
        "package dup\n\ntype A interface {\n\tClose() error\n}\n\n"
        "type B interface {\n\tA\n\tClose() error\n}\n",
        encoding="utf-8",
    )
    mock = generate_mock(GenerateOptions(filename=src, interface="B", package="dup"))
    assert [m.signature.name for m in mock.methods] == ["Close", "Close"]
    assert "duplicate methods Close" in caplog.text


def test_generate_missing_interface(testdata):
    with pytest.raises(InterfaceNotFoundError):
        generate_mock(GenerateOptions(filename=testdata / "fred.go", interface="Barney", package="example"))


def test_generate_missing_file(tmp_path):
    with pytest.raises(InputError, match=r"cannot read"):
        generate_mock(GenerateOptions(filename=tmp_path / "nope.go", interface="Fred", package="example"))


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"filename": Path(""), "interface": "Fred", "package": "example"}, "filename"),
        ({"filename": Path("x.go"), "interface": "", "package": "example"}, "interface"),
        ({"filename": Path("x.go"), "interface": "Fred", "package": ""}, "package"),
        ({"filename": Path("x.go"), "interface": "Fred", "package": "my-pkg"}, "invalid package"),
        ({"filename": Path("x.go"), "interface": "Fred", "package": "p", "mock_name": "1x"}, "invalid mock"),
        ({"filename": Path("x.go"), "interface": "Fred", "package": "p", "qualifier": "a.b"}, "invalid qualifier"),
    ],
)
def test_options_validation(kwargs, message):
    with pytest.raises(ConfigError, match=message):
        GenerateOptions(**kwargs).resolved()


def test_generate_drops_source_import_aliased_like_receiver(tmp_path):
    src = tmp_path / "calc.go"
    src.write_text(
        "\n".join(
            [
                "package calc",
                "",
                'import m "math"',
                "",
                "var Pi = m.Pi",
                "",
                "type Calc interface {",
                "\tAdd(x, y int) int",
                "}",
                "",
            ]
        ),
        encoding="utf-8",
    )
    text = render_mock(GenerateOptions(filename=src, interface="Calc", package="calc"))
    assert '"math"' not in text
    assert "func (m *MockCalc) Add(x, y int) int {" in text


def test_generate_param_named_after_package(tmp_path):
    src = tmp_path / "web.go"
    src.write_text(
        'package web\n\nimport "net/url"\n\ntype Fetcher interface {\n\tFetch(url *url.URL) (*url.URL, error)\n}\n',
        encoding="utf-8",
    )
    mock = generate_mock(GenerateOptions(filename=src, interface="Fetcher", package="web"))
    assert ImportSpec("net/url") in mock.imports
    assert [p.name for p in mock.methods[0].signature.params] == ["url_"]


def test_generate_rejects_method_named_like_scaffold(tmp_path):
    src = tmp_path / "rec.go"
    src.write_text("package rec\n\ntype Recorder interface {\n\tAddCall(name string)\n}\n", encoding="utf-8")
    with pytest.raises(UnsupportedTypeShapeError, match=r"method AddCall collides"):
        generate_mock(GenerateOptions(filename=src, interface="Recorder", package="rec"))


def test_options_defaults_are_never_none():
    opts = GenerateOptions(filename=Path("fred.go"), interface="Fred", package="example")
    assert opts.mock_type_name == "MockFred"
    assert opts.output_path == Path("mockfred.go")
    resolved = opts.resolved()
    assert (resolved.mock_name, resolved.outfile) == ("MockFred", Path("mockfred.go"))

    custom = GenerateOptions(
        filename=Path("fred.go"), interface="Fred", package="example", mock_name="fakeFred", outfile=Path("x.go")
    )
    assert (custom.mock_type_name, custom.output_path) == ("fakeFred", Path("x.go"))
