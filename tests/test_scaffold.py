from __future__ import annotations

import pytest

from genmock.config import TrackerRuntime, Visibility
from genmock.errors import UnsupportedTypeShapeError
from genmock.gosource.printer import format_decl
from genmock.scaffold import build_scaffold, check_method_names, constructor_name


def test_constructor_name_follows_visibility():
    assert constructor_name("MockFred", Visibility.EXPORTED) == "NewMockFred"
    assert constructor_name("mockFred", Visibility.UNEXPORTED) == "newMockFred"
    assert constructor_name("mockFred", Visibility.EXPORTED) == "NewMockFred"


def test_build_scaffold_renders_struct_constructor_and_wrappers():
    decls = build_scaffold(
        "MockFred",
        ["sanit", "doit", "sanit"],
        visibility=Visibility.EXPORTED,
        tracker=TrackerRuntime(),
    )
    assert "\n\n".join(format_decl(d) for d in decls) == "\n".join(
        [
            "type MockFred struct {",
            "\tut.CallTracker",
            "}",
            "",
            "func NewMockFred(t *testing.T) *MockFred {",
            "\treturn &MockFred{ut.NewCallRecords(t)}",
            "}",
            "",
            "func (m *MockFred) AddCall(name string, params ...interface{}) *MockFred {",
            "\tswitch name {",
            '\tcase "sanit", "doit":',
            "\tdefault:",
            '\t\tpanic(fmt.Errorf("AddCall: %T has no method %s", m, name))',
            "\t}",
            "\tm.CallTracker.AddCall(name, params...)",
            "\treturn m",
            "}",
            "",
            "func (m *MockFred) SetReturns(params ...interface{}) *MockFred {",
            "\tm.CallTracker.SetReturns(params...)",
            "\treturn m",
            "}",
        ]
    )


def test_build_scaffold_uses_tracker_package_name():
    tracker = TrackerRuntime(import_path="example.com/testing/calltrack/v2")
    assert tracker.package == "calltrack"
    decls = build_scaffold("mockStore", [], visibility=Visibility.UNEXPORTED, tracker=tracker)
    text = "\n\n".join(format_decl(d) for d in decls)
    assert "\tcalltrack.CallTracker\n" in text
    assert "func newMockStore(t *testing.T) *mockStore {" in text
    assert "\treturn &mockStore{calltrack.NewCallRecords(t)}" in text
    # No methods: every AddCall panics.
    assert "\tswitch name {\n\tdefault:\n" in text


@pytest.mark.parametrize("method", ["AddCall", "SetReturns", "TrackCall", "CallTracker"])
def test_check_method_names_rejects_scaffold_collisions(method):
    with pytest.raises(UnsupportedTypeShapeError, match=rf"method {method} collides"):
        check_method_names(["Get", method], TrackerRuntime())


def test_check_method_names_allows_ordinary_methods():
    check_method_names(["Get", "Put", "AssertDone"], TrackerRuntime())
