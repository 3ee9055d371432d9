"""Boilerplate shared by every mock, whatever the interface looks like.

For a mock named MockFred this produces:

    type MockFred struct {
        ut.CallTracker
    }

    func NewMockFred(t *testing.T) *MockFred {
        return &MockFred{ut.NewCallRecords(t)}
    }

    func (m *MockFred) AddCall(name string, params ...interface{}) *MockFred {
        switch name {
        case "doit", "sanit":
        default:
            panic(fmt.Errorf("AddCall: %T has no method %s", m, name))
        }
        m.CallTracker.AddCall(name, params...)
        return m
    }

    func (m *MockFred) SetReturns(params ...interface{}) *MockFred {
        m.CallTracker.SetReturns(params...)
        return m
    }

The wrappers return *MockFred rather than the tracker interface so calls can
be chained: mf.AddCall("doit", "x").SetReturns(5).
"""

from __future__ import annotations

from .config import TrackerRuntime, Visibility
from .errors import UnsupportedTypeShapeError
from .gosource.model import FuncType, Param, PointerType, Result, TypeName
from .gosource.syntax import (
    Call,
    CaseClause,
    CompositeLit,
    Decl,
    ExprStmt,
    FuncDecl,
    Ident,
    PackageRef,
    Return,
    Selector,
    StringLit,
    StructDecl,
    StructField,
    Switch,
    Unary,
)
from .synth import EMPTY_INTERFACE

TESTING_IMPORT = "testing"
FMT_IMPORT = "fmt"

_RECV = "m"


def constructor_name(mock_name: str, visibility: Visibility) -> str:
    """Return the constructor name for a mock type.

    Exported: MockFred -> NewMockFred. Unexported: mockFred -> newMockFred.
    """
    stem = mock_name[:1].upper() + mock_name[1:]
    if visibility is Visibility.UNEXPORTED:
        return "new" + stem
    return "New" + stem


def check_method_names(method_names: list[str], tracker: TrackerRuntime) -> None:
    """Reject interface methods that would collide with the scaffold.

    The mock declares AddCall and SetReturns itself, calls TrackCall on the
    embedded tracker and has a field named after the tracker interface.
    """
    reserved = {"AddCall", "SetReturns", "TrackCall", tracker.interface}
    clashes = [n for n in dict.fromkeys(method_names) if n in reserved]
    if clashes:
        raise UnsupportedTypeShapeError(
            f"method {', '.join(clashes)} collides with the mock's {tracker.interface} helpers"
        )


def build_scaffold(
    mock_name: str,
    method_names: list[str],
    *,
    visibility: Visibility,
    tracker: TrackerRuntime,
) -> list[Decl]:
    tracker_type = TypeName(tracker.interface, package=tracker.package)
    mock_ptr = PointerType(TypeName(mock_name))
    recv = Param(name=_RECV, type=mock_ptr)
    embedded = Selector(Ident(_RECV), tracker.interface)

    struct = StructDecl(name=mock_name, fields=(StructField(name=None, type=tracker_type),))

    constructor = FuncDecl(
        name=constructor_name(mock_name, visibility),
        type=FuncType(
            params=(Param(name="t", type=PointerType(TypeName("T", package=TESTING_IMPORT))),),
            results=(Result(name=None, type=mock_ptr),),
        ),
        body=(
            Return(
                results=(
                    Unary(
                        "&",
                        CompositeLit(
                            type=TypeName(mock_name),
                            elts=(Call(Selector(PackageRef(tracker.package), tracker.constructor), (Ident("t"),)),),
                        ),
                    ),
                )
            ),
        ),
    )

    variadic_any = Param(name="params", type=EMPTY_INTERFACE, variadic=True)

    add_call = FuncDecl(
        name="AddCall",
        recv=recv,
        type=FuncType(
            params=(Param(name="name", type=TypeName("string")), variadic_any),
            results=(Result(name=None, type=mock_ptr),),
        ),
        body=(
            _method_name_switch(method_names),
            ExprStmt(Call(Selector(embedded, "AddCall"), (Ident("name"), Ident("params")), spread=True)),
            Return(results=(Ident(_RECV),)),
        ),
    )

    set_returns = FuncDecl(
        name="SetReturns",
        recv=recv,
        type=FuncType(params=(variadic_any,), results=(Result(name=None, type=mock_ptr),)),
        body=(
            ExprStmt(Call(Selector(embedded, "SetReturns"), (Ident("params"),), spread=True)),
            Return(results=(Ident(_RECV),)),
        ),
    )

    return [struct, constructor, add_call, set_returns]


def _method_name_switch(method_names: list[str]) -> Switch:
    # Duplicate case values do not compile, so list each name once.
    unique = list(dict.fromkeys(method_names))
    clauses: list[CaseClause] = []
    if unique:
        clauses.append(CaseClause(values=tuple(StringLit(n) for n in unique)))
    clauses.append(
        CaseClause(
            values=None,
            body=(
                ExprStmt(
                    Call(
                        Ident("panic"),
                        (
                            Call(
                                Selector(PackageRef(FMT_IMPORT), "Errorf"),
                                (StringLit("AddCall: %T has no method %s"), Ident(_RECV), Ident("name")),
                            ),
                        ),
                    )
                ),
            ),
        )
    )
    return Switch(tag=Ident("name"), clauses=tuple(clauses))
