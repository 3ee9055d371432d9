"""Go source parser built on tree-sitter.

`parse` turns one Go source file into a `SourceUnit`. Only the package clause,
imports and top-level type declarations are modelled.
"""

from __future__ import annotations

import logging

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from ..errors import ParseError
from .model import (
    ArrayType,
    ChanDir,
    ChanType,
    Declaration,
    DeclKind,
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
    SourceLocation,
    SourceUnit,
    TypeExpr,
    TypeName,
)

logger = logging.getLogger(__name__)

_GO_LANGUAGE = Language(tree_sitter_go.language())
_ENCODING = "utf-8"

# Interface element node names differ between tree-sitter-go releases.
_METHOD_NODES = frozenset({"method_elem", "method_spec"})
_EMBED_WRAPPER_NODES = frozenset({"type_elem", "constraint_elem"})
_TYPE_LEAF_NODES = frozenset({"type_identifier", "qualified_type", "generic_type"})


def _get_parser() -> Parser:
    parser = Parser()
    parser.language = _GO_LANGUAGE
    return parser


def parse(source_text: str, *, filename: str | None = None) -> SourceUnit:
    """Parse Go source text into a `SourceUnit`.

    Raises `ParseError` when the source has syntax errors or no package clause.
    """
    source = source_text.encode(_ENCODING)
    tree = _get_parser().parse(source)
    root = tree.root_node
    b = _UnitBuilder(source, filename)

    if root.has_error:
        bad = _first_error(root) or root
        raise b.error("syntax error", bad)

    return b.build(root)


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing or child.type == "ERROR":
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _named(node: Node) -> list[Node]:
    return [c for c in node.named_children if c.type != "comment"]


class _UnitBuilder:
    def __init__(self, source: bytes, filename: str | None):
        self._source = source
        self._filename = filename
        self._group = 0

    def error(self, message: str, node: Node) -> ParseError:
        row, col = node.start_point[0], node.start_point[1]
        return ParseError(message, filename=self._filename, line=row + 1, column=col + 1)

    def text(self, node: Node) -> str:
        return self._source[node.start_byte : node.end_byte].decode(_ENCODING)

    def location(self, node: Node) -> SourceLocation:
        return SourceLocation(line=node.start_point[0] + 1, column=node.start_point[1] + 1)

    def build(self, root: Node) -> SourceUnit:
        package: str | None = None
        imports: list[ImportSpec] = []
        decls: list[Declaration] = []
        for child in _named(root):
            if child.type == "package_clause":
                for n in _named(child):
                    package = self.text(n)
            elif child.type == "import_declaration":
                imports.extend(self._imports(child))
            elif child.type == "type_declaration":
                decls.extend(self._type_declaration(child))

        if not package:
            raise ParseError("missing package clause", filename=self._filename)

        logger.debug(
            "parsed %s: package %s, %d imports, %d type declarations",
            self._filename or "<source>",
            package,
            len(imports),
            len(decls),
        )
        return SourceUnit(
            package=package,
            imports=tuple(imports),
            declarations=tuple(decls),
            filename=self._filename,
        )

    # Imports

    def _imports(self, node: Node) -> list[ImportSpec]:
        out: list[ImportSpec] = []
        for child in _named(node):
            if child.type == "import_spec":
                out.append(self._import_spec(child))
            elif child.type == "import_spec_list":
                out.extend(self._import_spec(s) for s in _named(child) if s.type == "import_spec")
        return out

    def _import_spec(self, node: Node) -> ImportSpec:
        path_node = node.child_by_field_name("path")
        if path_node is None:
            raise self.error("import without path", node)
        path = self.text(path_node).strip('"`')
        name_node = node.child_by_field_name("name")
        alias = self.text(name_node) if name_node is not None else None
        return ImportSpec(path=path, alias=alias)

    # Type declarations

    def _type_declaration(self, node: Node) -> list[Declaration]:
        out: list[Declaration] = []
        for spec in _named(node):
            if spec.type == "type_spec":
                out.append(self._type_spec(spec))
            elif spec.type == "type_alias":
                name = spec.child_by_field_name("name")
                if name is None:
                    raise self.error("type alias without name", spec)
                out.append(Declaration(name=self.text(name), kind=DeclKind.ALIAS, location=self.location(spec)))
        return out

    def _type_spec(self, node: Node) -> Declaration:
        name_node = node.child_by_field_name("name")
        type_node = node.child_by_field_name("type")
        if name_node is None or type_node is None:
            raise self.error("incomplete type declaration", node)

        type_params: list[str] = []
        tp = node.child_by_field_name("type_parameters")
        if tp is not None:
            for decl in _named(tp):
                type_params.extend(self.text(n) for n in decl.children_by_field_name("name"))

        name = self.text(name_node)
        loc = self.location(node)
        if type_node.type == "interface_type":
            embeds, methods = self._interface_body(type_node)
            return Declaration(
                name=name,
                kind=DeclKind.INTERFACE,
                location=loc,
                type_params=tuple(type_params),
                embeds=tuple(embeds),
                methods=tuple(methods),
            )
        kind = DeclKind.STRUCT if type_node.type == "struct_type" else DeclKind.TYPE
        return Declaration(name=name, kind=kind, location=loc, type_params=tuple(type_params))

    def _interface_body(self, node: Node) -> tuple[list[TypeExpr], list[MethodSignature]]:
        embeds: list[TypeExpr] = []
        methods: list[MethodSignature] = []
        elems = _named(node)
        # Older grammars wrap the elements in a list node.
        if len(elems) == 1 and elems[0].type in {"method_spec_list", "interface_body"}:
            elems = _named(elems[0])
        for elem in elems:
            if elem.type in _METHOD_NODES:
                methods.append(self._method(elem))
            elif elem.type in _EMBED_WRAPPER_NODES:
                embeds.append(self._embed(elem))
            elif elem.type in _TYPE_LEAF_NODES:
                embeds.append(self.type_expr(elem))
            else:
                raise self.error(f"unsupported interface element {elem.type}", elem)
        return embeds, methods

    def _embed(self, node: Node) -> TypeExpr:
        parts = _named(node)
        if len(parts) == 1 and parts[0].type != "negated_type":
            return self.type_expr(parts[0])
        # Union or approximation element: only meaningful as a constraint.
        return InlineType(kind="constraint", text=self.text(node))

    def _method(self, node: Node) -> MethodSignature:
        name = node.child_by_field_name("name")
        params = node.child_by_field_name("parameters")
        if name is None or params is None:
            raise self.error("incomplete method declaration", node)
        return MethodSignature(
            name=self.text(name),
            params=tuple(self._params(params)),
            results=tuple(self._results(node.child_by_field_name("result"))),
            location=self.location(node),
        )

    def _params(self, node: Node) -> list[Param]:
        out: list[Param] = []
        for decl in _named(node):
            type_node = decl.child_by_field_name("type")
            if type_node is None:
                raise self.error("parameter without type", decl)
            ty = self.type_expr(type_node)
            self._group += 1
            if decl.type == "variadic_parameter_declaration":
                name = decl.child_by_field_name("name")
                out.append(
                    Param(
                        name=self.text(name) if name is not None else None,
                        type=ty,
                        variadic=True,
                        group=self._group,
                    )
                )
                continue
            names = decl.children_by_field_name("name")
            if not names:
                out.append(Param(name=None, type=ty, group=self._group))
            for n in names:
                out.append(Param(name=self.text(n), type=ty, group=self._group))
        return out

    def _results(self, node: Node | None) -> list[Result]:
        if node is None:
            return []
        if node.type != "parameter_list":
            return [Result(name=None, type=self.type_expr(node))]
        return [Result(name=p.name, type=p.type, group=p.group) for p in self._params(node)]

    # Type expressions

    def type_expr(self, node: Node) -> TypeExpr:
        t = node.type
        if t in {"type_identifier", "identifier"}:
            return TypeName(name=self.text(node))
        if t == "qualified_type":
            pkg = node.child_by_field_name("package")
            name = node.child_by_field_name("name")
            if pkg is None or name is None:
                raise self.error("incomplete qualified type", node)
            return TypeName(name=self.text(name), package=self.text(pkg))
        if t == "pointer_type":
            return PointerType(elem=self.type_expr(_named(node)[0]))
        if t == "slice_type":
            return SliceType(elem=self.type_expr(self._field(node, "element")))
        if t == "array_type":
            return ArrayType(
                length=self.text(self._field(node, "length")),
                elem=self.type_expr(self._field(node, "element")),
            )
        if t == "implicit_length_array_type":
            return ArrayType(length="...", elem=self.type_expr(self._field(node, "element")))
        if t == "map_type":
            return MapType(
                key=self.type_expr(self._field(node, "key")),
                value=self.type_expr(self._field(node, "value")),
            )
        if t == "channel_type":
            return ChanType(value=self.type_expr(self._field(node, "value")), dir=self._chan_dir(node))
        if t == "function_type":
            params = self._field(node, "parameters")
            return FuncType(
                params=tuple(self._params(params)),
                results=tuple(self._results(node.child_by_field_name("result"))),
            )
        if t == "generic_type":
            base = self.type_expr(self._field(node, "type"))
            if not isinstance(base, TypeName):
                raise self.error("unsupported generic base type", node)
            args = self._field(node, "type_arguments")
            return GenericType(base=base, args=tuple(self._type_arg(a) for a in _named(args)))
        if t == "parenthesized_type":
            return self.type_expr(_named(node)[0])
        if t in {"struct_type", "interface_type"}:
            refs, packages = self._refs(node)
            return InlineType(kind=t.split("_")[0], text=self.text(node), refs=refs, packages=packages)
        if t in _EMBED_WRAPPER_NODES:
            return self._embed(node)
        raise self.error(f"unsupported type syntax {t}", node)

    def _type_arg(self, node: Node) -> TypeExpr:
        if node.type in _EMBED_WRAPPER_NODES:
            return self._embed(node)
        return self.type_expr(node)

    def _field(self, node: Node, name: str) -> Node:
        child = node.child_by_field_name(name)
        if child is None:
            raise self.error(f"{node.type} without {name}", node)
        return child

    def _chan_dir(self, node: Node) -> ChanDir:
        tokens = [c.type for c in node.children if not c.is_named]
        if tokens[:1] == ["<-"]:
            return ChanDir.RECV
        if tokens[:2] == ["chan", "<-"]:
            return ChanDir.SEND
        return ChanDir.BOTH

    def _refs(self, node: Node) -> tuple[frozenset[str], frozenset[str]]:
        refs: set[str] = set()
        packages: set[str] = set()
        stack = [node]
        while stack:
            n = stack.pop()
            if n.type == "qualified_type":
                pkg = n.child_by_field_name("package")
                if pkg is not None:
                    packages.add(self.text(pkg))
                continue
            if n.type == "type_identifier":
                refs.add(self.text(n))
            stack.extend(n.named_children)
        return frozenset(refs), frozenset(packages)
