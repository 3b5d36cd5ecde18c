"""Type resolution over a SourceProject.

The checker understands the subset of the type system needed to document
declarations: named interfaces, enums, classes and aliases, unions and
intersections, object literal types, function types, the ``Pick``/``Omit``
family of utility types, and imports between project files. Anything
else resolves to an opaque type.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from scripts.docschema.analysis.nodes import (
    ExternalDeclaration,
    InterfaceDeclaration,
    MethodSignature,
    Node,
    PropertySignature,
    TypeAliasDeclaration,
)
from scripts.docschema.analysis.project import ImportBinding
from scripts.docschema.analysis.types import Symbol, Type, TypeKind

if TYPE_CHECKING:
    from scripts.docschema.analysis.project import SourceFile, SourceProject

logger = logging.getLogger(__name__)

# Built-in utility types whose properties the checker can compute
UTILITY_TYPES = {"Pick", "Omit", "Partial", "Required", "Readonly"}

# Where built-in library types are declared
LIB_FILE_PATH = "node_modules/typescript/lib/lib.es5.d.ts"

# Alias values that do not create a type of their own
TRANSPARENT_ALIAS_KINDS = {
    "type_identifier",
    "nested_type_identifier",
    "predefined_type",
    "literal_type",
    "parenthesized_type",
}

ANONYMOUS_KINDS = {
    "union_type": TypeKind.UNION,
    "intersection_type": TypeKind.INTERSECTION,
    "object_type": TypeKind.OBJECT,
    "function_type": TypeKind.FUNCTION,
    "constructor_type": TypeKind.FUNCTION,
    "array_type": TypeKind.ARRAY,
    "tuple_type": TypeKind.ARRAY,
    "readonly_type": TypeKind.ARRAY,
    "predefined_type": TypeKind.PRIMITIVE,
    "literal_type": TypeKind.LITERAL,
    "template_literal_type": TypeKind.PRIMITIVE,
}


def _node_key(node: Node) -> tuple[str, int, int, str]:
    ts_node = node.ts_node
    return (node.get_file_path(), ts_node.start_byte, ts_node.end_byte, ts_node.type)


class TypeChecker:
    """Resolve syntax nodes to types and types to their properties."""

    def __init__(self, project: "SourceProject"):
        self.project = project
        self._declared: dict[tuple, Type] = {}
        self._node_types: dict[tuple, Type] = {}
        self._external: dict[tuple[str, str], Type] = {}
        self._resolving: set[tuple] = set()

    # Symbols

    def get_symbol_by_type(self, type_: Optional[Type]) -> Optional[Symbol]:
        """Alias symbol first, then the type's own symbol."""
        if type_ is None:
            return None
        return type_.get_alias_symbol() or type_.get_symbol()

    @staticmethod
    def get_declaration_by_symbol(symbol: Optional[Symbol]):
        if symbol is None:
            return None
        declarations = symbol.get_declarations()
        return declarations[0] if declarations else None

    # Types of nodes

    def get_type_at_node(self, node: Node) -> Type:
        if isinstance(node, TypeAliasDeclaration) or node.kind in (
            "interface_declaration",
            "enum_declaration",
            "class_declaration",
            "abstract_class_declaration",
        ):
            return self.get_declared_type(node)
        if isinstance(node, (PropertySignature,)) or node.kind in (
            "required_parameter",
            "optional_parameter",
        ):
            type_node = node.get_type_node()
            if type_node is None:
                return Type(TypeKind.UNKNOWN, "any")
            return self.get_type_at_node(type_node)
        if node.is_type_node():
            return self._get_type_of_type_node(node)
        if isinstance(node, MethodSignature) or node.kind in (
            "function_declaration",
            "function_signature",
            "generator_function_declaration",
        ):
            return Type(TypeKind.FUNCTION, node.get_text(), symbol=node.get_symbol(), node=node)
        return Type(TypeKind.UNKNOWN, node.get_text())

    def _get_type_of_type_node(self, node: Node) -> Type:
        key = _node_key(node)
        cached = self._node_types.get(key)
        if cached is not None:
            return cached
        type_ = self._resolve_type_node(node)
        self._node_types[key] = type_
        return type_

    def _resolve_type_node(self, node: Node) -> Type:
        kind = node.kind
        if kind == "parenthesized_type":
            inner = node.get_named_children()
            return self.get_type_at_node(inner[0]) if inner else Type(TypeKind.UNKNOWN, "")
        if kind == "type_identifier":
            return self.resolve_type_name(node.get_text(), node)
        if kind == "nested_type_identifier":
            return self._resolve_qualified_name(node)
        if kind == "generic_type":
            return self._resolve_generic(node)
        if kind in ("union_type", "intersection_type"):
            return self._anonymous_type(node, node.get_text())
        if kind in ANONYMOUS_KINDS:
            return Type(ANONYMOUS_KINDS[kind], node.get_text(), node=node)
        return Type(TypeKind.UNKNOWN, node.get_text(), node=node)

    def _anonymous_type(self, node: Node, text: str, alias_symbol: Optional[Symbol] = None) -> Type:
        kind = ANONYMOUS_KINDS.get(node.kind, TypeKind.UNKNOWN)

        def resolve_members() -> list[Type]:
            return [self.get_type_at_node(member) for member in self._flatten(node, node.kind)]

        resolver = resolve_members if kind in (TypeKind.UNION, TypeKind.INTERSECTION) else None
        return Type(kind, text, alias_symbol=alias_symbol, node=node, member_resolver=resolver)

    def _flatten(self, node: Node, kind: str) -> list[Node]:
        """Members of a (syntactically nested) union or intersection."""
        members: list[Node] = []
        for child in node.get_named_children():
            if child.kind == kind:
                members.extend(self._flatten(child, kind))
            else:
                members.append(child)
        return members

    def _resolve_generic(self, node: Node) -> Type:
        name_node = node.get_field("name")
        if name_node is None:
            return Type(TypeKind.UNKNOWN, node.get_text())
        if name_node.kind == "nested_type_identifier":
            return self._resolve_qualified_name(name_node)

        name = name_node.get_text()
        resolved = self.resolve_type_name(name, node)
        if resolved.kind is not TypeKind.UNKNOWN or name not in UTILITY_TYPES:
            return resolved

        arguments_node = node.get_field("type_arguments")
        arguments = arguments_node.get_named_children() if arguments_node is not None else []
        target = self.get_type_at_node(arguments[0]) if arguments else None
        keys = self._literal_keys(arguments[1]) if len(arguments) > 1 else None
        lib_path = self.project.root.joinpath(LIB_FILE_PATH).as_posix()
        lib_symbol = Symbol(name, [ExternalDeclaration(name, lib_path)])
        return Type(
            TypeKind.MAPPED,
            node.get_text(),
            alias_symbol=lib_symbol,
            node=node,
            target=target,
            keys=keys,
            utility=name,
        )

    def _literal_keys(self, node: Node) -> set[str]:
        """String literal members of a key type such as ``'a' | 'b'``."""
        if node.kind == "type_identifier":
            resolved = self.resolve_type_name(node.get_text(), node)
            if resolved.node is not None and resolved.node is not node:
                return self._literal_keys(resolved.node)
            return set()
        keys = set()
        for descendant in [node, *node.for_each_descendant()]:
            if descendant.kind == "string_fragment":
                keys.add(descendant.get_text())
        return keys

    # Name resolution

    def resolve_type_name(self, name: str, node: Node) -> Type:
        """Resolve an identifier in a type position.

        Lookup order: type parameters of enclosing declarations, top-level
        declarations of the same file, imports, global declarations of
        non-module files.
        """
        scope = node.get_parent()
        while scope is not None:
            if hasattr(scope, "get_type_parameter_names") and name in scope.get_type_parameter_names():
                return Type(TypeKind.TYPE_PARAMETER, name)
            scope = scope.get_parent()

        source_file = node.get_source_file()
        declaration = source_file.get_local_type_declaration(name)
        if declaration is not None:
            return self.get_declared_type(declaration)

        binding = source_file.get_import(name)
        if binding is not None:
            return self._resolve_binding(binding, source_file)

        for other in self.project.get_source_files():
            if other.is_module or other is source_file:
                continue
            declaration = other.get_local_type_declaration(name)
            if declaration is not None:
                return self.get_declared_type(declaration)

        return Type(TypeKind.UNKNOWN, name)

    def _resolve_binding(self, binding: ImportBinding, source_file: "SourceFile") -> Type:
        resolved = self.project.resolve_binding(binding, source_file)
        if isinstance(resolved, ImportBinding):
            return self._external_type(resolved.specifier, resolved.imported_name or resolved.local_name)
        if resolved is None:
            return Type(TypeKind.UNKNOWN, binding.local_name)
        return self.get_declared_type(resolved)

    def _resolve_qualified_name(self, node: Node) -> Type:
        module = node.get_field("module")
        name = node.get_field("name")
        if module is None or name is None:
            return Type(TypeKind.UNKNOWN, node.get_text())
        source_file = node.get_source_file()
        binding = source_file.get_import(module.get_text().split(".")[0])
        if binding is None:
            return Type(TypeKind.UNKNOWN, node.get_text())
        if self.project.is_external_specifier(binding.specifier):
            return self._external_type(binding.specifier, name.get_text())
        namespace_binding = ImportBinding(name.get_text(), binding.specifier, name.get_text())
        return self._resolve_binding(namespace_binding, source_file)

    def _external_type(self, specifier: str, name: str) -> Type:
        key = (specifier, name)
        if key not in self._external:
            path = self.project.external_module_path(specifier)
            symbol = Symbol(name, [ExternalDeclaration(name, path)])
            self._external[key] = Type(TypeKind.EXTERNAL, name, symbol=symbol)
        return self._external[key]

    # Declared types

    def get_declared_type(self, declaration: Node) -> Type:
        """The type introduced by a named declaration, created once."""
        key = _node_key(declaration)
        cached = self._declared.get(key)
        if cached is not None:
            return cached

        name = declaration.get_name()
        if isinstance(declaration, TypeAliasDeclaration):
            return self._declare_alias(declaration, key)

        kind = {
            "interface_declaration": TypeKind.INTERFACE,
            "enum_declaration": TypeKind.ENUM,
        }.get(declaration.kind, TypeKind.CLASS)
        type_ = Type(kind, name, symbol=declaration.get_symbol(), node=declaration)
        self._declared[key] = type_
        return type_

    def _declare_alias(self, declaration: TypeAliasDeclaration, key: tuple) -> Type:
        value = declaration.get_type_node()
        while value is not None and value.kind == "parenthesized_type":
            inner = value.get_named_children()
            value = inner[0] if inner else None
        if value is None:
            return Type(TypeKind.UNKNOWN, declaration.get_name())

        if value.kind in TRANSPARENT_ALIAS_KINDS or (
            value.kind == "generic_type" and self._is_reference(value)
        ):
            # An alias of a reference or primitive is the referenced type itself
            if key in self._resolving:
                logger.debug(f"Circular type alias {declaration.get_name()} in {declaration.get_file_path()}")
                return Type(TypeKind.UNKNOWN, declaration.get_name())
            self._resolving.add(key)
            try:
                type_ = self.get_type_at_node(value)
            finally:
                self._resolving.discard(key)
            self._declared[key] = type_
            return type_

        alias_symbol = declaration.get_symbol()
        if value.kind == "generic_type":
            # Pick<...>/Omit<...>: keep the computed members, name it after the alias
            mapped = self.get_type_at_node(value)
            type_ = Type(
                mapped.kind,
                declaration.get_name(),
                alias_symbol=alias_symbol,
                node=value,
                target=mapped.target,
                keys=mapped.keys,
                utility=mapped.utility,
            )
        else:
            type_ = self._anonymous_type(value, declaration.get_name(), alias_symbol)
        self._declared[key] = type_
        return type_

    def _is_reference(self, node: Node) -> bool:
        name_node = node.get_field("name")
        if name_node is None:
            return False
        if name_node.kind == "nested_type_identifier":
            return True
        name = name_node.get_text()
        return name not in UTILITY_TYPES or (
            self.resolve_type_name(name, node).kind is not TypeKind.UNKNOWN
        )

    # Properties

    def get_properties_of_type(self, type_: Type) -> list[Symbol]:
        """Every property visible on a type, inherited ones included."""
        return self._collect_properties(type_, set())

    def _collect_properties(self, type_: Optional[Type], seen: set[int]) -> list[Symbol]:
        if type_ is None or id(type_) in seen:
            return []
        seen.add(id(type_))

        if type_.kind is TypeKind.INTERFACE and isinstance(type_.node, InterfaceDeclaration):
            properties = self._member_symbols(type_.node.get_members())
            for base in type_.node.get_extends():
                properties = _merge(properties, self._collect_properties(base.get_type(), seen))
            return properties

        if type_.kind is TypeKind.OBJECT and type_.node is not None:
            return self._member_symbols(type_.node.get_named_children())

        if type_.kind is TypeKind.INTERSECTION:
            properties: list[Symbol] = []
            for member in type_.get_intersection_types():
                properties = _merge(properties, self._collect_properties(member, set(seen)))
            return properties

        if type_.kind is TypeKind.UNION:
            members = [self._collect_properties(m, set(seen)) for m in type_.get_union_types()]
            if not members:
                return []
            common = set.intersection(*({s.get_name() for s in m} for m in members))
            return [symbol for symbol in members[0] if symbol.get_name() in common]

        if type_.kind is TypeKind.MAPPED:
            properties = self._collect_properties(type_.target, seen)
            if type_.utility == "Pick":
                return [s for s in properties if s.get_name() in (type_.keys or set())]
            if type_.utility == "Omit":
                return [s for s in properties if s.get_name() not in (type_.keys or set())]
            return properties

        return []

    @staticmethod
    def _member_symbols(members: list[Node]) -> list[Symbol]:
        symbols = []
        for member in members:
            if isinstance(member, (PropertySignature, MethodSignature)):
                symbol = member.get_symbol()
                if symbol is not None and symbol.get_name():
                    symbols.append(symbol)
        return symbols


def _merge(own: list[Symbol], inherited: list[Symbol]) -> list[Symbol]:
    """Append inherited properties not overridden by own ones."""
    names = {symbol.get_name() for symbol in own}
    return own + [symbol for symbol in inherited if symbol.get_name() not in names]
