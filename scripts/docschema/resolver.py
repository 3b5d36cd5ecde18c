"""Collect custom types referenced by documented declarations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from scripts.docschema.analysis.checker import TypeChecker
from scripts.docschema.analysis.nodes import InterfaceDeclaration, Node, TypeAliasDeclaration
from scripts.docschema.analysis.types import Type
from scripts.docschema.models import NestedTypeSchema, SchemaEntry, SchemaList
from scripts.docschema.tags import TITLE_TAG, get_declaration_tags

logger = logging.getLogger(__name__)

# Marks declarations living in third-party packages
EXTERNAL_PATH_MARKER = "/node_modules/"


@dataclass
class ResolutionContext:
    """Per-invocation state shared by the resolver and the linkifier.

    ``visited`` keeps insertion order (a dict used as an ordered set) so
    that link lookups are deterministic.
    """

    checker: TypeChecker
    formatter: Callable[[str], str]
    skip_type_names: frozenset[str] = frozenset()
    visited: dict[Type, None] = field(default_factory=dict)
    nested: SchemaList = field(default_factory=list)

    def mark_visited(self, type_: Type) -> None:
        self.visited.setdefault(type_, None)

    def has_visited(self, type_: Type) -> bool:
        return type_ in self.visited

    def visited_types(self) -> Iterable[Type]:
        return list(self.visited)

    def find_nested(self, title: str) -> Optional[SchemaEntry]:
        for entry in self.nested:
            if entry["title"] == title:
                return entry
        return None


def has_title(declaration: Any, context: ResolutionContext) -> bool:
    """Check for a ``@title`` tag; titled types are marked visited.

    A titled type is documented on its own page, so it is linked to
    rather than dumped as a nested type.
    """
    if declaration is None:
        return False
    if get_declaration_tags(declaration).title:
        if isinstance(declaration, Node):
            context.mark_visited(declaration.get_type())
        return True
    return False


def is_alias_declaration(type_: Type, checker: TypeChecker) -> bool:
    alias_symbol = type_.get_alias_symbol()
    if alias_symbol is None:
        return False
    return isinstance(checker.get_declaration_by_symbol(alias_symbol), TypeAliasDeclaration)


def is_target(type_: Type, context: ResolutionContext) -> bool:
    """Check whether a type should be dumped as a nested type."""
    if context.has_visited(type_):
        return False
    checker = context.checker
    declaration = checker.get_declaration_by_symbol(checker.get_symbol_by_type(type_))
    if has_title(declaration, context):
        return False
    definition_path = declaration.get_file_path() if declaration is not None else None
    if definition_path and EXTERNAL_PATH_MARKER in definition_path:
        return False
    return (
        type_.is_interface()
        or type_.is_enum()
        or type_.is_union_or_intersection()
        or is_alias_declaration(type_, checker)
    )


def get_declaration_text(declaration: Any, context: ResolutionContext) -> str:
    source = declaration.print() if declaration is not None else ""
    return context.formatter(source)


def dump_nested_types(node: Any, context: ResolutionContext) -> SchemaList:
    """Append every custom type reachable from node to context.nested.

    Walks the type nodes below node in pre-order. Each resolvable type is
    marked visited before its own members are explored, so cyclic type
    graphs terminate and every type is emitted at most once.

    Args:
        node: Declaration, property or parameter to scan
        context: Shared visited set and nested-type accumulator

    Returns:
        The accumulator, context.nested
    """
    if not isinstance(node, Node):
        return context.nested
    if has_title(node, context):
        return context.nested

    checker = context.checker
    for descendant in node.for_each_descendant():
        if not descendant.is_type_node():
            continue
        type_ = descendant.get_type()
        symbol = checker.get_symbol_by_type(type_)
        title = symbol.get_name() if symbol is not None else None
        if not title or title in context.skip_type_names or not is_target(type_, context):
            continue

        context.mark_visited(type_)
        declaration = checker.get_declaration_by_symbol(symbol)
        schema: NestedTypeSchema = {
            "tags": [{"name": TITLE_TAG, "value": title}],
            "data": get_declaration_text(declaration, context),
            "isNestedType": True,
        }
        context.nested.append({"title": title, "schema": schema})
        logger.debug(f"Nested type {title} found via {descendant!r}")

        if type_.is_union_or_intersection():
            members = type_.get_union_types() if type_.is_union() else type_.get_intersection_types()
            for member in members:
                member_declaration = checker.get_declaration_by_symbol(checker.get_symbol_by_type(member))
                if member_declaration is not None:
                    dump_nested_types(member_declaration, context)
                elif member.node is not None and member.node.kind == "object_type":
                    # Inline object literal member: scan its own property types
                    dump_nested_types(member.node, context)
        elif type_.is_interface() and isinstance(declaration, InterfaceDeclaration):
            for prop in declaration.get_properties():
                dump_nested_types(checker.get_declaration_by_symbol(prop.get_symbol()), context)

    return context.nested
