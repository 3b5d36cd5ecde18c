"""Symbols and types produced by the type checker."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from scripts.docschema.utils.jsdoc_utils import JsDocTag

if TYPE_CHECKING:
    from scripts.docschema.analysis.nodes import Node


class TypeKind(Enum):
    """Structural kind of a resolved type."""

    INTERFACE = "interface"
    ENUM = "enum"
    CLASS = "class"
    UNION = "union"
    INTERSECTION = "intersection"
    OBJECT = "object"
    FUNCTION = "function"
    ARRAY = "array"
    PRIMITIVE = "primitive"
    LITERAL = "literal"
    MAPPED = "mapped"  # Pick<...>, Omit<...> and friends
    TYPE_PARAMETER = "type_parameter"
    EXTERNAL = "external"
    UNKNOWN = "unknown"


class Symbol:
    """A named entity backed by one or more declarations."""

    def __init__(self, name: str, declarations: Optional[list[Any]] = None):
        self.name = name
        self.declarations = declarations or []

    def get_name(self) -> str:
        return self.name

    def get_declarations(self) -> list[Any]:
        return list(self.declarations)

    def get_js_doc_tags(self) -> list[JsDocTag]:
        """Block tags of every JSDoc comment attached to the first declaration."""
        if not self.declarations:
            return []
        tags: list[JsDocTag] = []
        for doc in self.declarations[0].get_js_docs():
            tags.extend(doc.tags)
        return tags

    def get_documentation_comment(self) -> str:
        """Free description text of the first declaration."""
        if not self.declarations:
            return ""
        return self.declarations[0].get_documentation_comment()

    def __repr__(self) -> str:
        return f"Symbol({self.name!r})"


class Type:
    """A resolved type.

    Types of named declarations are created once per declaration by the
    type checker, so instances can be compared and hashed by identity.
    Union and intersection members are resolved lazily to allow
    self-referencing aliases.
    """

    def __init__(
        self,
        kind: TypeKind,
        text: str,
        symbol: Optional[Symbol] = None,
        alias_symbol: Optional[Symbol] = None,
        node: Optional["Node"] = None,
        member_resolver: Optional[Callable[[], list["Type"]]] = None,
        target: Optional["Type"] = None,
        keys: Optional[set[str]] = None,
        utility: Optional[str] = None,
    ):
        self.kind = kind
        self.text = text
        self.symbol = symbol
        self.alias_symbol = alias_symbol
        self.node = node
        self.target = target
        self.keys = keys
        self.utility = utility
        self._member_resolver = member_resolver
        self._members: Optional[list[Type]] = None

    def get_text(self) -> str:
        return self.text

    def get_symbol(self) -> Optional[Symbol]:
        return self.symbol

    def get_alias_symbol(self) -> Optional[Symbol]:
        return self.alias_symbol

    def is_interface(self) -> bool:
        return self.kind is TypeKind.INTERFACE

    def is_enum(self) -> bool:
        return self.kind is TypeKind.ENUM

    def is_union(self) -> bool:
        return self.kind is TypeKind.UNION

    def is_intersection(self) -> bool:
        return self.kind is TypeKind.INTERSECTION

    def is_union_or_intersection(self) -> bool:
        return self.kind in (TypeKind.UNION, TypeKind.INTERSECTION)

    def _get_members(self) -> list["Type"]:
        if self._members is None:
            self._members = self._member_resolver() if self._member_resolver else []
        return self._members

    def get_union_types(self) -> list["Type"]:
        return self._get_members() if self.is_union() else []

    def get_intersection_types(self) -> list["Type"]:
        return self._get_members() if self.is_intersection() else []

    def __repr__(self) -> str:
        return f"Type({self.kind.value}, {self.text!r})"
