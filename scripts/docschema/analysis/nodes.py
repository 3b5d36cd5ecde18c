"""Wrappers around tree-sitter nodes with declaration-level helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional

from tree_sitter import Node as TSNode

from scripts.docschema.analysis.types import Symbol, Type
from scripts.docschema.utils.jsdoc_utils import (
    JsDoc,
    get_param_description,
    is_jsdoc_comment,
    parse_jsdoc,
)

if TYPE_CHECKING:
    from scripts.docschema.analysis.project import SourceFile


# Statements that wrap a declaration and own its leading comments
WRAPPER_KINDS = {"export_statement", "ambient_declaration"}

# Syntax kinds that denote a type expression
TYPE_NODE_KINDS = {
    "type_identifier",
    "generic_type",
    "nested_type_identifier",
    "union_type",
    "intersection_type",
    "object_type",
    "array_type",
    "tuple_type",
    "function_type",
    "constructor_type",
    "parenthesized_type",
    "predefined_type",
    "literal_type",
    "lookup_type",
    "index_type_query",
    "type_query",
    "conditional_type",
    "readonly_type",
    "template_literal_type",
    "infer_type",
    "this_type",
    "optional_type",
    "rest_type",
}

FUNCTION_DECLARATION_KINDS = {
    "function_declaration",
    "function_signature",
    "generator_function_declaration",
}

PARAMETER_KINDS = {"required_parameter", "optional_parameter"}

CLASS_DECLARATION_KINDS = {"class_declaration", "abstract_class_declaration"}

# Type of a literal expression, by syntax kind
LITERAL_TYPES = {
    "number": "number",
    "string": "string",
    "template_string": "string",
    "true": "boolean",
    "false": "boolean",
}

# Nested scopes whose return statements belong to another function
FUNCTION_SCOPE_KINDS = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
    "class_declaration",
    "class",
}


class Node:
    """A syntax node bound to the source file it came from."""

    def __init__(self, ts_node: TSNode, source_file: "SourceFile"):
        self.ts_node = ts_node
        self.source_file = source_file
        self._symbol: Optional[Symbol] = None

    @property
    def kind(self) -> str:
        return self.ts_node.type

    def get_kind_name(self) -> str:
        """Syntax kind in CamelCase, e.g. ``InterfaceDeclaration``."""
        return "".join(part.capitalize() for part in self.kind.split("_"))

    def get_text(self) -> str:
        return self.source_file.text_of(self.ts_node)

    def get_start_line_number(self) -> int:
        return self.ts_node.start_point[0] + 1

    def get_source_file(self) -> "SourceFile":
        return self.source_file

    def get_file_path(self) -> str:
        return self.source_file.get_file_path()

    def get_parent(self) -> Optional["Node"]:
        parent = self.ts_node.parent
        return self.source_file.wrap(parent) if parent is not None else None

    def get_field(self, name: str) -> Optional["Node"]:
        child = self.ts_node.child_by_field_name(name)
        return self.source_file.wrap(child) if child is not None else None

    def get_named_children(self) -> list["Node"]:
        return [
            self.source_file.wrap(child)
            for child in self.ts_node.named_children
            if child.type != "comment"
        ]

    def for_each_descendant(self) -> Iterator["Node"]:
        """Yield every descendant in pre-order, comments excluded."""
        stack = list(reversed(self.ts_node.named_children))
        while stack:
            current = stack.pop()
            if current.type == "comment":
                continue
            yield self.source_file.wrap(current)
            stack.extend(reversed(current.named_children))

    def is_type_node(self) -> bool:
        """Check whether this node is a type expression.

        Identifiers that only name something (a declaration, a generic
        type's target, the right side of ``ns.Name``) are not type nodes.
        """
        if self.kind not in TYPE_NODE_KINDS:
            return False
        if self.kind == "type_identifier":
            parent = self.ts_node.parent
            if parent is not None and parent.child_by_field_name("name") == self.ts_node:
                return False
        return True

    def get_type(self) -> Type:
        return self.source_file.project.get_type_checker().get_type_at_node(self)

    def _jsdoc_anchor(self) -> TSNode:
        anchor = self.ts_node
        while anchor.parent is not None and anchor.parent.type in WRAPPER_KINDS:
            anchor = anchor.parent
        return anchor

    def get_js_docs(self) -> list[JsDoc]:
        """JSDoc blocks directly preceding this node, in source order."""
        comments = []
        sibling = self._jsdoc_anchor().prev_sibling
        while sibling is not None and sibling.type == "comment":
            comments.append(self.source_file.text_of(sibling))
            sibling = sibling.prev_sibling
        return [parse_jsdoc(text) for text in reversed(comments) if is_jsdoc_comment(text)]

    def get_documentation_comment(self) -> str:
        return "\n".join(doc.description for doc in self.get_js_docs() if doc.description)

    def get_symbol(self) -> Optional[Symbol]:
        return self._symbol

    def print(self) -> str:
        """Source text of the node including ``export``/``declare`` keywords."""
        parent = self.ts_node.parent
        if parent is not None and parent.type in WRAPPER_KINDS:
            return self.source_file.wrap(parent).print()
        return self.get_text()

    def __repr__(self) -> str:
        return f"{self.get_kind_name()}({self.get_file_path()}:{self.get_start_line_number()})"


class NamedNode(Node):
    """A node introducing a name (declaration, member or parameter)."""

    def get_name(self) -> str:
        name = self.ts_node.child_by_field_name("name")
        return self.source_file.text_of(name) if name is not None else ""

    def get_symbol(self) -> Optional[Symbol]:
        if self._symbol is None:
            self._symbol = Symbol(self.get_name(), [self])
        return self._symbol


class InterfaceDeclaration(NamedNode):
    """``interface Name<T> extends Base { ... }``"""

    def get_members(self) -> list[Node]:
        body = self.get_field("body")
        return body.get_named_children() if body is not None else []

    def get_properties(self) -> list["PropertySignature"]:
        """Properties declared directly on the interface, inherited ones excluded."""
        return [member for member in self.get_members() if isinstance(member, PropertySignature)]

    def get_extends(self) -> list[Node]:
        for child in self.ts_node.named_children:
            if child.type == "extends_type_clause":
                return self.source_file.wrap(child).get_named_children()
        return []

    def get_type_parameter_names(self) -> list[str]:
        return _type_parameter_names(self)


class TypeAliasDeclaration(NamedNode):
    """``type Name<T> = ...``"""

    def get_type_node(self) -> Optional[Node]:
        return self.get_field("value")

    def get_type_parameter_names(self) -> list[str]:
        return _type_parameter_names(self)


class EnumDeclaration(NamedNode):
    """``enum Name { ... }``"""


class ClassDeclaration(NamedNode):
    """``class Name { ... }``"""

    def get_type_parameter_names(self) -> list[str]:
        return _type_parameter_names(self)


class SignatureNode(Node):
    """Shared behaviour of nodes that carry a parameter list."""

    def _get_parameter_list(self) -> Optional[Node]:
        parameters = self.get_field("parameters")
        if parameters is None:
            parameters = next(
                (child for child in self.get_named_children() if child.kind == "formal_parameters"),
                None,
            )
        return parameters

    def get_parameters(self) -> list["ParameterDeclaration"]:
        parameters = self._get_parameter_list()
        if parameters is None:
            return []
        return [
            child
            for child in parameters.get_named_children()
            if isinstance(child, ParameterDeclaration)
        ]

    def get_return_type_node(self) -> Optional[Node]:
        return_type = self.get_field("return_type")
        if return_type is None and self.kind == "function_type":
            # (a: A) => R: the type after the parameter list
            children = self.get_named_children()
            if len(children) > 1 and children[-2].kind == "formal_parameters":
                return_type = children[-1]
        if return_type is not None and return_type.kind == "type_annotation":
            children = return_type.get_named_children()
            return children[0] if children else None
        return return_type

    def get_return_type_text(self) -> str:
        """Annotated return type, else one inferred from the body.

        Without an annotation, a body with no ``return <expr>`` gives
        ``void``. Returned literals of a single kind give their type and
        anything else gives ``any``.
        """
        return_type = self.get_return_type_node()
        if return_type is not None:
            return return_type.get_text()
        returned = self.get_returned_expressions()
        if not returned:
            return "void"
        types = {LITERAL_TYPES.get(expression.kind, "any") for expression in returned}
        return types.pop() if len(types) == 1 else "any"

    def get_returned_expressions(self) -> list[Node]:
        """Expressions of the body's return statements, nested functions excluded."""
        body = self.get_field("body")
        if body is None:
            return []
        expressions = []
        stack = [body.ts_node]
        while stack:
            current = stack.pop()
            if current.type == "return_statement":
                children = [child for child in current.named_children if child.type != "comment"]
                if children:
                    expressions.append(self.source_file.wrap(children[0]))
                continue
            stack.extend(
                child for child in reversed(current.named_children)
                if child.type not in FUNCTION_SCOPE_KINDS
            )
        return expressions

    def get_type_parameter_names(self) -> list[str]:
        return _type_parameter_names(self)


class FunctionDeclaration(SignatureNode, NamedNode):
    """``function name(...)``, with or without a body."""


class FunctionTypeNode(SignatureNode):
    """``(a: A) => R`` used as a type."""


class MethodSignature(SignatureNode, NamedNode):
    """``name(a: A): R`` inside an interface."""


class PropertySignature(NamedNode):
    """``name?: Type`` inside an interface or object type."""

    def has_question_token(self) -> bool:
        return any(child.type == "?" for child in self.ts_node.children)

    def get_type_node(self) -> Optional[Node]:
        return _annotated_type(self)


class ParameterDeclaration(NamedNode):
    """A required or optional function parameter."""

    def get_name(self) -> str:
        pattern = self.ts_node.child_by_field_name("pattern")
        if pattern is None:
            return ""
        text = self.source_file.text_of(pattern)
        return text[3:] if pattern.type == "rest_pattern" and text.startswith("...") else text

    def is_rest_parameter(self) -> bool:
        pattern = self.ts_node.child_by_field_name("pattern")
        return pattern is not None and pattern.type == "rest_pattern"

    def get_initializer(self) -> Optional[Node]:
        return self.get_field("value")

    def is_optional(self) -> bool:
        return (
            self.kind == "optional_parameter"
            or self.get_initializer() is not None
            or self.is_rest_parameter()
        )

    def get_type_node(self) -> Optional[Node]:
        return _annotated_type(self)

    def get_documentation_comment(self) -> str:
        """Inline JSDoc description, else the owner's ``@param`` text."""
        own = super().get_documentation_comment()
        if own:
            return own
        owner = self.get_parent()
        while owner is not None and not isinstance(
            owner, (FunctionDeclaration, TypeAliasDeclaration, MethodSignature)
        ):
            owner = owner.get_parent()
        if owner is None:
            return ""
        for doc in owner.get_js_docs():
            description = get_param_description(doc, self.get_name())
            if description:
                return description
        return ""


class ExternalDeclaration:
    """Opaque stand-in for a declaration living outside the project sources."""

    def __init__(self, name: str, file_path: str):
        self.name = name
        self.file_path = file_path

    def get_name(self) -> str:
        return self.name

    def get_file_path(self) -> str:
        return self.file_path

    def get_kind_name(self) -> str:
        return "ExternalDeclaration"

    def get_js_docs(self) -> list[JsDoc]:
        return []

    def get_documentation_comment(self) -> str:
        return ""

    def print(self) -> str:
        return ""

    def __repr__(self) -> str:
        return f"ExternalDeclaration({self.name!r}, {self.file_path!r})"


NODE_CLASSES: dict[str, type[Node]] = {
    "interface_declaration": InterfaceDeclaration,
    "type_alias_declaration": TypeAliasDeclaration,
    "enum_declaration": EnumDeclaration,
    "function_type": FunctionTypeNode,
    "method_signature": MethodSignature,
    "property_signature": PropertySignature,
}
NODE_CLASSES.update({kind: FunctionDeclaration for kind in FUNCTION_DECLARATION_KINDS})
NODE_CLASSES.update({kind: ParameterDeclaration for kind in PARAMETER_KINDS})
NODE_CLASSES.update({kind: ClassDeclaration for kind in CLASS_DECLARATION_KINDS})


def _annotated_type(node: Node) -> Optional[Node]:
    annotation = node.get_field("type")
    if annotation is None:
        return None
    children = annotation.get_named_children()
    return children[0] if children else None


def _type_parameter_names(node: Node) -> list[str]:
    type_parameters = node.get_field("type_parameters")
    if type_parameters is None:
        return []
    names = []
    for parameter in type_parameters.get_named_children():
        name = parameter.get_field("name")
        if name is not None:
            names.append(name.get_text())
    return names
