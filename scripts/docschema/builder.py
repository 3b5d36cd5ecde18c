"""Build the schema of one documented declaration."""

from __future__ import annotations

import copy
import functools
import logging
import re
from typing import Any, Callable, Optional

from scripts.docschema.analysis.nodes import (
    FunctionDeclaration,
    FunctionTypeNode,
    InterfaceDeclaration,
    LITERAL_TYPES,
    ParameterDeclaration,
    SignatureNode,
    TypeAliasDeclaration,
)
from scripts.docschema.analysis.types import Symbol
from scripts.docschema.config import GenerateConfig
from scripts.docschema.extractor import extract_from_property_text
from scripts.docschema.linkifier import get_display_type_with_link
from scripts.docschema.models import (
    DeclarationSchema,
    FunctionSchema,
    InterfaceSchema,
    PropertyEntry,
    Tag,
)
from scripts.docschema.resolver import ResolutionContext, dump_nested_types
from scripts.docschema.tags import (
    DEFAULT_VALUE_TAG_NAMES,
    find_tag,
    get_symbol_tags,
    has_description,
)
from scripts.docschema.utils.text_utils import to_single_line

logger = logging.getLogger(__name__)

NOT_EXTENDS_TAG = "notExtends"

# Module-qualified references like import("./types").Size
IMPORT_QUALIFIER_PATTERN = re.compile(r"import\([^)]+\)\.")


def get_property_schema(
    symbol: Symbol,
    config: GenerateConfig,
    context: ResolutionContext,
) -> Optional[PropertyEntry]:
    """Build the entry of one interface property.

    Documented properties have their nested types dumped and their type
    text linkified. Undocumented ones fall back to the default type map,
    else they are dropped.

    Args:
        symbol: Property symbol from the type checker
        config: Generation options
        context: Per-invocation resolution state

    Returns:
        PropertyEntry, or None when the member is dropped
    """
    name = symbol.get_name()
    declarations = symbol.get_declarations()
    if not declarations:
        return None
    declaration = declarations[0]

    extract = extract_from_property_text(declaration.get_text())
    if extract is None:
        logger.debug(f"Skipping member {name}: not a property signature")
        return None

    tags = get_symbol_tags(symbol, config.strict_comment)
    if has_description(tags):
        dump_nested_types(declaration, context)
        return {
            "name": name,
            "type": get_display_type_with_link(extract["type"], context, config.link_formatter),
            "isOptional": extract["isOptional"],
            "tags": tags,
        }

    default = config.default_type_map.get(name)
    if default is None:
        logger.debug(f"Dropping undocumented property {name}")
        return None
    entry: Any = {"name": name, "isOptional": extract["isOptional"]}
    entry.update(copy.deepcopy(default))
    return entry


def get_parameter_type_text(parameter: ParameterDeclaration) -> str:
    type_node = parameter.get_type_node()
    if type_node is not None:
        return IMPORT_QUALIFIER_PATTERN.sub("", type_node.get_text())
    initializer = parameter.get_initializer()
    if initializer is not None:
        return LITERAL_TYPES.get(initializer.kind, "any")
    return "any"


def get_initializer_text(parameter: ParameterDeclaration, tags: list[Tag]) -> Optional[str]:
    """Inline default expression, else the @default/@defaultValue tag value."""
    initializer = parameter.get_initializer()
    if initializer is not None and initializer.get_text():
        return initializer.get_text()
    tag = find_tag(tags, *DEFAULT_VALUE_TAG_NAMES)
    if tag is not None and tag["value"]:
        return tag["value"]
    return None


def get_function_schema(
    signature: SignatureNode,
    tags: list[Tag],
    config: GenerateConfig,
    context: ResolutionContext,
) -> FunctionSchema:
    """Build the params/returns schema of a function or function type."""
    params: list[PropertyEntry] = []
    for parameter in signature.get_parameters():
        dump_nested_types(parameter, context)
        param_tags = get_symbol_tags(parameter.get_symbol(), config.strict_comment)
        params.append({
            "tags": param_tags,
            "name": parameter.get_name(),
            "type": get_display_type_with_link(
                get_parameter_type_text(parameter), context, config.link_formatter
            ),
            "isOptional": parameter.is_optional(),
            "initializerText": get_initializer_text(parameter, param_tags),
        })
    return {
        "tags": tags,
        "params": params,
        "returns": to_single_line(signature.get_return_type_text()),
    }


def get_signature(declaration: Any) -> Optional[SignatureNode]:
    """The function shape of a declaration, if it has one."""
    if isinstance(declaration, FunctionDeclaration):
        return declaration
    if isinstance(declaration, TypeAliasDeclaration):
        type_node = declaration.get_type_node()
        if isinstance(type_node, FunctionTypeNode):
            return type_node
    return None


def build_declaration_schema(
    declaration: Any,
    tags: list[Tag],
    config: GenerateConfig,
    context: ResolutionContext,
) -> DeclarationSchema:
    """Build the schema of a titled interface, type alias or function.

    Args:
        declaration: Top-level declaration node
        tags: The declaration's own tags
        config: Generation options
        context: Per-invocation resolution state

    Returns:
        FunctionSchema for function shapes, InterfaceSchema otherwise
    """
    schema: DeclarationSchema
    signature = get_signature(declaration)
    if signature is not None:
        schema = get_function_schema(signature, tags, config, context)
        _sort_entries(schema["params"], config.property_sorter)
        return schema

    if isinstance(declaration, InterfaceDeclaration) and find_tag(tags, NOT_EXTENDS_TAG):
        symbols = [prop.get_symbol() for prop in declaration.get_properties()]
    else:
        symbols = context.checker.get_properties_of_type(declaration.get_type())

    data: list[PropertyEntry] = []
    for symbol in symbols:
        entry = get_property_schema(symbol, config, context)
        if entry is not None:
            data.append(entry)
    _sort_entries(data, config.property_sorter)

    schema = InterfaceSchema(tags=tags, data=data)
    return schema


def _sort_entries(
    entries: list[PropertyEntry],
    sorter: Optional[Callable[[PropertyEntry, PropertyEntry], int]],
) -> None:
    if sorter is not None:
        entries.sort(key=functools.cmp_to_key(sorter))
