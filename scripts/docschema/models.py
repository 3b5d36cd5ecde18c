"""Schema shapes produced by the generator.

Keys use the camelCase spelling consumed by the documentation site.
"""

from __future__ import annotations

from typing import Optional, TypedDict, Union


class Tag(TypedDict):
    """A documentation tag such as ``@en Whether to disable``."""

    name: str
    value: str


class _PropertyEntryBase(TypedDict):
    name: str
    type: str
    isOptional: bool
    tags: list[Tag]


class PropertyEntry(_PropertyEntryBase, total=False):
    """One interface property or function parameter."""

    initializerText: Optional[str]  # function parameters only


class InterfaceSchema(TypedDict):
    """Schema of an interface or object-like type alias."""

    tags: list[Tag]
    data: list[PropertyEntry]


class FunctionSchema(TypedDict):
    """Schema of a function or function-type alias."""

    tags: list[Tag]
    params: list[PropertyEntry]
    returns: str


class NestedTypeSchema(TypedDict):
    """A custom type referenced by documented declarations."""

    tags: list[Tag]
    data: str  # formatted declaration source
    isNestedType: bool


DeclarationSchema = Union[InterfaceSchema, FunctionSchema]
Schema = Union[InterfaceSchema, FunctionSchema, NestedTypeSchema]


class SchemaEntry(TypedDict):
    """A titled schema, the unit of list output."""

    title: str
    schema: Schema


class DefaultTypeEntry(TypedDict, total=False):
    """Fallback schema for a conventionally documented property."""

    type: str
    tags: list[Tag]


SchemaMap = dict[str, Schema]
SchemaList = list[SchemaEntry]
