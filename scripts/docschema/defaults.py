"""Default policies: fallback property types, links, sorting, skipped names."""

from __future__ import annotations

import copy
from typing import Callable, Optional

from scripts.docschema.models import DefaultTypeEntry, PropertyEntry
from scripts.docschema.utils.text_utils import slugify

# Properties documented by convention rather than per declaration
DEFAULT_TYPE_MAP: dict[str, DefaultTypeEntry] = {
    "style": {
        "type": "CSSProperties",
        "tags": [
            {"name": "zh", "value": "节点样式"},
            {"name": "en", "value": "Additional style"},
        ],
    },
    "className": {
        "type": "string | string[]",
        "tags": [
            {"name": "zh", "value": "节点类名"},
            {"name": "en", "value": "Additional css class"},
        ],
    },
}

# Built-in type transforms with no documentation of their own
DEFAULT_SKIP_TYPE_NAMES = frozenset({
    "Omit",
    "Pick",
    "Partial",
    "Required",
    "Readonly",
    "Record",
    "Exclude",
    "Extract",
    "NonNullable",
    "ReturnType",
    "Parameters",
    "InstanceType",
})


def get_default_type_map() -> dict[str, DefaultTypeEntry]:
    """Return a fresh copy of DEFAULT_TYPE_MAP."""
    return copy.deepcopy(DEFAULT_TYPE_MAP)


def default_link_formatter(
    type_name: str,
    js_doc_title: Optional[str] = None,
    full_path: Optional[str] = None,
) -> Optional[str]:
    """Link to an in-page anchor named after the title, else the type name."""
    return f"#{slugify(js_doc_title or type_name)}"


def make_link_formatter(template: str) -> Callable[..., Optional[str]]:
    """Build a link formatter from a template string.

    Placeholders: ``{type_name}``, ``{title}`` (title or type name),
    ``{slug}`` (slugified title) and ``{path}`` (definition path, titled
    types only).
    """

    def formatter(
        type_name: str,
        js_doc_title: Optional[str] = None,
        full_path: Optional[str] = None,
    ) -> Optional[str]:
        title = js_doc_title or type_name
        return template.format(
            type_name=type_name,
            title=title,
            slug=slugify(title),
            path=full_path or "",
        )

    return formatter


def compare_by_name(a: PropertyEntry, b: PropertyEntry) -> int:
    """Alphabetical order."""
    return (a["name"] > b["name"]) - (a["name"] < b["name"])


def compare_required_first(a: PropertyEntry, b: PropertyEntry) -> int:
    """Required entries before optional ones, otherwise unchanged."""
    return int(a.get("isOptional", False)) - int(b.get("isOptional", False))


PROPERTY_SORTERS: dict[str, Callable[[PropertyEntry, PropertyEntry], int]] = {
    "name": compare_by_name,
    "required-first": compare_required_first,
}
