"""Read documentation tags from JSDoc comments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from scripts.docschema.analysis.types import Symbol
from scripts.docschema.models import Tag

TITLE_TAG = "title"

# Tags holding a property's description, one per documentation language
DESCRIPTION_TAG_NAMES = ("zh", "en")

DEFAULT_VALUE_TAG_NAMES = ("default", "defaultValue")


@dataclass
class DeclarationTags:
    """Tags of a declaration with its title surfaced."""

    title: Optional[str] = None
    tags: list[Tag] = field(default_factory=list)


def get_declaration_tags(declaration: Any) -> DeclarationTags:
    """Get tags from the first JSDoc block of a declaration.

    Args:
        declaration: Any node (or external declaration) exposing get_js_docs()

    Returns:
        DeclarationTags; the first ``@title`` tag supplies the title
    """
    if declaration is None or not hasattr(declaration, "get_js_docs"):
        return DeclarationTags()
    docs = declaration.get_js_docs()
    if not docs:
        return DeclarationTags()

    result = DeclarationTags()
    for tag in docs[0].tags:
        if tag.name == TITLE_TAG and result.title is None:
            result.title = tag.text
        result.tags.append({"name": tag.name, "value": tag.get_comment_text()})
    return result


def get_symbol_tags(symbol: Optional[Symbol], strict_comment: bool = False) -> list[Tag]:
    """Get tags from the JSDoc of a property or parameter symbol.

    Unless strict_comment is set, a plain description paragraph is copied
    into every description tag the symbol does not define itself, so
    ``/** Whether to disable */`` documents a property just like
    ``@zh``/``@en`` tags would.

    Args:
        symbol: Property or parameter symbol
        strict_comment: Only honour explicit tags

    Returns:
        List of tags, possibly empty
    """
    if symbol is None:
        return []
    tags: list[Tag] = [{"name": tag.name, "value": tag.get_comment_text()} for tag in symbol.get_js_doc_tags()]

    if not strict_comment:
        description = symbol.get_documentation_comment()
        if description:
            for tag_name in DESCRIPTION_TAG_NAMES:
                if find_tag(tags, tag_name) is None:
                    tags.append({"name": tag_name, "value": description})

    return tags


def find_tag(tags: list[Tag], *names: str) -> Optional[Tag]:
    """Return the first tag whose name is one of names."""
    for tag in tags:
        if tag["name"] in names:
            return tag
    return None


def has_description(tags: list[Tag]) -> bool:
    """Check whether tags document a property."""
    return find_tag(tags, *DESCRIPTION_TAG_NAMES) is not None
