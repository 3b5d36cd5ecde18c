"""Render type text with references to documented types turned into links."""

from __future__ import annotations

from typing import Callable, Iterator, Optional

from tree_sitter import Node as TSNode

from scripts.docschema.analysis.parser import parse_source
from scripts.docschema.resolver import ResolutionContext
from scripts.docschema.tags import get_declaration_tags
from scripts.docschema.utils.text_utils import to_single_line

LinkFormatter = Callable[..., Optional[str]]

# Type text is parsed as the value of a throwaway alias
SCRATCH_PREFIX = "type __DocschemaScratch = "
SCRATCH_PATH = "__docschema_scratch__.ts"


def _type_identifiers(root: TSNode) -> Iterator[TSNode]:
    stack = [root]
    while stack:
        current = stack.pop()
        if current.type == "type_identifier":
            yield current
        stack.extend(current.named_children)


def get_link(type_name: str, context: ResolutionContext, link_formatter: LinkFormatter) -> Optional[str]:
    """Ask the link formatter for a link to a visited type named type_name.

    Types dumped on the current page are linked by name only; titled
    types documented elsewhere pass their title and definition path too.
    """
    checker = context.checker
    for type_ in context.visited_types():
        symbol = checker.get_symbol_by_type(type_)
        if symbol is None or symbol.get_name() != type_name:
            continue
        if context.find_nested(type_name) is not None:
            link = link_formatter(type_name)
        else:
            declaration = checker.get_declaration_by_symbol(symbol)
            title = get_declaration_tags(declaration).title
            link = None
            if title:
                link = link_formatter(
                    type_name,
                    js_doc_title=title,
                    full_path=declaration.get_file_path(),
                )
        if link:
            return link
    return None


def get_display_type_with_link(
    type_text: str,
    context: ResolutionContext,
    link_formatter: LinkFormatter,
) -> str:
    """Single-line type text with visited type names replaced by links.

    The text is parsed on its own, outside the analysis project. Only type
    identifiers are candidates: string literal contents and property keys
    are left alone. Substitution happens in one pass.

    Args:
        type_text: Raw type expression, e.g. ``"Size | 'auto'"``
        context: Resolution state holding the visited types
        link_formatter: Maps a type reference to a link, or None

    Returns:
        Rendered text such as ``"[Size](#size) | 'auto'"``
    """
    text = to_single_line(type_text)
    if not text:
        return text

    source = f"{SCRATCH_PREFIX}{text};".encode("utf-8")
    start = len(SCRATCH_PREFIX.encode("utf-8"))
    end = start + len(text.encode("utf-8"))
    tree = parse_source(source.decode("utf-8"), SCRATCH_PATH)

    replacements: list[tuple[int, int, bytes]] = []
    for identifier in _type_identifiers(tree.root_node):
        if identifier.start_byte < start or identifier.end_byte > end:
            continue
        name = source[identifier.start_byte:identifier.end_byte].decode("utf-8")
        link = get_link(name, context, link_formatter)
        if link:
            replacements.append(
                (identifier.start_byte, identifier.end_byte, f"[{name}]({link})".encode("utf-8"))
            )

    rendered = source
    for node_start, node_end, replacement in sorted(replacements, reverse=True):
        rendered = rendered[:node_start] + replacement + rendered[node_end:]
    return rendered[start:len(rendered) - (len(source) - end)].decode("utf-8")
