"""Tree-sitter grammars for TypeScript and TSX sources."""

from __future__ import annotations

from functools import lru_cache
from pathlib import PurePath

import tree_sitter_typescript
from tree_sitter import Language, Parser, Tree

# Extensions parsed with the TSX grammar (JSX syntax allowed)
TSX_SUFFIXES = {".tsx", ".jsx"}


@lru_cache(maxsize=None)
def get_language(dialect: str) -> Language:
    """Return the tree-sitter language for "typescript" or "tsx"."""
    if dialect == "tsx":
        return Language(tree_sitter_typescript.language_tsx())
    return Language(tree_sitter_typescript.language_typescript())


def dialect_for_path(path: str | PurePath) -> str:
    """Pick the grammar dialect from a file extension."""
    return "tsx" if PurePath(path).suffix.lower() in TSX_SUFFIXES else "typescript"


def parse_source(text: str, path: str | PurePath = "module.ts") -> Tree:
    """Parse source text into a syntax tree.

    Args:
        text: Source text
        path: File path, only used to select the grammar

    Returns:
        Parsed tree. Syntax errors are kept in the tree as ERROR nodes.
    """
    parser = Parser(get_language(dialect_for_path(path)))
    return parser.parse(text.encode("utf-8"))
