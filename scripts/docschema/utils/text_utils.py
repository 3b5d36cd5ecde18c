"""Text helpers for rendering type expressions."""

from __future__ import annotations

import re

LINE_BREAK_PATTERN = re.compile(r"\s*(?:\r\n|\r|\n)\s*")
SLUG_PATTERN = re.compile(r"[^\w]+", re.UNICODE)


def to_single_line(text: str) -> str:
    """Collapse line breaks and their surrounding indentation into single spaces."""
    return LINE_BREAK_PATTERN.sub(" ", text).strip()


def slugify(text: str) -> str:
    """Turn a heading text into a URL anchor (``"My Foo"`` -> ``"my-foo"``)."""
    return SLUG_PATTERN.sub("-", text.strip().lower()).strip("-")
