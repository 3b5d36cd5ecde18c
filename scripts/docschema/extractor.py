"""Split a member's source text into name, optionality and type text."""

from __future__ import annotations

import re
from typing import Optional, TypedDict

# [readonly] name [?] : type [;|,]  -- the type may span several lines
PROPERTY_PATTERN = re.compile(
    r"^\s*(?:readonly\s+)?([A-Za-z_$][\w$]*)\s*(\??)\s*:(.*?)[;,]?\s*$",
    re.DOTALL,
)


class ExtractedProperty(TypedDict):
    """Pieces of a ``name?: Type;`` member."""

    name: str
    type: str
    isOptional: bool


def extract_from_property_text(text: str) -> Optional[ExtractedProperty]:
    """Parse the raw text of a property member.

    Args:
        text: Member source, e.g. ``"closable?: boolean;"``

    Returns:
        Extracted pieces with the type text verbatim, or None for members of
        another shape (methods, index signatures, quoted or computed names)
    """
    match = PROPERTY_PATTERN.match(text)
    if not match:
        return None
    return {
        "name": match.group(1),
        "type": match.group(3),
        "isOptional": match.group(2) == "?",
    }
