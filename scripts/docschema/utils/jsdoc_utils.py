"""Parsing of JSDoc comment blocks (/** ... */)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# A tag starts with "@" at the beginning of a line or after whitespace.
# "{@link ...}" and "user@example.com" are not tags.
TAG_PATTERN = re.compile(r"(?:^|(?<=\s))@([A-Za-z_][\w-]*)")

# "@param {Type} [name=default] - description"
PARAM_TAG_PATTERN = re.compile(
    r"^(?:\{[^}]*\}\s*)?\[?([\w$]+)(?:=[^\]]*)?\]?\s*(?:-\s*)?(.*)$",
    re.DOTALL,
)

PARAM_TAG_NAMES = ("param", "arg", "argument")


@dataclass
class JsDocTag:
    """A single block tag such as ``@title Button``."""

    name: str
    text: str = ""

    def get_comment_text(self) -> str:
        """Tag text without the parameter name of a ``@param`` tag."""
        if self.name not in PARAM_TAG_NAMES:
            return self.text
        match = PARAM_TAG_PATTERN.match(self.text)
        return match.group(2).strip() if match else self.text


@dataclass
class JsDoc:
    """A parsed JSDoc block."""

    description: str = ""
    tags: list[JsDocTag] = field(default_factory=list)

    def get_tag(self, name: str) -> JsDocTag | None:
        """Return the first tag with the given name."""
        for tag in self.tags:
            if tag.name == name:
                return tag
        return None


def is_jsdoc_comment(text: str) -> bool:
    """Check whether comment text is a JSDoc block rather than a plain comment."""
    return text.startswith("/**") and text.endswith("*/") and not text.startswith("/**/")


def _comment_lines(text: str) -> list[str]:
    """Strip comment delimiters and leading asterisks."""
    lines = []
    for line in text[3:-2].splitlines():
        stripped = line.strip()
        if stripped.startswith("*"):
            stripped = stripped[1:].strip()
        lines.append(stripped)
    return lines


def parse_jsdoc(text: str) -> JsDoc:
    """Parse the text of a JSDoc comment.

    Args:
        text: Raw comment text including the ``/**`` and ``*/`` delimiters

    Returns:
        JsDoc with the free description and the block tags in source order.
        Tag text is trimmed; multi-line text keeps its line breaks.
    """
    if not is_jsdoc_comment(text):
        return JsDoc()

    description: list[str] = []
    tags: list[tuple[str, list[str]]] = []

    for line in _comment_lines(text):
        matches = list(TAG_PATTERN.finditer(line))
        head = line[: matches[0].start()] if matches else line

        if tags:
            tags[-1][1].append(head)
        else:
            description.append(head)

        for index, match in enumerate(matches):
            end = matches[index + 1].start() if index + 1 < len(matches) else len(line)
            tags.append((match.group(1), [line[match.end():end].strip()]))

    return JsDoc(
        description="\n".join(description).strip(),
        tags=[JsDocTag(name, "\n".join(parts).strip()) for name, parts in tags],
    )


def get_param_description(jsdoc: JsDoc, param_name: str) -> str:
    """Look up the ``@param`` description for a parameter.

    Args:
        jsdoc: Parsed JSDoc of the function
        param_name: Parameter name

    Returns:
        Description text, or an empty string if the parameter is not documented
    """
    for tag in jsdoc.tags:
        if tag.name not in PARAM_TAG_NAMES:
            continue
        match = PARAM_TAG_PATTERN.match(tag.text)
        if match and match.group(1) == param_name:
            return match.group(2).strip()
    return ""
