"""Docschema utility modules."""

from scripts.docschema.utils.jsdoc_utils import (
    JsDoc,
    JsDocTag,
    parse_jsdoc,
    is_jsdoc_comment,
    get_param_description,
)
from scripts.docschema.utils.text_utils import to_single_line, slugify

__all__ = [
    "JsDoc",
    "JsDocTag",
    "parse_jsdoc",
    "is_jsdoc_comment",
    "get_param_description",
    "to_single_line",
    "slugify",
]
