"""Assemble the documentation schema of one source file.

Usage:
    from scripts.docschema import generate

    schema = generate("src/button/interface.ts", GenerateConfig(
        source_files_paths=["src/**/*.ts"],
    ))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from scripts.docschema.analysis.project import SourceFile, SourceProject
from scripts.docschema.builder import build_declaration_schema
from scripts.docschema.config import GenerateConfig
from scripts.docschema.models import Schema, SchemaList, SchemaMap
from scripts.docschema.resolver import ResolutionContext
from scripts.docschema.tags import get_declaration_tags

logger = logging.getLogger(__name__)


def get_candidate_declarations(source_file: SourceFile) -> list:
    """Interfaces, type aliases and functions of a file, by start line.

    The sort is stable, so declarations starting on the same line keep
    their encounter order.
    """
    declarations = [
        *source_file.get_interfaces(),
        *source_file.get_type_aliases(),
        *source_file.get_functions(),
    ]
    return sorted(declarations, key=lambda declaration: declaration.get_start_line_number())


def generate_schema(
    source_file: SourceFile,
    config: Optional[GenerateConfig] = None,
) -> Union[SchemaMap, SchemaList]:
    """Build schemas for every titled declaration of a source file.

    Nested types collected along the way follow the top-level entries.

    Args:
        source_file: File whose declarations are documented
        config: Generation options

    Returns:
        Map of title to schema, or an ordered list of ``{title, schema}``
        entries when config.strict_declaration_order is set
    """
    config = config or GenerateConfig()
    context = ResolutionContext(
        checker=source_file.project.get_type_checker(),
        formatter=config.formatter,
        skip_type_names=frozenset(config.skip_type_names),
    )

    schema_list: SchemaList = []
    for declaration in get_candidate_declarations(source_file):
        declaration_tags = get_declaration_tags(declaration)
        title = declaration_tags.title
        if not title:
            continue
        schema = build_declaration_schema(declaration, declaration_tags.tags, config, context)
        schema_list.append({"title": title, "schema": schema})
        logger.debug(f"Built schema '{title}' from {declaration!r}")

    entries = schema_list + context.nested
    if config.strict_declaration_order:
        return entries

    schema_map: dict[str, Schema] = {}
    for entry in entries:
        schema_map[entry["title"]] = entry["schema"]
    return schema_map


def generate(
    file: Union[str, Path],
    config: Optional[GenerateConfig] = None,
) -> Optional[Union[SchemaMap, SchemaList]]:
    """Generate the documentation schema of an entry file.

    Args:
        file: Entry file path, absolute or relative to the project root
        config: Generation options; config.project replaces the fresh
            project created for this call

    Returns:
        The schema, or None when the entry file is not in the project
    """
    config = config or GenerateConfig()
    project = config.project

    if project is None:
        project = SourceProject()
        # A fresh project also loads the entry file itself
        project.add_source_file_at_path(file)

    if config.source_files_paths:
        project.add_source_files_at_paths(config.source_files_paths)

    source_file = project.get_source_file(file)
    if source_file is None:
        logger.warning(f"Entry file not found: {file}")
        return None

    return generate_schema(source_file, config)
