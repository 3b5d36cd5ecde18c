"""Configuration for schema generation, from code or a YAML file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from scripts.docschema.analysis.project import SourceProject
from scripts.docschema.defaults import (
    DEFAULT_SKIP_TYPE_NAMES,
    PROPERTY_SORTERS,
    default_link_formatter,
    get_default_type_map,
    make_link_formatter,
)
from scripts.docschema.formatter import format_declaration
from scripts.docschema.models import DefaultTypeEntry, PropertyEntry

DEFAULT_CONFIG_PATH = "docschema.yaml"


class ConfigError(Exception):
    """Error in docschema configuration."""

    def __init__(
        self,
        message: str,
        file: Optional[str] = None,
        error_type: str = "config_invalid",
    ):
        super().__init__(message)
        self.message = message
        self.file = file
        self.error_type = error_type

    def to_json(self) -> dict[str, Any]:
        """Serialize error to JSON format for machine parsing."""
        result: dict[str, Any] = {
            "error": self.error_type,
            "message": self.message,
        }
        if self.file:
            result["file"] = self.file
        return result

    def __str__(self) -> str:
        if self.file:
            return f"{self.message} | file: {self.file}"
        return self.message


@dataclass
class GenerateConfig:
    """Options recognised by generate().

    Attributes:
        source_files_paths: Glob patterns of extra files to load
        default_type_map: Fallback schema for undocumented properties, by name
        strict_comment: Only explicit tags document a property
        property_sorter: Comparator ordering each schema's data/params
        link_formatter: Maps a type reference to a link, or None for no link
        strict_declaration_order: Return an ordered list instead of a map
        project: Pre-populated project used instead of a fresh one
        skip_type_names: Type names never dumped as nested types
        formatter: Formats declaration source of nested types
    """

    source_files_paths: list[str] = field(default_factory=list)
    default_type_map: dict[str, DefaultTypeEntry] = field(default_factory=get_default_type_map)
    strict_comment: bool = False
    property_sorter: Optional[Callable[[PropertyEntry, PropertyEntry], int]] = None
    link_formatter: Callable[..., Optional[str]] = default_link_formatter
    strict_declaration_order: bool = False
    project: Optional[SourceProject] = None
    skip_type_names: frozenset[str] = DEFAULT_SKIP_TYPE_NAMES
    formatter: Callable[[str], str] = format_declaration


def _expect(value: Any, expected: type, key: str, config_file: Optional[str]) -> Any:
    if not isinstance(value, expected):
        raise ConfigError(
            f"'{key}' must be a {expected.__name__}, got {type(value).__name__}",
            file=config_file,
        )
    return value


def _parse_default_type_map(data: Any, config_file: Optional[str]) -> dict[str, DefaultTypeEntry]:
    """Validate a default_type_map mapping of property name -> {type, tags}."""
    _expect(data, dict, "default_type_map", config_file)
    result: dict[str, DefaultTypeEntry] = {}
    for name, entry in data.items():
        key = f"default_type_map.{name}"
        _expect(entry, dict, key, config_file)
        parsed: DefaultTypeEntry = {}
        if "type" in entry:
            parsed["type"] = str(entry["type"])
        tags = entry.get("tags", [])
        _expect(tags, list, f"{key}.tags", config_file)
        parsed["tags"] = []
        for tag in tags:
            if not isinstance(tag, dict) or "name" not in tag:
                raise ConfigError(
                    f"'{key}.tags' entries must be mappings with a 'name'",
                    file=config_file,
                )
            parsed["tags"].append({"name": str(tag["name"]), "value": str(tag.get("value", ""))})
        result[str(name)] = parsed
    return result


def parse_config(data: dict[str, Any], config_file: Optional[str] = None) -> GenerateConfig:
    """Build a GenerateConfig from a parsed YAML mapping.

    Raises:
        ConfigError: If a value has the wrong shape
    """
    config = GenerateConfig()

    if "source_files_paths" in data:
        paths = data["source_files_paths"]
        if isinstance(paths, str):
            paths = [paths]
        config.source_files_paths = [str(p) for p in _expect(paths, list, "source_files_paths", config_file)]

    if "default_type_map" in data:
        config.default_type_map = _parse_default_type_map(data["default_type_map"], config_file)

    for key in ("strict_comment", "strict_declaration_order"):
        if key in data:
            setattr(config, key, _expect(data[key], bool, key, config_file))

    if "skip_type_names" in data:
        names = _expect(data["skip_type_names"], list, "skip_type_names", config_file)
        config.skip_type_names = frozenset(str(name) for name in names)

    sort = data.get("property_sort")
    if sort is not None:
        if sort not in PROPERTY_SORTERS:
            raise ConfigError(
                f"Unknown property_sort '{sort}'. Must be one of: {', '.join(sorted(PROPERTY_SORTERS))}",
                file=config_file,
            )
        config.property_sorter = PROPERTY_SORTERS[sort]

    template = data.get("link_template")
    if template is not None:
        _expect(template, str, "link_template", config_file)
        try:
            template.format(type_name="", title="", slug="", path="")
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigError(f"Invalid link_template '{template}': {e}", file=config_file)
        config.link_formatter = make_link_formatter(template)

    return config


def load_config(config_path: Path | str) -> GenerateConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the docschema.yaml file.

    Returns:
        GenerateConfig with loaded values merged with defaults.

    Raises:
        ConfigError: If the file exists but contains invalid configuration.
    """
    config_path = Path(config_path)
    config_file = str(config_path)

    if not config_path.exists():
        return GenerateConfig()

    try:
        content = config_path.read_text(encoding="utf-8")
        data = yaml.safe_load(content) if content.strip() else None
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", file=config_file)

    if not data:
        return GenerateConfig()
    if not isinstance(data, dict):
        raise ConfigError("Top-level docschema config must be a mapping", file=config_file)

    return parse_config(data, config_file)
