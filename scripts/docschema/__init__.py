"""Docschema - documentation schemas from annotated TypeScript declarations.

This package provides tools for:
- Finding interfaces, type aliases and functions tagged with ``@title``
- Resolving their properties and parameters, inherited ones included
- Collecting the custom types they reference as nested schemas
- Rendering type text with links to documented types

Usage:
    python -m scripts.docschema generate src/button/interface.ts
    python -m scripts.docschema generate src/alert.tsx --source "src/**/*.ts" --strict-order
"""

from scripts.docschema.config import ConfigError, GenerateConfig, load_config
from scripts.docschema.generator import generate, generate_schema

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "GenerateConfig",
    "generate",
    "generate_schema",
    "load_config",
]
