"""Source analysis layer: parsed TypeScript files, symbols and types.

Provides the project capability the schema engine works against:
- SourceProject: loads files, resolves modules, owns the type checker
- SourceFile: top-level declarations and import/export bindings
- TypeChecker: types of syntax nodes and properties of types
"""

from scripts.docschema.analysis.checker import TypeChecker
from scripts.docschema.analysis.nodes import (
    ExternalDeclaration,
    FunctionDeclaration,
    FunctionTypeNode,
    InterfaceDeclaration,
    Node,
    ParameterDeclaration,
    PropertySignature,
    TypeAliasDeclaration,
)
from scripts.docschema.analysis.project import SourceFile, SourceProject
from scripts.docschema.analysis.types import Symbol, Type, TypeKind

__all__ = [
    "TypeChecker",
    "ExternalDeclaration",
    "FunctionDeclaration",
    "FunctionTypeNode",
    "InterfaceDeclaration",
    "Node",
    "ParameterDeclaration",
    "PropertySignature",
    "TypeAliasDeclaration",
    "SourceFile",
    "SourceProject",
    "Symbol",
    "Type",
    "TypeKind",
]
