"""In-memory project of parsed TypeScript source files."""

from __future__ import annotations

import fnmatch
import glob
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Union

from tree_sitter import Node as TSNode

from scripts.docschema.analysis.nodes import (
    CLASS_DECLARATION_KINDS,
    FUNCTION_DECLARATION_KINDS,
    NODE_CLASSES,
    ClassDeclaration,
    EnumDeclaration,
    FunctionDeclaration,
    InterfaceDeclaration,
    Node,
    TypeAliasDeclaration,
)
from scripts.docschema.analysis.parser import parse_source

if TYPE_CHECKING:
    from scripts.docschema.analysis.checker import TypeChecker

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Declarations that can be referenced from a type position
TYPE_DECLARATION_KINDS = {
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
} | CLASS_DECLARATION_KINDS

DECLARATION_KINDS = TYPE_DECLARATION_KINDS | FUNCTION_DECLARATION_KINDS

# Extensions tried, in order, when resolving a relative module specifier
MODULE_SUFFIXES = [".ts", ".tsx", ".d.ts", ".js", ".jsx"]

EXTERNAL_MODULES_DIR = "node_modules"


@dataclass
class ImportBinding:
    """A name brought into scope by an import statement."""

    local_name: str
    specifier: str
    imported_name: Optional[str]  # None for "import * as ns"


@dataclass
class ReExport:
    """``export { a as b } from "x"`` or ``export * from "x"``."""

    specifier: str
    names: Optional[dict[str, str]]  # exported name -> imported name; None for "*"


def _string_value(node: Optional[TSNode], text_of) -> str:
    if node is None:
        return ""
    return text_of(node).strip("'\"`")


class SourceFile:
    """A parsed source file and its top-level bindings."""

    def __init__(self, project: "SourceProject", path: str, text: str):
        self.project = project
        self.path = path
        self.text = text
        self.source = text.encode("utf-8")
        self.tree = parse_source(text, path)
        self.is_module = False
        self._nodes: dict[tuple[int, int, str], Node] = {}
        self._declarations: list[Node] = []
        self._imports: dict[str, ImportBinding] = {}
        self._exports: dict[str, str] = {}  # exported name -> local name
        self._exported_nodes: dict[str, Node] = {}
        self._reexports: list[ReExport] = []
        self._index()

    def get_file_path(self) -> str:
        return self.path

    def get_full_text(self) -> str:
        return self.text

    def text_of(self, ts_node: TSNode) -> str:
        return self.source[ts_node.start_byte:ts_node.end_byte].decode("utf-8")

    def wrap(self, ts_node: TSNode) -> Node:
        """Return the (cached) wrapper for a tree-sitter node of this file."""
        key = (ts_node.start_byte, ts_node.end_byte, ts_node.type)
        node = self._nodes.get(key)
        if node is None:
            node = NODE_CLASSES.get(ts_node.type, Node)(ts_node, self)
            self._nodes[key] = node
        return node

    # Indexing

    def _index(self) -> None:
        for statement in self.tree.root_node.named_children:
            if statement.type == "import_statement":
                self.is_module = True
                self._index_import(statement)
            elif statement.type == "export_statement":
                self.is_module = True
                self._index_export(statement)
            else:
                self._add_declaration(statement)

    def _add_declaration(self, ts_node: TSNode) -> Optional[Node]:
        if ts_node.type == "ambient_declaration":
            for child in ts_node.named_children:
                if child.type in DECLARATION_KINDS:
                    return self._add_declaration(child)
            return None
        if ts_node.type not in DECLARATION_KINDS:
            return None
        node = self.wrap(ts_node)
        self._declarations.append(node)
        return node

    def _index_import(self, statement: TSNode) -> None:
        specifier = _string_value(statement.child_by_field_name("source"), self.text_of)
        if not specifier:
            return
        for clause in statement.named_children:
            if clause.type != "import_clause":
                continue
            for child in clause.named_children:
                if child.type == "identifier":
                    name = self.text_of(child)
                    self._imports[name] = ImportBinding(name, specifier, "default")
                elif child.type == "namespace_import":
                    for ident in child.named_children:
                        if ident.type == "identifier":
                            name = self.text_of(ident)
                            self._imports[name] = ImportBinding(name, specifier, None)
                elif child.type == "named_imports":
                    for spec in child.named_children:
                        if spec.type != "import_specifier":
                            continue
                        imported = self.text_of(spec.child_by_field_name("name"))
                        alias = spec.child_by_field_name("alias")
                        local = self.text_of(alias) if alias is not None else imported
                        self._imports[local] = ImportBinding(local, specifier, imported)

    def _index_export(self, statement: TSNode) -> None:
        is_default = any(child.type == "default" for child in statement.children)
        declaration = statement.child_by_field_name("declaration")
        if declaration is not None:
            node = self._add_declaration(declaration)
            if node is not None and hasattr(node, "get_name"):
                exported = "default" if is_default else node.get_name()
                self._exported_nodes[exported] = node
            return

        source = statement.child_by_field_name("source")
        specifier = _string_value(source, self.text_of) if source is not None else ""
        clause = next((c for c in statement.named_children if c.type == "export_clause"), None)

        if clause is None:
            if specifier and any(child.type == "*" for child in statement.children):
                self._reexports.append(ReExport(specifier, None))
            elif is_default:
                value = statement.child_by_field_name("value")
                if value is not None and value.type == "identifier":
                    self._exports["default"] = self.text_of(value)
            return

        names: dict[str, str] = {}
        for spec in clause.named_children:
            if spec.type != "export_specifier":
                continue
            name = self.text_of(spec.child_by_field_name("name"))
            alias = spec.child_by_field_name("alias")
            names[self.text_of(alias) if alias is not None else name] = name
        if specifier:
            self._reexports.append(ReExport(specifier, names))
        else:
            self._exports.update(names)

    # Queries

    def get_declarations(self) -> list[Node]:
        return list(self._declarations)

    def get_interfaces(self) -> list[InterfaceDeclaration]:
        return [d for d in self._declarations if isinstance(d, InterfaceDeclaration)]

    def get_type_aliases(self) -> list[TypeAliasDeclaration]:
        return [d for d in self._declarations if isinstance(d, TypeAliasDeclaration)]

    def get_functions(self) -> list[FunctionDeclaration]:
        return [d for d in self._declarations if isinstance(d, FunctionDeclaration)]

    def get_enums(self) -> list[EnumDeclaration]:
        return [d for d in self._declarations if isinstance(d, EnumDeclaration)]

    def get_classes(self) -> list[ClassDeclaration]:
        return [d for d in self._declarations if isinstance(d, ClassDeclaration)]

    def get_import(self, name: str) -> Optional[ImportBinding]:
        return self._imports.get(name)

    def get_local_type_declaration(self, name: str) -> Optional[Node]:
        """First top-level declaration usable as a type with the given name."""
        for declaration in self._declarations:
            if declaration.kind in TYPE_DECLARATION_KINDS and declaration.get_name() == name:
                return declaration
        return None

    def get_exported_declaration(
        self,
        name: str,
        seen: Optional[set[tuple[str, str]]] = None,
    ) -> Union[Node, ImportBinding, None]:
        """Resolve an exported name to its declaration.

        Returns an ImportBinding when the export forwards a name imported
        from a module outside the project.
        """
        seen = seen if seen is not None else set()
        if (self.path, name) in seen:
            return None
        seen.add((self.path, name))

        if name in self._exported_nodes:
            return self._exported_nodes[name]

        local = self._exports.get(name)
        if local is not None:
            declaration = self.get_local_type_declaration(local)
            if declaration is not None:
                return declaration
            binding = self.get_import(local)
            if binding is not None:
                return self.project.resolve_binding(binding, self, seen)

        for reexport in self._reexports:
            if reexport.names is None:
                if name == "default":
                    continue
                imported = name
            elif name in reexport.names:
                imported = reexport.names[name]
            else:
                continue
            binding = ImportBinding(name, reexport.specifier, imported)
            resolved = self.project.resolve_binding(binding, self, seen)
            if resolved is not None:
                return resolved
        return None

    def __repr__(self) -> str:
        return f"SourceFile({self.path!r})"


class SourceProject:
    """A collection of parsed source files plus a type checker over them.

    Relative imports between files are followed and loaded from disk on
    demand. Bare module specifiers ("react") are treated as external
    libraries and never parsed.
    """

    def __init__(self, root: Optional[PathLike] = None):
        self.root = Path(root).resolve() if root is not None else Path.cwd().resolve()
        self._files: dict[str, SourceFile] = {}
        self._checker: Optional["TypeChecker"] = None

    def _normalize(self, path: PathLike) -> str:
        path = Path(path)
        if not path.is_absolute():
            path = self.root / path
        return Path(os.path.normpath(str(path))).as_posix()

    def add_source_file_at_path(self, path: PathLike) -> Optional[SourceFile]:
        """Parse a file from disk and add it to the project.

        Returns:
            The source file, or None if it could not be read
        """
        key = self._normalize(path)
        if key in self._files:
            return self._files[key]
        try:
            text = Path(key).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable source file {key}: {e}")
            return None
        source_file = SourceFile(self, key, text)
        self._files[key] = source_file
        logger.debug(f"Added source file {key}")
        return source_file

    def add_source_files_at_paths(self, patterns: Union[str, Iterable[str]]) -> list[SourceFile]:
        """Add every file matching the glob patterns.

        Patterns are relative to the project root unless absolute. ``**``
        matches any number of directories; a leading ``!`` excludes matches.
        """
        if isinstance(patterns, str):
            patterns = [patterns]
        includes: list[str] = []
        excludes: list[str] = []
        for pattern in patterns:
            if pattern.startswith("!"):
                excludes.append(self._normalize(pattern[1:]))
            else:
                includes.append(self._normalize(pattern))

        added: list[SourceFile] = []
        for pattern in includes:
            for match in sorted(glob.glob(pattern, recursive=True)):
                path = Path(match).as_posix()
                if not Path(path).is_file():
                    continue
                if any(fnmatch.fnmatch(path, exclude) for exclude in excludes):
                    continue
                source_file = self.add_source_file_at_path(path)
                if source_file is not None:
                    added.append(source_file)
        return added

    def create_source_file(self, path: PathLike, text: str, overwrite: bool = False) -> SourceFile:
        """Add a source file from text without touching the file system.

        Raises:
            FileExistsError: If the path is already in the project and
                overwrite is False
        """
        key = self._normalize(path)
        if key in self._files and not overwrite:
            raise FileExistsError(f"Source file already exists in project: {key}")
        source_file = SourceFile(self, key, text)
        self._files[key] = source_file
        # Cached types may point at nodes of the replaced file
        self._checker = None
        return source_file

    def get_source_file(self, file: PathLike) -> Optional[SourceFile]:
        """Find a file by path, falling back to a path-suffix match."""
        key = self._normalize(file)
        if key in self._files:
            return self._files[key]
        suffix = "/" + Path(file).as_posix().lstrip("./")
        for path, source_file in self._files.items():
            if path.endswith(suffix):
                return source_file
        return None

    def get_source_files(self) -> list[SourceFile]:
        return list(self._files.values())

    def get_type_checker(self) -> "TypeChecker":
        if self._checker is None:
            from scripts.docschema.analysis.checker import TypeChecker

            self._checker = TypeChecker(self)
        return self._checker

    # Module resolution

    def is_external_specifier(self, specifier: str) -> bool:
        return not (specifier.startswith(".") or specifier.startswith("/"))

    def external_module_path(self, specifier: str) -> str:
        return (self.root / EXTERNAL_MODULES_DIR / specifier).as_posix()

    def resolve_module(self, specifier: str, from_file: SourceFile) -> Optional[SourceFile]:
        """Resolve a relative module specifier to a source file."""
        if self.is_external_specifier(specifier):
            return None
        base = self._normalize(Path(from_file.get_file_path()).parent / specifier)
        stem = base
        for js_suffix in (".js", ".jsx"):
            if base.endswith(js_suffix):
                stem = base[: -len(js_suffix)]

        candidates = [base] + [stem + suffix for suffix in MODULE_SUFFIXES]
        candidates += [f"{base}/index{suffix}" for suffix in MODULE_SUFFIXES]
        for candidate in candidates:
            if candidate in self._files:
                return self._files[candidate]
        for candidate in candidates:
            if Path(candidate).is_file():
                return self.add_source_file_at_path(candidate)
        return None

    def resolve_binding(
        self,
        binding: ImportBinding,
        from_file: SourceFile,
        seen: Optional[set[tuple[str, str]]] = None,
    ) -> Union[Node, ImportBinding, None]:
        """Follow an import to the declaration it names.

        Returns the binding itself when it points outside the project.
        """
        if self.is_external_specifier(binding.specifier):
            return binding
        target = self.resolve_module(binding.specifier, from_file)
        if target is None or binding.imported_name is None:
            return None
        return target.get_exported_declaration(binding.imported_name, seen)
