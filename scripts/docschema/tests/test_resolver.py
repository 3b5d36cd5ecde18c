"""Tests for nested type collection."""

from scripts.docschema.formatter import format_declaration
from scripts.docschema.resolver import ResolutionContext, dump_nested_types, is_target


def _context(project, **kwargs):
    return ResolutionContext(checker=project.get_type_checker(), formatter=format_declaration, **kwargs)


def _property(source_file, interface_name, prop_name):
    interface = next(i for i in source_file.get_interfaces() if i.get_name() == interface_name)
    return next(p for p in interface.get_properties() if p.get_name() == prop_name)


class TestDumpNestedTypes:
    """Tests for dump_nested_types."""

    def test_cycle_terminates_with_each_type_once(self, make_project):
        project = make_project({
            "a.ts": (
                "interface A { /** @en b */ b?: B; }\n"
                "interface B { /** @en a */ a?: A; }\n"
                "export interface Root { /** @en node */ node?: A; other?: B; }\n"
            ),
        })
        source_file = project.get_source_file("a.ts")
        context = _context(project)

        dump_nested_types(_property(source_file, "Root", "node"), context)
        dump_nested_types(_property(source_file, "Root", "other"), context)

        assert [entry["title"] for entry in context.nested] == ["A", "B"]

    def test_nested_schema_shape(self, make_project):
        project = make_project({
            "a.ts": (
                "export type Size = 'small' | 'large';\n"
                "interface Root { size?: Size; }\n"
            ),
        })
        context = _context(project)
        dump_nested_types(_property(project.get_source_file("a.ts"), "Root", "size"), context)

        assert context.nested == [{
            "title": "Size",
            "schema": {
                "tags": [{"name": "title", "value": "Size"}],
                "data": "export type Size = 'small' | 'large';\n",
                "isNestedType": True,
            },
        }]

    def test_titled_type_is_visited_not_dumped(self, make_project):
        project = make_project({
            "a.ts": (
                "/** @title MyFoo */\n"
                "interface Foo { a: string; }\n"
                "interface Root { foo?: Foo | string; }\n"
            ),
        })
        source_file = project.get_source_file("a.ts")
        context = _context(project)
        dump_nested_types(_property(source_file, "Root", "foo"), context)

        assert context.nested == []
        foo_type = source_file.get_interfaces()[0].get_type()
        assert context.has_visited(foo_type)

    def test_titled_node_stops_walk(self, make_project):
        project = make_project({
            "a.ts": (
                "interface Inner { a: string; }\n"
                "/** @title Outer */\n"
                "interface Outer { inner?: Inner; }\n"
            ),
        })
        outer = project.get_source_file("a.ts").get_interfaces()[1]
        context = _context(project)
        dump_nested_types(outer, context)

        assert context.nested == []
        assert context.has_visited(outer.get_type())

    def test_enum_and_union_alias_members(self, make_project):
        project = make_project({
            "a.ts": (
                "enum Color { Red, Blue }\n"
                "interface Child { color?: Color; }\n"
                "interface Foo { child?: Child; }\n"
                "type Item = Foo | string;\n"
                "interface Root { item?: Item; }\n"
            ),
        })
        context = _context(project)
        dump_nested_types(_property(project.get_source_file("a.ts"), "Root", "item"), context)

        assert [entry["title"] for entry in context.nested] == ["Item", "Child", "Color"]

    def test_inline_object_member_of_intersection(self, make_project):
        project = make_project({
            "a.ts": (
                "interface Base { id?: string; }\n"
                "interface Extra { note?: string; }\n"
                "type Both = Base & { extra: Extra };\n"
                "interface Root { x?: Both; }\n"
            ),
        })
        context = _context(project)
        dump_nested_types(_property(project.get_source_file("a.ts"), "Root", "x"), context)

        assert [entry["title"] for entry in context.nested] == ["Both", "Extra"]

    def test_inline_object_members_of_recursive_unions(self, make_project):
        project = make_project({
            "a.ts": (
                "type A = { b?: B } | string;\n"
                "type B = { a?: A } | number;\n"
                "interface Root { a?: A; }\n"
            ),
        })
        context = _context(project)
        dump_nested_types(_property(project.get_source_file("a.ts"), "Root", "a"), context)

        assert [entry["title"] for entry in context.nested] == ["A", "B"]

    def test_external_and_primitive_types_skipped(self, make_project):
        project = make_project({
            "a.ts": (
                'import { ReactNode } from "react";\n'
                "interface Root { icon?: ReactNode; label?: string; list?: number[]; }\n"
            ),
        })
        source_file = project.get_source_file("a.ts")
        context = _context(project)
        for name in ("icon", "label", "list"):
            dump_nested_types(_property(source_file, "Root", name), context)

        assert context.nested == []

    def test_skip_type_names(self, make_project):
        project = make_project({
            "a.ts": (
                "interface Foo { a: string; }\n"
                "interface Root { foo?: Partial<Foo>; }\n"
            ),
        })
        prop = _property(project.get_source_file("a.ts"), "Root", "foo")

        context = _context(project)
        dump_nested_types(prop, context)
        assert [entry["title"] for entry in context.nested] == ["Foo"]

        context = _context(project, skip_type_names=frozenset({"Foo"}))
        dump_nested_types(prop, context)
        assert context.nested == []

    def test_imported_type(self, sample_ts_project):
        from scripts.docschema.analysis.project import SourceProject

        project = SourceProject(root=sample_ts_project)
        button = project.add_source_file_at_path("src/button.tsx")
        context = _context(project)
        dump_nested_types(_property(button, "ButtonProps", "size"), context)

        assert [entry["title"] for entry in context.nested] == ["Size"]
        assert context.nested[0]["schema"]["data"].startswith("export type Size =")


class TestIsTarget:
    """Tests for is_target."""

    def test_visited_type_is_not_a_target(self, make_project):
        project = make_project({"a.ts": "interface Foo { a: string; }\n"})
        foo_type = project.get_source_file("a.ts").get_interfaces()[0].get_type()
        context = _context(project)

        assert is_target(foo_type, context)
        context.mark_visited(foo_type)
        assert not is_target(foo_type, context)

    def test_object_literal_is_not_a_target(self, make_project):
        project = make_project({"a.ts": "interface Root { pos?: { x: number }; }\n"})
        prop = _property(project.get_source_file("a.ts"), "Root", "pos")
        context = _context(project)
        assert not is_target(prop.get_type(), context)
