"""Tests for building declaration schemas."""

from scripts.docschema.config import GenerateConfig
from scripts.docschema.defaults import compare_by_name, compare_required_first
from scripts.docschema.generator import generate

FUNCTIONS_SOURCE = (
    'import { Dayjs } from "dayjs";\n'
    "\n"
    "interface MessageOptions {\n"
    "  /** @en Position */\n"
    "  position?: 'top' | 'bottom';\n"
    "}\n"
    "\n"
    "/**\n"
    " * @title useMessage\n"
    " * @param content - Message content\n"
    " */\n"
    "export function useMessage(\n"
    "  content: string,\n"
    "  duration = 3000,\n"
    "  /** @en Options */\n"
    "  options?: MessageOptions,\n"
    "  ...rest: any[]\n"
    "): void {}\n"
    "\n"
    "/**\n"
    " * @title onChange\n"
    " */\n"
    "export type ChangeHandler = (\n"
    "  /** @en Value */\n"
    "  value: Dayjs,\n"
    "  /**\n"
    "   * @en Event\n"
    "   * @defaultValue null\n"
    "   */\n"
    "  event?: Event\n"
    ") => boolean;\n"
    "\n"
    "/** @title noReturn */\n"
    "declare function noReturn(flag = true, label = 'x');\n"
)

PROPS_SOURCE = (
    "/**\n"
    " * @title Base\n"
    " */\n"
    "export interface BaseProps {\n"
    "  /** @en Base a */\n"
    "  a?: string;\n"
    "}\n"
    "\n"
    "/**\n"
    " * @title Child\n"
    " * @notExtends\n"
    " */\n"
    "export interface ChildProps extends BaseProps {\n"
    "  /** @en Child c */\n"
    "  c: string;\n"
    "  /** @en Child b */\n"
    "  b?: string;\n"
    "  /** Plain description */\n"
    "  plain?: boolean;\n"
    "  style?: object;\n"
    "  foo?: string;\n"
    "  onClick(): void;\n"
    "}\n"
    "\n"
    "/**\n"
    " * @title Merged\n"
    " */\n"
    "export interface MergedProps extends BaseProps {\n"
    "  /** @en Merged m */\n"
    "  m?: number;\n"
    "}\n"
)


def _generate(make_project, source, **config):
    project = make_project({"src/entry.ts": source})
    return generate("src/entry.ts", GenerateConfig(project=project, **config))


class TestFunctionSchema:
    """Tests for functions and function type aliases."""

    def test_function_declaration(self, make_project):
        schema = _generate(make_project, FUNCTIONS_SOURCE)["useMessage"]

        assert schema["tags"] == [
            {"name": "title", "value": "useMessage"},
            {"name": "param", "value": "Message content"},
        ]
        assert schema["returns"] == "void"
        assert schema["params"] == [
            {
                "tags": [
                    {"name": "zh", "value": "Message content"},
                    {"name": "en", "value": "Message content"},
                ],
                "name": "content",
                "type": "string",
                "isOptional": False,
                "initializerText": None,
            },
            {
                "tags": [],
                "name": "duration",
                "type": "number",
                "isOptional": True,
                "initializerText": "3000",
            },
            {
                "tags": [{"name": "en", "value": "Options"}],
                "name": "options",
                "type": "[MessageOptions](#messageoptions)",
                "isOptional": True,
                "initializerText": None,
            },
            {
                "tags": [],
                "name": "rest",
                "type": "any[]",
                "isOptional": True,
                "initializerText": None,
            },
        ]

    def test_function_type_alias(self, make_project):
        schema = _generate(make_project, FUNCTIONS_SOURCE)["onChange"]

        assert schema["returns"] == "boolean"
        value, event = schema["params"]
        assert value["name"] == "value"
        assert value["type"] == "Dayjs"
        assert value["isOptional"] is False
        assert event["name"] == "event"
        assert event["isOptional"] is True
        assert event["initializerText"] == "null"

    def test_missing_return_type_is_void(self, make_project):
        schema = _generate(make_project, FUNCTIONS_SOURCE)["noReturn"]

        assert schema["returns"] == "void"
        assert [(p["name"], p["type"], p["initializerText"]) for p in schema["params"]] == [
            ("flag", "boolean", "true"),
            ("label", "string", "'x'"),
        ]

    def test_return_type_inferred_from_body(self, make_project):
        result = _generate(make_project, (
            "/** @title label */\n"
            "export function label(a = 1) { return 'x'; }\n"
            "/** @title count */\n"
            "export function count() { if (Math.random()) { return 1; } return 2; }\n"
            "/** @title mixed */\n"
            "export function mixed(flag: boolean) { if (flag) { return 1; } return 'one'; }\n"
            "/** @title computed */\n"
            "export function computed(n: number) { return n * 2; }\n"
            "/** @title callback */\n"
            "export function callback() { const f = () => { return 1; }; f(); return; }\n"
        ))

        assert {title: schema["returns"] for title, schema in result.items()} == {
            "label": "string",
            "count": "number",
            "mixed": "any",
            "computed": "any",
            "callback": "void",
        }

    def test_parameter_types_dumped_as_nested(self, make_project):
        result = _generate(make_project, FUNCTIONS_SOURCE)

        assert list(result) == ["useMessage", "onChange", "noReturn", "MessageOptions"]
        assert result["MessageOptions"]["isNestedType"] is True

    def test_params_sorted(self, make_project):
        schema = _generate(make_project, FUNCTIONS_SOURCE, property_sorter=compare_by_name)["useMessage"]
        assert [p["name"] for p in schema["params"]] == ["content", "duration", "options", "rest"]


class TestInterfaceSchema:
    """Tests for interface and object alias schemas."""

    def test_not_extends_keeps_own_properties(self, make_project):
        schema = _generate(make_project, PROPS_SOURCE)["Child"]
        assert [p["name"] for p in schema["data"]] == ["c", "b", "plain", "style"]

    def test_inherited_properties_by_default(self, make_project):
        schema = _generate(make_project, PROPS_SOURCE)["Merged"]
        assert schema["data"] == [
            {"name": "m", "type": "number", "isOptional": True, "tags": [{"name": "en", "value": "Merged m"}]},
            {"name": "a", "type": "string", "isOptional": True, "tags": [{"name": "en", "value": "Base a"}]},
        ]

    def test_default_type_map_fallback(self, make_project):
        schema = _generate(make_project, PROPS_SOURCE)["Child"]
        style = next(p for p in schema["data"] if p["name"] == "style")
        assert style == {
            "name": "style",
            "isOptional": True,
            "type": "CSSProperties",
            "tags": [
                {"name": "zh", "value": "节点样式"},
                {"name": "en", "value": "Additional style"},
            ],
        }
        assert "foo" not in [p["name"] for p in schema["data"]]

    def test_custom_default_type_map(self, make_project):
        default_type_map = {"foo": {"type": "Foo", "tags": [{"name": "en", "value": "Foo"}]}}
        schema = _generate(make_project, PROPS_SOURCE, default_type_map=default_type_map)["Child"]
        names = [p["name"] for p in schema["data"]]
        assert "foo" in names
        assert "style" not in names

    def test_default_entry_not_shared(self, make_project):
        result = _generate(make_project, PROPS_SOURCE)
        style = next(p for p in result["Child"]["data"] if p["name"] == "style")
        style["tags"].append({"name": "version", "value": "1"})

        again = _generate(make_project, PROPS_SOURCE)
        style = next(p for p in again["Child"]["data"] if p["name"] == "style")
        assert len(style["tags"]) == 2

    def test_plain_description_documents_property(self, make_project):
        schema = _generate(make_project, PROPS_SOURCE)["Child"]
        plain = next(p for p in schema["data"] if p["name"] == "plain")
        assert plain["tags"] == [
            {"name": "zh", "value": "Plain description"},
            {"name": "en", "value": "Plain description"},
        ]

    def test_strict_comment_drops_plain_description(self, make_project):
        schema = _generate(make_project, PROPS_SOURCE, strict_comment=True)["Child"]
        assert "plain" not in [p["name"] for p in schema["data"]]

    def test_required_first_sort_is_stable(self, make_project):
        schema = _generate(make_project, PROPS_SOURCE, property_sorter=compare_required_first)["Child"]
        assert [p["name"] for p in schema["data"]] == ["c", "b", "plain", "style"]

    def test_sort_by_name(self, make_project):
        schema = _generate(make_project, PROPS_SOURCE, property_sorter=compare_by_name)["Child"]
        assert [p["name"] for p in schema["data"]] == ["b", "c", "plain", "style"]

    def test_object_type_alias(self, make_project):
        source = (
            "interface Extra { /** @en Extra */ extra?: boolean; }\n"
            "/** @title Options */\n"
            "export type Options = Extra & {\n"
            "  /** @en Width */\n"
            "  width: number;\n"
            "};\n"
        )
        schema = _generate(make_project, source)["Options"]
        assert [p["name"] for p in schema["data"]] == ["extra", "width"]
        assert schema["data"][1]["isOptional"] is False

    def test_multiline_type_single_lined(self, make_project):
        source = (
            "/** @title Layout */\n"
            "export interface LayoutProps {\n"
            "  /** @en Position */\n"
            "  position?:\n"
            "    | 'top'\n"
            "    | 'bottom';\n"
            "}\n"
        )
        schema = _generate(make_project, source)["Layout"]
        assert schema["data"][0]["type"] == "| 'top' | 'bottom'"
