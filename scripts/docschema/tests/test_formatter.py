"""Tests for the default declaration formatter."""

from scripts.docschema.formatter import format_declaration


class TestFormatDeclaration:
    """Tests for format_declaration."""

    def test_reindents_by_bracket_depth(self):
        text = "interface A {\na: string;\n\n\n  b?: {\nc: number;\n  };\n}"
        assert format_declaration(text) == (
            "interface A {\n"
            "  a: string;\n"
            "\n"
            "  b?: {\n"
            "    c: number;\n"
            "  };\n"
            "}\n"
        )

    def test_aligns_comment_lines(self):
        text = "interface A {\n/**\n* @en x\n*/\nx: string;\n}"
        assert format_declaration(text) == (
            "interface A {\n"
            "  /**\n"
            "   * @en x\n"
            "   */\n"
            "  x: string;\n"
            "}\n"
        )

    def test_brackets_in_strings_ignored(self):
        assert format_declaration("type A = '{';\ntype B = string;") == "type A = '{';\ntype B = string;\n"

    def test_custom_indent(self):
        assert format_declaration("enum E {\nA,\n}", indent="    ") == "enum E {\n    A,\n}\n"

    def test_single_line_unchanged(self):
        text = "export type Size = 'mini' | 'small';"
        assert format_declaration(text) == text + "\n"

    def test_empty_input(self):
        assert format_declaration("") == ""
        assert format_declaration("\n\n") == ""
