"""Shared fixtures for docschema tests."""

import pytest

from scripts.docschema.analysis.project import SourceProject


@pytest.fixture
def sample_ts_project(tmp_path):
    """Create a small component library with documented declarations."""
    src = tmp_path / "src"
    src.mkdir()

    (src / "types.ts").write_text(
        "export type Size = 'mini' | 'small' | 'default' | 'large';\n"
        "\n"
        "/**\n"
        " * @title ButtonShape\n"
        " */\n"
        "export interface ShapeProps {\n"
        "  /**\n"
        "   * @zh 圆角\n"
        "   * @en Radius\n"
        "   */\n"
        "  radius?: number;\n"
        "}\n",
        encoding="utf-8",
    )

    (src / "button.tsx").write_text(
        'import { ReactNode, CSSProperties } from "react";\n'
        'import { Size, ShapeProps } from "./types";\n'
        "\n"
        "interface BaseProps {\n"
        "  /**\n"
        "   * @zh 是否禁用\n"
        "   * @en Whether to disable\n"
        "   */\n"
        "  disabled?: boolean;\n"
        "  style?: CSSProperties;\n"
        "}\n"
        "\n"
        "/**\n"
        " * @title Button\n"
        " * @zh 按钮\n"
        " * @en Button\n"
        " */\n"
        "export interface ButtonProps extends BaseProps {\n"
        "  /**\n"
        "   * @zh 尺寸\n"
        "   * @en Size of the button\n"
        "   * @defaultValue default\n"
        "   */\n"
        "  size?: Size;\n"
        "  /**\n"
        "   * @zh 形状\n"
        "   * @en Shape\n"
        "   */\n"
        "  shape?: ShapeProps;\n"
        "  /**\n"
        "   * @en Content\n"
        "   */\n"
        "  children?: ReactNode;\n"
        "  foo?: string;\n"
        "  className?: string | string[];\n"
        "  onClick?(e: Event): void;\n"
        "}\n",
        encoding="utf-8",
    )

    (src / "index.ts").write_text(
        'export { Size as ButtonSize } from "./types";\n'
        'export * from "./types";\n',
        encoding="utf-8",
    )

    return tmp_path


@pytest.fixture
def make_project(tmp_path):
    """Build an in-memory project from a mapping of relative path -> source."""

    def _make(files):
        project = SourceProject(root=tmp_path)
        for path, text in files.items():
            project.create_source_file(path, text)
        return project

    return _make
