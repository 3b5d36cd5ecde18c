"""Default formatting of declaration source shown for nested types."""

from __future__ import annotations

OPENING = "{(["
CLOSING = "})]"


def _scan_brackets(line: str) -> tuple[int, int]:
    """Count leading closers and the net bracket depth change of a line.

    Brackets inside string literals and comments are ignored.
    """
    leading = 0
    depth = 0
    seen_code = False
    quote = ""
    index = 0
    while index < len(line):
        char = line[index]
        if quote:
            if char == "\\":
                index += 2
                continue
            if char == quote:
                quote = ""
        elif char in "'\"`":
            quote = char
            seen_code = True
        elif line.startswith("//", index):
            break
        elif line.startswith("/*", index):
            close = line.find("*/", index + 2)
            if close < 0:
                break
            index = close + 2
            continue
        elif char in OPENING:
            depth += 1
            seen_code = True
        elif char in CLOSING:
            depth -= 1
            if not seen_code:
                leading += 1
        elif not char.isspace():
            seen_code = True
        index += 1
    return leading, depth


def format_declaration(text: str, indent: str = "  ") -> str:
    """Re-indent declaration source by bracket depth.

    Blank line runs collapse to one, trailing whitespace is dropped and the
    result ends with a newline. Empty input stays empty.
    """
    lines: list[str] = []
    depth = 0
    in_comment = False

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            if lines and lines[-1]:
                lines.append("")
            continue

        if in_comment:
            prefix = " " if line.startswith("*") else ""
            lines.append(indent * depth + prefix + line)
            if "*/" in line:
                in_comment = False
            continue

        leading, change = _scan_brackets(line)
        lines.append(indent * max(depth - leading, 0) + line)
        depth = max(depth + change, 0)
        if line.startswith("/*") and "*/" not in line:
            in_comment = True

    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines) + "\n" if lines else ""
