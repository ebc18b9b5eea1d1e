"""Whitespace tidying for converter output."""

import re

# Opening or closing line of a fenced code block
_FENCE_RE = re.compile(r"^\s*(```|~~~)")


def tidy_markdown(text: str) -> str:
    """Collapse runs of blank lines, drop trailing spaces and trim *text*.

    Lines inside fenced code blocks are left exactly as they are.
    """
    lines = []
    in_fence = False
    previous_blank = False
    for line in text.split("\n"):
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            lines.append(line.rstrip())
            previous_blank = False
            continue
        if in_fence:
            lines.append(line)
            continue
        line = line.rstrip(" \t")
        if not line:
            if previous_blank:
                continue
            previous_blank = True
        else:
            previous_blank = False
        lines.append(line)
    return "\n".join(lines).strip()
