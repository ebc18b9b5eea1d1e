"""YAML frontmatter rendering for extracted page metadata."""

from typing import List

from mdview.models.metadata import ExtractedMetadata


def _escape_yaml(value: str) -> str:
    """Escape characters that would break inline double-quoted YAML strings."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _quote(value: str) -> str:
    return f'"{_escape_yaml(value)}"'


def make_frontmatter(metadata: ExtractedMetadata) -> str:
    """Return a ``---``-delimited YAML block for *metadata*.

    Fields follow the declaration order of :class:`ExtractedMetadata`.
    Unset and blank values are skipped; lists become sequences of quoted
    strings and booleans are written bare.
    """
    lines: List[str] = ["---"]
    for key, value in metadata.model_dump().items():
        if value is None:
            continue
        if isinstance(value, bool):
            lines.append(f"{key}: {'true' if value else 'false'}")
        elif isinstance(value, list):
            if value:
                lines.append(f"{key}:")
                lines.extend(f"  - {_quote(str(item))}" for item in value)
        elif str(value).strip():
            lines.append(f"{key}: {_quote(str(value))}")
    lines.append("---")
    return "\n".join(lines)
