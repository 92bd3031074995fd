"""YAML frontmatter splitting."""
from dataclasses import dataclass, field
from typing import Any

import yaml

from agentshelf.exceptions import FrontmatterError

DELIMITER = "---"


@dataclass
class Frontmatter:
    """Header mapping and body of a markdown document."""

    data: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    present: bool = False


def split_frontmatter(text: str) -> Frontmatter:
    """Split a markdown document into its YAML header and body.

    The header must start on the first line with ``---`` and end with the
    next line consisting only of ``---``.

    Args:
        text: Full document text.

    Returns:
        Parsed Frontmatter. Documents without a header get empty data.

    Raises:
        FrontmatterError: Header is unterminated, not valid YAML, or not a mapping.
    """
    # Tolerate a BOM and Windows line endings from editors
    text = text.lstrip("\ufeff").replace("\r\n", "\n")
    lines = text.split("\n")

    if not lines or lines[0].strip() != DELIMITER:
        return Frontmatter(body=text.strip())

    for idx in range(1, len(lines)):
        if lines[idx].strip() == DELIMITER:
            header = "\n".join(lines[1:idx])
            body = "\n".join(lines[idx + 1:])
            break
    else:
        raise FrontmatterError("Frontmatter is not closed with '---'")

    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML in frontmatter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Frontmatter must be a mapping, got {type(data).__name__}"
        )

    return Frontmatter(data=data, body=body.strip(), present=True)
