"""Markdown structure checks and link extraction."""
import re

FENCE_PATTERN = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
LINK_PATTERN = re.compile(r"(?<!!)\[([^\]]*)\]\(([^)]*)\)")
SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def _prose_lines(text: str) -> list[tuple[int, str]]:
    """Return (line number, line) pairs outside fenced code blocks."""
    result = []
    fence: str | None = None

    for number, line in enumerate(text.split("\n"), start=1):
        match = FENCE_PATTERN.match(line)
        if fence is None:
            if match:
                fence = match.group(1)
                continue
            result.append((number, line))
        elif match and match.group(1)[0] == fence[0] and len(match.group(1)) >= len(fence):
            fence = None

    return result


def check_structure(text: str) -> list[str]:
    """Find problems that make a markdown document malformed.

    Args:
        text: Markdown body.

    Returns:
        Human-readable problem descriptions, empty when well-formed.
    """
    problems = []
    fence: str | None = None
    fence_line = 0

    for number, line in enumerate(text.split("\n"), start=1):
        match = FENCE_PATTERN.match(line)
        if not match:
            continue
        marker = match.group(1)
        if fence is None:
            fence = marker
            fence_line = number
        elif marker[0] == fence[0] and len(marker) >= len(fence):
            fence = None

    if fence is not None:
        problems.append(f"Code fence opened on line {fence_line} is never closed")

    for number, line in _prose_lines(text):
        for match in LINK_PATTERN.finditer(line):
            if not match.group(2).strip():
                problems.append(
                    f"Link '{match.group(1)}' on line {number} has an empty target"
                )

    return problems


def extract_links(text: str) -> list[tuple[str, str]]:
    """Extract inline markdown links outside fenced code.

    Image links are skipped. Titles (``[a](b "title")``) are stripped.
    """
    links = []
    for _, line in _prose_lines(text):
        for match in LINK_PATTERN.finditer(line):
            target = match.group(2).strip()
            if not target:
                continue
            target = target.split(" ", 1)[0].strip("<>")
            links.append((match.group(1), target))
    return links


def is_local_target(target: str) -> bool:
    """Check whether a link target points at a file relative to the document."""
    if not target or target.startswith(("#", "/")):
        return False
    return not SCHEME_PATTERN.match(target)
