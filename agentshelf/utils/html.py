"""HTML formatting utilities for Telegram messages.

All bot replies use HTML parse_mode.
"""
import html as html_lib
import re

# Tags Telegram accepts in HTML parse mode
SUPPORTED_TAGS = {"b", "strong", "i", "em", "u", "ins", "s", "strike", "del",
                  "code", "pre", "a", "tg-spoiler", "blockquote"}

TAG_PATTERN = re.compile(r"<(/?)([\w-]+)(?:\s[^>]*)?>")

# Longest tag or entity a hard split must not cut through
MAX_MARKUP_LENGTH = 40


def escape(text: str) -> str:
    """Escape HTML special characters for Telegram.

    Args:
        text: Raw text that may contain <, >, &

    Returns:
        Text safe for HTML rendering
    """
    return html_lib.escape(str(text))


def bold(text: str) -> str:
    """Wrap text in bold tags (text is escaped)."""
    return f"<b>{escape(text)}</b>"


def italic(text: str) -> str:
    """Wrap text in italic tags (text is escaped)."""
    return f"<i>{escape(text)}</i>"


def code(text: str) -> str:
    """Wrap text in inline code tags (text is escaped)."""
    return f"<code>{escape(text)}</code>"


def pre(text: str, language: str = "") -> str:
    """Wrap text in preformatted block tags.

    Args:
        text: Text for code block (will be escaped)
        language: Optional language for syntax highlighting

    Returns:
        <pre>escaped text</pre> or <pre><code class="language-X">text</code></pre>
    """
    escaped = escape(text)
    if language:
        return f'<pre><code class="language-{escape(language)}">{escaped}</code></pre>'
    return f"<pre>{escaped}</pre>"


def _split_point(line: str, max_size: int) -> int:
    """Index to cut a long line at without breaking a tag or an entity."""
    offset = max(0, max_size - MAX_MARKUP_LENGTH)
    window = line[offset:max_size]
    cut = max_size
    for opener, closer in (("<", ">"), ("&", ";")):
        start = window.rfind(opener)
        if start != -1 and closer not in window[start:] and offset + start > 0:
            cut = min(cut, offset + start)
    return cut


def chunk_text(text: str, max_size: int = 3800) -> list[str]:
    """Split text into chunks of at most max_size characters.

    Splits on line boundaries where possible.
    """
    if len(text) <= max_size:
        return [text]

    chunks = []
    current = ""

    for line in text.splitlines(keepends=True):
        while len(line) > max_size:
            if current:
                chunks.append(current)
                current = ""
            cut = _split_point(line, max_size)
            chunks.append(line[:cut])
            line = line[cut:]
        if len(current) + len(line) > max_size:
            chunks.append(current)
            current = ""
        current += line

    if current:
        chunks.append(current)

    return chunks


def find_open_tags(text: str) -> list[str]:
    """Find all unclosed HTML tags in text.

    Returns list of tag names that are opened but not closed,
    in the order they were opened (for proper nesting).
    """
    tag_stack = []

    for match in TAG_PATTERN.finditer(text):
        is_closing = match.group(1) == "/"
        tag_name = match.group(2).lower()

        if tag_name not in SUPPORTED_TAGS:
            continue

        if is_closing:
            if tag_stack and tag_stack[-1] == tag_name:
                tag_stack.pop()
            elif tag_name in tag_stack:
                tag_stack.remove(tag_name)
        else:
            tag_stack.append(tag_name)

    return tag_stack


def balance_tags(text: str) -> str:
    """Close any tags left open at the end of text."""
    open_tags = find_open_tags(text)
    return text + "".join(f"</{tag}>" for tag in reversed(open_tags))


def chunk_html(text: str, max_size: int = 3800) -> list[str]:
    """Split formatted HTML into messages that each have balanced tags.

    Tags still open at the end of a chunk are closed there and opened
    again at the start of the next one.
    """
    chunks = []
    reopen = ""

    # Leave room for the tags added around each chunk
    for piece in chunk_text(text, max_size - 2 * MAX_MARKUP_LENGTH):
        body = reopen + piece
        open_tags = find_open_tags(body)
        chunks.append(balance_tags(body))
        reopen = "".join(f"<{tag}>" for tag in open_tags)

    return chunks


def truncate(text: str, max_len: int = 4096, suffix: str = "...") -> str:
    """Truncate text with suffix if too long.

    Args:
        text: Text to truncate
        max_len: Maximum length including suffix
        suffix: String to append when truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_len:
        return text
    return text[:max_len - len(suffix)] + suffix
