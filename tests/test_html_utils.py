"""Test HTML utility functions."""
from agentshelf.utils.html import (
    balance_tags,
    bold,
    chunk_html,
    chunk_text,
    code,
    escape,
    find_open_tags,
    italic,
    pre,
    truncate,
)


def test_escape():
    """Special characters are escaped."""
    assert escape("<b>&") == "&lt;b&gt;&amp;"


def test_wrappers_escape_content():
    """Tag helpers escape their content."""
    assert bold("a<b") == "<b>a&lt;b</b>"
    assert italic("x") == "<i>x</i>"
    assert code("$1 > $2") == "<code>$1 &gt; $2</code>"


def test_pre_with_language():
    """pre adds a language class."""
    assert pre("x", "bash") == '<pre><code class="language-bash">x</code></pre>'
    assert pre("<x>") == "<pre>&lt;x&gt;</pre>"


class TestChunkText:
    """Tests for chunk_text function."""

    def test_short_text_single_chunk(self):
        """Short text is one chunk."""
        assert chunk_text("hello", max_size=10) == ["hello"]

    def test_splits_on_lines(self):
        """Chunks break at line boundaries."""
        text = "aaaa\nbbbb\ncccc\n"

        chunks = chunk_text(text, max_size=10)

        assert chunks == ["aaaa\nbbbb\n", "cccc\n"]
        assert "".join(chunks) == text

    def test_splits_long_lines(self):
        """Lines longer than max_size are split."""
        chunks = chunk_text("x" * 25, max_size=10)

        assert chunks == ["x" * 10, "x" * 10, "x" * 5]


def test_truncate():
    """truncate adds suffix within max_len."""
    assert truncate("hello", 10) == "hello"
    assert truncate("hello world", 8) == "hello..."


def test_find_open_tags():
    """Unclosed supported tags are reported in opening order."""
    assert find_open_tags("<b>x <pre><code>y") == ["b", "pre", "code"]
    assert find_open_tags("<b>x</b> <div>") == []


def test_balance_tags():
    assert balance_tags("<pre><code>x") == "<pre><code>x</code></pre>"


class TestChunkHtml:
    """Tests for chunk_html function."""

    def test_escaped_block_stays_balanced(self):
        """A long preformatted block is closed and reopened across chunks."""
        body = '<div className="a">\n' * 200
        html = bold("Skill") + "\n" + pre(body)

        chunks = chunk_html(html)

        assert len(chunks) > 1
        for chunk in chunks:
            assert len(chunk) <= 4096
            assert chunk.count("<pre>") == chunk.count("</pre>") == 1
            assert find_open_tags(chunk) == []

    def test_long_line_not_split_inside_entity(self):
        """Hard splits never cut an escaped entity."""
        html = pre("&" * 3000)

        chunks = chunk_html(html, max_size=1000)

        for chunk in chunks:
            inner = chunk.removeprefix("<pre>").removesuffix("</pre>")
            assert inner.replace("&amp;", "") == ""

    def test_short_html_unchanged(self):
        assert chunk_html("<b>hi</b>") == ["<b>hi</b>"]
