# -*- coding: utf-8 -*-
"""
Tests for HTML to canonical text conversion.
"""
from text_prep.html_to_md import html_to_markdown


class TestBlocks:
    """Tests for block-level conversion."""

    def test_headings_and_paragraphs(self):
        """Headings become ATX lines and paragraphs are separated by blank lines."""
        result = html_to_markdown("<h2>Overview</h2><p>First.</p><p>Second.</p>")

        assert result == "## Overview\n\nFirst.\n\nSecond."

    def test_unordered_list(self):
        """Unordered items should use dash markers."""
        result = html_to_markdown("<ul><li>One</li><li>Two</li></ul>")

        assert result == "- One\n- Two"

    def test_ordered_list(self):
        """Ordered items should be numbered from 1."""
        result = html_to_markdown("<ol><li>First</li><li>Second</li></ol>")

        assert result == "1. First\n2. Second"

    def test_pre_with_language(self):
        """Code blocks should be fenced with the class language."""
        result = html_to_markdown('<pre><code class="language-python">x = 1\nprint(x)</code></pre>')

        assert result == "```python\nx = 1\nprint(x)\n```"

    def test_blockquote(self):
        """Quotes should be prefixed with '> '."""
        result = html_to_markdown("<blockquote><p>Quoted</p></blockquote>")

        assert result == "> Quoted"

    def test_horizontal_rule(self):
        """hr should become a dash rule."""
        result = html_to_markdown("<p>A</p><hr><p>B</p>")

        assert result == "A\n\n---\n\nB"

    def test_empty_wrappers_dropped(self):
        """Whitespace-only div/span wrappers should leave nothing behind."""
        result = html_to_markdown("<div>  </div><div><span> </span></div><p>Text</p>")

        assert result == "Text"

    def test_content_wrappers_unwrapped(self):
        """Content-bearing div/span should become plain text."""
        result = html_to_markdown("<div><span>Inline content</span></div>")

        assert result == "Inline content"


class TestInline:
    """Tests for inline conversion."""

    def test_emphasis(self):
        """strong/em/strike should use Markdown delimiters."""
        result = html_to_markdown("<p><strong>bold</strong> <em>soft</em> <s>gone</s></p>")

        assert result == "**bold** *soft* ~~gone~~"

    def test_inline_code(self):
        """Inline code should use backticks."""
        result = html_to_markdown("<p>Run <code>make test</code> now</p>")

        assert result == "Run `make test` now"

    def test_link(self):
        """Links should keep their href."""
        result = html_to_markdown('<p><a href="https://example.com">Example</a></p>')

        assert result == "[Example](https://example.com)"

    def test_link_text_falls_back_to_href(self):
        """Empty link text should fall back to the href."""
        result = html_to_markdown('<p><a href="https://example.com"></a></p>')

        assert result == "[https://example.com](https://example.com)"

    def test_image(self):
        """Images should keep alt and src."""
        result = html_to_markdown('<p><img src="https://example.com/a.png" alt="Chart"></p>')

        assert result == "![Chart](https://example.com/a.png)"

    def test_line_break(self):
        """br should break the line inside a paragraph."""
        result = html_to_markdown("<p>Line one<br>Line two</p>")

        assert result == "Line one\nLine two"


class TestTables:
    """Tests for table conversion."""

    def test_thead_header(self):
        """The first thead row should become the header."""
        html = (
            "<table><thead><tr><th>Name</th><th>Role</th></tr></thead>"
            "<tbody><tr><td>Ann</td><td>Dev</td></tr></tbody></table>"
        )

        result = html_to_markdown(html)

        assert result == "| Name | Role |\n| --- | --- |\n| Ann | Dev |"

    def test_first_row_header_without_thead(self):
        """Without thead the first row should be the header."""
        html = "<table><tr><th>Owner</th></tr><tr><td>Team A</td></tr></table>"

        result = html_to_markdown(html)

        assert result == "| Owner |\n| --- |\n| Team A |"

    def test_rows_padded_to_widest(self):
        """Short rows should be padded to the widest row."""
        html = (
            "<table><tr><th>A</th><th>B</th></tr>"
            "<tr><td>1</td><td>2</td><td>3</td></tr></table>"
        )

        result = html_to_markdown(html)

        assert result.split("\n")[0] == "| A | B |  |"
        assert result.split("\n")[1] == "| --- | --- | --- |"
        assert result.split("\n")[2] == "| 1 | 2 | 3 |"

    def test_pipes_escaped_in_cells(self):
        """Pipes inside cells should be escaped."""
        html = "<table><tr><th>Expr</th></tr><tr><td>a | b</td></tr></table>"

        result = html_to_markdown(html)

        assert "| a \\| b |" in result


class TestEscaping:
    """Tests for escaping literal HTML text."""

    def test_numbered_paragraph_stays_text(self):
        """A paragraph starting with '2.' is not turned into a list item."""
        result = html_to_markdown("<p>Intro</p><p>2. Second point of the memo</p>")

        assert result == "Intro\n\n2\\. Second point of the memo"

    def test_literal_asterisks(self):
        """Asterisks in text are not emphasis."""
        result = html_to_markdown("<p>*not emphasis*</p>")

        assert result == "\\*not emphasis\\*"

    def test_literal_heading_marker(self):
        """A paragraph starting with '#' is not a heading."""
        result = html_to_markdown("<p># Not a heading</p>")

        assert result == "\\# Not a heading"

    def test_entity_encoded_tag_stays_text(self):
        """Encoded markup does not come back as a live tag."""
        result = html_to_markdown("<p>&lt;script&gt;alert(1)&lt;/script&gt;</p>")

        assert result == "\\<script>alert(1)\\</script>"

    def test_underscores(self):
        """Only underscores at word edges are escaped."""
        result = html_to_markdown("<p>user_id and _private</p>")

        assert result == "user_id and \\_private"

    def test_code_is_not_escaped(self):
        """Inline code keeps its characters as they are."""
        result = html_to_markdown("<p><code>*args</code></p>")

        assert result == "`*args`"

    def test_pre_holding_a_fence(self):
        """A block containing ``` is fenced with a longer run."""
        result = html_to_markdown("<pre>```\nMAX_SIZE  =  10\n```</pre>")

        assert result == "````\n```\nMAX_SIZE  =  10\n```\n````"
