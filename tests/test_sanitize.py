# -*- coding: utf-8 -*-
"""
Tests for HTML sanitization.
"""
import pytest

from text_prep.sanitize import is_safe_url, sanitize_html


class TestIsSafeUrl:
    """Tests for the URL scheme filter."""

    @pytest.mark.parametrize(
        "url",
        ["https://example.com", "http://example.com/a?b=1", "mailto:team@example.com", "/docs/page"],
    )
    def test_accepts_allowed_urls(self, url):
        """http, https, mailto and relative URLs should pass."""
        assert is_safe_url(url) is True

    @pytest.mark.parametrize(
        "url",
        ["javascript:alert(1)", "data:text/html;base64,AAAA", "//evil.example.com/x", "  java\nscript:alert(1)", ""],
    )
    def test_rejects_unsafe_urls(self, url):
        """Other schemes, protocol-relative and empty URLs should be rejected."""
        assert is_safe_url(url) is False


class TestSanitizeHtml:
    """Tests for sanitize_html."""

    def test_removes_script_with_content(self):
        """Scripts should disappear together with their code."""
        result = sanitize_html("<p>Hello</p><script>alert('x')</script>")

        assert "<script" not in result
        assert "alert" not in result
        assert "Hello" in result

    def test_removes_style_with_content(self):
        """Style blocks should disappear entirely."""
        result = sanitize_html("<style>p { color: red }</style><p>Body</p>")

        assert "color" not in result
        assert "Body" in result

    def test_unwraps_disallowed_tags_keeping_text(self):
        """Disallowed wrappers should be removed but their text kept."""
        result = sanitize_html("<section><article><p>Kept text</p></article></section>")

        assert "<section" not in result
        assert "<article" not in result
        assert "<p>Kept text</p>" in result

    def test_filters_attributes(self):
        """Only allow-listed attributes should survive."""
        result = sanitize_html('<p class="x" onclick="boom()">Text</p>')

        assert "onclick" not in result
        assert "class" not in result

    def test_keeps_code_language_class(self):
        """pre/code keep their class for language detection."""
        result = sanitize_html('<pre><code class="language-python">x = 1</code></pre>')

        assert 'class="language-python"' in result

    def test_strips_javascript_links(self):
        """Unsafe hrefs should be removed, the link text kept."""
        result = sanitize_html('<a href="javascript:alert(1)">Click</a>')

        assert "javascript" not in result
        assert "Click" in result

    def test_keeps_safe_links(self):
        """Safe hrefs should stay."""
        result = sanitize_html('<a href="https://example.com" onclick="x()">Site</a>')

        assert 'href="https://example.com"' in result
        assert "onclick" not in result

    def test_drops_comments(self):
        """HTML comments should be removed."""
        result = sanitize_html("<p>Visible<!-- hidden note --></p>")

        assert "hidden note" not in result
        assert "Visible" in result

    def test_drops_protocol_relative_images(self):
        """Protocol-relative image sources should be stripped."""
        result = sanitize_html('<img src="//cdn.example.com/a.png" alt="Logo">')

        assert "cdn.example.com" not in result
        assert 'alt="Logo"' in result
