# -*- coding: utf-8 -*-
"""
Format detection: decide whether pasted input is HTML or line-oriented text.
"""
import re

HTML_TAG_RE = re.compile(
    r"(?<!\\)<(html|head|body|div|span|p|br|hr|h[1-6]|ul|ol|li|table|thead|tbody|tfoot"
    r"|tr|th|td|pre|code|blockquote|a|img)\b",
    re.IGNORECASE,
)
HTML_CLOSE_TAG_RE = re.compile(
    r"(?<!\\)</(html|head|body|div|span|p|h[1-6]|ul|ol|li|table|thead|tbody|tfoot"
    r"|tr|th|td|pre|code|blockquote|a)\s*>",
    re.IGNORECASE,
)
HTML_DOCTYPE_RE = re.compile(r"<!doctype\s+html", re.IGNORECASE)
HTML_ROOT_RE = re.compile(r"(?<!\\)<html\b", re.IGNORECASE)
HTML_SELF_CLOSING_RE = re.compile(r"(?<!\\)<(br|hr|img)\b[^>]*/?>", re.IGNORECASE)


def looks_like_html(text: str) -> bool:
    """
    Return True when the input is rich markup.

    A known opening tag alone is not enough: plain text such as
    "a <b test" must also carry a closing tag or a void element.
    """
    trimmed = (text or "").strip()
    if not trimmed:
        return False
    if HTML_DOCTYPE_RE.search(trimmed) or HTML_ROOT_RE.search(trimmed):
        return True
    if not HTML_TAG_RE.search(trimmed):
        return False
    if HTML_CLOSE_TAG_RE.search(trimmed):
        return True
    return bool(HTML_SELF_CLOSING_RE.search(trimmed))
