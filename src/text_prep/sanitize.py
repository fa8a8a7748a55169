# -*- coding: utf-8 -*-
"""
HTML sanitization: restrict pasted markup to a safe allow-list.

Disallowed tags are discarded: their markup always goes away, their text
survives unless the tag is a non-text container (scripts, styles, forms
widgets), in which case the whole subtree is dropped.
"""
import re

from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

ALLOWED_TAGS = frozenset(
    [
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "p",
        "br",
        "hr",
        "div",
        "span",
        "strong",
        "b",
        "em",
        "i",
        "u",
        "s",
        "del",
        "strike",
        "blockquote",
        "pre",
        "code",
        "ul",
        "ol",
        "li",
        "table",
        "thead",
        "tbody",
        "tfoot",
        "tr",
        "th",
        "td",
        "a",
        "img",
    ]
)

ALLOWED_ATTRIBUTES = {
    "a": ("href", "name", "target", "rel"),
    "img": ("src", "alt", "title"),
    "th": ("colspan", "rowspan", "align"),
    "td": ("colspan", "rowspan", "align"),
    "code": ("class",),
    "pre": ("class",),
}

# Removed together with everything inside them
NON_TEXT_TAGS = [
    "head",
    "script",
    "style",
    "noscript",
    "template",
    "textarea",
    "option",
    "select",
    "iframe",
    "object",
    "embed",
    "svg",
    "canvas",
]

ALLOWED_SCHEMES = ("http", "https", "mailto")

URL_ATTRIBUTES = {"a": "href", "img": "src"}

_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.\-]*):")
_URL_NOISE_RE = re.compile(r"[\s\x00-\x1f\x7f]+")


def is_safe_url(url: str) -> bool:
    """Accept relative URLs and http/https/mailto; reject protocol-relative ones."""
    compact = _URL_NOISE_RE.sub("", url or "").lower()
    if not compact:
        return False
    if compact.startswith("//") or compact.startswith("\\\\"):
        return False
    match = _SCHEME_RE.match(compact)
    if not match:
        return True
    return match.group(1) in ALLOWED_SCHEMES


def sanitize_html(html: str) -> str:
    """
    Return the safe subset of the given markup as an HTML string.

    Comments, doctypes and processing instructions are dropped, attributes
    are filtered per tag and unsafe link/image URLs are removed.
    """
    soup = BeautifulSoup(html or "", "lxml")

    for node in soup.find_all(
        string=lambda s: isinstance(s, (Comment, Declaration, Doctype, ProcessingInstruction))
    ):
        node.extract()

    for tag_name in NON_TEXT_TAGS:
        for tag in soup.find_all(tag_name):
            tag.decompose()

    # Snapshot first: unwrapping mutates the tree
    for tag in list(soup.find_all(True)):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue

        allowed = ALLOWED_ATTRIBUTES.get(tag.name, ())
        tag.attrs = {name: value for name, value in tag.attrs.items() if name in allowed}

        url_attribute = URL_ATTRIBUTES.get(tag.name)
        if url_attribute and url_attribute in tag.attrs:
            if not is_safe_url(str(tag.attrs[url_attribute])):
                del tag.attrs[url_attribute]

    return soup.decode().strip()
