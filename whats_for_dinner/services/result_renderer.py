"""Renders the model's Markdown answer as HTML."""

import html
import logging
import re
from urllib.parse import urlsplit

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ["sane_lists"]

SAFE_URL_SCHEMES = {"", "http", "https", "mailto"}

_CONTROL_CHARS = re.compile(r"[\x00-\x20\x7f]+")


def is_safe_url(url: str) -> bool:
    """Relative URLs and http(s)/mailto links only."""
    try:
        scheme = urlsplit(_CONTROL_CHARS.sub("", url or "")).scheme
    except ValueError:
        return False
    return scheme.lower() in SAFE_URL_SCHEMES


class UnsafeUrlTreeprocessor(Treeprocessor):
    """Strip href/src attributes whose scheme is not allowed."""

    def run(self, root):
        for element in root.iter():
            for attribute in ("href", "src"):
                value = element.get(attribute)
                if value is not None and not is_safe_url(value):
                    logger.warning("Dropped unsafe %s in model output: %.80s", attribute, value)
                    del element.attrib[attribute]
        return None


class SafeUrlExtension(Extension):
    def extendMarkdown(self, md):
        # After inline parsing, which is where links and images are created.
        md.treeprocessors.register(UnsafeUrlTreeprocessor(md), "unsafe_urls", 5)


def _build_markdown() -> markdown.Markdown:
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS + [SafeUrlExtension()], output_format="html"
    )
    # Raw HTML from the model is shown as text, never passed through.
    md.preprocessors.deregister("html_block")
    md.inlinePatterns.deregister("html")
    return md


def render_markdown(text: str) -> str:
    """
    Convert Markdown (headings, emphasis, lists, links, images) to HTML.

    Stateless: a fresh parser per call. Links and images keep only relative,
    http(s) and mailto URLs. Never raises; if rendering fails the escaped text
    is returned as a single paragraph.
    """
    if not text:
        return ""
    try:
        return _build_markdown().convert(text)
    except Exception as e:
        logger.warning("Markdown rendering failed, falling back to plain text: %s", str(e))
        return f"<p>{html.escape(text)}</p>"
