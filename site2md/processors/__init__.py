"""
Content processing components for the HTML to Markdown crawler

This package contains components for processing page markup including:
- Declarative HTML rewriting
- Page title extraction
- HTML to markdown conversion
"""

from site2md.processors.html_rewriter import HtmlRewriter
from site2md.processors.title import extract_title
from site2md.processors.converter import ContentConverter, SiteMarkdownConverter

__all__ = [
    'HtmlRewriter',
    'extract_title',
    'ContentConverter',
    'SiteMarkdownConverter'
]
