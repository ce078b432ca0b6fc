"""
HTML Rewriter

Applies a declarative rule set to page markup before conversion: removes
excluded elements, unwraps container elements, strips attributes outside
an allow-list and makes root-relative media and link URLs absolute.
"""

import logging
import re
from typing import Optional
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from site2md.core.base import RewriteRuleSet


MEDIA_TAGS = ['img', 'audio', 'video', 'source', 'picture']

# ![alt](/path) embedded in an alt attribute
_MARKDOWN_IMAGE_RE = re.compile(r'(!\[[^\]]*\]\()(/(?!/)[^)\s]*)(\))')


def _is_root_relative(value) -> bool:
    return isinstance(value, str) and value.startswith('/') and not value.startswith('//')


def page_origin(page_url: str) -> Optional[str]:
    """scheme://host[:port] of a URL, or None if it has neither"""
    parts = urlsplit(page_url)
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}"


class HtmlRewriter:
    """
    Best-effort markup rewriter. Stages run in a fixed order: exclusion,
    unwrapping, attribute stripping, URL absolutization. Any parse or
    selector failure returns the input markup unchanged.
    """

    def __init__(self, rule_set: RewriteRuleSet):
        self.rule_set = rule_set
        self.logger = logging.getLogger(__name__)

    def rewrite(self, html: str, page_url: Optional[str] = None) -> str:
        """
        Rewrite markup according to the rule set.

        Args:
            html: Raw page markup
            page_url: URL of the page; enables absolutization when given

        Returns:
            Rewritten markup, or the original markup if rewriting failed
        """
        try:
            soup = BeautifulSoup(html, 'html.parser')

            self._exclude(soup)
            self._unwrap(soup)
            if self.rule_set.strip_attributes:
                self._strip_attributes(soup)
            if page_url:
                self._absolutize(soup, page_url)

            return str(soup)
        except Exception as e:
            self.logger.error(f"Error processing HTML{f' for {page_url}' if page_url else ''}: {e}")
            return html

    def _exclude(self, soup: BeautifulSoup) -> None:
        if not self.rule_set.exclude_selectors:
            return

        selector = ', '.join(self.rule_set.exclude_selectors)
        for element in soup.select(selector):
            # Descendants of an element removed earlier in this loop
            if element.decomposed:
                continue
            element.decompose()

    def _unwrap(self, soup: BeautifulSoup) -> None:
        if not self.rule_set.unwrap_selectors:
            return

        selector = ', '.join(self.rule_set.unwrap_selectors)
        for element in soup.select(selector):
            if element.parent is not None:
                element.unwrap()

    def _strip_attributes(self, soup: BeautifulSoup) -> None:
        keep = self.rule_set.keep_attribute_names
        for element in soup.find_all(True):
            element.attrs = {name: value for name, value in element.attrs.items() if name in keep}

    def _absolutize(self, soup: BeautifulSoup, page_url: str) -> None:
        origin = page_origin(page_url)
        if not origin:
            return

        for element in soup.find_all(MEDIA_TAGS):
            src = element.get('src')
            if _is_root_relative(src):
                element['src'] = origin + src

        for anchor in soup.find_all('a'):
            href = anchor.get('href')
            if _is_root_relative(href):
                anchor['href'] = origin + href

        for element in soup.find_all(alt=True):
            alt = element['alt']
            if isinstance(alt, str) and '![' in alt:
                element['alt'] = _MARKDOWN_IMAGE_RE.sub(
                    lambda m: f"{m.group(1)}{origin}{m.group(2)}{m.group(3)}", alt
                )
