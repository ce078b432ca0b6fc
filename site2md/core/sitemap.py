"""
Sitemap resolution

Turns a sitemap URL into the flat list of page URLs it describes. Sitemap
index documents are followed recursively, with child sitemaps resolved in
windows of at most ``max_concurrent`` concurrent requests.
"""

import asyncio
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import List, Optional, Set, Union
from urllib.parse import urljoin

from site2md.core.base import FetcherInterface, FetchError
from site2md.core.fetcher import SITEMAP_ACCEPT


@dataclass
class IndexNode:
    """A sitemap index: references to other sitemaps"""
    children: List[str] = field(default_factory=list)


@dataclass
class UrlsetNode:
    """A urlset: page locations"""
    locs: List[str] = field(default_factory=list)


SitemapNode = Union[IndexNode, UrlsetNode]


def _local_name(tag) -> str:
    """Strip any '{namespace}' prefix from an element tag"""
    if not isinstance(tag, str):
        return ''
    return tag.rsplit('}', 1)[-1]


def _child_locs(root: ET.Element, entry_name: str) -> List[str]:
    """Trimmed <loc> values of each <entry_name> child, in document order"""
    locs = []
    for entry in root:
        if _local_name(entry.tag) != entry_name:
            continue
        for child in entry:
            if _local_name(child.tag) == 'loc':
                loc = (child.text or '').strip()
                if loc:
                    locs.append(loc)
                break
    return locs


def parse_sitemap_document(content: str) -> Optional[SitemapNode]:
    """
    Parse sitemap XML into an IndexNode or UrlsetNode.

    A document with a single entry is handled exactly like one with many.
    Returns None when the root is neither <sitemapindex> nor <urlset>.

    Raises:
        ET.ParseError: If the content is not well-formed XML
    """
    root = ET.fromstring(content.lstrip('\ufeff').strip())
    root_name = _local_name(root.tag)

    if root_name == 'sitemapindex':
        return IndexNode(children=_child_locs(root, 'sitemap'))
    if root_name == 'urlset':
        return UrlsetNode(locs=_child_locs(root, 'url'))
    return None


class SitemapResolver:
    """
    Recursive sitemap resolver with concurrency-bounded fan-out.

    Failures for one sitemap are logged and yield an empty list so sibling
    sitemaps still resolve. Each sitemap URL is fetched at most once per
    resolve() call, which stops self-referencing indexes from recursing
    forever.
    """

    def __init__(self, fetcher: FetcherInterface, max_concurrent: int = 3):
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.fetcher = fetcher
        self.max_concurrent = max_concurrent
        self.logger = logging.getLogger(__name__)

    async def resolve(self, sitemap_url: str, base_url: Optional[str] = None) -> List[str]:
        """
        Resolve a sitemap into page URLs.

        Args:
            sitemap_url: Sitemap location, absolute or relative to base_url
            base_url: Base for resolving a relative sitemap_url

        Returns:
            Page URLs in window order
        """
        if base_url:
            sitemap_url = urljoin(base_url, sitemap_url)

        visited: Set[str] = set()
        urls = await self._resolve(sitemap_url, visited)
        self.logger.info(f"Resolved {len(urls)} URLs from sitemap {sitemap_url}")
        return urls

    async def _resolve(self, sitemap_url: str, visited: Set[str]) -> List[str]:
        if sitemap_url in visited:
            self.logger.warning(f"Skipping already visited sitemap: {sitemap_url}")
            return []
        visited.add(sitemap_url)

        self.logger.info(f"Fetching sitemap from: {sitemap_url}")
        try:
            content = await self.fetcher.fetch(sitemap_url, accept=SITEMAP_ACCEPT)
        except FetchError as e:
            self.logger.error(f"Error fetching sitemap {sitemap_url}: {e}")
            return []

        try:
            node = parse_sitemap_document(content)
        except ET.ParseError as e:
            self.logger.error(f"Error parsing XML content of {sitemap_url}: {e}")
            return []

        if isinstance(node, IndexNode):
            return await self._resolve_index(node, sitemap_url, visited)
        if isinstance(node, UrlsetNode):
            self.logger.info(f"Found {len(node.locs)} URLs in sitemap {sitemap_url}")
            return list(node.locs)

        self.logger.warning(f"No valid sitemap format detected at {sitemap_url}")
        return []

    async def _resolve_index(self, node: IndexNode, index_url: str, visited: Set[str]) -> List[str]:
        # Child locations resolve against the index document's own URL
        children = [urljoin(index_url, loc) for loc in node.children]
        total = len(children)
        self.logger.info(f"Found {total} sitemaps in the sitemap index {index_url}")

        all_urls: List[str] = []
        processed = 0
        for i in range(0, total, self.max_concurrent):
            window = children[i:i + self.max_concurrent]
            results = await asyncio.gather(*(self._resolve(child, visited) for child in window))
            for urls in results:
                all_urls.extend(urls)

            processed += len(window)
            self.logger.info(
                f"Processed {processed}/{total} sitemaps ({round(processed / total * 100)}%)"
            )

        return all_urls
