"""
URL sources for a crawl run: a local URL file or a sitemap.
"""

import csv
import json
import logging
from pathlib import Path
from typing import List, Optional

from site2md.core.base import UrlSourceType
from site2md.core.config import UrlSourceConfig
from site2md.core.sitemap import SitemapResolver


COMMENT_PREFIX = '//'


def parse_url_lines(lines) -> List[str]:
    """Trimmed, non-blank lines that are not '//' comments"""
    urls = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        urls.append(line)
    return urls


def load_urls_from_file(file_path: str) -> List[str]:
    """
    Load URLs from file in various formats

    Args:
        file_path: Path to a TXT (one URL per line), CSV (first column)
            or JSON (list, or object with a 'urls' list) file

    Returns:
        List of URLs

    Raises:
        ValueError: If the file cannot be read or has an unsupported shape
    """
    file_path = Path(file_path)

    try:
        if file_path.suffix.lower() == '.json':
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if isinstance(data, dict) and 'urls' in data:
                data = data['urls']
            if not isinstance(data, list):
                raise ValueError(f"Invalid JSON format in {file_path}")
            return parse_url_lines(str(url) for url in data if url)

        if file_path.suffix.lower() == '.csv':
            with open(file_path, 'r', encoding='utf-8', newline='') as f:
                return parse_url_lines(row[0] for row in csv.reader(f) if row)

        with open(file_path, 'r', encoding='utf-8') as f:
            return parse_url_lines(f)
    except (OSError, ValueError, csv.Error) as e:
        raise ValueError(f"Failed to load URLs from {file_path}: {e}")


class UrlSourceLoader:
    """Reads the page URL list from the configured source"""

    def __init__(self, config: UrlSourceConfig, sitemap_resolver: Optional[SitemapResolver] = None):
        self.config = config
        self.sitemap_resolver = sitemap_resolver
        self.logger = logging.getLogger(__name__)

    async def load(self) -> List[str]:
        """
        Load URLs from the configured file or sitemap.

        Unreadable sources are logged and yield an empty list so the run
        can finish cleanly.
        """
        if self.config.type == UrlSourceType.SITEMAP.value:
            if not self.sitemap_resolver:
                self.logger.error("Sitemap source configured but no sitemap resolver available")
                return []
            self.logger.info(f"Using sitemap: {self.config.sitemap}")
            return await self.sitemap_resolver.resolve(self.config.sitemap)

        self.logger.info(f"Reading URLs from {self.config.file}")
        try:
            urls = load_urls_from_file(self.config.file)
        except ValueError as e:
            self.logger.error(str(e))
            return []

        self.logger.info(f"Loaded {len(urls)} URLs from {self.config.file}")
        return urls
