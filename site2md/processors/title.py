"""
Page title extraction used by title-based filename policies.
"""

import logging
from typing import Optional

from bs4 import BeautifulSoup


logger = logging.getLogger(__name__)


def extract_title(html: str) -> Optional[str]:
    """
    Find a page title in raw markup.

    Tries the first <title>, then the first <h1>, then the content of
    <meta name="title">. Returns the first non-empty trimmed value, or None.
    """
    try:
        soup = BeautifulSoup(html, 'html.parser')

        title_tag = soup.find('title')
        if title_tag:
            text = title_tag.get_text().strip()
            if text:
                return text

        h1 = soup.find('h1')
        if h1:
            text = h1.get_text().strip()
            if text:
                return text

        meta = soup.find('meta', attrs={'name': 'title'})
        if meta:
            content = meta.get('content')
            if isinstance(content, str) and content.strip():
                return content.strip()
    except Exception as e:
        logger.warning(f"Error extracting title: {e}")

    return None
