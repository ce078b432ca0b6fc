"""
site2md - HTML to Markdown crawler

Fetches web pages listed in a URL file or a sitemap, strips page chrome
from their markup, converts them to Markdown and writes one file per page
under an output directory that mirrors the site's URL structure.

Features:
- Recursive sitemap and sitemap index resolution
- Bounded-concurrency batch processing with retries
- Declarative HTML rewriting (exclude, unwrap, attribute stripping)
- URL path, page title and query hash based filenames
- Configurable via YAML/JSON, environment variables and command line
"""

__version__ = "0.1.0"
