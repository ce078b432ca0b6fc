"""
URL to filesystem path mapping

Derives a deterministic, sanitized output location for a page URL under
one of the filename policies. Mapping never raises: URLs that cannot be
parsed fall back to a plain string split of the input.
"""

import re
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, urlsplit

from site2md.core.base import FilenamePolicy, PathPolicy, ResolvedPath


OUTPUT_EXTENSION = '.md'
FALLBACK_NAME = 'index'
MAX_TITLE_LENGTH = 100
MAX_FILENAME_BYTES = 255

STRIPPED_EXTENSIONS = ('.html', '.htm', '.php', '.asp', '.aspx', '.jsp')
KEY_QUERY_PARAMS = ('id', 'page', 'slug')

_ILLEGAL_CHARS = re.compile(r'[/?<>\\:*|"]')
_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x80-\x9f]')
_RESERVED_NAMES = re.compile(r'^\.+$')
_WINDOWS_RESERVED_NAMES = re.compile(r'^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$', re.IGNORECASE)
_WINDOWS_TRAILING = re.compile(r'[. ]+$')
_SCHEME_AND_WWW = re.compile(r'^https?://(www\.)?')


def sanitize_filename(name: str) -> str:
    """
    Remove characters and names that are unsafe in a path component.

    Path separators, reserved and control characters are dropped, names made
    only of dots or matching Windows device names become empty, trailing dots
    and spaces are removed and the result is capped at 255 UTF-8 bytes. The
    result may be empty.
    """
    name = _ILLEGAL_CHARS.sub('', name)
    name = _CONTROL_CHARS.sub('', name)
    name = _RESERVED_NAMES.sub('', name)
    name = _WINDOWS_RESERVED_NAMES.sub('', name)
    name = _WINDOWS_TRAILING.sub('', name)
    return name.encode('utf-8')[:MAX_FILENAME_BYTES].decode('utf-8', errors='ignore')


def safe_segment(name: str) -> str:
    """Sanitized path component, never empty"""
    return sanitize_filename(name) or FALLBACK_NAME


def query_hash(query: str) -> str:
    """
    Stable 32-bit string hash (h = 31 * h + c over UTF-16 code units)
    rendered as lowercase hex of its absolute value.
    """
    h = 0
    data = query.encode('utf-16-le')
    for i in range(0, len(data), 2):
        h = (h * 31 + (data[i] | data[i + 1] << 8)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return format(abs(h), 'x')


def _key_query_param(query: str) -> Optional[str]:
    params = parse_qs(query)
    for key in KEY_QUERY_PARAMS:
        for value in params.get(key, []):
            if value:
                return value
    return None


def _strip_extension(path: str) -> str:
    lowered = path.lower()
    for ext in STRIPPED_EXTENSIONS:
        if lowered.endswith(ext):
            return path[:-len(ext)]
    return path


def _split_url(url: str, policy: PathPolicy) -> Tuple[str, List[str], str]:
    """Host, directory parts and filename stem of a well-formed URL"""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc or not parts.hostname:
        raise ValueError(f"Not an absolute URL: {url}")

    host = parts.hostname
    if host.startswith('www.'):
        host = host[4:]

    trailing_slash = parts.path.endswith('/')
    path = _strip_extension(parts.path.strip('/'))
    segments = [segment for segment in path.split('/') if segment]

    if not segments:
        directories, filename = [], FALLBACK_NAME
    elif trailing_slash:
        # /about/ names the directory itself
        directories, filename = segments, FALLBACK_NAME
    else:
        directories, filename = segments[:-1], segments[-1]

    if parts.query:
        if policy.filename_policy == FilenamePolicy.PRESERVE_URL_WITH_QUERY_HASH:
            filename = f"{filename}-{query_hash(parts.query)}"
        else:
            key_param = _key_query_param(parts.query)
            if key_param:
                filename = f"{filename}-{sanitize_filename(key_param)}"

    return host, directories, filename


def _split_fallback(url: str) -> Tuple[str, List[str], str]:
    """Best-effort string split for input urlsplit cannot make sense of"""
    stripped = re.split(r'[?#]', _SCHEME_AND_WWW.sub('', url), maxsplit=1)[0]
    if stripped.endswith('/'):
        stripped = stripped[:-1]

    parts = stripped.split('/')
    filename = parts[-1] if len(parts) > 1 else FALLBACK_NAME
    return parts[0], parts[1:-1], filename


def title_filename(title: Optional[str]) -> Optional[str]:
    """Sanitized title capped at MAX_TITLE_LENGTH characters, or None if nothing usable remains"""
    if not title:
        return None
    name = sanitize_filename(sanitize_filename(title)[:MAX_TITLE_LENGTH])
    return name or None


def map_path(url: str, policy: PathPolicy, title: Optional[str] = None) -> ResolvedPath:
    """
    Map a page URL to its output location.

    Args:
        url: Page URL
        policy: Filename policy and directory layout
        title: Page title, used only under the page title policy

    Returns:
        ResolvedPath relative to the output root
    """
    try:
        host, directories, filename = _split_url(url, policy)
    except ValueError:
        host, directories, filename = _split_fallback(url)

    filename = safe_segment(filename)

    if policy.filename_policy == FilenamePolicy.PAGE_TITLE:
        filename = title_filename(title) or filename

    segments = [safe_segment(directory) for directory in directories]
    if policy.use_domain_subfolders:
        segments.insert(0, safe_segment(host))

    # Leave room for the extension within the filesystem name limit
    stem = filename.encode('utf-8')[:MAX_FILENAME_BYTES - len(OUTPUT_EXTENSION)].decode('utf-8', errors='ignore')
    return ResolvedPath(directory_segments=tuple(segments), filename=stem + OUTPUT_EXTENSION)
