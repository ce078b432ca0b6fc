"""
Storage components for the HTML to Markdown crawler

This package contains components for storage management including:
- URL to output path mapping
- Local markdown file storage
"""

from .path_mapper import map_path, sanitize_filename, query_hash
from .file_storage import FileStorageManager

__all__ = ['map_path', 'sanitize_filename', 'query_hash', 'FileStorageManager']
