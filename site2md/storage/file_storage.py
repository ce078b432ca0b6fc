"""
File Storage Manager Implementation

Writes converted markdown documents under the output root at the location
chosen by the path mapper, with optional source and timestamp header lines.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import aiofiles

from site2md.core.base import ResolvedPath, StorageError, StorageManagerInterface
from site2md.core.config import FileOptionsConfig
from site2md.core.logging import get_logger


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix"""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f"{moment.microsecond // 1000:03d}Z"


class FileStorageManager(StorageManagerInterface):
    """
    Implementation of the local file storage manager
    """

    def __init__(self, config: FileOptionsConfig, output_dir: str = "dist"):
        super().__init__(config)
        self.logger = get_logger(__name__)
        self.output_dir = Path(output_dir)
        self.add_source_url = config.add_source_url
        self.add_date = config.add_date
        self.documents_written = 0
        self.bytes_written = 0

    async def initialize(self) -> None:
        """Initialize the component"""
        self.logger.info(f"Initializing file storage in {self.output_dir}")
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create output directory {self.output_dir}: {e}")
        self._initialized = True

    async def cleanup(self) -> None:
        """Clean up resources"""
        self.logger.debug("Cleaning up file storage manager")

    def build_document(self, url: str, markdown: str) -> str:
        """Prefix markdown with the enabled header comments"""
        header = ""
        if self.add_source_url:
            header += f"<!-- Source: {url} -->\n\n"
        if self.add_date:
            header += f"<!-- Generated: {format_timestamp(datetime.now(timezone.utc))} -->\n\n"
        return header + markdown

    async def save_document(self, url: str, resolved_path: ResolvedPath, markdown: str) -> str:
        """
        Save document to storage

        Args:
            url: Source URL of the document
            resolved_path: Location relative to the output root
            markdown: Converted content

        Returns:
            Path of the written file
        """
        file_path = resolved_path.to_path(self.output_dir)
        content = self.build_document(url, markdown)

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, 'w', encoding='utf-8') as f:
                await f.write(content)
        except OSError as e:
            raise StorageError(f"Failed to write {file_path}: {e}")

        self.documents_written += 1
        self.bytes_written += len(content.encode('utf-8'))
        self.logger.debug(f"Saved document to {file_path}")
        return str(file_path)

    def get_storage_stats(self) -> Dict[str, Any]:
        """
        Get storage statistics

        Returns:
            Storage statistics
        """
        stats = {
            'output_dir': str(self.output_dir),
            'documents_written': self.documents_written,
            'bytes_written': self.bytes_written,
            'total_documents': 0
        }

        if self.output_dir.exists():
            stats['total_documents'] = sum(1 for _ in self.output_dir.rglob('*.md'))

        return stats
