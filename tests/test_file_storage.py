"""
Tests for the file storage manager
"""

import re
from datetime import datetime, timezone

import pytest
from unittest.mock import patch

from site2md.core.base import ResolvedPath, StorageError
from site2md.core.config import FileOptionsConfig
from site2md.storage.file_storage import FileStorageManager, format_timestamp


@pytest.fixture
def storage(tmp_path):
    return FileStorageManager(FileOptionsConfig(), output_dir=str(tmp_path / 'dist'))


class TestFileStorageManager:
    """Test cases for FileStorageManager"""

    @pytest.mark.asyncio
    async def test_initialize_creates_output_dir(self, storage, tmp_path):
        await storage.initialize()

        assert (tmp_path / 'dist').is_dir()
        assert storage.is_initialized()

    @pytest.mark.asyncio
    async def test_save_document_creates_directories(self, storage, tmp_path):
        resolved = ResolvedPath(('example.com', 'docs'), 'intro.md')

        path = await storage.save_document('https://example.com/docs/intro', resolved, '# Intro\n')

        expected = tmp_path / 'dist' / 'example.com' / 'docs' / 'intro.md'
        assert path == str(expected)
        assert expected.is_file()

    @pytest.mark.asyncio
    async def test_document_headers(self, storage):
        resolved = ResolvedPath(('example.com',), 'index.md')

        path = await storage.save_document('https://example.com/', resolved, '# Home\n')

        with open(path, encoding='utf-8') as f:
            content = f.read()
        match = re.fullmatch(
            r'<!-- Source: https://example\.com/ -->\n\n'
            r'<!-- Generated: \d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z -->\n\n'
            r'# Home\n',
            content
        )
        assert match

    @pytest.mark.asyncio
    async def test_headers_can_be_disabled(self, tmp_path):
        options = FileOptionsConfig(add_source_url=False, add_date=False)
        storage = FileStorageManager(options, output_dir=str(tmp_path))

        path = await storage.save_document('https://example.com/', ResolvedPath((), 'index.md'), 'Body\n')

        with open(path, encoding='utf-8') as f:
            assert f.read() == 'Body\n'

    @pytest.mark.asyncio
    async def test_source_header_only(self, tmp_path):
        storage = FileStorageManager(FileOptionsConfig(add_date=False), output_dir=str(tmp_path))

        path = await storage.save_document('https://example.com/a', ResolvedPath((), 'a.md'), 'Body\n')

        with open(path, encoding='utf-8') as f:
            assert f.read() == '<!-- Source: https://example.com/a -->\n\nBody\n'

    @pytest.mark.asyncio
    async def test_overwrites_existing_file(self, tmp_path):
        storage = FileStorageManager(FileOptionsConfig(add_source_url=False, add_date=False), output_dir=str(tmp_path))
        resolved = ResolvedPath(('example.com',), 'page.md')

        await storage.save_document('https://example.com/page', resolved, 'first\n')
        path = await storage.save_document('https://example.com/page', resolved, 'second\n')

        with open(path, encoding='utf-8') as f:
            assert f.read() == 'second\n'

    @pytest.mark.asyncio
    async def test_unicode_content(self, storage):
        path = await storage.save_document(
            'https://example.com/ü', ResolvedPath(('example.com',), 'ü.md'), 'Grüße 👋\n'
        )

        with open(path, encoding='utf-8') as f:
            assert f.read().endswith('Grüße 👋\n')

    @pytest.mark.asyncio
    async def test_write_failure_raises_storage_error(self, tmp_path):
        blocker = tmp_path / 'example.com'
        blocker.write_text('not a directory')
        storage = FileStorageManager(FileOptionsConfig(), output_dir=str(tmp_path))

        with pytest.raises(StorageError):
            await storage.save_document('https://example.com/a', ResolvedPath(('example.com',), 'a.md'), 'x\n')

    @pytest.mark.asyncio
    async def test_storage_stats(self, storage):
        await storage.initialize()
        await storage.save_document('https://example.com/a', ResolvedPath(('example.com',), 'a.md'), 'a\n')
        await storage.save_document('https://example.com/b', ResolvedPath(('example.com',), 'b.md'), 'b\n')

        stats = storage.get_storage_stats()

        assert stats['documents_written'] == 2
        assert stats['total_documents'] == 2
        assert stats['bytes_written'] > 0


def test_format_timestamp():
    moment = datetime(2024, 3, 5, 7, 8, 9, 123456, tzinfo=timezone.utc)
    assert format_timestamp(moment) == '2024-03-05T07:08:09.123Z'


def test_build_document_uses_current_time(storage):
    fixed = datetime(2024, 1, 2, 3, 4, 5, 6000, tzinfo=timezone.utc)
    with patch('site2md.storage.file_storage.datetime') as mock_datetime:
        mock_datetime.now.return_value = fixed
        document = storage.build_document('https://example.com/', 'Body\n')

    assert document == (
        '<!-- Source: https://example.com/ -->\n\n'
        '<!-- Generated: 2024-01-02T03:04:05.006Z -->\n\n'
        'Body\n'
    )
