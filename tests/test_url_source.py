"""
Tests for URL sources
"""

import json

import pytest
from unittest.mock import AsyncMock

from site2md.core.config import UrlSourceConfig
from site2md.core.url_source import UrlSourceLoader, load_urls_from_file, parse_url_lines


class TestLoadUrlsFromFile:
    """Test cases for URL file loading"""

    def test_text_file(self, tmp_path):
        path = tmp_path / 'urls.txt'
        path.write_text(
            '// docs pages\n'
            'https://example.com/a\n'
            '\n'
            '   https://example.com/b   \n'
            '  // indented comment\n'
            'https://example.com/c\n'
        )

        assert load_urls_from_file(str(path)) == [
            'https://example.com/a', 'https://example.com/b', 'https://example.com/c'
        ]

    def test_json_list(self, tmp_path):
        path = tmp_path / 'urls.json'
        path.write_text(json.dumps(['https://example.com/a', '', 'https://example.com/b']))

        assert load_urls_from_file(str(path)) == ['https://example.com/a', 'https://example.com/b']

    def test_json_object(self, tmp_path):
        path = tmp_path / 'urls.json'
        path.write_text(json.dumps({'urls': ['https://example.com/a']}))

        assert load_urls_from_file(str(path)) == ['https://example.com/a']

    def test_json_invalid_shape(self, tmp_path):
        path = tmp_path / 'urls.json'
        path.write_text(json.dumps({'pages': []}))

        with pytest.raises(ValueError):
            load_urls_from_file(str(path))

    def test_csv_first_column(self, tmp_path):
        path = tmp_path / 'urls.csv'
        path.write_text('https://example.com/a,Home\n\nhttps://example.com/b,About\n')

        assert load_urls_from_file(str(path)) == ['https://example.com/a', 'https://example.com/b']

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError):
            load_urls_from_file(str(tmp_path / 'missing.txt'))

    def test_parse_url_lines(self):
        assert parse_url_lines(['', '  ', '//x', 'https://example.com']) == ['https://example.com']


class TestUrlSourceLoader:
    """Test cases for UrlSourceLoader"""

    @pytest.mark.asyncio
    async def test_file_source(self, tmp_path):
        path = tmp_path / 'urls.txt'
        path.write_text('https://example.com/a\n')

        loader = UrlSourceLoader(UrlSourceConfig(type='file', file=str(path)))

        assert await loader.load() == ['https://example.com/a']

    @pytest.mark.asyncio
    async def test_unreadable_file_yields_empty_list(self, tmp_path, caplog):
        loader = UrlSourceLoader(UrlSourceConfig(type='file', file=str(tmp_path / 'missing.txt')))

        assert await loader.load() == []
        assert 'Failed to load URLs' in caplog.text

    @pytest.mark.asyncio
    async def test_sitemap_source(self):
        resolver = AsyncMock()
        resolver.resolve = AsyncMock(return_value=['https://example.com/a'])
        loader = UrlSourceLoader(
            UrlSourceConfig(type='sitemap', sitemap='https://example.com/sitemap.xml'), resolver
        )

        assert await loader.load() == ['https://example.com/a']
        resolver.resolve.assert_awaited_once_with('https://example.com/sitemap.xml')

    @pytest.mark.asyncio
    async def test_sitemap_source_without_resolver(self):
        loader = UrlSourceLoader(UrlSourceConfig(type='sitemap', sitemap='https://example.com/sitemap.xml'))

        assert await loader.load() == []
