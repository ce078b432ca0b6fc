"""
Tests for the main entry point
"""

import logging

import pytest
import yaml
from unittest.mock import AsyncMock, Mock, patch

from site2md.__main__ import cli, main
from site2md.core.base import FetchError
from site2md.core.fetcher import HttpFetcher
from site2md.core.logging import logging_manager


PAGE = '<html><head><title>Intro</title></head><body><nav>menu</nav><h1>Intro</h1><p>Hello</p></body></html>'


@pytest.fixture(autouse=True)
def isolated_run(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ('SITE2MD_OUTPUT_DIR', 'SITE2MD_MAX_CONCURRENT', 'SITE2MD_SITEMAP', 'LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    yield
    logging_manager.close()
    logging.getLogger('site2md').handlers.clear()


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump({
        'scraper': {'retry_attempts': 0, 'retry_delay': 0},
        'file_options': {'add_date': False},
        'logging': {'file': str(tmp_path / 'logs' / 'site2md.log')}
    }))
    return str(path)


@pytest.fixture
def url_file(tmp_path):
    path = tmp_path / 'urls.txt'
    path.write_text('https://example.com/docs/intro\nhttps://example.com/missing\n')
    return str(path)


async def fake_fetch(url, accept=None):
    if url.endswith('/missing'):
        raise FetchError('HTTP 404: Not Found', status=404, url=url)
    return PAGE


class TestMain:
    """Test cases for main()"""

    @pytest.mark.asyncio
    async def test_end_to_end(self, tmp_path, config_path, url_file):
        with patch.object(HttpFetcher, 'fetch', AsyncMock(side_effect=fake_fetch)):
            exit_code = await main(['--config', config_path, '-f', url_file, '-o', str(tmp_path / 'out')])

        assert exit_code == 0
        output = tmp_path / 'out' / 'example.com' / 'docs' / 'intro.md'
        assert output.read_text(encoding='utf-8') == (
            '<!-- Source: https://example.com/docs/intro -->\n\n'
            '# Intro\n\nHello\n'
        )
        assert not (tmp_path / 'out' / 'example.com' / 'missing.md').exists()

    @pytest.mark.asyncio
    async def test_title_filenames_flat(self, tmp_path, config_path, url_file):
        with patch.object(HttpFetcher, 'fetch', AsyncMock(side_effect=fake_fetch)):
            exit_code = await main(['--config', config_path, '-f', url_file, '-o', str(tmp_path / 'out'), '-t', '-n'])

        assert exit_code == 0
        assert (tmp_path / 'out' / 'docs' / 'Intro.md').is_file()
        assert not (tmp_path / 'out' / 'example.com').exists()

    @pytest.mark.asyncio
    async def test_empty_url_file(self, tmp_path, config_path):
        path = tmp_path / 'empty.txt'
        path.write_text('// nothing yet\n\n')

        exit_code = await main(['--config', config_path, '-f', str(path), '-o', str(tmp_path / 'out')])

        assert exit_code == 0

    @pytest.mark.asyncio
    async def test_invalid_config_file(self, tmp_path):
        path = tmp_path / 'broken.yaml'
        path.write_text('scraper: [unclosed')

        assert await main(['--config', str(path)]) == 1

    @pytest.mark.asyncio
    async def test_invalid_config_values(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text(yaml.safe_dump({
            'conversion': {'heading_style': 'fancy'},
            'logging': {'file': str(tmp_path / 'site2md.log')}
        }))

        assert await main(['--config', str(path)]) == 1


def test_cli_interrupt():
    with patch('site2md.__main__.main', new=Mock()), \
            patch('site2md.__main__.asyncio.run', side_effect=KeyboardInterrupt):
        with pytest.raises(SystemExit) as exc_info:
            cli()

    assert exc_info.value.code == 130
