"""
Tests for the command line interface
"""

import pytest

from site2md.cli.arguments import CLIManager
from site2md.core.base import FilenamePolicy
from site2md.core.config import ConfigManager


@pytest.fixture
def cli_manager():
    return CLIManager()


@pytest.fixture
def config_manager(tmp_path, monkeypatch):
    for name in ('SITE2MD_OUTPUT_DIR', 'SITE2MD_MAX_CONCURRENT', 'SITE2MD_SITEMAP', 'LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    manager = ConfigManager(str(tmp_path / 'config.yaml'))
    manager.load_config()
    return manager


@pytest.fixture
def url_file(tmp_path):
    path = tmp_path / 'urls.txt'
    path.write_text('https://example.com/a\n')
    return str(path)


class TestCLIManager:
    """Test cases for CLIManager"""

    def test_defaults(self, cli_manager):
        args = cli_manager.parse_arguments([])

        assert args.config == 'config/config.yaml'
        assert args.output_dir is None
        assert args.url_file is None
        assert args.sitemap is None
        assert args.max_concurrent is None
        assert not args.use_titles
        assert not args.flat_structure

    def test_short_options(self, cli_manager, url_file):
        args = cli_manager.parse_arguments(['-o', 'out', '-f', url_file, '-c', '5', '-t', '-n'])

        assert args.output_dir == 'out'
        assert args.url_file == url_file
        assert args.max_concurrent == 5
        assert args.use_titles
        assert args.flat_structure

    def test_long_options_with_equals(self, cli_manager):
        args = cli_manager.parse_arguments([
            '--output-dir=out', '--sitemap=https://example.com/sitemap.xml',
            '--max-concurrent=4', '--timeout=10', '--retry-attempts=1', '--log-level=DEBUG'
        ])

        assert args.sitemap == 'https://example.com/sitemap.xml'
        assert args.timeout == 10.0
        assert args.retry_attempts == 1
        assert args.log_level == 'DEBUG'

    @pytest.mark.parametrize('argv', [
        ['-f', 'urls.txt', '-s', 'https://example.com/sitemap.xml'],
        ['-t', '-u'],
        ['-d', '-n'],
    ])
    def test_mutually_exclusive_options(self, cli_manager, argv):
        with pytest.raises(SystemExit):
            cli_manager.parse_arguments(argv)

    def test_missing_url_file(self, cli_manager, tmp_path):
        with pytest.raises(SystemExit):
            cli_manager.parse_arguments(['-f', str(tmp_path / 'missing.txt')])

    def test_invalid_sitemap_url(self, cli_manager):
        with pytest.raises(SystemExit):
            cli_manager.parse_arguments(['-s', 'not-a-url'])

    @pytest.mark.parametrize('argv', [
        ['-c', '0'],
        ['--timeout', '0'],
        ['--retry-attempts', '-1'],
    ])
    def test_invalid_numbers(self, cli_manager, argv):
        with pytest.raises(SystemExit):
            cli_manager.parse_arguments(argv)

    def test_version(self, cli_manager, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli_manager.parse_arguments(['--version'])

        assert exc_info.value.code == 0
        assert 'site2md v' in capsys.readouterr().out


class TestApplyOverrides:
    """Test cases for applying CLI values over configuration"""

    def test_no_options_changes_nothing(self, cli_manager, config_manager):
        args = cli_manager.parse_arguments([])

        assert cli_manager.apply_overrides(args, config_manager) is False
        assert config_manager.scraper_config.output_dir == 'dist'

    def test_output_and_source(self, cli_manager, config_manager):
        args = cli_manager.parse_arguments(['-o', 'out', '-s', 'https://example.com/sitemap.xml', '-c', '7'])

        assert cli_manager.apply_overrides(args, config_manager)
        assert config_manager.scraper_config.output_dir == 'out'
        assert config_manager.scraper_config.max_concurrent == 7
        assert config_manager.url_source_config.type == 'sitemap'
        assert config_manager.url_source_config.sitemap == 'https://example.com/sitemap.xml'

    def test_url_file_source(self, cli_manager, config_manager, url_file):
        config_manager.url_source_config.type = 'sitemap'
        args = cli_manager.parse_arguments(['-f', url_file])

        cli_manager.apply_overrides(args, config_manager)

        assert config_manager.url_source_config.type == 'file'
        assert config_manager.url_source_config.file == url_file

    def test_use_titles(self, cli_manager, config_manager):
        cli_manager.apply_overrides(cli_manager.parse_arguments(['-t']), config_manager)

        assert config_manager.get_filename_policy() == FilenamePolicy.PAGE_TITLE

    def test_use_url_paths(self, cli_manager, config_manager):
        config_manager.file_options.preserve_url_filenames = False
        config_manager.file_options.use_page_titles_for_filenames = True

        cli_manager.apply_overrides(cli_manager.parse_arguments(['-u']), config_manager)

        assert config_manager.get_filename_policy() == FilenamePolicy.PRESERVE_URL_WITH_QUERY_HASH

    def test_folder_layout(self, cli_manager, config_manager):
        cli_manager.apply_overrides(cli_manager.parse_arguments(['-n']), config_manager)
        assert config_manager.file_options.use_domain_subfolders is False

        cli_manager.apply_overrides(cli_manager.parse_arguments(['-d']), config_manager)
        assert config_manager.file_options.use_domain_subfolders is True

    def test_timeout_and_retries(self, cli_manager, config_manager):
        args = cli_manager.parse_arguments(['--timeout', '5', '--retry-attempts', '0'])

        cli_manager.apply_overrides(args, config_manager)

        assert config_manager.scraper_config.timeout == 5.0
        assert config_manager.scraper_config.retry_attempts == 0
