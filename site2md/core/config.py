"""
Configuration Manager for the HTML to Markdown crawler

Handles YAML/JSON configuration files and environment variable overrides,
and turns the merged settings into the immutable values threaded through
the pipeline components.
"""

import os
import copy
import json
import yaml
from typing import Dict, Any, Optional, List
from dataclasses import asdict, dataclass, field
from pathlib import Path

from site2md.core.base import (
    ConfigurationError,
    ConversionOptions,
    FetchSettings,
    FilenamePolicy,
    PathPolicy,
    PipelineSettings,
    RewriteRuleSet,
    UrlSourceType,
)


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/100.0.4896.127 Safari/537.36"
)

HEADING_STYLES = ('atx', 'setext')
BULLET_MARKERS = ('-', '*', '+')
CODE_BLOCK_STYLES = ('indented', 'fenced')
EM_DELIMITERS = ('*', '_')
LINK_STYLES = ('inlined', 'referenced')
STRONG_DELIMITERS = ('**', '__')


@dataclass
class ScraperConfig:
    """Main crawler configuration"""
    output_dir: str = "dist"
    max_concurrent: int = 3
    timeout: float = 30
    retry_attempts: int = 3
    retry_delay: float = 3.0
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class UrlSourceConfig:
    """Where URLs are read from"""
    type: str = "file"
    file: str = "urls.txt"
    sitemap: str = ""


@dataclass
class SelectorConfig:
    """HTML rewriting rules"""
    exclude: List[str] = field(default_factory=lambda: [
        "footer", "header", "nav", "script", ".cookie-banner", "#sidebar"
    ])
    unwrap: List[str] = field(default_factory=lambda: [".container", ".wrapper"])
    remove_attributes: bool = True
    absolutize_urls: bool = True


@dataclass
class ConversionConfig:
    """Markdown conversion options"""
    heading_style: str = "atx"
    hr: str = "---"
    bullet_list_marker: str = "-"
    code_block_style: str = "fenced"
    em_delimiter: str = "*"
    link_style: str = "referenced"
    strong_delimiter: str = "**"


@dataclass
class FileOptionsConfig:
    """Output file layout and header options"""
    add_source_url: bool = True
    add_date: bool = True
    use_domain_subfolders: bool = True
    use_page_titles_for_filenames: bool = False
    preserve_url_filenames: bool = True


@dataclass
class LoggingConfig:
    """Logging system configuration"""
    level: str = "INFO"
    file: str = "./logs/site2md.log"
    max_size: str = "10MB"
    backup_count: int = 5


class ConfigManager:
    """
    Centralized configuration manager with support for YAML/JSON files
    and environment variable integration.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or "config/config.yaml"
        self._config_data: Dict[str, Any] = {}
        self.scraper_config: Optional[ScraperConfig] = None
        self.url_source_config: Optional[UrlSourceConfig] = None
        self.selector_config: Optional[SelectorConfig] = None
        self.conversion_config: Optional[ConversionConfig] = None
        self.file_options: Optional[FileOptionsConfig] = None
        self.logging_config: Optional[LoggingConfig] = None

    def load_config(self, config_path: Optional[str] = None) -> Dict[str, Any]:
        """Load configuration from file with environment variable override"""
        if config_path:
            self.config_path = config_path

        config_file = Path(self.config_path)
        defaults = self._get_default_config()

        if not config_file.exists():
            self._config_data = defaults
            self._create_default_config_file()
        else:
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    if config_file.suffix.lower() == '.json':
                        file_data = json.load(f)
                    else:  # Assume YAML
                        file_data = yaml.safe_load(f) or {}
            except (OSError, ValueError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config from {config_file}: {e}")

            if not isinstance(file_data, dict):
                raise ConfigurationError(f"Config file {config_file} must contain a mapping")
            self._config_data = self._merge_configs(defaults, file_data)

        self._apply_env_overrides()
        self._parse_config()

        return self._config_data

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration dictionary"""
        return {
            'scraper': {
                'output_dir': 'dist',
                'max_concurrent': 3,
                'timeout': 30,
                'retry_attempts': 3,
                'retry_delay': 3.0,
                'user_agent': DEFAULT_USER_AGENT
            },
            'url_source': {
                'type': 'file',
                'file': 'urls.txt',
                'sitemap': ''
            },
            'selectors': {
                'exclude': ['footer', 'header', 'nav', 'script', '.cookie-banner', '#sidebar'],
                'unwrap': ['.container', '.wrapper'],
                'remove_attributes': True,
                'absolutize_urls': True
            },
            'conversion': {
                'heading_style': 'atx',
                'hr': '---',
                'bullet_list_marker': '-',
                'code_block_style': 'fenced',
                'em_delimiter': '*',
                'link_style': 'referenced',
                'strong_delimiter': '**'
            },
            'file_options': {
                'add_source_url': True,
                'add_date': True,
                'use_domain_subfolders': True,
                'use_page_titles_for_filenames': False,
                'preserve_url_filenames': True
            },
            'logging': {
                'level': 'INFO',
                'file': './logs/site2md.log',
                'max_size': '10MB',
                'backup_count': 5
            }
        }

    def _merge_configs(self, target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge source over target; lists and scalars are replaced"""
        output = copy.deepcopy(target)
        for key, value in source.items():
            if isinstance(value, dict) and isinstance(output.get(key), dict):
                output[key] = self._merge_configs(output[key], value)
            else:
                output[key] = copy.deepcopy(value)
        return output

    def _create_default_config_file(self) -> None:
        """Create default configuration file"""
        config_dir = Path(self.config_path).parent
        config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, 'w', encoding='utf-8') as f:
            if Path(self.config_path).suffix.lower() == '.json':
                json.dump(self._config_data, f, indent=2)
            else:
                yaml.dump(self._config_data, f, default_flow_style=False, indent=2, sort_keys=False)

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides"""
        if os.getenv('SITE2MD_OUTPUT_DIR'):
            self._config_data.setdefault('scraper', {})['output_dir'] = os.getenv('SITE2MD_OUTPUT_DIR')

        if os.getenv('SITE2MD_MAX_CONCURRENT'):
            try:
                self._config_data.setdefault('scraper', {})['max_concurrent'] = int(os.getenv('SITE2MD_MAX_CONCURRENT'))
            except ValueError:
                pass

        if os.getenv('SITE2MD_SITEMAP'):
            source = self._config_data.setdefault('url_source', {})
            source['type'] = 'sitemap'
            source['sitemap'] = os.getenv('SITE2MD_SITEMAP')

        if os.getenv('LOG_LEVEL'):
            self._config_data.setdefault('logging', {})['level'] = os.getenv('LOG_LEVEL')

    def _parse_config(self) -> None:
        """Parse configuration into dataclass objects"""
        scraper_data = self._config_data.get('scraper', {})
        self.scraper_config = ScraperConfig(
            output_dir=scraper_data.get('output_dir', 'dist'),
            max_concurrent=scraper_data.get('max_concurrent', 3),
            timeout=scraper_data.get('timeout', 30),
            retry_attempts=scraper_data.get('retry_attempts', 3),
            retry_delay=scraper_data.get('retry_delay', 3.0),
            user_agent=scraper_data.get('user_agent', DEFAULT_USER_AGENT)
        )

        source_data = self._config_data.get('url_source', {})
        self.url_source_config = UrlSourceConfig(
            type=source_data.get('type', 'file'),
            file=source_data.get('file', 'urls.txt'),
            sitemap=source_data.get('sitemap', '') or ''
        )

        selector_data = self._config_data.get('selectors', {})
        self.selector_config = SelectorConfig(
            exclude=list(selector_data.get('exclude') or []),
            unwrap=list(selector_data.get('unwrap') or []),
            remove_attributes=selector_data.get('remove_attributes', True),
            absolutize_urls=selector_data.get('absolutize_urls', True)
        )

        conversion_data = self._config_data.get('conversion', {})
        defaults = ConversionConfig()
        self.conversion_config = ConversionConfig(
            heading_style=conversion_data.get('heading_style', defaults.heading_style),
            hr=conversion_data.get('hr', defaults.hr),
            bullet_list_marker=conversion_data.get('bullet_list_marker', defaults.bullet_list_marker),
            code_block_style=conversion_data.get('code_block_style', defaults.code_block_style),
            em_delimiter=conversion_data.get('em_delimiter', defaults.em_delimiter),
            link_style=conversion_data.get('link_style', defaults.link_style),
            strong_delimiter=conversion_data.get('strong_delimiter', defaults.strong_delimiter)
        )

        file_data = self._config_data.get('file_options', {})
        self.file_options = FileOptionsConfig(
            add_source_url=file_data.get('add_source_url', True),
            add_date=file_data.get('add_date', True),
            use_domain_subfolders=file_data.get('use_domain_subfolders', True),
            use_page_titles_for_filenames=file_data.get('use_page_titles_for_filenames', False),
            preserve_url_filenames=file_data.get('preserve_url_filenames', True)
        )

        logging_data = self._config_data.get('logging', {})
        self.logging_config = LoggingConfig(
            level=logging_data.get('level', 'INFO'),
            file=logging_data.get('file', './logs/site2md.log'),
            max_size=logging_data.get('max_size', '10MB'),
            backup_count=logging_data.get('backup_count', 5)
        )

    def validate_config(self) -> bool:
        """Validate the loaded configuration"""
        if not self.scraper_config:
            raise ConfigurationError("Configuration not loaded")

        scraper = self.scraper_config
        if not isinstance(scraper.max_concurrent, int) or scraper.max_concurrent < 1:
            raise ConfigurationError(f"max_concurrent must be a positive integer, got {scraper.max_concurrent!r}")
        if scraper.timeout <= 0:
            raise ConfigurationError(f"timeout must be greater than 0, got {scraper.timeout!r}")
        if scraper.retry_attempts < 0:
            raise ConfigurationError(f"retry_attempts must be non-negative, got {scraper.retry_attempts!r}")
        if scraper.retry_delay < 0:
            raise ConfigurationError(f"retry_delay must be non-negative, got {scraper.retry_delay!r}")

        source_types = [t.value for t in UrlSourceType]
        if self.url_source_config.type not in source_types:
            raise ConfigurationError(f"Invalid URL source type: {self.url_source_config.type}")
        if self.url_source_config.type == UrlSourceType.SITEMAP.value and not self.url_source_config.sitemap:
            raise ConfigurationError("Sitemap URL source selected but no sitemap URL configured")

        conversion = self.conversion_config
        allowed = [
            ('heading_style', conversion.heading_style, HEADING_STYLES),
            ('bullet_list_marker', conversion.bullet_list_marker, BULLET_MARKERS),
            ('code_block_style', conversion.code_block_style, CODE_BLOCK_STYLES),
            ('em_delimiter', conversion.em_delimiter, EM_DELIMITERS),
            ('link_style', conversion.link_style, LINK_STYLES),
            ('strong_delimiter', conversion.strong_delimiter, STRONG_DELIMITERS),
        ]
        for name, value, choices in allowed:
            if value not in choices:
                raise ConfigurationError(f"Invalid {name}: {value!r} (expected one of {', '.join(choices)})")

        return True

    def get_filename_policy(self) -> FilenamePolicy:
        """Query-hash preservation wins over title naming, which wins over plain URL paths"""
        if self.file_options.preserve_url_filenames:
            return FilenamePolicy.PRESERVE_URL_WITH_QUERY_HASH
        if self.file_options.use_page_titles_for_filenames:
            return FilenamePolicy.PAGE_TITLE
        return FilenamePolicy.URL_PATH

    def get_path_policy(self) -> PathPolicy:
        return PathPolicy(
            filename_policy=self.get_filename_policy(),
            use_domain_subfolders=self.file_options.use_domain_subfolders
        )

    def get_rule_set(self) -> RewriteRuleSet:
        return RewriteRuleSet(
            exclude_selectors=tuple(self.selector_config.exclude),
            unwrap_selectors=tuple(self.selector_config.unwrap),
            strip_attributes=self.selector_config.remove_attributes
        )

    def get_conversion_options(self) -> ConversionOptions:
        return ConversionOptions(**asdict(self.conversion_config))

    def get_fetch_settings(self) -> FetchSettings:
        return FetchSettings(
            timeout=float(self.scraper_config.timeout),
            user_agent=self.scraper_config.user_agent
        )

    def get_pipeline_settings(self) -> PipelineSettings:
        return PipelineSettings(
            max_concurrent=self.scraper_config.max_concurrent,
            retry_attempts=self.scraper_config.retry_attempts,
            retry_delay=float(self.scraper_config.retry_delay),
            path_policy=self.get_path_policy(),
            absolutize_urls=self.selector_config.absolutize_urls
        )
