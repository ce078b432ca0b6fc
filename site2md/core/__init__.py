"""
Core components for the HTML to Markdown crawler

This package contains the core components including:
- Base classes and interfaces
- Configuration management
- Logging system
- HTTP fetching and sitemap resolution
- URL sources
- Batch pipeline implementation
"""

from site2md.core.base import (
    JobStatus,
    FilenamePolicy,
    UrlSourceType,
    PageJob,
    RewriteRuleSet,
    ConversionOptions,
    PathPolicy,
    ResolvedPath,
    FetchSettings,
    PipelineSettings,
    ProcessingResult,
    BaseComponent,
    FetcherInterface,
    ConverterInterface,
    StorageManagerInterface,
    PipelineOrchestrator,
    ScraperError,
    ConfigurationError,
    FetchError,
    ConversionError,
    StorageError
)

from site2md.core.config import (
    ConfigManager,
    ScraperConfig,
    UrlSourceConfig,
    SelectorConfig,
    ConversionConfig,
    FileOptionsConfig,
    LoggingConfig
)

from site2md.core.logging import (
    LoggingManager,
    get_logger,
    setup_logging
)

from site2md.core.fetcher import HttpFetcher

from site2md.core.sitemap import (
    SitemapResolver,
    IndexNode,
    UrlsetNode,
    parse_sitemap_document
)

from site2md.core.url_source import UrlSourceLoader

from site2md.core.pipeline import BatchPipeline

__all__ = [
    # Base classes
    'JobStatus',
    'FilenamePolicy',
    'UrlSourceType',
    'PageJob',
    'RewriteRuleSet',
    'ConversionOptions',
    'PathPolicy',
    'ResolvedPath',
    'FetchSettings',
    'PipelineSettings',
    'ProcessingResult',
    'BaseComponent',
    'FetcherInterface',
    'ConverterInterface',
    'StorageManagerInterface',
    'PipelineOrchestrator',
    'ScraperError',
    'ConfigurationError',
    'FetchError',
    'ConversionError',
    'StorageError',

    # Configuration
    'ConfigManager',
    'ScraperConfig',
    'UrlSourceConfig',
    'SelectorConfig',
    'ConversionConfig',
    'FileOptionsConfig',
    'LoggingConfig',

    # Logging
    'LoggingManager',
    'get_logger',
    'setup_logging',

    # Fetching
    'HttpFetcher',
    'SitemapResolver',
    'IndexNode',
    'UrlsetNode',
    'parse_sitemap_document',
    'UrlSourceLoader',

    # Pipeline
    'BatchPipeline'
]
