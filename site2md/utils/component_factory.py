"""
Component Factory for the HTML to Markdown crawler

This module provides functions to create and register components with the pipeline.
"""

from site2md.core.base import PipelineOrchestrator
from site2md.core.config import ConfigManager
from site2md.core.fetcher import HttpFetcher
from site2md.core.sitemap import SitemapResolver
from site2md.processors.converter import ContentConverter
from site2md.processors.html_rewriter import HtmlRewriter
from site2md.storage.file_storage import FileStorageManager


def create_and_register_components(pipeline: PipelineOrchestrator, config_manager: ConfigManager) -> None:
    """
    Create and register all components with the pipeline.

    Args:
        pipeline: The pipeline to register components with
        config_manager: Loaded configuration
    """
    # One fetcher serves both sitemap and page requests
    fetcher = HttpFetcher(config_manager.get_fetch_settings())
    pipeline.register_component("fetcher", fetcher)

    sitemap_resolver = SitemapResolver(fetcher, max_concurrent=config_manager.scraper_config.max_concurrent)
    pipeline.register_component("sitemap_resolver", sitemap_resolver)

    html_rewriter = HtmlRewriter(config_manager.get_rule_set())
    pipeline.register_component("html_rewriter", html_rewriter)

    converter = ContentConverter(config_manager.get_conversion_options())
    pipeline.register_component("converter", converter)

    storage_manager = FileStorageManager(
        config_manager.file_options,
        output_dir=config_manager.scraper_config.output_dir
    )
    pipeline.register_component("storage_manager", storage_manager)
