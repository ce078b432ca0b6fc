#!/usr/bin/env python3
"""
site2md - Main Entry Point

This module serves as the main entry point for the crawler. It loads the
configuration, sets up logging, reads the URL source and runs the batch
pipeline.
"""

import sys
import asyncio
from typing import List, Optional

from site2md.core.base import ConfigurationError
from site2md.core.config import ConfigManager
from site2md.core.logging import setup_logging, get_logger, generate_summary_report
from site2md.core.pipeline import BatchPipeline
from site2md.core.url_source import UrlSourceLoader
from site2md.cli.arguments import CLIManager
from site2md.utils.component_factory import create_and_register_components


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the crawler"""
    cli_manager = CLIManager()
    args = cli_manager.parse_arguments(argv)

    config_manager = ConfigManager(args.config)
    try:
        config_manager.load_config()
    except ConfigurationError as e:
        setup_logging(level=args.log_level or "INFO", log_file=None)
        get_logger().error(f"Configuration error: {e}")
        return 1

    if cli_manager.apply_overrides(args, config_manager):
        get_logger().debug("Command-line options applied")

    logging_config = config_manager.logging_config
    setup_logging(
        level=args.log_level or logging_config.level,
        log_file=logging_config.file,
        max_size=logging_config.max_size,
        backup_count=logging_config.backup_count
    )
    logger = get_logger()

    try:
        config_manager.validate_config()
    except ConfigurationError as e:
        logger.error(f"Configuration validation failed: {e}")
        return 1

    scraper_config = config_manager.scraper_config
    logger.info(f"Output directory: {scraper_config.output_dir}")
    logger.info(f"Filename policy: {config_manager.get_filename_policy().value}")

    pipeline = BatchPipeline(config_manager.get_pipeline_settings())
    create_and_register_components(pipeline, config_manager)
    loader = UrlSourceLoader(config_manager.url_source_config, pipeline.sitemap_resolver)

    try:
        await pipeline.initialize()

        urls = await loader.load()
        if not urls:
            logger.warning("No URLs to process")
            return 0

        results = await pipeline.run(urls)

        stats = pipeline.get_stats()
        stats.update(pipeline.storage_manager.get_storage_stats())
        generate_summary_report(logger, stats)

        success_count = sum(1 for r in results if r.success)
        logger.info(f"Processing completed: {success_count}/{len(results)} URLs successful")
        return 0
    except Exception as e:
        logger.error(f"Crawler execution failed: {e}", exc_info=True)
        return 1
    finally:
        await pipeline.cleanup()


def cli() -> None:
    """Console script entry point"""
    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nCrawler interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    cli()
