"""
Command Line Argument Parsing for the HTML to Markdown crawler

Handles command line arguments for URL source selection, output layout
and configuration overrides.
"""

import argparse
from pathlib import Path
from typing import List, Optional

import validators

from site2md import __version__
from site2md.core.base import UrlSourceType
from site2md.core.config import ConfigManager


class CLIManager:
    """
    Command line interface manager for the crawler

    Handles command line arguments for URL sources, filename policy and
    directory layout, and applies them over the loaded configuration.
    """

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all options

        Returns:
            Configured argument parser
        """
        parser = argparse.ArgumentParser(
            prog="site2md",
            description="Crawl web pages and save them as Markdown files",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_epilog()
        )

        # URL input options
        url_group = parser.add_argument_group("URL Sources")
        url_source = url_group.add_mutually_exclusive_group()
        url_source.add_argument(
            "-f", "--url-file",
            help="Path to file containing URLs (supports TXT, CSV, JSON formats)"
        )
        url_source.add_argument(
            "-s", "--sitemap",
            help="Sitemap URL to read page URLs from"
        )

        # Output options
        output_group = parser.add_argument_group("Output")
        output_group.add_argument(
            "-o", "--output-dir",
            help="Directory to write markdown files to"
        )
        naming = output_group.add_mutually_exclusive_group()
        naming.add_argument(
            "-t", "--use-titles",
            action="store_true",
            help="Use page titles for filenames"
        )
        naming.add_argument(
            "-u", "--use-url-paths",
            action="store_true",
            help="Use URL paths for filenames, keeping query strings as a hash suffix"
        )
        layout = output_group.add_mutually_exclusive_group()
        layout.add_argument(
            "-d", "--domain-folders",
            action="store_true",
            help="Organize output by domain folders"
        )
        layout.add_argument(
            "-n", "--flat-structure",
            action="store_true",
            help="Use a flat folder structure without domain folders"
        )

        # Configuration options
        config_group = parser.add_argument_group("Configuration")
        config_group.add_argument(
            "--config",
            default="config/config.yaml",
            help="Path to configuration file (default: %(default)s)"
        )
        config_group.add_argument(
            "--log-level",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Logging level"
        )
        config_group.add_argument(
            "-c", "--max-concurrent",
            type=int,
            help="Maximum number of concurrent downloads"
        )
        config_group.add_argument(
            "--timeout",
            type=float,
            help="Request timeout in seconds"
        )
        config_group.add_argument(
            "--retry-attempts",
            type=int,
            help="Number of retries for a failed fetch or conversion"
        )

        parser.add_argument(
            "--version",
            action="version",
            version=f"site2md v{__version__}"
        )

        return parser

    def _get_epilog(self) -> str:
        return """
Examples:
  # Convert every page listed in a sitemap
  python -m site2md --output-dir=output --sitemap=https://example.com/sitemap.xml

  # Convert URLs from a file, named by page title, without domain folders
  python -m site2md --url-file=myurls.txt --use-titles --flat-structure

Notes:
  - URL files can be TXT (one URL per line), CSV, or JSON format
  - Lines starting with // in TXT files are ignored
"""

    def parse_arguments(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command line arguments

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        parsed_args = self.parser.parse_args(args)
        self.validate_arguments(parsed_args)
        return parsed_args

    def validate_arguments(self, args: argparse.Namespace) -> bool:
        """
        Validate parsed arguments for consistency

        Exits through parser.error() on invalid input.
        """
        if args.url_file and not Path(args.url_file).is_file():
            self.parser.error(f"URL file not found: {args.url_file}")

        if args.sitemap and not validators.url(args.sitemap):
            self.parser.error(f"Invalid sitemap URL: {args.sitemap}")

        if args.max_concurrent is not None and args.max_concurrent <= 0:
            self.parser.error("Maximum concurrent downloads must be greater than 0")

        if args.timeout is not None and args.timeout <= 0:
            self.parser.error("Timeout must be greater than 0")

        if args.retry_attempts is not None and args.retry_attempts < 0:
            self.parser.error("Retry attempts must be non-negative")

        return True

    def apply_overrides(self, args: argparse.Namespace, config_manager: ConfigManager) -> bool:
        """
        Apply command line values over the loaded configuration

        Returns:
            True if any option was overridden
        """
        scraper = config_manager.scraper_config
        source = config_manager.url_source_config
        file_options = config_manager.file_options
        updated = False

        if args.output_dir:
            scraper.output_dir = args.output_dir
            updated = True

        if args.url_file:
            source.type = UrlSourceType.FILE.value
            source.file = args.url_file
            updated = True
        elif args.sitemap:
            source.type = UrlSourceType.SITEMAP.value
            source.sitemap = args.sitemap
            updated = True

        if args.max_concurrent is not None:
            scraper.max_concurrent = args.max_concurrent
            updated = True

        if args.timeout is not None:
            scraper.timeout = args.timeout
            updated = True

        if args.retry_attempts is not None:
            scraper.retry_attempts = args.retry_attempts
            updated = True

        if args.use_titles:
            file_options.use_page_titles_for_filenames = True
            file_options.preserve_url_filenames = False
            updated = True
        elif args.use_url_paths:
            file_options.use_page_titles_for_filenames = False
            file_options.preserve_url_filenames = True
            updated = True

        if args.domain_folders:
            file_options.use_domain_subfolders = True
            updated = True
        elif args.flat_structure:
            file_options.use_domain_subfolders = False
            updated = True

        return updated

    def print_help(self) -> None:
        """Print help message"""
        self.parser.print_help()
