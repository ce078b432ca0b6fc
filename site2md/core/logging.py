"""
Logging System for the HTML to Markdown crawler

Provides logging with file rotation and console output under the
``site2md`` logger hierarchy, plus helpers for the progress and per-URL
result lines the pipeline reports.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional


ROOT_LOGGER_NAME = 'site2md'


class LoggingManager:
    """
    Centralized logging manager with file rotation and console output
    """

    def __init__(self):
        self.logger: Optional[logging.Logger] = None
        self.file_handler: Optional[logging.handlers.RotatingFileHandler] = None
        self.console_handler: Optional[logging.StreamHandler] = None
        self._setup_complete = False

    def setup_logging(self, level: str = "INFO", log_file: Optional[str] = "./logs/site2md.log",
                      max_size: str = "10MB", backup_count: int = 5) -> None:
        """
        Set up logging system with file rotation and console output

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Path to log file, or None to log to the console only
            max_size: Maximum size before rotation (e.g., "10MB")
            backup_count: Number of backup files to keep
        """
        self.logger = logging.getLogger(ROOT_LOGGER_NAME)
        self.logger.setLevel(getattr(logging, level.upper()))

        # Clear existing handlers
        self.close()
        self.logger.handlers.clear()

        detailed_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            self.file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=self._parse_size(max_size), backupCount=backup_count, encoding='utf-8'
            )
            self.file_handler.setLevel(logging.DEBUG)
            self.file_handler.setFormatter(detailed_formatter)
            self.logger.addHandler(self.file_handler)

        self.console_handler = logging.StreamHandler(sys.stdout)
        self.console_handler.setLevel(getattr(logging, level.upper()))
        self.console_handler.setFormatter(console_formatter)
        self.logger.addHandler(self.console_handler)

        self._setup_complete = True
        self.logger.info("Logging system initialized")

    def _parse_size(self, size_str: str) -> int:
        """Parse size string like '10MB' to bytes"""
        size_str = str(size_str).upper().strip()

        if size_str.endswith('KB'):
            return int(size_str[:-2]) * 1024
        elif size_str.endswith('MB'):
            return int(size_str[:-2]) * 1024 * 1024
        elif size_str.endswith('GB'):
            return int(size_str[:-2]) * 1024 * 1024 * 1024
        else:
            # Assume bytes
            return int(size_str)

    def get_logger(self) -> logging.Logger:
        """Get the configured root logger"""
        return self.logger or logging.getLogger(ROOT_LOGGER_NAME)

    def close(self) -> None:
        """Close logging handlers"""
        if self.file_handler:
            self.file_handler.close()
            self.file_handler = None
        if self.console_handler:
            self.console_handler.close()
            self.console_handler = None


# Global logging manager instance
logging_manager = LoggingManager()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger inside the site2md hierarchy"""
    if not name or name == ROOT_LOGGER_NAME:
        return logging_manager.get_logger()
    if not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(level: str = "INFO", log_file: Optional[str] = "./logs/site2md.log",
                  max_size: str = "10MB", backup_count: int = 5) -> None:
    """Set up global logging system"""
    logging_manager.setup_logging(level, log_file, max_size, backup_count)


def log_progress(logger: logging.Logger, current: int, total: int, message: str = "") -> None:
    """Log progress information"""
    percentage = (current / total) * 100 if total > 0 else 0
    progress_msg = f"Progress: {current}/{total} ({percentage:.0f}%)"
    if message:
        progress_msg += f" - {message}"

    logger.info(progress_msg)


def log_url_result(logger: logging.Logger, url: str, success: bool, processing_time: float,
                   output_path: Optional[str] = None, error_message: Optional[str] = None,
                   attempts: int = 1) -> None:
    """Log the terminal outcome of a single URL"""
    if success:
        logger.info(f"Saved {url} -> {output_path} in {processing_time:.2f}s")
    else:
        logger.error(f"Failed to process {url} after {attempts} attempt(s): {error_message}")


def generate_summary_report(logger: logging.Logger, stats: Dict[str, Any]) -> str:
    """Generate and log a summary of the run"""
    total = stats.get('total_urls', 0)
    succeeded = stats.get('successful_urls', 0)
    success_rate = (succeeded / total) * 100 if total else 0.0

    report_lines = [
        "=" * 60,
        "CONVERSION SUMMARY",
        "=" * 60,
        f"Output Directory: {stats.get('output_dir', 'Unknown')}",
        f"Total Duration: {stats.get('duration', 0.0):.2f}s",
        "",
        "URL PROCESSING:",
        f"  Total URLs: {total}",
        f"  Successful: {succeeded}",
        f"  Failed: {stats.get('failed_urls', 0)}",
        f"  Success Rate: {success_rate:.1f}%",
        "",
        "OUTPUT:",
        f"  Documents Written: {stats.get('documents_written', 0)}",
        f"  Bytes Written: {stats.get('bytes_written', 0)}",
    ]

    failed = stats.get('failed', [])
    if failed:
        report_lines.extend(["", "FAILED URLS:"])
        for url in failed[:10]:
            report_lines.append(f"  - {url}")
        if len(failed) > 10:
            report_lines.append(f"  ... and {len(failed) - 10} more")

    report_lines.append("=" * 60)

    report = "\n".join(report_lines)
    logger.info(f"Run Summary:\n{report}")
    return report
