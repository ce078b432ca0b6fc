"""
Batch Pipeline Implementation

Runs every URL through fetch, rewrite, convert, path mapping and write,
processing the URL list in fixed-size windows so at most ``max_concurrent``
jobs are in flight at once.
"""

import asyncio
import time
from typing import Any, Dict, List, Optional

from site2md.core.base import (
    ConversionError,
    FetchError,
    JobStatus,
    PageJob,
    PipelineOrchestrator,
    PipelineSettings,
    ProcessingResult,
    StorageError,
)
from site2md.core.logging import get_logger, log_progress, log_url_result
from site2md.processors.title import extract_title
from site2md.storage.path_mapper import map_path


RETRYABLE_ERRORS = (FetchError, ConversionError)


class BatchPipeline(PipelineOrchestrator):
    """
    Window-based batch pipeline with per-job retry.

    A job that hits a fetch or conversion error sleeps ``retry_delay``
    seconds and starts again from the fetch, up to ``retry_attempts``
    retries. A job that runs out of retries, or whose write fails, is
    logged once and skipped; it never stops the rest of the run.
    """

    def __init__(self, config: PipelineSettings):
        super().__init__(config)
        self.logger = get_logger(__name__)
        self.max_concurrent = config.max_concurrent
        self.retry_attempts = config.retry_attempts
        self.retry_delay = config.retry_delay
        self.path_policy = config.path_policy
        self.absolutize_urls = config.absolutize_urls
        self.stats: Dict[str, Any] = {}

    def _components(self) -> list:
        return [self.fetcher, self.converter, self.storage_manager]

    async def initialize(self) -> None:
        """Initialize all components"""
        self.logger.info("Initializing batch pipeline")

        missing = [
            name for name, component in (
                ('fetcher', self.fetcher),
                ('html_rewriter', self.html_rewriter),
                ('converter', self.converter),
                ('storage_manager', self.storage_manager),
            ) if component is None
        ]
        if missing:
            raise ValueError(f"Missing pipeline components: {', '.join(missing)}")

        for component in self._components():
            await component.initialize()

        self._initialized = True

    async def cleanup(self) -> None:
        """Clean up resources"""
        self.logger.info("Cleaning up batch pipeline")
        for component in self._components():
            if component:
                await component.cleanup()
        self._initialized = False

    async def run(self, urls: List[str]) -> List[ProcessingResult]:
        """
        Process list of URLs

        Args:
            urls: Page URLs in processing order

        Returns:
            One ProcessingResult per URL, in input order
        """
        if not self._initialized:
            await self.initialize()

        total = len(urls)
        start_time = time.time()
        self.logger.info(f"Processing {total} URLs with concurrency {self.max_concurrent}")

        results: List[ProcessingResult] = []
        for i in range(0, total, self.max_concurrent):
            window = urls[i:i + self.max_concurrent]
            outcomes = await asyncio.gather(
                *(self.process_single_url(url) for url in window),
                return_exceptions=True
            )

            for url, outcome in zip(window, outcomes):
                if isinstance(outcome, ProcessingResult):
                    results.append(outcome)
                elif isinstance(outcome, Exception):
                    self.logger.error(f"Unexpected error processing {url}: {outcome}", exc_info=outcome)
                    log_url_result(self.logger, url, False, 0.0, error_message=str(outcome))
                    results.append(ProcessingResult(
                        url=url, success=False, error_message=str(outcome), status=JobStatus.FAILED
                    ))
                else:
                    raise outcome

            log_progress(self.logger, len(results), total)

        succeeded = [r for r in results if r.success]
        self.stats = {
            'total_urls': total,
            'successful_urls': len(succeeded),
            'failed_urls': total - len(succeeded),
            'failed': [r.url for r in results if not r.success],
            'duration': time.time() - start_time,
        }
        return results

    async def process_single_url(self, url: str) -> ProcessingResult:
        """
        Process a single URL

        Args:
            url: Page URL

        Returns:
            Processing result
        """
        start_time = time.time()
        job = PageJob(url=url)
        title: Optional[str] = None

        while True:
            try:
                job.status = JobStatus.FETCHING
                html = await self.fetcher.fetch(url)

                # Title and body come from the same fetched copy
                if self.path_policy.requires_title:
                    title = extract_title(html)
                    if title:
                        self.logger.debug(f"Found page title for {url}: {title!r}")

                job.status = JobStatus.REWRITING
                rewritten = self.html_rewriter.rewrite(html, url if self.absolutize_urls else None)

                job.status = JobStatus.CONVERTING
                markdown = self.converter.convert(rewritten)
                break
            except RETRYABLE_ERRORS as e:
                if job.retry_count >= self.retry_attempts:
                    return self._failed(job, str(e), start_time)

                job.retry_count += 1
                job.status = JobStatus.RETRYING
                self.logger.warning(
                    f"Retrying {url} ({job.retry_count}/{self.retry_attempts}) "
                    f"in {self.retry_delay}s after error: {e}"
                )
                await asyncio.sleep(self.retry_delay)

        job.status = JobStatus.PATH_MAPPING
        resolved_path = map_path(url, self.path_policy, title)

        job.status = JobStatus.WRITING
        try:
            output_path = await self.storage_manager.save_document(url, resolved_path, markdown)
        except StorageError as e:
            return self._failed(job, str(e), start_time)

        job.status = JobStatus.DONE
        processing_time = time.time() - start_time
        log_url_result(self.logger, url, True, processing_time, output_path=output_path)

        return ProcessingResult(
            url=url,
            success=True,
            output_path=output_path,
            title=title,
            processing_time=processing_time,
            retry_count=job.retry_count,
            status=job.status
        )

    def _failed(self, job: PageJob, error_message: str, start_time: float) -> ProcessingResult:
        job.status = JobStatus.FAILED
        processing_time = time.time() - start_time
        log_url_result(
            self.logger, job.url, False, processing_time,
            error_message=error_message, attempts=job.retry_count + 1
        )
        return ProcessingResult(
            url=job.url,
            success=False,
            error_message=error_message,
            processing_time=processing_time,
            retry_count=job.retry_count,
            status=job.status
        )

    def get_stats(self) -> Dict[str, Any]:
        """Statistics of the last run"""
        return dict(self.stats)
