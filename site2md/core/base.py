"""
Base Classes and Interfaces for the HTML to Markdown crawler

Defines the shared data model, abstract component interfaces and the
exception hierarchy used by every stage of the crawl-and-materialize
pipeline.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path
from enum import Enum


class JobStatus(Enum):
    """States a page job moves through in the batch pipeline"""
    PENDING = "pending"
    FETCHING = "fetching"
    REWRITING = "rewriting"
    CONVERTING = "converting"
    PATH_MAPPING = "path_mapping"
    WRITING = "writing"
    RETRYING = "retrying"
    DONE = "done"
    FAILED = "failed"


class FilenamePolicy(Enum):
    """Strategies for deriving an output filename from a URL"""
    URL_PATH = "url_path"
    PAGE_TITLE = "page_title"
    PRESERVE_URL_WITH_QUERY_HASH = "preserve_url_with_query_hash"


class UrlSourceType(Enum):
    """Where the list of page URLs comes from"""
    FILE = "file"
    SITEMAP = "sitemap"


@dataclass
class PageJob:
    """A single URL moving through the pipeline"""
    url: str
    retry_count: int = 0
    status: JobStatus = JobStatus.PENDING


@dataclass(frozen=True)
class RewriteRuleSet:
    """Declarative rules applied by the HTML rewriter"""
    exclude_selectors: Tuple[str, ...] = ()
    unwrap_selectors: Tuple[str, ...] = ()
    strip_attributes: bool = True
    keep_attribute_names: frozenset = frozenset({'href', 'src', 'alt', 'title'})


@dataclass(frozen=True)
class ConversionOptions:
    """Options handed unchanged to the markdown converter"""
    heading_style: str = "atx"
    hr: str = "---"
    bullet_list_marker: str = "-"
    code_block_style: str = "fenced"
    em_delimiter: str = "*"
    link_style: str = "referenced"
    strong_delimiter: str = "**"


@dataclass(frozen=True)
class PathPolicy:
    """Filename policy plus directory layout toggle"""
    filename_policy: FilenamePolicy = FilenamePolicy.PRESERVE_URL_WITH_QUERY_HASH
    use_domain_subfolders: bool = True

    @property
    def requires_title(self) -> bool:
        return self.filename_policy == FilenamePolicy.PAGE_TITLE


@dataclass(frozen=True)
class ResolvedPath:
    """Sanitized location of an output document relative to the output root"""
    directory_segments: Tuple[str, ...]
    filename: str

    def to_path(self, output_root) -> Path:
        """Join the segments and filename under the output root"""
        return Path(output_root).joinpath(*self.directory_segments, self.filename)


@dataclass(frozen=True)
class FetchSettings:
    """HTTP settings shared by page and sitemap requests"""
    timeout: float = 30.0
    user_agent: str = "site2md/0.1"


@dataclass(frozen=True)
class PipelineSettings:
    """Settings for the batch pipeline"""
    max_concurrent: int = 3
    retry_attempts: int = 3
    retry_delay: float = 3.0
    path_policy: PathPolicy = field(default_factory=PathPolicy)
    absolutize_urls: bool = True


@dataclass
class ProcessingResult:
    """Result of processing a single URL"""
    url: str
    success: bool
    output_path: Optional[str] = None
    title: Optional[str] = None
    error_message: Optional[str] = None
    processing_time: float = 0.0
    retry_count: int = 0
    status: JobStatus = JobStatus.PENDING


class BaseComponent(ABC):
    """Base class for all pipeline components"""

    def __init__(self, config: Any):
        self.config = config
        self._initialized = False

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the component"""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Clean up resources"""
        pass

    def is_initialized(self) -> bool:
        """Check if component is initialized"""
        return self._initialized


class FetcherInterface(BaseComponent):
    """Interface for the HTTP fetch capability"""

    @abstractmethod
    async def fetch(self, url: str, accept: Optional[str] = None) -> str:
        """Fetch a URL and return the response body, raising FetchError on failure"""
        pass


class ConverterInterface(BaseComponent):
    """Interface for markup to markdown conversion"""

    @abstractmethod
    def convert(self, html: str) -> str:
        """Convert HTML to markdown, raising ConversionError on failure"""
        pass


class StorageManagerInterface(BaseComponent):
    """Interface for persisting converted documents"""

    @abstractmethod
    async def save_document(self, url: str, resolved_path: ResolvedPath, markdown: str) -> str:
        """Write a document and return the path it was written to"""
        pass

    @abstractmethod
    def get_storage_stats(self) -> Dict[str, Any]:
        """Get storage statistics"""
        pass


class PipelineOrchestrator(BaseComponent):
    """Main orchestrator for the fetch, rewrite, convert and persist process"""

    def __init__(self, config: Any):
        super().__init__(config)
        self.fetcher: Optional[FetcherInterface] = None
        self.html_rewriter = None
        self.converter: Optional[ConverterInterface] = None
        self.storage_manager: Optional[StorageManagerInterface] = None
        self.sitemap_resolver = None

    @abstractmethod
    async def run(self, urls: List[str]) -> List[ProcessingResult]:
        """Process a list of URLs"""
        pass

    @abstractmethod
    async def process_single_url(self, url: str) -> ProcessingResult:
        """Process a single URL"""
        pass

    def register_component(self, component_type: str, component: Any) -> None:
        """Register a component with the orchestrator"""
        if component_type == "fetcher":
            self.fetcher = component
        elif component_type == "html_rewriter":
            self.html_rewriter = component
        elif component_type == "converter":
            self.converter = component
        elif component_type == "storage_manager":
            self.storage_manager = component
        elif component_type == "sitemap_resolver":
            self.sitemap_resolver = component
        else:
            raise ValueError(f"Unknown component type: {component_type}")


class ScraperError(Exception):
    """Base exception for crawler errors"""
    pass


class ConfigurationError(ScraperError):
    """Configuration-related errors"""
    pass


class FetchError(ScraperError):
    """HTTP fetch failures, including timeouts and non-success status"""

    def __init__(self, message: str, url: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class ConversionError(ScraperError):
    """Markdown conversion failures, including empty output"""
    pass


class StorageError(ScraperError):
    """Storage-related errors"""
    pass
