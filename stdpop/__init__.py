"""Standard-library popularity collector.

Queries a package index for the "imported by" count of every public Go
standard-library package and writes the results to one JSON file.

Key modules:
    targets     -- standard-library enumeration and internal-package filter
    extractors  -- HTML and JSON count extraction
    base        -- BaseScraper per-target fetch-and-extract pipeline
    scrapers    -- PkgsiteScraper, ImportersApiScraper backends
    factory     -- ScraperFactory for creating scrapers
    controller  -- ThreadPoolController for bounded concurrency
    pipeline    -- availability check, batch run, full collection
    metrics     -- MetricsCollector for run statistics
    storage     -- ResultSet and JsonResultStorage for the result artifact
    config      -- SourceConfig, SOURCES, CollectorConfig
    models      -- Task, FetchOutcome, ResultEntry, BatchResult, RunSummary
    errors      -- exception hierarchy
"""

__version__ = "0.1.0"
