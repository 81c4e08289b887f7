"""Grant ingestion service: feed-first scraping of funding opportunities."""

__version__ = "0.1.0"
