"""General utilities for junctools."""

from junctools.utils.regions import GenomicRegion, parse_region

__all__ = [
    "GenomicRegion",
    "parse_region",
]
