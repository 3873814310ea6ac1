"""Genomic region parsing utilities.

Regions restrict a junction scan to part of an alignment file.

Coordinate conventions:
    - CLI input: 1-based inclusive (samtools convention)
    - Internal storage: 0-based half-open (pysam convention)
    - BED output: 0-based half-open

Example:
    >>> from junctools.utils.regions import parse_region
    >>> region = parse_region("chr1:1000-2000")
    >>> print(region.seqid)  # 'chr1'
    >>> print(region.start)  # 999 (0-based)
    >>> print(region.end)    # 2000 (half-open)
    >>> parse_region("chr2").end is None  # whole sequence
    True
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional


class GenomicRegion(NamedTuple):
    """Parsed genomic region with 0-based half-open coordinates.

    Attributes:
        seqid: Scaffold/chromosome name.
        start: Start position (0-based, inclusive).
        end: End position (0-based, exclusive). None runs to the end of
            the sequence.
    """

    seqid: str
    start: int = 0  # 0-based, inclusive
    end: Optional[int] = None  # 0-based, exclusive

    def __str__(self) -> str:
        """Return string representation in 1-based inclusive format."""
        if self.end is None:
            return self.seqid if self.start == 0 else f"{self.seqid}:{self.start + 1}"
        return f"{self.seqid}:{self.start + 1}-{self.end}"


# Handles: chr1:1000-2000, chr1:1,000-2,000, scaffold_123:100-200
_REGION_PATTERN = re.compile(r"^(.+):([\d,]+)-([\d,]+)$")

# A bare sequence name selects the whole sequence
_SEQID_PATTERN = re.compile(r"^[^:\s]+$")


def parse_region(region_str: str) -> GenomicRegion:
    """Parse region string into GenomicRegion.

    Supported formats:
        chr1:1000-2000      (1-based, inclusive)
        chr1:1,000-2,000    (thousands separators are ignored)
        chr1                (the whole sequence)

    Args:
        region_str: Region string in format seqid:start-end or seqid.

    Returns:
        GenomicRegion with 0-based, half-open coordinates.

    Raises:
        ValueError: If format is invalid or coordinates are invalid.

    Example:
        >>> region = parse_region("chr1:1000-2000")
        >>> region.start  # 0-based
        999
        >>> region.end    # half-open
        2000
    """
    value = region_str.strip()
    match = _REGION_PATTERN.match(value)

    if not match:
        if _SEQID_PATTERN.match(value):
            return GenomicRegion(value)
        raise ValueError(
            f"Invalid region format: '{region_str}'. "
            "Expected format: seqid:start-end or seqid (e.g., chr1:1000-2000)"
        )

    seqid = match.group(1)
    start = int(match.group(2).replace(",", ""))
    end = int(match.group(3).replace(",", ""))

    if start < 1:
        raise ValueError(f"Start position must be >= 1, got {start}")
    if end < start:
        raise ValueError(f"End must be >= start: {start}-{end}")

    # 1-based inclusive -> 0-based half-open
    return GenomicRegion(seqid, start - 1, end)
