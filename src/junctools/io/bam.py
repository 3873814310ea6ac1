"""BAM/SAM access for junction extraction.

This module wraps ``pysam.AlignmentFile`` as a single scoped resource:
the file handle, its index, its header and the active iterator are
acquired together and released together, on success or on error.

Example:
    >>> from junctools.io.bam import AlignmentSource
    >>> with AlignmentSource("rnaseq.bam") as source:
    ...     for read in source.fetch():
    ...         record = source.record(read)
    ...         print(record.chrom, record.position, record.strand)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any, NamedTuple

import pysam

from junctools.core.junction import STRANDS, UNKNOWN_STRAND

if TYPE_CHECKING:
    from junctools.utils.regions import GenomicRegion

logger = logging.getLogger(__name__)

STRAND_TAG = "XS"


# =============================================================================
# Errors
# =============================================================================


class AlignmentSourceError(OSError):
    """Raised when an alignment file cannot be opened, indexed or iterated."""


class RecordError(ValueError):
    """Raised when a single alignment cannot be turned into junctions."""


# =============================================================================
# Data Structures
# =============================================================================


class AlignmentRecord(NamedTuple):
    """The parts of an alignment that junction extraction needs.

    Attributes:
        chrom: Reference name resolved through the header.
        position: 0-based leftmost reference position.
        cigar: (operation, length) tuples.
        strand: Strand from the XS tag, '?' if unavailable.
    """

    chrom: str
    position: int
    cigar: list[tuple[int, int]]
    strand: str


def read_strand(read: pysam.AlignedSegment) -> str:
    """Get the strand hint for a read from its XS tag.

    Args:
        read: Aligned read segment.

    Returns:
        The single-character tag value, or '?' if the tag is absent or
        does not hold a single character.
    """
    try:
        value = read.get_tag(STRAND_TAG)
    except KeyError:
        return UNKNOWN_STRAND
    if isinstance(value, str) and len(value) == 1:
        if value not in STRANDS:
            logger.debug(f"Unexpected {STRAND_TAG} value '{value}' on {read.query_name}")
        return value
    return UNKNOWN_STRAND


# =============================================================================
# Alignment Source
# =============================================================================


class AlignmentSource:
    """Indexed BAM/SAM file opened for region queries.

    Attributes:
        path: Path to the alignment file.

    Example:
        >>> with AlignmentSource("rnaseq.bam") as source:
        ...     reads = list(source.fetch(parse_region("chr1:1-5000")))
    """

    def __init__(self, bam_path: Path | str) -> None:
        """Open the alignment file and check it is indexed.

        Args:
            bam_path: Path to an indexed BAM/CRAM/SAM file.

        Raises:
            AlignmentSourceError: If the file cannot be opened or has no index.
        """
        self.path = Path(bam_path)
        self._bam: pysam.AlignmentFile | None = None

        try:
            self._bam = pysam.AlignmentFile(str(self.path), "rb")
        except (OSError, ValueError) as e:
            raise AlignmentSourceError(f"Unable to open BAM/SAM file {self.path}: {e}") from e

        try:
            indexed = self._bam.has_index()
        except (AttributeError, ValueError):
            indexed = False
        if not indexed:
            self.close()
            raise AlignmentSourceError(
                f"Unable to open BAM/SAM index for {self.path}. "
                f"Make sure alignments are indexed (samtools index {self.path})"
            )

        logger.info(
            f"Opened alignment file: {self.path.name} ({len(self.references)} reference sequences)"
        )

    def __enter__(self) -> AlignmentSource:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the alignment file."""
        if self._bam is not None:
            self._bam.close()
            self._bam = None

    @property
    def is_open(self) -> bool:
        return self._bam is not None

    @property
    def references(self) -> list[str]:
        """List of reference sequences in the header."""
        if self._bam is None:
            raise RuntimeError("BAM file not open")
        return list(self._bam.references)

    def fetch(self, region: GenomicRegion | None = None) -> Iterator[pysam.AlignedSegment]:
        """Iterate over alignments, optionally restricted to a region.

        Args:
            region: Region to query. None iterates the whole file.

        Returns:
            Iterator over aligned segments in index order.

        Raises:
            AlignmentSourceError: If the region cannot be queried.
        """
        if self._bam is None:
            raise RuntimeError("BAM file not open")

        target = str(region) if region is not None else "whole file"
        try:
            if region is None:
                reads = self._bam.fetch()
            else:
                reads = self._bam.fetch(region.seqid, region.start, region.end)
        except (ValueError, KeyError, OSError) as e:
            raise AlignmentSourceError(
                f"Unable to iterate to region {target} within BAM: {e}"
            ) from e
        return self._iterate(reads, target)

    def _iterate(
        self, reads: Iterator[pysam.AlignedSegment], target: str
    ) -> Iterator[pysam.AlignedSegment]:
        try:
            yield from reads
        except OSError as e:
            raise AlignmentSourceError(f"Error reading {self.path} ({target}): {e}") from e

    def record(self, read: pysam.AlignedSegment) -> AlignmentRecord:
        """Extract the junction-relevant fields of a read.

        Raises:
            RecordError: If the read's reference cannot be resolved.
        """
        chrom = read.reference_name
        if chrom is None:
            raise RecordError(f"Read {read.query_name} has no reference sequence")
        return AlignmentRecord(
            chrom=chrom,
            position=read.reference_start,
            cigar=list(read.cigartuples or []),
            strand=read_strand(read),
        )
