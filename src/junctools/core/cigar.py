"""CIGAR walking for splice junction discovery.

This module turns one alignment's CIGAR operations into candidate
junctions. Each reference skip (``N``) opens a junction; matched bases on
either side of it grow the left and right anchors. Deletions, mismatches,
insertions and clips end an anchor, so the bases beyond them never count
toward anchor length.

Example:
    >>> from junctools.core.cigar import parse_cigar, walk_cigar
    >>> junctions = walk_cigar("chr1", 1000, parse_cigar("10M500N10M"), "+")
    >>> j = junctions[0]
    >>> (j.thick_start, j.start, j.end, j.thick_end)
    (1000, 1010, 1510, 1520)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Sequence

from junctools.core.junction import UNKNOWN_STRAND, Junction

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

# CIGAR operations (pysam / BAM numeric codes)
CIGAR_M = 0  # Match or mismatch
CIGAR_I = 1  # Insertion
CIGAR_D = 2  # Deletion
CIGAR_N = 3  # Skipped region (intron)
CIGAR_S = 4  # Soft clip
CIGAR_H = 5  # Hard clip
CIGAR_P = 6  # Padding
CIGAR_EQ = 7  # Sequence match
CIGAR_X = 8  # Sequence mismatch
CIGAR_B = 9  # Back

CIGAR_CHARS = "MIDNSHP=XB"

_CIGAR_PATTERN = re.compile(r"(\d+)([MIDNSHP=XB])")

CigarTuples = Sequence[tuple[int, int]]


def parse_cigar(cigar: str) -> list[tuple[int, int]]:
    """Parse a SAM CIGAR string into (operation, length) tuples.

    Args:
        cigar: CIGAR string such as ``"10M500N10M"``. ``"*"`` means
            no CIGAR.

    Returns:
        List of (operation, length) tuples using pysam operation codes.

    Raises:
        ValueError: If the string is not a valid CIGAR.
    """
    if cigar in ("", "*"):
        return []

    ops = []
    consumed = 0
    for match in _CIGAR_PATTERN.finditer(cigar):
        if match.start() != consumed:
            break
        ops.append((CIGAR_CHARS.index(match.group(2)), int(match.group(1))))
        consumed = match.end()

    if consumed != len(cigar):
        raise ValueError(f"Invalid CIGAR string: '{cigar}'")
    return ops


# =============================================================================
# Walker
# =============================================================================


class CigarWalker:
    """Single pass over one alignment's CIGAR, yielding candidate junctions.

    Iterating the walker yields a new :class:`Junction` for every intron
    it closes, in left-to-right order. Candidates carry coordinates and
    strand only; naming, counting and anchor flags belong to the store.

    Operations the walker does not know (padding, back) are logged and
    leave the position untouched, which shifts every later coordinate in
    that alignment. ``unknown_ops`` counts them.

    Attributes:
        chrom: Reference name of the alignment.
        position: 0-based leftmost reference position.
        cigar: (operation, length) tuples.
        strand: Strand hint for every candidate.
        unknown_ops: Unrecognized operations seen by the latest walk.
    """

    def __init__(
        self,
        chrom: str,
        position: int,
        cigar: CigarTuples,
        strand: str = UNKNOWN_STRAND,
    ) -> None:
        self.chrom = chrom
        self.position = position
        self.cigar = cigar
        self.strand = strand
        self.unknown_ops = 0

    def __iter__(self) -> Iterator[Junction]:
        self.unknown_ops = 0
        # A single operation cannot hold an intron between two anchors
        if len(self.cigar) <= 1:
            return

        start = thick_start = end = thick_end = self.position
        in_junction = False

        for op, length in self.cigar:
            if op == CIGAR_N:
                if in_junction:
                    # Back-to-back introns: the next one starts where this one ends
                    yield self._candidate(start, end, thick_start, thick_end)
                    thick_start = end
                    start = thick_end
                end = start + length
                thick_end = end
                in_junction = True

            elif op in (CIGAR_M, CIGAR_EQ):
                if in_junction:
                    thick_end += length
                else:
                    start += length

            elif op in (CIGAR_D, CIGAR_X):
                if in_junction:
                    yield self._candidate(start, end, thick_start, thick_end)
                    start = thick_end + length
                else:
                    start += length
                thick_start = start
                in_junction = False

            elif op in (CIGAR_I, CIGAR_S):
                if in_junction:
                    yield self._candidate(start, end, thick_start, thick_end)
                    start = thick_end
                thick_start = start
                in_junction = False

            elif op == CIGAR_H:
                continue

            else:
                self.unknown_ops += 1
                logger.warning(
                    f"Unknown CIGAR operation {op} (length {length}) in alignment "
                    f"at {self.chrom}:{self.position}"
                )

        if in_junction:
            yield self._candidate(start, end, thick_start, thick_end)

    def _candidate(self, start: int, end: int, thick_start: int, thick_end: int) -> Junction:
        return Junction(
            chrom=self.chrom,
            start=start,
            end=end,
            thick_start=thick_start,
            thick_end=thick_end,
            strand=self.strand,
        )


def walk_cigar(
    chrom: str,
    position: int,
    cigar: CigarTuples,
    strand: str = UNKNOWN_STRAND,
) -> list[Junction]:
    """Collect every candidate junction from one alignment.

    Args:
        chrom: Reference name.
        position: 0-based leftmost reference position.
        cigar: (operation, length) tuples.
        strand: Strand hint.

    Returns:
        Candidate junctions in left-to-right order.
    """
    return list(CigarWalker(chrom, position, cigar, strand))
