"""Pytest configuration and shared fixtures for junctools tests.

Fixtures are organized by category:

- Configuration fixtures: Default and custom run settings
- Junction fixtures: Candidate junctions built by hand
- BAM fixtures: Small indexed BAM files written with pysam
"""

from collections.abc import Callable
from pathlib import Path
from typing import Optional

import pysam
import pytest

from junctools.config import ExtractionConfig
from junctools.core.cigar import CIGAR_EQ, CIGAR_I, CIGAR_M, CIGAR_S, CIGAR_X, parse_cigar
from junctools.core.junction import Junction

REFERENCES = [("chr1", 1_000_000), ("chr2", 500_000)]

# (chrom, 0-based position, CIGAR string, XS strand or None)
ReadSpec = tuple[str, int, str, Optional[str]]


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def default_config() -> ExtractionConfig:
    """Return the default extraction configuration."""
    return ExtractionConfig()


# =============================================================================
# Junction Fixtures
# =============================================================================


@pytest.fixture
def make_candidate() -> Callable[..., Junction]:
    """Factory for candidate junctions with 10 bp anchors by default."""

    def _make(
        chrom: str = "chr1",
        start: int = 1010,
        end: int = 1510,
        thick_start: Optional[int] = None,
        thick_end: Optional[int] = None,
        strand: str = "+",
    ) -> Junction:
        return Junction(
            chrom=chrom,
            start=start,
            end=end,
            thick_start=start - 10 if thick_start is None else thick_start,
            thick_end=end + 10 if thick_end is None else thick_end,
            strand=strand,
        )

    return _make


# =============================================================================
# BAM Fixtures
# =============================================================================


def _query_length(cigar: str) -> int:
    return sum(
        length
        for op, length in parse_cigar(cigar)
        if op in (CIGAR_M, CIGAR_I, CIGAR_S, CIGAR_EQ, CIGAR_X)
    )


def write_bam(path: Path, reads: list[ReadSpec], index: bool = True) -> Path:
    """Write reads to a coordinate-sorted BAM file and optionally index it."""
    chroms = [name for name, _ in REFERENCES]
    header = {
        "HD": {"VN": "1.6", "SO": "coordinate"},
        "SQ": [{"SN": name, "LN": length} for name, length in REFERENCES],
    }

    ordered = sorted(reads, key=lambda r: (chroms.index(r[0]), r[1]))
    with pysam.AlignmentFile(str(path), "wb", header=header) as out:
        for i, (chrom, pos, cigar, strand) in enumerate(ordered):
            length = _query_length(cigar)
            segment = pysam.AlignedSegment(out.header)
            segment.query_name = f"read{i + 1}"
            segment.flag = 0
            segment.reference_id = chroms.index(chrom)
            segment.reference_start = pos
            segment.mapping_quality = 60
            segment.cigarstring = cigar
            segment.query_sequence = "A" * length
            segment.query_qualities = pysam.qualitystring_to_array("I" * length)
            if strand is not None:
                segment.set_tag("XS", strand, value_type="A")
            out.write(segment)

    if index:
        pysam.index(str(path))
    return path


@pytest.fixture
def make_bam(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an indexed BAM file into the test's temp directory."""

    def _make(reads: list[ReadSpec], name: str = "test.bam", index: bool = True) -> Path:
        return write_bam(tmp_path / name, reads, index=index)

    return _make


@pytest.fixture
def spliced_bam(make_bam: Callable[..., Path]) -> Path:
    """Indexed BAM with a small set of spliced and unspliced reads.

    - Two reads supporting chr1:1010-1510 on '+' with different anchors
    - One read supporting chr1:1010-1510 on '-'
    - One read with a short right anchor at chr1:3020-3520
    - One unspliced read
    - One read on chr2 supporting chr2:220-420
    """
    return make_bam(
        [
            ("chr1", 1000, "10M500N10M", "+"),
            ("chr1", 990, "20M500N30M", "+"),
            ("chr1", 1000, "10M500N10M", "-"),
            ("chr1", 3000, "20M500N4M", "+"),
            ("chr1", 5000, "100M", None),
            ("chr2", 200, "20M200N20M", None),
        ]
    )
