"""Junction extraction from an indexed alignment file.

This module drives a full run: it drains the alignment source, walks each
alignment's CIGAR, feeds the candidates to the store and keeps counts of
what happened along the way. A bad record is logged and skipped; only
failures of the alignment source itself end the run.

Example:
    >>> from junctools.config import ExtractionConfig
    >>> from junctools.core.extract import JunctionExtractor
    >>> extractor = JunctionExtractor("rnaseq.bam", ExtractionConfig(min_anchor_length=10))
    >>> store = extractor.run()
    >>> extractor.stats.inserted
    1532
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import attrs

from junctools.config import ExtractionConfig
from junctools.core.cigar import CigarTuples, CigarWalker
from junctools.core.junction import UNKNOWN_STRAND, Junction
from junctools.core.store import InsertOutcome, JunctionStore
from junctools.io.bam import AlignmentSource, RecordError
from junctools.io.bed import anchored_junctions
from junctools.utils.logging import ProgressLogger

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1_000_000


@attrs.define
class ExtractionStats:
    """Counters for one extraction run."""

    alignments: int = 0
    skipped: int = 0  # At most one CIGAR operation
    candidates: int = 0
    inserted: int = 0
    merged: int = 0
    rejected: int = 0
    invalid: int = 0
    record_errors: int = 0
    unknown_ops: int = 0

    def to_dict(self) -> dict[str, Any]:
        return attrs.asdict(self)

    def summary(self) -> str:
        return (
            f"{self.alignments:,} alignments, {self.candidates:,} candidate junctions: "
            f"{self.inserted:,} new, {self.merged:,} merged, {self.rejected:,} rejected by QC, "
            f"{self.invalid + self.record_errors:,} bad records"
        )


class JunctionExtractor:
    """Extract splice junctions from one alignment file.

    Attributes:
        bam_path: Path to the indexed alignment file.
        config: Run configuration.
        store: Junctions collected so far.
        stats: Counters for the run.
    """

    def __init__(self, bam_path: Path | str, config: ExtractionConfig | None = None) -> None:
        self.bam_path = Path(bam_path)
        self.config = config if config is not None else ExtractionConfig()
        self.store = JunctionStore(self.config)
        self.stats = ExtractionStats()

    def add_alignment(
        self,
        chrom: str,
        position: int,
        cigar: CigarTuples,
        strand: str = UNKNOWN_STRAND,
    ) -> None:
        """Walk one alignment and insert its candidates into the store.

        Args:
            chrom: Reference name.
            position: 0-based leftmost reference position.
            cigar: (operation, length) tuples.
            strand: Strand hint from the XS tag.
        """
        self.stats.alignments += 1
        if len(cigar) <= 1:
            self.stats.skipped += 1
            return

        walker = CigarWalker(chrom, position, cigar, strand)
        for candidate in walker:
            self.stats.candidates += 1
            result = self.store.insert(candidate)
            if result.outcome is InsertOutcome.INSERTED:
                self.stats.inserted += 1
            elif result.outcome is InsertOutcome.MERGED:
                self.stats.merged += 1
            elif result.outcome is InsertOutcome.REJECTED:
                self.stats.rejected += 1
            else:
                self.stats.invalid += 1
                logger.warning(f"Skipping junction candidate {result.reason}")
        self.stats.unknown_ops += walker.unknown_ops

    def run(self) -> JunctionStore:
        """Scan the alignment file and collect junctions.

        Each run starts from an empty store and fresh counters, so running
        twice gives the same result as running once.

        Returns:
            The populated junction store.

        Raises:
            AlignmentSourceError: If the file cannot be opened, is not
                indexed, or the region cannot be queried.
        """
        self.store = JunctionStore(self.config)
        self.stats = ExtractionStats()
        progress = ProgressLogger(logger, interval=PROGRESS_INTERVAL)

        with AlignmentSource(self.bam_path) as source:
            for read in source.fetch(self.config.region):
                progress.update()
                try:
                    record = source.record(read)
                except RecordError as e:
                    self.stats.record_errors += 1
                    logger.warning(f"Skipping alignment: {e}")
                    continue
                self.add_alignment(record.chrom, record.position, record.cigar, record.strand)

        progress.finish()
        logger.info(f"Junction extraction: {self.stats.summary()}")
        return self.store

    def junctions(self) -> list[Junction]:
        """Sorted junctions anchored on both sides, as they will be written."""
        return list(anchored_junctions(self.store.snapshot()))
