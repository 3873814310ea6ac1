"""Input/output handlers for junctools.

- BAM: indexed RNA-seq alignments (via pysam)
- BED: BED12 junction output
"""

from junctools.io.bam import AlignmentSource, AlignmentSourceError, RecordError
from junctools.io.bed import anchored_junctions, format_bed12, write_bed12

__all__ = [
    "AlignmentSource",
    "AlignmentSourceError",
    "RecordError",
    "anchored_junctions",
    "format_bed12",
    "write_bed12",
]
