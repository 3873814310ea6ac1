"""BED12 output for splice junctions.

Each junction is written as a two-block BED12 feature spanning both
anchors, so genome browsers draw the intron as the gap between blocks.

Columns:
    chrom, thickStart, thickEnd, name, score, strand, thickStart,
    thickEnd, itemRgb, blockCount, blockSizes, blockStarts

Example:
    >>> from junctools.io.bed import write_bed12
    >>> n_written = write_bed12(store.snapshot(), "junctions.bed")
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TextIO

from junctools.core.junction import Junction

logger = logging.getLogger(__name__)

ITEM_RGB = "255,0,0"
BLOCK_COUNT = 2


def anchored_junctions(junctions: Iterable[Junction]) -> Iterator[Junction]:
    """Yield junctions with a minimum-length anchor on both sides."""
    for junction in junctions:
        if junction.has_left_min_anchor and junction.has_right_min_anchor:
            yield junction


def format_bed12(junction: Junction) -> str:
    """Render one junction as a BED12 line (without newline).

    Args:
        junction: Stored junction.

    Returns:
        Tab-delimited BED12 record.
    """
    fields = [
        junction.chrom,
        junction.thick_start,
        junction.thick_end,
        junction.name,
        junction.score,
        junction.strand,
        junction.thick_start,
        junction.thick_end,
        ITEM_RGB,
        BLOCK_COUNT,
        f"{junction.left_anchor_length},{junction.right_anchor_length}",
        f"0,{junction.end - junction.thick_start}",
    ]
    return "\t".join(str(f) for f in fields)


def _write_lines(junctions: Iterable[Junction], handle: TextIO) -> int:
    count = 0
    for junction in anchored_junctions(junctions):
        handle.write(format_bed12(junction) + "\n")
        count += 1
    return count


def write_bed12(
    junctions: Iterable[Junction],
    output: Path | str | TextIO | None = None,
) -> int:
    """Write anchored junctions in BED12 format.

    Junctions without a minimum anchor on both sides are skipped.

    Args:
        junctions: Junctions in output order.
        output: Output path, open text handle, or None / "-" for stdout.

    Returns:
        Number of records written.
    """
    if output is None or output == "-":
        count = _write_lines(junctions, sys.stdout)
    elif isinstance(output, (str, Path)):
        with open(output, "w") as f:
            count = _write_lines(junctions, f)
    else:
        count = _write_lines(junctions, output)

    logger.debug(f"Wrote {count} junctions")
    return count
