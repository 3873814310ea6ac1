"""Splice junction records.

A junction is an intron inferred from a reference skip in an alignment,
together with the anchors observed on either side of it.

Coordinates are 0-based and half-open. For one junction::

    thick_start     start              end     thick_end
        |=============|-----intron------|=========|
          left anchor                    right anchor
"""

from __future__ import annotations

from typing import NamedTuple

import attrs

STRANDS = ("+", "-", "?")
UNKNOWN_STRAND = "?"


class JunctionKey(NamedTuple):
    """Canonical identity of a junction in the store."""

    chrom: str
    start: int
    end: int
    strand: str


@attrs.define
class Junction:
    """A splice junction and the evidence merged into it.

    Attributes:
        chrom: Reference sequence name.
        start: Intron start (0-based, first intronic base).
        end: Intron end (0-based, exclusive).
        thick_start: Outer edge of the widest left anchor seen.
        thick_end: Outer edge of the widest right anchor seen.
        strand: '+', '-' or '?' when unknown.
        name: Identifier assigned when the junction is first stored.
        read_count: Number of alignments merged into this junction.
        has_left_min_anchor: A merged alignment had a long enough left anchor.
        has_right_min_anchor: A merged alignment had a long enough right anchor.
    """

    chrom: str
    start: int
    end: int
    thick_start: int
    thick_end: int
    strand: str = UNKNOWN_STRAND
    name: str = ""
    read_count: int = 0
    has_left_min_anchor: bool = False
    has_right_min_anchor: bool = False

    @property
    def key(self) -> JunctionKey:
        return JunctionKey(self.chrom, self.start, self.end, self.strand)

    @property
    def score(self) -> str:
        """BED score column: the read count as text."""
        return str(self.read_count)

    @property
    def intron_length(self) -> int:
        return self.end - self.start

    @property
    def left_anchor_length(self) -> int:
        return self.start - self.thick_start

    @property
    def right_anchor_length(self) -> int:
        return self.thick_end - self.end

    def invariant_violation(self) -> str | None:
        """Describe why the coordinates are inconsistent, or None if they are fine."""
        if self.end <= self.start:
            return f"intron end {self.end} is not after start {self.start}"
        if self.thick_start > self.start:
            return f"thick_start {self.thick_start} is after start {self.start}"
        if self.thick_end < self.end:
            return f"thick_end {self.thick_end} is before end {self.end}"
        return None

    def __str__(self) -> str:
        return f"{self.chrom}:{self.start}-{self.end}({self.strand})"
