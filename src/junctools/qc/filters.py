"""Quality control for candidate junctions.

Candidates whose intron length falls outside the configured bounds are
rejected. Accepted candidates are annotated with whether each flanking
anchor reaches the minimum anchor length.

Example:
    >>> from junctools.qc.filters import JunctionQC
    >>> qc = JunctionQC(min_anchor_length=8)
    >>> result = qc.evaluate(candidate)
    >>> result.passed, result.has_left_min_anchor
    (True, True)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

import attrs

from junctools.config import (
    DEFAULT_MAX_INTRON_LENGTH,
    DEFAULT_MIN_ANCHOR_LENGTH,
    DEFAULT_MIN_INTRON_LENGTH,
)

if TYPE_CHECKING:
    from junctools.config import ExtractionConfig
    from junctools.core.junction import Junction


class QCResult(NamedTuple):
    """Outcome of QC for one candidate.

    Attributes:
        passed: Whether the intron length is within bounds.
        has_left_min_anchor: Left anchor is at least the minimum length.
        has_right_min_anchor: Right anchor is at least the minimum length.
    """

    passed: bool
    has_left_min_anchor: bool = False
    has_right_min_anchor: bool = False


REJECTED = QCResult(passed=False)


@attrs.define(frozen=True)
class JunctionQC:
    """Intron length bounds and anchor threshold for a run.

    Attributes:
        min_anchor_length: Minimum bases on one side to count as anchored.
        min_intron_length: Shortest accepted intron (inclusive).
        max_intron_length: Longest accepted intron (inclusive).
    """

    min_anchor_length: int = DEFAULT_MIN_ANCHOR_LENGTH
    min_intron_length: int = DEFAULT_MIN_INTRON_LENGTH
    max_intron_length: int = DEFAULT_MAX_INTRON_LENGTH

    @classmethod
    def from_config(cls, config: ExtractionConfig) -> JunctionQC:
        """Build the QC policy from a run configuration."""
        return cls(
            min_anchor_length=config.min_anchor_length,
            min_intron_length=config.min_intron_length,
            max_intron_length=config.max_intron_length,
        )

    def passes_length(self, candidate: Junction) -> bool:
        return self.min_intron_length <= candidate.intron_length <= self.max_intron_length

    def evaluate(self, candidate: Junction) -> QCResult:
        """Check a candidate without modifying it.

        Args:
            candidate: Junction produced by the CIGAR walker.

        Returns:
            QCResult with the length verdict and both anchor flags.
        """
        if not self.passes_length(candidate):
            return REJECTED
        return QCResult(
            passed=True,
            has_left_min_anchor=candidate.left_anchor_length >= self.min_anchor_length,
            has_right_min_anchor=candidate.right_anchor_length >= self.min_anchor_length,
        )
