"""Deduplicating junction store.

The store merges candidates that share ``(chrom, start, end, strand)``
into one record, counting supporting reads and widening the observed
anchors. It collects until the first :meth:`JunctionStore.snapshot`
call, which sorts the records once and freezes the store.

Example:
    >>> from junctools.config import ExtractionConfig
    >>> from junctools.core.store import JunctionStore
    >>> store = JunctionStore(ExtractionConfig())
    >>> for candidate in candidates:
    ...     store.insert(candidate)
    >>> for junction in store.snapshot():
    ...     print(junction.name, junction.read_count)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import NamedTuple

import attrs

from junctools.config import ExtractionConfig
from junctools.core.junction import Junction, JunctionKey
from junctools.qc.filters import JunctionQC

logger = logging.getLogger(__name__)

NAME_PREFIX = "JUNC"
NAME_DIGITS = 8


# =============================================================================
# Enums and Results
# =============================================================================


class StoreState(Enum):
    """Lifecycle of a store."""

    COLLECTING = "collecting"
    FINALIZED = "finalized"


class InsertOutcome(Enum):
    """What happened to a candidate passed to :meth:`JunctionStore.insert`."""

    INSERTED = "inserted"  # New key, new record
    MERGED = "merged"  # Existing key, evidence added
    REJECTED = "rejected"  # Failed QC
    INVALID = "invalid"  # Inconsistent coordinates


class InsertResult(NamedTuple):
    """Result of one insert.

    Attributes:
        outcome: What the store did with the candidate.
        junction: The stored record for INSERTED and MERGED, else None.
        reason: Why the candidate was not stored, else None.
    """

    outcome: InsertOutcome
    junction: Junction | None = None
    reason: str | None = None

    @property
    def stored(self) -> bool:
        return self.outcome in (InsertOutcome.INSERTED, InsertOutcome.MERGED)


class StoreFinalizedError(RuntimeError):
    """Raised when inserting into a store that has already been sorted."""


# =============================================================================
# Store
# =============================================================================


class JunctionStore:
    """Key-to-junction mapping with read counting and one-time sorting.

    Attributes:
        config: Run configuration the QC policy was built from.
        qc: QC policy applied on every insert.
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config if config is not None else ExtractionConfig()
        self.qc = JunctionQC.from_config(self.config)
        self._junctions: dict[JunctionKey, Junction] = {}
        self._snapshot: tuple[Junction, ...] | None = None

    def __len__(self) -> int:
        return len(self._junctions)

    def __contains__(self, key: object) -> bool:
        return key in self._junctions

    def get(self, key: JunctionKey) -> Junction | None:
        return self._junctions.get(key)

    @property
    def state(self) -> StoreState:
        if self._snapshot is None:
            return StoreState.COLLECTING
        return StoreState.FINALIZED

    @property
    def is_finalized(self) -> bool:
        return self.state is StoreState.FINALIZED

    def _next_name(self) -> str:
        return f"{NAME_PREFIX}{len(self._junctions) + 1:0{NAME_DIGITS}d}"

    def insert(self, candidate: Junction) -> InsertResult:
        """Run QC on a candidate and add it to the store.

        The candidate itself is never stored; a new record is created for
        an unseen key, and an existing record absorbs the candidate's
        evidence otherwise.

        Args:
            candidate: Junction produced by the CIGAR walker.

        Returns:
            InsertResult describing the outcome.

        Raises:
            StoreFinalizedError: If :meth:`snapshot` was already called.
        """
        if self.is_finalized:
            raise StoreFinalizedError(
                f"Cannot insert {candidate}: junctions were already sorted for output"
            )

        problem = candidate.invariant_violation()
        if problem is not None:
            return InsertResult(InsertOutcome.INVALID, reason=f"{candidate}: {problem}")

        result = self.qc.evaluate(candidate)
        if not result.passed:
            return InsertResult(
                InsertOutcome.REJECTED,
                reason=f"{candidate}: intron length {candidate.intron_length} out of bounds",
            )

        key = candidate.key
        existing = self._junctions.get(key)

        if existing is None:
            junction = attrs.evolve(
                candidate,
                name=self._next_name(),
                read_count=1,
                has_left_min_anchor=result.has_left_min_anchor,
                has_right_min_anchor=result.has_right_min_anchor,
            )
            self._junctions[key] = junction
            return InsertResult(InsertOutcome.INSERTED, junction)

        existing.read_count += 1
        existing.thick_start = min(existing.thick_start, candidate.thick_start)
        existing.thick_end = max(existing.thick_end, candidate.thick_end)
        existing.has_left_min_anchor = existing.has_left_min_anchor or result.has_left_min_anchor
        existing.has_right_min_anchor = existing.has_right_min_anchor or result.has_right_min_anchor
        return InsertResult(InsertOutcome.MERGED, existing)

    def snapshot(self) -> tuple[Junction, ...]:
        """Return all junctions sorted by position, finalizing the store.

        The first call sorts by ``(chrom, start, end)``, with strand as the
        last tie-break, and caches the result. Later calls return the same
        tuple.
        """
        if self._snapshot is None:
            self._snapshot = tuple(
                sorted(
                    self._junctions.values(),
                    key=lambda j: (j.chrom, j.start, j.end, j.strand),
                )
            )
            logger.debug(f"Finalized junction store with {len(self._snapshot)} junctions")
        return self._snapshot
