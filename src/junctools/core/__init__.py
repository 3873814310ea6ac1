"""Core junction extraction logic.

This module contains:
- junction: Junction records and store keys
- cigar: CIGAR walking state machine
- store: Deduplicating, read-counting junction store
- extract: Extraction runs over an alignment file
"""

from junctools.core.cigar import CigarWalker, parse_cigar, walk_cigar
from junctools.core.junction import Junction, JunctionKey
from junctools.core.store import (
    InsertOutcome,
    InsertResult,
    JunctionStore,
    StoreFinalizedError,
    StoreState,
)

__all__ = [
    "CigarWalker",
    "InsertOutcome",
    "InsertResult",
    "Junction",
    "JunctionKey",
    "JunctionStore",
    "StoreFinalizedError",
    "StoreState",
    "parse_cigar",
    "walk_cigar",
]
