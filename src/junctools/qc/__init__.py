"""Quality control for candidate junctions.

Example:
    >>> from junctools.qc import JunctionQC
    >>> qc = JunctionQC(min_anchor_length=8, min_intron_length=70)
"""

from junctools.qc.filters import JunctionQC, QCResult

__all__ = [
    "JunctionQC",
    "QCResult",
]
