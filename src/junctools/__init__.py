"""junctools: Splice junction extraction from RNA-seq alignments.

junctools walks the CIGAR strings of spliced alignments in an indexed BAM
file, collects the introns they imply, counts supporting reads and writes
junctions with sufficient anchoring in BED12 format.

Example:
    >>> import junctools
    >>> junctools.__version__
    '0.1.0'

Modules:
    core: CIGAR walking, junction store and extraction runs
    qc: Junction quality control
    io: BAM input and BED output
    utils: Region parsing and logging
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
