"""Unit tests for junctools.core.cigar module.

Tests cover:
- CIGAR string parsing
- Junction boundaries for each CIGAR operation
- Back-to-back introns
- Skipping alignments that cannot hold a junction
- Unknown operations
"""

import logging

import pytest

from junctools.core.cigar import (
    CIGAR_D,
    CIGAR_EQ,
    CIGAR_H,
    CIGAR_I,
    CIGAR_M,
    CIGAR_N,
    CIGAR_P,
    CIGAR_S,
    CIGAR_X,
    CigarWalker,
    parse_cigar,
    walk_cigar,
)


def spans(cigar: str, position: int = 1000) -> list[tuple[int, int, int, int]]:
    """Walk a CIGAR string and return (thick_start, start, end, thick_end) tuples."""
    return [
        (j.thick_start, j.start, j.end, j.thick_end)
        for j in walk_cigar("chr1", position, parse_cigar(cigar))
    ]


# =============================================================================
# Parsing Tests
# =============================================================================


class TestParseCigar:
    """Tests for parse_cigar."""

    def test_simple(self) -> None:
        """Test parsing a spliced CIGAR."""
        assert parse_cigar("10M500N10M") == [(CIGAR_M, 10), (CIGAR_N, 500), (CIGAR_M, 10)]

    def test_all_operations(self) -> None:
        """Test every operation letter maps to its pysam code."""
        ops = parse_cigar("1M2I3D4N5S6H7P8=9X10B")
        assert [op for op, _ in ops] == list(range(10))
        assert [length for _, length in ops] == list(range(1, 11))

    def test_empty(self) -> None:
        """Test missing CIGAR values."""
        assert parse_cigar("*") == []
        assert parse_cigar("") == []

    @pytest.mark.parametrize("cigar", ["10M500", "M10", "10Q", "10M 5N", "abc"])
    def test_invalid(self, cigar: str) -> None:
        """Test malformed CIGAR strings are rejected."""
        with pytest.raises(ValueError, match="Invalid CIGAR"):
            parse_cigar(cigar)


# =============================================================================
# Walker Tests
# =============================================================================


class TestSingleIntron:
    """Tests for alignments with one intron."""

    def test_match_intron_match(self) -> None:
        """Test a plain spliced read."""
        assert spans("10M500N10M") == [(1000, 1010, 1510, 1520)]

    def test_sequence_match_operations(self) -> None:
        """Test '=' extends anchors like 'M'."""
        assert spans("6=4M500N3M7=") == [(1000, 1010, 1510, 1520)]

    def test_candidate_fields(self) -> None:
        """Test chrom and strand are carried onto the candidate."""
        (junction,) = walk_cigar("chrX", 50, [(CIGAR_M, 10), (CIGAR_N, 100), (CIGAR_M, 10)], "-")

        assert junction.chrom == "chrX"
        assert junction.strand == "-"
        assert junction.name == ""
        assert junction.read_count == 0

    def test_default_strand_unknown(self) -> None:
        """Test the strand defaults to '?'."""
        (junction,) = walk_cigar("chr1", 0, parse_cigar("5M100N5M"))
        assert junction.strand == "?"

    def test_intron_at_read_end(self) -> None:
        """Test an open intron is flushed at the end of the CIGAR."""
        assert spans("10M500N") == [(1000, 1010, 1510, 1510)]


class TestAnchorBoundaries:
    """Tests for operations that end an anchor."""

    def test_deletion_in_left_anchor(self) -> None:
        """Test bases before a deletion do not count toward the left anchor."""
        assert spans("10M2D10M500N10M") == [(1012, 1022, 1522, 1532)]

    def test_mismatch_in_left_anchor(self) -> None:
        """Test 'X' resets the left anchor like a deletion."""
        assert spans("10M2X10M500N10M") == [(1012, 1022, 1522, 1532)]

    def test_deletion_in_right_anchor(self) -> None:
        """Test a deletion closes the junction with the anchor seen so far."""
        assert spans("10M500N5M2D20M") == [(1000, 1010, 1510, 1515)]

    def test_soft_clip_at_start(self) -> None:
        """Test a leading soft clip does not move the junction."""
        assert spans("5S10M500N10M") == [(1000, 1010, 1510, 1520)]

    def test_insertion_in_left_anchor(self) -> None:
        """Test bases before an insertion do not count toward the left anchor."""
        assert spans("5M2I10M500N10M") == [(1005, 1015, 1515, 1525)]

    def test_insertion_in_right_anchor(self) -> None:
        """Test an insertion closes the junction."""
        assert spans("10M500N4M1I10M") == [(1000, 1010, 1510, 1514)]

    def test_soft_clip_at_end(self) -> None:
        """Test a trailing soft clip closes the junction without moving it."""
        assert spans("10M500N10M5S") == [(1000, 1010, 1510, 1520)]

    def test_hard_clips_ignored(self) -> None:
        """Test hard clips have no effect."""
        assert spans("5H10M500N10M5H") == [(1000, 1010, 1510, 1520)]

    def test_second_intron_after_deletion(self) -> None:
        """Test a new junction can open after a deletion closed the first one."""
        assert spans("10M100N10M3D10M200N10M") == [
            (1000, 1010, 1110, 1120),
            (1123, 1133, 1333, 1343),
        ]

    def test_second_intron_after_insertion(self) -> None:
        """Test a new junction can open after an insertion closed the first one."""
        assert spans("10M100N10M3I10M200N10M") == [
            (1000, 1010, 1110, 1120),
            (1120, 1130, 1330, 1340),
        ]


class TestMultipleIntrons:
    """Tests for reads spanning more than one intron."""

    def test_two_introns_with_middle_exon(self) -> None:
        """Test the middle exon anchors both junctions."""
        assert spans("10M500N10M300N10M") == [
            (1000, 1010, 1510, 1520),
            (1510, 1520, 1820, 1830),
        ]

    def test_back_to_back_introns(self) -> None:
        """Test two introns with no anchor between them."""
        assert spans("10M500N300N10M") == [
            (1000, 1010, 1510, 1510),
            (1510, 1510, 1810, 1820),
        ]

    def test_three_introns(self) -> None:
        """Test every intron is reported in order."""
        junctions = walk_cigar("chr1", 0, parse_cigar("20M100N30M200N40M300N50M"))

        assert [(j.start, j.end) for j in junctions] == [(20, 120), (150, 350), (390, 690)]
        assert junctions[1].left_anchor_length == 30
        assert junctions[1].right_anchor_length == 40

    def test_candidates_are_independent(self) -> None:
        """Test each yielded candidate is a separate object."""
        first, second = walk_cigar("chr1", 0, parse_cigar("20M100N30M200N40M"))
        first.thick_start = -1
        assert second.thick_start == 120


class TestSkippedAlignments:
    """Tests for alignments that cannot contain a junction."""

    def test_single_match(self) -> None:
        """Test an unspliced read yields nothing."""
        assert spans("100M") == []

    def test_single_intron_operation(self) -> None:
        """Test a lone 'N' is skipped rather than reported."""
        assert spans("500N") == []

    def test_empty_cigar(self) -> None:
        """Test an alignment without CIGAR yields nothing."""
        assert walk_cigar("chr1", 1000, []) == []

    def test_no_intron(self) -> None:
        """Test a multi-operation CIGAR without 'N' yields nothing."""
        assert spans("5S50M2D40M3I10M") == []


class TestUnknownOperations:
    """Tests for operations the walker does not handle."""

    def test_padding_leaves_position_unchanged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test padding is logged and does not move the junction."""
        cigar = [(CIGAR_M, 10), (CIGAR_P, 3), (CIGAR_N, 500), (CIGAR_M, 10)]
        walker = CigarWalker("chr1", 1000, cigar)

        with caplog.at_level(logging.WARNING, logger="junctools.core.cigar"):
            junctions = list(walker)

        assert [(j.start, j.end) for j in junctions] == [(1010, 1510)]
        assert walker.unknown_ops == 1
        assert "Unknown CIGAR operation 6" in caplog.text

    def test_unknown_code_inside_junction(self) -> None:
        """Test an unknown code inside a junction keeps it open."""
        cigar = [(CIGAR_M, 10), (CIGAR_N, 500), (42, 7), (CIGAR_M, 10)]
        walker = CigarWalker("chr1", 1000, cigar)

        assert [(j.start, j.end, j.thick_end) for j in walker] == [(1010, 1510, 1520)]
        assert walker.unknown_ops == 1

    def test_known_operations_not_counted(self) -> None:
        """Test no warnings for standard operations."""
        cigar = [
            (CIGAR_S, 2),
            (CIGAR_M, 10),
            (CIGAR_I, 1),
            (CIGAR_EQ, 10),
            (CIGAR_D, 1),
            (CIGAR_X, 1),
            (CIGAR_N, 100),
            (CIGAR_M, 10),
            (CIGAR_H, 5),
        ]
        walker = CigarWalker("chr1", 0, cigar)
        list(walker)
        assert walker.unknown_ops == 0

    def test_walking_twice(self) -> None:
        """Test a second walk gives the same junctions and the same count."""
        cigar = [(CIGAR_M, 10), (CIGAR_P, 3), (CIGAR_N, 500), (CIGAR_M, 10)]
        walker = CigarWalker("chr1", 1000, cigar)

        first = list(walker)
        second = list(walker)

        assert first == second
        assert walker.unknown_ops == 1
