"""Configuration management for junctools.

This module holds the run-wide settings for a junction extraction run.
Thresholds are fixed for the duration of a run and are handed explicitly
to the QC filter and the junction store.

Example:
    >>> from junctools.config import ExtractionConfig
    >>> config = ExtractionConfig(min_anchor_length=12, region="chr1:1-50000")
    >>> config.region.seqid
    'chr1'
    >>> config.min_intron_length
    70
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import attrs

from junctools.utils.regions import GenomicRegion, parse_region

# =============================================================================
# Default Configuration Values
# =============================================================================

# Junction QC defaults
DEFAULT_MIN_ANCHOR_LENGTH = 8
DEFAULT_MIN_INTRON_LENGTH = 70
DEFAULT_MAX_INTRON_LENGTH = 500_000


# =============================================================================
# Errors
# =============================================================================


class ConfigurationError(ValueError):
    """Raised when run options are invalid."""


# =============================================================================
# Converters and Validators
# =============================================================================


def _to_region(value: GenomicRegion | str | None) -> GenomicRegion | None:
    if value is None or isinstance(value, GenomicRegion):
        return value
    try:
        return parse_region(value)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def _to_path(value: Path | str | None) -> Path | None:
    if value is None or value == "-":
        return None
    return Path(value)


def _non_negative(instance: Any, attribute: attrs.Attribute, value: int) -> None:
    if value < 0:
        raise ConfigurationError(f"{attribute.name} must be >= 0, got {value}")


# =============================================================================
# Configuration Classes
# =============================================================================


@attrs.define(frozen=True)
class ExtractionConfig:
    """Settings for one junction extraction run.

    Attributes:
        min_anchor_length: Minimum matched bases required on a side of the
            intron for that side to count as anchored.
        min_intron_length: Shortest intron accepted (inclusive).
        max_intron_length: Longest intron accepted (inclusive).
        region: Optional region to restrict the scan to. Strings are parsed
            as 1-based inclusive ``chrom:start-end``.
        output: Output BED path. None writes to standard output.
    """

    min_anchor_length: int = attrs.field(
        default=DEFAULT_MIN_ANCHOR_LENGTH, validator=_non_negative
    )
    min_intron_length: int = attrs.field(
        default=DEFAULT_MIN_INTRON_LENGTH, validator=_non_negative
    )
    max_intron_length: int = attrs.field(
        default=DEFAULT_MAX_INTRON_LENGTH, validator=_non_negative
    )
    region: GenomicRegion | None = attrs.field(default=None, converter=_to_region)
    output: Path | None = attrs.field(default=None, converter=_to_path)

    def __attrs_post_init__(self) -> None:
        if self.max_intron_length < self.min_intron_length:
            raise ConfigurationError(
                f"Maximum intron length ({self.max_intron_length}) is smaller than "
                f"minimum intron length ({self.min_intron_length})"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation of configuration, with the region
            rendered as a 1-based string.
        """
        data = attrs.asdict(self, recurse=False)
        data["region"] = str(self.region) if self.region is not None else None
        data["output"] = str(self.output) if self.output is not None else None
        return data
