"""Command-line interface for junctools.

Commands:
    extract: Identify splice junctions in an indexed BAM file

Example:
    $ junctools --help
    $ junctools extract rnaseq.bam > junctions.bed
    $ junctools extract -a 12 -i 50 -r chr1:1-1000000 -o junctions.bed rnaseq.bam
"""

import os
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from junctools import __version__

# Junctions go to stdout, so status output goes to stderr
console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__, prog_name="junctools")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """junctools: Splice junction tools for RNA-seq alignments."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# =============================================================================
# extract command
# =============================================================================


@main.command()
@click.argument("bam", type=click.Path(path_type=Path))
@click.option(
    "-a",
    "--min-anchor-length",
    type=int,
    default=8,
    show_default=True,
    help="Minimum anchor length. Junctions which satisfy a minimum anchor "
    "length on both sides are reported.",
)
@click.option(
    "-i",
    "--min-intron-length",
    type=int,
    default=70,
    show_default=True,
    help="Minimum intron length.",
)
@click.option(
    "-I",
    "--max-intron-length",
    type=int,
    default=500000,
    show_default=True,
    help="Maximum intron length.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="The file to write output to. [default: STDOUT]",
)
@click.option(
    "-r",
    "--region",
    type=str,
    help='The region to identify junctions in "chr:start-end" format, or a '
    "sequence name for the whole sequence. Entire BAM by default.",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    help="Also write a debug log to this file.",
)
@click.pass_context
def extract(
    ctx: click.Context,
    bam: Path,
    min_anchor_length: int,
    min_intron_length: int,
    max_intron_length: int,
    output: Optional[Path],
    region: Optional[str],
    log_file: Optional[Path],
) -> None:
    """Identify exon-exon junctions from an indexed BAM file.

    Junctions are written in BED12 format, one line per junction with a
    minimum anchor on both sides, sorted by position. The score column
    holds the number of supporting reads.

    \b
    Examples:
        $ junctools extract rnaseq.bam > junctions.bed
        $ junctools extract -a 12 -r chr1:1-1000000 -o chr1.bed rnaseq.bam
    """
    from junctools.config import ConfigurationError, ExtractionConfig
    from junctools.core.extract import JunctionExtractor
    from junctools.io.bam import AlignmentSourceError
    from junctools.io.bed import write_bed12
    from junctools.utils.logging import Timer, setup_logging

    verbose = ctx.obj.get("verbose", False)
    quiet = ctx.obj.get("quiet", False)
    logger = setup_logging(verbosity=0 if quiet else (2 if verbose else 1), log_file=log_file)

    try:
        config = ExtractionConfig(
            min_anchor_length=min_anchor_length,
            min_intron_length=min_intron_length,
            max_intron_length=max_intron_length,
            region=region,
            output=output,
        )
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    # Output location is checked before the scan
    if config.output is not None:
        output_dir = config.output.parent
        if config.output.is_dir():
            console.print(f"[red]Error:[/red] Output path is a directory: {config.output}")
            raise SystemExit(1)
        if not output_dir.is_dir():
            console.print(f"[red]Error:[/red] Output directory does not exist: {output_dir}")
            raise SystemExit(1)
        if not os.access(output_dir, os.W_OK):
            console.print(f"[red]Error:[/red] Output directory is not writable: {output_dir}")
            raise SystemExit(1)

    if not quiet:
        console.print(f"[blue]Minimum junction anchor length:[/blue] {config.min_anchor_length}")
        console.print(f"[blue]Minimum intron length:[/blue] {config.min_intron_length}")
        console.print(f"[blue]Maximum intron length:[/blue] {config.max_intron_length}")
        console.print(f"[blue]Alignment:[/blue] {bam}")
        if config.region is not None:
            console.print(f"[blue]Region:[/blue] {config.region}")
        console.print(f"[blue]Output file:[/blue] {config.output or 'STDOUT'}")

    try:
        extractor = JunctionExtractor(bam, config)
        with Timer("Junction extraction", logger):
            store = extractor.run()
    except AlignmentSourceError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    try:
        n_written = write_bed12(store.snapshot(), config.output)
    except OSError as e:
        target = config.output or "STDOUT"
        console.print(f"[red]Error:[/red] Unable to write junctions to {target}: {e}")
        raise SystemExit(1)

    if not quiet:
        console.print(
            f"[green]Done:[/green] {n_written} of {len(store)} junctions "
            f"passed the anchor filter"
        )


if __name__ == "__main__":
    main()
