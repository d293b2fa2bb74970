"""Click-based CLI entry point for downcast."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from downcast.models.core import MeasuredVariable


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log debug messages.")
def cli(verbose: bool):
    """Sonde downcast coverage and depth-time profile reports."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--heatmap", type=click.Path(dir_okay=False, path_type=Path), help="Also save a coverage heatmap PNG.")
def coverage(input_path: Path, heatmap: Path | None):
    """Show successful sampling dates per site and year."""
    from downcast.coverage.analyzer import coverage_table, total_coverage
    from downcast.storage.catalog import load_observations

    df = load_observations(input_path)
    table = coverage_table(df)
    if table.empty:
        click.echo("No observations found.")
        return

    table["total"] = total_coverage(df).reindex(table.index, fill_value=0)
    click.echo("Successful sampling dates per site and year")
    click.echo("=" * 80)
    click.echo(table.to_string())

    if heatmap is not None:
        from downcast.coverage.plots import plot_coverage_heatmap

        plot_coverage_heatmap(table.drop(columns="total"), heatmap)
        click.echo(f"Heatmap saved to {heatmap}")


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--threshold", type=int, required=True, help="Minimum successful sampling dates (exclusive).")
def preferred(input_path: Path, threshold: int):
    """List sites sampled densely enough for depth-time review."""
    from downcast.coverage.analyzer import select_preferred_sites
    from downcast.storage.catalog import load_observations

    sites = select_preferred_sites(load_observations(input_path), threshold)
    if not sites:
        click.echo(f"No site has more than {threshold} successful sampling dates.")
        return
    for site in sorted(sites):
        click.echo(site)


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option("--threshold", type=int, required=True, help="Minimum successful sampling dates (exclusive).")
@click.option("--min-year", type=int, required=True, help="Keep years strictly after this one.")
@click.option("--year", "years", type=int, multiple=True, help="Year to plot (repeatable). Default: all kept years.")
@click.option(
    "--variable", "variables", type=click.Choice(MeasuredVariable.names()), multiple=True,
    help="Variable to plot (repeatable). Default: all variables.",
)
@click.option("--render-config", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="YAML file with palettes and colour domains.")
def plot(
    input_path: Path,
    output_dir: Path,
    threshold: int,
    min_year: int,
    years: tuple[int, ...],
    variables: tuple[str, ...],
    render_config: Path | None,
):
    """Render depth-time profiles for preferred sites."""
    from downcast.config import YEAR_COL
    from downcast.coverage.analyzer import restrict_to_sites_and_years, select_preferred_sites
    from downcast.reporting.batch import render_profile_batch
    from downcast.reporting.render_config import RenderSettings
    from downcast.storage.catalog import load_observations

    df = load_observations(input_path)
    sites = select_preferred_sites(df, threshold)
    if not sites:
        click.echo(f"No site has more than {threshold} successful sampling dates; nothing to plot.")
        return

    subset = restrict_to_sites_and_years(df, sites, min_year)
    if subset.empty:
        click.echo(f"No observations after {min_year} at the preferred sites; nothing to plot.")
        return

    settings = RenderSettings.from_yaml(render_config) if render_config else RenderSettings()
    result = render_profile_batch(
        subset,
        variables=variables or MeasuredVariable.names(),
        years=years or sorted(subset[YEAR_COL].unique()),
        settings=settings,
        output_dir=output_dir,
    )

    click.echo(result.summary())
    for failure in result.failures:
        click.echo(f"  FAILED {failure.site_id} {failure.year} {failure.variable}: {failure.error}")


if __name__ == "__main__":
    cli()
