"""Render depth-time profiles for every site x year x variable combination."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.figure import Figure
from tqdm import tqdm

from downcast.config import FIG_DPI, SITE_COL, YEAR_COL
from downcast.coverage.analyzer import observation_years
from downcast.exceptions import InvalidVariable
from downcast.models.core import MeasuredVariable, Observation, as_frame
from downcast.plotting.profile import render_depth_time_profile
from downcast.reporting.render_config import RenderSettings

logger = logging.getLogger(__name__)


@dataclass
class RenderFailure:
    """One combination that could not be rendered."""

    site_id: str
    year: int
    variable: str
    error: str


@dataclass
class BatchResult:
    """Outcome of a batch render."""

    rendered: list[tuple[str, int, str]] = field(default_factory=list)  # (site, year, variable)
    empty: list[tuple[str, int, str]] = field(default_factory=list)  # rendered with no rows
    saved: list[Path] = field(default_factory=list)
    failures: list[RenderFailure] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"Rendered {len(self.rendered)} profiles ({len(self.empty)} without data), "
            f"saved {len(self.saved)}, failed {len(self.failures)}"
        )


def profile_path(output_dir: Path, site_id: str, year: int, variable: str) -> Path:
    return output_dir / str(site_id) / f"{year}_{variable}.png"


def save_figure(fig: Figure, save_path: Path, dpi: int = FIG_DPI) -> Path:
    """Write a figure as PNG, creating parent directories."""
    save_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(save_path, dpi=dpi)
    return save_path


def _variable_name(variable: MeasuredVariable | str) -> str:
    """Canonical column name when the variable is known, else the name as given."""
    try:
        return MeasuredVariable.parse(variable).value
    except InvalidVariable:
        return str(variable)


def render_profile_batch(
    observations: pd.DataFrame | Iterable[Observation],
    variables: Iterable[MeasuredVariable | str],
    years: Iterable[int],
    settings: RenderSettings | None = None,
    output_dir: Path | None = None,
) -> BatchResult:
    """Render one plot per (site, year, variable).

    Each combination is independent: an error is logged and recorded in
    ``BatchResult.failures`` and the loop moves on. Figures are saved under
    ``output_dir/<site>/<year>_<variable>.png`` when ``output_dir`` is given,
    and always closed.
    """
    df = as_frame(observations)
    if not df.empty and YEAR_COL not in df.columns:
        df = df.assign(**{YEAR_COL: observation_years(df)})
    settings = settings or RenderSettings()
    variables = list(variables)
    years = sorted(int(y) for y in years)
    result = BatchResult()

    sites = sorted(df[SITE_COL].dropna().unique()) if not df.empty else []
    combos = [(s, y, v) for s in sites for y in years for v in variables]
    logger.info("Rendering %d profiles for %d sites", len(combos), len(sites))

    by_site = {site: grp for site, grp in df.groupby(SITE_COL, sort=True)} if sites else {}

    for site_id, year, variable in tqdm(combos, desc="Rendering profiles"):
        name = _variable_name(variable)
        subset = by_site[site_id]
        subset = subset[subset[YEAR_COL] == year]
        fig = None
        try:
            config = settings.config_for(variable, year=year, title=str(site_id))
            fig = render_depth_time_profile(subset, variable, config)
            if output_dir is not None:
                result.saved.append(save_figure(fig, profile_path(output_dir, site_id, year, name)))
        except Exception as e:
            result.failures.append(RenderFailure(site_id=str(site_id), year=year, variable=name, error=str(e)))
            logger.error("Error rendering %s %d %s: %s", site_id, year, name, e)
            continue
        finally:
            if fig is not None:
                plt.close(fig)

        result.rendered.append((str(site_id), year, name))
        if subset.empty:
            result.empty.append((str(site_id), year, name))
            logger.debug("No observations for %s in %d", site_id, year)

    return result
