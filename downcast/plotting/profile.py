"""Depth-vs-date scatter plots coloured by one measured variable.

One call, one figure. Points are drawn raw at (sample date, depth); there is
no gridding or interpolation between casts. Rows whose variable is null are
still drawn, in the configured missing colour. Uses the Agg backend so no
display is needed; saving and closing is left to the caller.
"""

from __future__ import annotations

from typing import Iterable

import matplotlib

matplotlib.use("Agg")

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.cm import ScalarMappable
from matplotlib.colors import Colormap, Normalize, to_rgba
from matplotlib.figure import Figure
from matplotlib.lines import Line2D

from downcast.config import DATE_COL, DEPTH_COL, PROFILE_FIGSIZE
from downcast.harmonize.variables import get_axis_label
from downcast.models.core import MeasuredVariable, Observation, ProfileRenderConfig, as_frame


def resolve_colormap(palette: str, direction: int = 1) -> Colormap:
    """Colormap from a matplotlib or seaborn palette name, reversed when direction is -1."""
    cmap = sns.color_palette(palette, as_cmap=True)
    if not isinstance(cmap, Colormap):
        raise ValueError(f"Palette {palette!r} cannot be used as a continuous colour scale")
    return cmap.reversed() if direction == -1 else cmap


def resolve_norm(domain: tuple[float, float] | None, values: pd.Series) -> Normalize | None:
    """Clamp to an explicit domain, else fit to the values present.

    Returns None when there is neither a domain nor any valid value.
    """
    if domain is not None:
        return Normalize(vmin=domain[0], vmax=domain[1], clip=True)
    valid = values.dropna()
    if valid.empty:
        return None
    return Normalize(vmin=float(valid.min()), vmax=float(valid.max()), clip=True)


def point_colors(
    values: pd.Series,
    cmap: Colormap,
    norm: Normalize | None,
    missing_color: str,
) -> np.ndarray:
    """RGBA per value: palette colour for valid values, ``missing_color`` for nulls."""
    colors = np.tile(np.asarray(to_rgba(missing_color)), (len(values), 1))
    valid = values.notna().to_numpy()
    if norm is not None and valid.any():
        colors[valid] = cmap(norm(values.to_numpy()[valid].astype(float)))
    return colors


def render_depth_time_profile(
    observations: pd.DataFrame | Iterable[Observation],
    variable: MeasuredVariable | str,
    config: ProfileRenderConfig | None = None,
) -> Figure:
    """Scatter of depth (inverted y) against sample date, coloured by ``variable``.

    All observations are assumed to belong to one site and one year; no
    filtering happens here. Empty input gives an empty, valid plot. Rows
    without a depth or a date have no position and are not drawn.

    Raises
    ------
    InvalidVariable
        If ``variable`` is not a supported measured variable.
    """
    var = MeasuredVariable.parse(variable)
    config = config or ProfileRenderConfig()
    cmap = resolve_colormap(config.palette, config.direction)

    df = as_frame(observations)
    if df.empty:
        df = pd.DataFrame(columns=[DATE_COL, DEPTH_COL, var.value])

    dates = pd.to_datetime(df[DATE_COL], errors="coerce") if DATE_COL in df.columns else pd.Series(pd.NaT, index=df.index)
    depth = pd.to_numeric(df[DEPTH_COL], errors="coerce") if DEPTH_COL in df.columns else pd.Series(np.nan, index=df.index)
    if var.value in df.columns:
        values = pd.to_numeric(df[var.value], errors="coerce")
    else:
        values = pd.Series(np.nan, index=df.index)

    placed = (dates.notna() & depth.notna()).to_numpy()
    dates, depth, values = dates[placed], depth[placed], values[placed]

    norm = resolve_norm(config.domain, values)
    colors = point_colors(values, cmap, norm, config.missing_color)

    fig, ax = plt.subplots(figsize=PROFILE_FIGSIZE)

    if len(depth):
        x = mdates.date2num(dates.to_numpy())
        ax.scatter(x, depth.to_numpy(dtype=float), c=colors, s=config.point_size, edgecolors="none")

    locator = mdates.AutoDateLocator()
    ax.xaxis.set_major_locator(locator)
    ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(locator))

    if config.depth_limits is not None:
        top, bottom = config.depth_limits
        ax.set_ylim(bottom, top)
    else:
        ax.invert_yaxis()

    ax.set_xlabel("Sample date")
    ax.set_ylabel("Depth [m]")
    ax.set_title(config.title)
    ax.grid(alpha=0.3)

    if norm is not None:
        fig.colorbar(ScalarMappable(norm=norm, cmap=cmap), ax=ax, label=get_axis_label(var))

    if values.isna().any():
        handle = Line2D([], [], marker="o", linestyle="none", markersize=5,
                        markerfacecolor=config.missing_color, markeredgecolor="none")
        ax.legend([handle], ["no value"], loc="lower right", fontsize=8)

    fig.tight_layout()
    return fig
