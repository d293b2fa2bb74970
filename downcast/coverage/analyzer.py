"""Sampling coverage analysis.

Pure analysis: no file I/O, no matplotlib. Takes an observation table (or a
sequence of Observation) and returns counts as pandas objects.

A sampling event is one (site, date) group. It counts as successful when
more than one of its rows carries a depth; a single reading is noise, not a
profile.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import pandas as pd

from downcast.config import DATE_COL, DEPTH_COL, MIN_DEPTH_READINGS, SITE_COL, YEAR_COL
from downcast.models.core import Observation, as_frame

ObservationInput = pd.DataFrame | Iterable[Observation]


def _valid_depth(df: pd.DataFrame) -> pd.Series:
    """Boolean mask of rows with a usable depth; an absent column means none."""
    if DEPTH_COL not in df.columns:
        return pd.Series(False, index=df.index)
    return pd.to_numeric(df[DEPTH_COL], errors="coerce").notna()


def observation_years(df: pd.DataFrame) -> pd.Series:
    """The year of each row, derived from the sample date when there is no year column."""
    if YEAR_COL in df.columns:
        return df[YEAR_COL]
    return pd.to_datetime(df[DATE_COL], errors="coerce").dt.year


def _empty_counts(keys: Sequence[str]) -> pd.Series:
    if len(keys) == 1:
        index = pd.Index([], name=keys[0])
    else:
        index = pd.MultiIndex.from_arrays([[] for _ in keys], names=list(keys))
    return pd.Series([], index=index, dtype="int64", name="n_events")


def event_succeeded(observations: ObservationInput) -> bool:
    """True iff more than one observation in the group has a depth."""
    df = as_frame(observations)
    return int(_valid_depth(df).sum()) >= MIN_DEPTH_READINGS


def compute_coverage(
    observations: ObservationInput,
    group_keys: Sequence[str] = (SITE_COL, YEAR_COL, DATE_COL),
    by: Sequence[str] | None = None,
) -> pd.Series:
    """Count successful finest-grain groups per coarser key.

    Parameters
    ----------
    observations : observation table or sequence of Observation.
    group_keys : finest grouping, e.g. ``("site_id", "year", "sample_date")``.
        Each group is one candidate sampling event.
    by : coarser grouping to count over. Defaults to ``group_keys`` without its
        last element. Must be a subset of ``group_keys``.

    Returns
    -------
    pd.Series of int named ``n_events``, indexed by ``by`` (MultiIndex when it
    has several fields) and sorted. Every coarser key present in the input is
    listed, including those with zero successful events.
    """
    group_keys = list(group_keys)
    by = list(by) if by is not None else group_keys[:-1]
    if not group_keys or not by:
        raise ValueError("compute_coverage needs at least one finest and one coarser key")
    missing = [k for k in by if k not in group_keys]
    if missing:
        raise ValueError(f"Coarser keys {missing} are not part of group_keys {group_keys}")

    df = as_frame(observations)
    if df.empty:
        return _empty_counts(by)

    key_series = [observation_years(df).rename(YEAR_COL) if k == YEAR_COL else df[k] for k in group_keys]
    n_depths = _valid_depth(df).groupby(key_series, sort=True, dropna=False).sum()
    succeeded = n_depths >= MIN_DEPTH_READINGS

    level = by[0] if len(by) == 1 else by
    counts = succeeded.groupby(level=level, sort=True, dropna=False).sum().astype("int64")
    return counts.rename("n_events")


def total_coverage(observations: ObservationInput) -> pd.Series:
    """Successful sampling dates per site across all years."""
    return compute_coverage(observations, group_keys=(SITE_COL, DATE_COL), by=(SITE_COL,))


def select_preferred_sites(observations: ObservationInput, threshold: int) -> set[str]:
    """Sites whose total number of successful sampling dates exceeds ``threshold``.

    An empty result means no site is dense enough for depth-time review.
    """
    totals = total_coverage(observations)
    return set(totals[totals > threshold].index)


def restrict_to_sites_and_years(
    observations: ObservationInput,
    sites: Iterable[str],
    min_year: int,
) -> pd.DataFrame:
    """Rows at one of ``sites`` whose year is strictly after ``min_year``.

    Relative row order is kept; the input is not modified.
    """
    df = as_frame(observations)
    mask = df[SITE_COL].isin(set(sites)) & (observation_years(df) > min_year)
    return df.loc[mask].copy()


def coverage_table(observations: ObservationInput) -> pd.DataFrame:
    """Site (rows) x year (columns) table of successful sampling dates, zero-filled."""
    counts = compute_coverage(observations, group_keys=(SITE_COL, YEAR_COL, DATE_COL))
    if counts.empty:
        return pd.DataFrame(dtype="int64")
    table = counts.unstack(YEAR_COL, fill_value=0).astype("int64")
    table.columns.name = YEAR_COL
    return table
