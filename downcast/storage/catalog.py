"""Load an exported sonde table into the canonical observation frame."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from downcast.config import (
    CENSORED_FLAGS,
    DATE_COL,
    DEPTH_COL,
    HOUR_COL,
    MONTH_COL,
    SITE_COL,
    TIME_COL,
    TURBIDITY_CENSORED_COL,
    TURBIDITY_FLAG_COL,
    YEAR_COL,
)
from downcast.harmonize.variables import get_column_aliases
from downcast.models.core import MeasuredVariable

logger = logging.getLogger(__name__)


def _read_table(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Observation table not found at {path}")
    suffix = path.suffix.lower()
    if suffix == ".parquet":
        return pd.read_parquet(path, engine="pyarrow")
    if suffix == ".csv":
        return pd.read_csv(path)
    raise ValueError(f"Unsupported table format {suffix!r} for {path}; expected .csv or .parquet")


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename exported column names to canonical ones; canonical names win on clashes."""
    aliases = get_column_aliases()
    rename = {c: aliases[c] for c in df.columns if c in aliases and aliases[c] not in df.columns}
    if rename:
        logger.debug("Renaming columns: %s", rename)
    return df.rename(columns=rename)


def resolve_turbidity_censoring(df: pd.DataFrame) -> pd.DataFrame:
    """Turn the turbidity flag column into a null value plus a boolean sidecar.

    Left-censored readings (below detection limit) are not usable as values,
    so their turbidity becomes NaN and ``turbidity_censored`` is True.
    """
    df = df.copy()
    if TURBIDITY_FLAG_COL not in df.columns:
        df[TURBIDITY_CENSORED_COL] = False
        return df

    flags = df[TURBIDITY_FLAG_COL].fillna("").astype(str).str.strip()
    censored = flags.isin(CENSORED_FLAGS)
    df[TURBIDITY_CENSORED_COL] = censored
    if "turbidity" in df.columns:
        df.loc[censored, "turbidity"] = float("nan")
    return df.drop(columns=[TURBIDITY_FLAG_COL])


def prepare_observations(df: pd.DataFrame) -> pd.DataFrame:
    """Clean a raw table: canonical names, parsed dates, derived year/month/hour, numeric values."""
    df = normalize_columns(df)
    missing = [c for c in (SITE_COL, DATE_COL) if c not in df.columns]
    if missing:
        raise ValueError(f"Observation table is missing required column(s): {', '.join(missing)}")

    no_site = df[SITE_COL].isna() | df[SITE_COL].astype(str).str.strip().eq("")
    n_no_site = int(no_site.sum())
    if n_no_site:
        logger.info("Dropping %d rows without a site identifier", n_no_site)
        df = df.loc[~no_site].copy()

    df[SITE_COL] = df[SITE_COL].astype(str).str.strip()
    df[DATE_COL] = pd.to_datetime(df[DATE_COL], errors="coerce").dt.normalize()
    n_bad = int(df[DATE_COL].isna().sum())
    if n_bad:
        logger.info("Dropping %d rows with unparseable sample dates", n_bad)
        df = df.dropna(subset=[DATE_COL]).copy()

    df[YEAR_COL] = df[DATE_COL].dt.year.astype("int64")
    df[MONTH_COL] = df[DATE_COL].dt.month.astype("int64")
    if TIME_COL in df.columns:
        raw = df[TIME_COL].astype(str).str.strip()
        times = pd.to_datetime(raw, format="%H:%M:%S", errors="coerce")
        times = times.fillna(pd.to_datetime(raw, format="%H:%M", errors="coerce"))
        df[HOUR_COL] = times.dt.hour

    for col in [DEPTH_COL, *MeasuredVariable.names()]:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
        else:
            df[col] = float("nan")

    return resolve_turbidity_censoring(df).reset_index(drop=True)


def load_observations(path: Path) -> pd.DataFrame:
    """Load a CSV or Parquet export as a cleaned observation frame."""
    df = prepare_observations(_read_table(Path(path)))
    logger.info("Loaded %d observations at %d sites from %s", len(df), df[SITE_COL].nunique(), path)
    return df
