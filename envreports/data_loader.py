"""Cached data loading and cleaning for the watershed and forest-fire datasets."""
import logging

import numpy as np
import pandas as pd
import streamlit as st

from envreports.constants import (
    DAY_ORDER, EQUIVALENT_WEIGHTS, FIRE_COLUMNS, FIRE_DATA_PATH, MISSING_SENTINEL,
    MONTH_ORDER, SEASONS, WATER_COLUMN_RENAMES, WATER_DATA_PATH, WATER_DATE_COL,
    WATER_FEATURES, WATER_SITE_COL,
)

logger = logging.getLogger(__name__)


class MissingColumnsError(ValueError):
    """Raised when a CSV lacks columns a report depends on."""

    def __init__(self, source, missing):
        self.source = source
        self.missing = sorted(missing)
        super().__init__(f"{source} is missing required columns: {', '.join(self.missing)}")


def _require_columns(df, required, source):
    missing = set(required) - set(df.columns)
    if missing:
        raise MissingColumnsError(source, missing)


def read_water_chemistry(path):
    """Read raw water-chemistry samples and return a tidy DataFrame.

    Renames raw columns, turns the -999 sentinel into NaN, converts major ions
    from µeq/L to mg/L and drops rows without a site.
    """
    raw = pd.read_csv(path)
    _require_columns(raw, ["SiteName"], path)

    df = raw.rename(columns=WATER_COLUMN_RENAMES)
    keep = [WATER_SITE_COL] + [c for c in [WATER_DATE_COL] + WATER_FEATURES if c in df.columns]
    df = df[keep].copy()

    # Coerce first: text columns ("<0.5" detection limits) hide the sentinel as a string
    features = [c for c in WATER_FEATURES if c in df.columns]
    df[features] = df[features].apply(pd.to_numeric, errors="coerce")
    df[features] = df[features].mask(df[features] == MISSING_SENTINEL)

    for col, eq_wt in EQUIVALENT_WEIGHTS.items():
        if col in df.columns:
            df[col] = df[col] * eq_wt / 1000.0

    if WATER_DATE_COL in df.columns:
        df[WATER_DATE_COL] = pd.to_datetime(df[WATER_DATE_COL], errors="coerce")

    df[WATER_SITE_COL] = df[WATER_SITE_COL].astype("string").str.strip()
    df = df[df[WATER_SITE_COL].notna() & (df[WATER_SITE_COL] != "")]
    df[WATER_SITE_COL] = df[WATER_SITE_COL].astype(str)

    logger.info("Loaded %d water samples from %d sites (%s)",
                len(df), df[WATER_SITE_COL].nunique(), path)
    return df.reset_index(drop=True)


def site_profiles(df, features):
    """Mean value of each feature per site, excluding sites with any gap."""
    profiles = df.groupby(WATER_SITE_COL)[features].mean()
    incomplete = profiles.index[profiles.isna().any(axis=1)].tolist()
    if incomplete:
        logger.warning("Dropping %d site(s) with missing features: %s",
                       len(incomplete), ", ".join(incomplete))
    return profiles.dropna()


def read_forest_fires(path):
    """Read the forest-fires table and add calendar and target columns."""
    df = pd.read_csv(path)
    _require_columns(df, FIRE_COLUMNS, path)

    df["month"] = pd.Categorical(df["month"].str.strip().str.lower(),
                                 categories=MONTH_ORDER, ordered=True)
    df["day"] = pd.Categorical(df["day"].str.strip().str.lower(),
                               categories=DAY_ORDER, ordered=True)
    df["month_num"] = df["month"].cat.codes + 1
    df["season"] = df["month_num"].map(SEASONS)

    df["area"] = pd.to_numeric(df["area"], errors="coerce")
    df = df.dropna(subset=["area"]).copy()
    df["burned"] = df["area"] > 0
    df["log_area"] = np.log1p(df["area"])

    logger.info("Loaded %d fire records, %d with burned area (%s)",
                len(df), int(df["burned"].sum()), path)
    return df.reset_index(drop=True)


@st.cache_data
def load_water_data(path=WATER_DATA_PATH):
    """Load the configured water-chemistry CSV."""
    return read_water_chemistry(path)


@st.cache_data
def load_fire_data(path=FIRE_DATA_PATH):
    """Load the configured forest-fires CSV."""
    return read_forest_fires(path)


def sidebar_site_filter(df):
    """Render a sidebar site multiselect; return the filtered DataFrame."""
    sites = sorted(df[WATER_SITE_COL].unique())
    st.sidebar.header("Filters")
    selected = st.sidebar.multiselect("Sites", sites, default=sites, key="site_filter")
    return df[df[WATER_SITE_COL].isin(selected)].copy()


def sidebar_month_filter(df):
    """Render a sidebar month multiselect; return the filtered DataFrame."""
    months = [m for m in MONTH_ORDER if m in set(df["month"].astype(str))]
    st.sidebar.header("Filters")
    selected = st.sidebar.multiselect("Months", months, default=months, key="month_filter")
    return df[df["month"].astype(str).isin(selected)].copy()
