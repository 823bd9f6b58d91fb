"""Reusable statistics computation helpers."""
import numpy as np
import pandas as pd
from scipy import stats
from sklearn.preprocessing import StandardScaler


def descriptive_stats(series):
    """Compute comprehensive descriptive statistics for a numeric series."""
    series = series.dropna()
    return {
        "count": len(series),
        "mean": series.mean(),
        "median": series.median(),
        "std": series.std(),
        "min": series.min(),
        "max": series.max(),
        "q25": series.quantile(0.25),
        "q75": series.quantile(0.75),
        "iqr": series.quantile(0.75) - series.quantile(0.25),
        "skewness": series.skew(),
        "kurtosis": series.kurtosis(),
    }


def summary_table(df, columns, labels=None):
    """One row of descriptive statistics per column."""
    rows = {}
    for col in columns:
        name = (labels or {}).get(col, col)
        rows[name] = descriptive_stats(df[col])
    return pd.DataFrame(rows).T


def missing_report(df):
    """Count and percent of missing values per column, largest first."""
    counts = df.isna().sum()
    report = pd.DataFrame({
        "missing": counts,
        "percent": (counts / max(len(df), 1) * 100).round(2),
    })
    return report.sort_values("missing", ascending=False)


def standardize(df, columns=None):
    """Scale columns to zero mean and unit variance, keeping index and names."""
    columns = list(columns) if columns is not None else df.select_dtypes(include=[np.number]).columns.tolist()
    scaler = StandardScaler()
    scaled = scaler.fit_transform(df[columns])
    return pd.DataFrame(scaled, index=df.index, columns=columns)


def normality_test(data):
    """Run Shapiro-Wilk test (on sample if too large) and return stat, p-value."""
    data = np.asarray(data)
    if len(data) > 5000:
        data = np.random.RandomState(42).choice(data, 5000, replace=False)
    stat, p = stats.shapiro(data)
    return stat, p


def correlation_matrix(df, method="pearson"):
    """Compute correlation matrix for numeric columns."""
    numeric = df.select_dtypes(include=[np.number])
    return numeric.corr(method=method)
