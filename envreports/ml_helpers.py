"""Random-forest regression training, tuning and evaluation wrappers."""
import logging

import numpy as np
import pandas as pd
import streamlit as st
from sklearn.ensemble import RandomForestRegressor
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score
from sklearn.model_selection import GridSearchCV, KFold, train_test_split

from envreports.constants import RANDOM_SEED, RF_CV_FOLDS, RF_PARAM_GRID

logger = logging.getLogger(__name__)


def prepare_regression_data(df, features, target, test_size=0.2, seed=RANDOM_SEED):
    """Prepare data for regression: drop incomplete rows and split."""
    clean = df[features + [target]].dropna()
    X = clean[features]
    y = clean[target]

    X_train, X_test, y_train, y_test = train_test_split(
        X, y, test_size=test_size, random_state=seed
    )
    return X_train, X_test, y_train, y_test


def regression_metrics(y_true, y_pred):
    """Compute regression metrics."""
    mse = mean_squared_error(y_true, y_pred)
    return {
        "mse": mse,
        "rmse": np.sqrt(mse),
        "mae": mean_absolute_error(y_true, y_pred),
        "r2": r2_score(y_true, y_pred),
    }


def tune_random_forest(X, y, param_grid=None, cv=RF_CV_FOLDS, seed=RANDOM_SEED, n_jobs=-1):
    """Grid-search a RandomForestRegressor with shuffled K-fold CV.

    Scored on negative MSE and refit on the best parameters; returns the fitted
    GridSearchCV.
    """
    param_grid = param_grid or RF_PARAM_GRID
    search = GridSearchCV(
        RandomForestRegressor(random_state=seed),
        param_grid=param_grid,
        cv=KFold(n_splits=cv, shuffle=True, random_state=seed),
        scoring="neg_mean_squared_error",
        n_jobs=n_jobs,
        refit=True,
    )
    search.fit(X, y)
    logger.info("Best random forest params %s (CV RMSE %.4f)",
                search.best_params_, np.sqrt(-search.best_score_))
    return search


def cv_results_frame(search):
    """Tidy table of grid-search results: one row per parameter combination."""
    results = pd.DataFrame(search.cv_results_)
    # param_* columns keep None (e.g. max_depth) instead of coercing to NaN
    param_cols = [c for c in results.columns if c.startswith("param_")]
    params = results[param_cols].rename(columns=lambda c: c[len("param_"):])
    table = params.assign(
        mean_rmse=np.sqrt(-results["mean_test_score"]),
        std_mse=results["std_test_score"],
        rank=results["rank_test_score"],
    )
    return table.sort_values("rank").reset_index(drop=True)


def feature_importance_frame(model, features):
    """Impurity-based importances sorted from most to least important."""
    return (
        pd.DataFrame({"feature": features, "importance": model.feature_importances_})
        .sort_values("importance", ascending=False)
        .reset_index(drop=True)
    )


def back_transform(values):
    """Undo the log1p target transform; burned area in hectares, never negative."""
    return np.clip(np.expm1(np.asarray(values, dtype=float)), 0, None)


@st.cache_resource
def train_model(model_class, X_train, y_train, **kwargs):
    """Train and cache a model."""
    model = model_class(**kwargs)
    model.fit(X_train, y_train)
    return model
