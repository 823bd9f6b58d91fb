"""Report B: Forest Fires -- tuned random forest for burned area."""
import streamlit as st
import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestRegressor

from envreports.data_loader import MissingColumnsError, load_fire_data, sidebar_month_filter
from envreports.ml_helpers import (
    back_transform, cv_results_frame, feature_importance_frame, prepare_regression_data,
    regression_metrics, train_model, tune_random_forest,
)
from envreports.plotting import (
    cv_heatmap, heatmap_chart, histogram_chart, importance_chart, predicted_vs_actual_chart,
)
from envreports.stats_helpers import correlation_matrix, normality_test, summary_table
from envreports.constants import (
    FIRE_DATA_PATH, FIRE_FEATURES, FIRE_LABELS, FIRE_TARGET, RANDOM_SEED, RF_CV_FOLDS,
    RF_PARAM_GRID,
)
from envreports.ui_components import (
    code_example, concept_box, configure_logging, data_error, formula_box,
    insight_box, report_header, takeaways, warning_box,
)

configure_logging()

# ── Page config ──────────────────────────────────────────────────────────────
report_header("Forest Fires: Predicting Burned Area", subtitle="Report B")
st.markdown(
    "Can today's weather tell us how much forest will burn? This report fits a "
    "**random forest regressor** to the fire-weather indices and meteorology of "
    "each recorded fire, tunes it with **cross-validated grid search**, and is "
    "honest about how little signal there turns out to be."
)

# ── Load data ────────────────────────────────────────────────────────────────
try:
    df = load_fire_data()
except (FileNotFoundError, MissingColumnsError) as exc:
    data_error(
        exc,
        f"Expected the forest-fires CSV at {FIRE_DATA_PATH}. Run `python fetch_data.py` "
        "or set FOREST_FIRES_DATA_PATH.",
    )
filt = sidebar_month_filter(df)

if len(filt) < 5 * RF_CV_FOLDS:
    st.warning("Too few fires in the selected months to train and cross-validate. Widen the filter.")
    st.stop()

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 1 -- The Data
# ══════════════════════════════════════════════════════════════════════════════
st.header("1. The Data")

col1, col2, col3 = st.columns(3)
col1.metric("Fires", f"{len(filt):,}")
col2.metric("With Burned Area > 0", f"{filt['burned'].mean():.0%}")
col3.metric("Largest Fire (ha)", f"{filt['area'].max():,.1f}")

st.dataframe(filt.head(20), use_container_width=True)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 2 -- The Target
# ══════════════════════════════════════════════════════════════════════════════
st.header("2. A Very Skewed Target")

col_raw, col_log = st.columns(2)
with col_raw:
    st.plotly_chart(
        histogram_chart(filt, "area", title="Burned Area (ha)", labels=FIRE_LABELS),
        use_container_width=True,
    )
with col_log:
    st.plotly_chart(
        histogram_chart(filt, "log_area", title="log(1 + Burned Area)", labels=FIRE_LABELS),
        use_container_width=True,
    )

formula_box(
    "Log Transform",
    r"y = \log(1 + \text{area})",
    "Most fires burn (almost) nothing and a handful burn hundreds of hectares. "
    "The log pulls the tail in so a few huge fires do not dominate the squared error."
)

burned_only = filt.loc[filt["burned"]]
if len(burned_only) >= 3:
    _, p_raw = normality_test(burned_only["area"])
    _, p_log = normality_test(burned_only["log_area"])
    st.caption(
        f"Shapiro-Wilk on fires with burned area > 0: p = {p_raw:.2g} raw, "
        f"p = {p_log:.2g} after the log transform."
    )

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 3 -- Predictors
# ══════════════════════════════════════════════════════════════════════════════
st.header("3. Meteorological Predictors")

st.dataframe(
    summary_table(filt, FIRE_FEATURES + ["area"], labels=FIRE_LABELS).round(3),
    use_container_width=True,
)

corr = correlation_matrix(filt[FIRE_FEATURES + [FIRE_TARGET]])
st.plotly_chart(
    heatmap_chart(
        corr.rename(index=FIRE_LABELS, columns=FIRE_LABELS),
        title="Correlation Matrix", height=550,
    ),
    use_container_width=True,
)

target_corr = corr[FIRE_TARGET].drop(FIRE_TARGET).abs().max()
insight_box(
    f"No single predictor reaches an absolute correlation above **{target_corr:.2f}** "
    "with log burned area. Whatever the forest finds will be weak and non-linear."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 4 -- Baseline vs Tuned Random Forest
# ══════════════════════════════════════════════════════════════════════════════
st.header("4. Baseline vs Tuned Random Forest")

concept_box(
    "Grid Search with Cross-Validation",
    "Every combination of hyperparameters in the grid is scored by K-fold "
    "cross-validation on the training set only. The best combination is refit on "
    "the whole training set and judged once on the untouched test set."
)

X_train, X_test, y_train, y_test = prepare_regression_data(
    filt, FIRE_FEATURES, FIRE_TARGET, test_size=0.2, seed=RANDOM_SEED
)

baseline = train_model(
    RandomForestRegressor, X_train, y_train,
    n_estimators=100, random_state=RANDOM_SEED, n_jobs=-1,
)


@st.cache_resource
def _tuned_search(X, y):
    return tune_random_forest(X, y, param_grid=RF_PARAM_GRID, cv=RF_CV_FOLDS, seed=RANDOM_SEED)


with st.spinner("Running grid search..."):
    search = _tuned_search(X_train, y_train)
tuned = search.best_estimator_

results = []
for name, model in [("Baseline", baseline), ("Tuned", tuned)]:
    train_m = regression_metrics(y_train, model.predict(X_train))
    test_m = regression_metrics(y_test, model.predict(X_test))
    results.append({
        "Model": name,
        "Train RMSE": train_m["rmse"], "Test RMSE": test_m["rmse"],
        "Test MAE": test_m["mae"], "Test R²": test_m["r2"],
    })
results_df = pd.DataFrame(results)
st.dataframe(results_df.round(4), use_container_width=True, hide_index=True)

mean_baseline = regression_metrics(y_test, np.full(len(y_test), y_train.mean()))
st.caption(f"Predicting the training mean for every fire gives a test RMSE of {mean_baseline['rmse']:.4f}.")

st.subheader("Best Parameters")
st.json({k: (v if v is not None else "None") for k, v in search.best_params_.items()})

cv_table = cv_results_frame(search)
st.plotly_chart(
    cv_heatmap(cv_table, "max_depth", "min_samples_leaf"),
    use_container_width=True,
)
with st.expander("All grid-search results"):
    st.dataframe(cv_table.round(4), use_container_width=True, hide_index=True)

warning_box(
    "A tuned forest with a higher train score than test score is still overfitting "
    "the noise in small fires. Deeper trees and tiny leaves look great in-sample "
    "and buy little out-of-sample."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 5 -- Feature Importance
# ══════════════════════════════════════════════════════════════════════════════
st.header("5. What the Forest Uses")

importances = feature_importance_frame(tuned, FIRE_FEATURES)
st.plotly_chart(
    importance_chart(importances, labels=FIRE_LABELS, title="Tuned Forest Feature Importance"),
    use_container_width=True,
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 6 -- Predictions
# ══════════════════════════════════════════════════════════════════════════════
st.header("6. Predicted vs Actual")

y_pred = tuned.predict(X_test)
st.plotly_chart(predicted_vs_actual_chart(y_test, y_pred), use_container_width=True)

area_true = back_transform(y_test)
area_pred = back_transform(y_pred)
area_m = regression_metrics(area_true, area_pred)
col_a, col_b = st.columns(2)
col_a.metric("MAE (ha)", f"{area_m['mae']:.2f}")
col_b.metric("RMSE (ha)", f"{area_m['rmse']:.2f}")

insight_box(
    "Back in hectares the model is most useful for the many small fires and badly "
    "underestimates the rare large ones. Weather alone does not explain how big a "
    "fire gets."
)

code_example("""
from envreports.data_loader import read_forest_fires
from envreports.ml_helpers import prepare_regression_data, tune_random_forest

df = read_forest_fires("forestfires.csv")
X_train, X_test, y_train, y_test = prepare_regression_data(df, FIRE_FEATURES, "log_area")

search = tune_random_forest(X_train, y_train, cv=5)
print(search.best_params_)
print(search.best_estimator_.score(X_test, y_test))
""")

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 7 -- Takeaways
# ══════════════════════════════════════════════════════════════════════════════
st.divider()

takeaways([
    "Burned area is extremely right-skewed; model log(1 + area) and back-transform for reporting.",
    "Grid search must run on the training split only; the test split is scored once at the end.",
    "Compare against a predict-the-mean baseline before celebrating any RMSE.",
    "Random forest importances show which weather variables the trees split on, not causal drivers.",
])
