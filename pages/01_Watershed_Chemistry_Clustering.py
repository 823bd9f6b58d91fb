"""Report A: Watershed Chemistry -- hierarchical clustering of stream sites."""
import streamlit as st
import pandas as pd
import plotly.express as px
from scipy.cluster.hierarchy import cophenet
from scipy.spatial.distance import pdist

from envreports.data_loader import (
    MissingColumnsError, load_water_data, sidebar_site_filter, site_profiles,
)
from envreports.hierarchical import InvalidInputError, cluster_frame
from envreports.plotting import apply_common_layout, dendrogram_figure, heatmap_chart
from envreports.stats_helpers import (
    correlation_matrix, missing_report, standardize, summary_table,
)
from envreports.constants import (
    LINKAGE_COLORS, LINKAGE_METHODS, WATER_DATA_PATH, WATER_FEATURES, WATER_LABELS,
    WATER_SITE_COL,
)
from envreports.ui_components import (
    code_example, concept_box, configure_logging, data_error, formula_box,
    insight_box, report_header, takeaways, warning_box,
)

configure_logging()

# ── Page config ──────────────────────────────────────────────────────────────
report_header("Watershed Chemistry: Which Streams Look Alike?", subtitle="Report A")
st.markdown(
    "Every stream carries a chemical fingerprint of the rock, soil and rain that "
    "feed it. Here we average each sampling site's chemistry, put every analyte on "
    "the same scale, and let **agglomerative hierarchical clustering** group the "
    "sites whose fingerprints are closest."
)

# ── Load data ────────────────────────────────────────────────────────────────
try:
    df = load_water_data()
except (FileNotFoundError, MissingColumnsError) as exc:
    data_error(
        exc,
        f"Expected a water-chemistry CSV at {WATER_DATA_PATH} "
        "(override with the WATERSHED_DATA_PATH environment variable).",
    )
filt = sidebar_site_filter(df)
features = [f for f in WATER_FEATURES if f in filt.columns]

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 1 -- The Data
# ══════════════════════════════════════════════════════════════════════════════
st.header("1. The Data")

col1, col2, col3 = st.columns(3)
col1.metric("Samples", f"{len(filt):,}")
col2.metric("Sites", filt[WATER_SITE_COL].nunique())
col3.metric("Analytes", len(features))

st.dataframe(filt.head(20), use_container_width=True)

st.subheader("Missing Values")
st.markdown(
    "The raw file marks a missing measurement with **-999**. Left alone, that "
    "sentinel would drag every mean toward a physically impossible value, so it "
    "is converted to a proper missing marker on load."
)
st.dataframe(missing_report(filt[features]), use_container_width=True)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 2 -- Summary Statistics
# ══════════════════════════════════════════════════════════════════════════════
st.header("2. Summary Statistics")

st.dataframe(
    summary_table(filt, features, labels=WATER_LABELS).round(3),
    use_container_width=True,
)

insight_box(
    "Major ions were reported in µeq/L and have been converted to mg/L using "
    "their equivalent weights. Specific conductance sits in the hundreds while "
    "nitrate sits below one, which is exactly why we standardize before "
    "measuring distances."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 3 -- Site Profiles
# ══════════════════════════════════════════════════════════════════════════════
st.header("3. Site Chemistry Profiles")

profiles = site_profiles(filt, features)
dropped = filt[WATER_SITE_COL].nunique() - len(profiles)
if dropped:
    st.caption(f"{dropped} site(s) excluded because at least one analyte was never measured.")

if len(profiles) < 2:
    st.warning("At least two sites with complete profiles are needed to cluster. Adjust the site filter.")
    st.stop()

scaled = standardize(profiles, features)

formula_box(
    "Standardization",
    r"z_{s,f} = \frac{\bar{x}_{s,f} - \mu_f}{\sigma_f}",
    "Each site's mean for analyte f, centred and scaled across sites so every "
    "analyte contributes equally to the distance."
)

st.plotly_chart(
    heatmap_chart(
        scaled.rename(columns=WATER_LABELS),
        x_label="Analyte", y_label="Site",
        title="Standardized Site Profiles", height=max(350, 28 * len(scaled)),
    ),
    use_container_width=True,
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 4 -- Dendrogram
# ══════════════════════════════════════════════════════════════════════════════
st.header("4. Dendrogram")

concept_box(
    "Agglomerative Clustering",
    "1. Start with every site as its own cluster<br>"
    "2. Merge the two closest clusters<br>"
    "3. Recompute the distance from the new cluster to every other cluster<br>"
    "4. Repeat until one cluster remains<br><br>"
    "<b>Complete</b> linkage measures the farthest pair of sites between two "
    "clusters, <b>single</b> the nearest pair, <b>average</b> the mean over all pairs."
)

linkage_method = st.selectbox("Linkage method", LINKAGE_METHODS, index=0, key="ws_linkage")

try:
    tree = cluster_frame(scaled, linkage=linkage_method)
except InvalidInputError as exc:
    st.error(f"Clustering failed: {exc}")
    st.stop()

st.plotly_chart(
    dendrogram_figure(
        tree, scaled.values,
        title=f"Site Dendrogram ({linkage_method.title()} Linkage)",
    ),
    use_container_width=True,
)

merge_table = pd.DataFrame([
    {
        "Step": step + 1,
        "Height": round(event.height, 3),
        "Size": event.size,
        "Sites": ", ".join(tree.labels[i] for i in event.members),
    }
    for step, event in enumerate(tree.events)
])
with st.expander("Merge sequence"):
    st.dataframe(merge_table, use_container_width=True, hide_index=True)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 5 -- Cutting the Tree
# ══════════════════════════════════════════════════════════════════════════════
st.header("5. Cutting the Tree into Groups")

cut_mode = st.radio("Cut by", ["Number of groups", "Merge height"], horizontal=True, key="ws_cut_mode")
if cut_mode == "Number of groups":
    max_k = min(10, len(scaled))
    n_groups = st.slider("Number of groups", 1, max_k, min(3, max_k), 1, key="ws_k")
    groups = tree.cut(n_groups)
else:
    top = float(max(tree.heights)) or 1.0
    cut_at = st.slider("Cut height", 0.0, top, round(0.7 * top, 2), key="ws_h")
    groups = tree.cut_height(cut_at)
    st.caption(f"{groups.nunique()} group(s) joined at or below height {cut_at:.2f}.")

col_a, col_b = st.columns([1, 2])
with col_a:
    st.dataframe(
        groups.rename("Group").rename_axis("Site").reset_index().sort_values(["Group", "Site"]),
        use_container_width=True, hide_index=True,
    )
with col_b:
    group_means = profiles.join(groups).groupby("cluster")[features].mean()
    group_means.index = [f"Group {g}" for g in group_means.index]
    st.plotly_chart(
        heatmap_chart(
            standardize(group_means, features).rename(columns=WATER_LABELS)
            if len(group_means) > 1 else group_means.rename(columns=WATER_LABELS),
            x_label="Analyte", y_label="Group",
            title="Group Mean Chemistry", height=350,
        ),
        use_container_width=True,
    )

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 6 -- Linkage Comparison
# ══════════════════════════════════════════════════════════════════════════════
st.header("6. Comparing Linkage Rules")

st.markdown(
    "The **cophenetic correlation** compares the distance at which two sites "
    "first share a cluster with their actual distance. Closer to 1 means the "
    "dendrogram is a more faithful summary of the raw distances."
)

raw_distances = pdist(scaled.values)
comparison = []
for method in LINKAGE_METHODS:
    t = cluster_frame(scaled, linkage=method)
    coph_corr, _ = cophenet(t.to_linkage_matrix(), raw_distances)
    comparison.append({
        "Linkage": method,
        "Final Height": t.heights[-1],
        "Cophenetic Correlation": coph_corr,
    })
comparison_df = pd.DataFrame(comparison)

fig_comp = px.bar(
    comparison_df, x="Linkage", y="Cophenetic Correlation", color="Linkage",
    color_discrete_map=LINKAGE_COLORS, text_auto=".3f",
)
apply_common_layout(fig_comp, title="Cophenetic Correlation by Linkage", height=380)
st.plotly_chart(fig_comp, use_container_width=True)
st.dataframe(comparison_df.round(3), use_container_width=True, hide_index=True)

warning_box(
    "Single linkage chains: one intermediate site can pull two otherwise distinct "
    "groups together at a low height. Complete linkage resists chaining but is "
    "sensitive to a single outlying site."
)

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 7 -- Analyte Correlations
# ══════════════════════════════════════════════════════════════════════════════
st.header("7. Which Analytes Move Together?")

corr = correlation_matrix(profiles[features]).rename(index=WATER_LABELS, columns=WATER_LABELS)
st.plotly_chart(
    heatmap_chart(corr, title="Correlation Between Site Means", height=550),
    use_container_width=True,
)

insight_box(
    "Strongly correlated analytes (calcium, magnesium and conductance often move "
    "together with bedrock weathering) effectively get extra weight in the "
    "Euclidean distance. Keep that in mind when reading the dendrogram."
)

code_example("""
from envreports.data_loader import read_water_chemistry, site_profiles
from envreports.stats_helpers import standardize
from envreports.hierarchical import cluster_frame

df = read_water_chemistry("water_chemistry.csv")
profiles = site_profiles(df, features)
tree = cluster_frame(standardize(profiles), linkage="complete")

for event in tree.events:
    print(event.left, event.right, round(event.height, 3))

groups = tree.cut(3)
""")

# ══════════════════════════════════════════════════════════════════════════════
# SECTION 8 -- Takeaways
# ══════════════════════════════════════════════════════════════════════════════
st.divider()

takeaways([
    "Sentinel values such as -999 must become missing values before any averaging.",
    "Standardize analytes first; otherwise conductance alone decides the clustering.",
    "The dendrogram records every merge and its height; cutting it at k groups is a separate, later choice.",
    "Complete linkage favours compact groups, single linkage follows chains of similar sites.",
    "Cophenetic correlation is a quick check of how well a dendrogram preserves the original distances.",
])
