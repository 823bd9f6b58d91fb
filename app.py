"""Watershed & Wildfire Analysis Reports -- Main Entry Point."""
import os

import streamlit as st

from envreports.constants import FIRE_DATA_PATH, WATER_DATA_PATH
from envreports.ui_components import configure_logging

configure_logging()

st.set_page_config(
    page_title="Watershed & Wildfire Reports",
    page_icon="🌲",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.title("Watershed & Wildfire Analysis Reports")
st.subheader("Two small, self-contained environmental data studies")

st.markdown("""
Each report is a straight line from a CSV file to a conclusion: load, clean,
summarize, fit one model, and look hard at the result.

### The Reports

- **Report A: Watershed Chemistry.** Stream-water samples from a set of sampling
  sites are averaged per site, standardized, and grouped with agglomerative
  hierarchical clustering. Which streams share a chemical fingerprint, and how
  much does the answer depend on the linkage rule?
- **Report B: Forest Fires.** Fire-weather indices and meteorology for each
  recorded fire feed a random forest that predicts log burned area, tuned with
  cross-validated grid search.

Pick a report from the sidebar.
""")

st.subheader("Data Files")
datasets = {
    "Watershed chemistry": (WATER_DATA_PATH, "WATERSHED_DATA_PATH"),
    "Forest fires": (FIRE_DATA_PATH, "FOREST_FIRES_DATA_PATH"),
}
for name, (path, env_var) in datasets.items():
    if os.path.exists(path):
        st.success(f"**{name}**: `{path}`")
    else:
        st.warning(f"**{name}**: `{path}` not found. Set `{env_var}` to point elsewhere.")

st.caption("The forest-fires CSV can be downloaded with `python fetch_data.py`.")
