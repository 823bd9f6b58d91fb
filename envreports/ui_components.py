"""Shared UI components: report headers, callout boxes, takeaways."""
import logging

import streamlit as st

from envreports.constants import LOG_FORMAT, LOG_LEVEL


def configure_logging(level=LOG_LEVEL):
    """Set up root logging once per Streamlit process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def report_header(title, subtitle=None):
    """Render a report title with an optional caption."""
    if subtitle:
        st.caption(subtitle)
    st.title(title)
    st.divider()


def concept_box(title, content):
    """Render a highlighted concept/theory box."""
    st.markdown(f"""
<div style="background-color: #EBF5FB; padding: 20px; border-radius: 10px; border-left: 5px solid #2E86C1; margin: 10px 0;">
<h4 style="color: #2E86C1; margin-top: 0;">{title}</h4>
<p style="color: #1B4F72;">{content}</p>
</div>
""", unsafe_allow_html=True)


def formula_box(title, formula, explanation=""):
    """Render a formula with explanation."""
    st.markdown(f"**{title}**")
    st.latex(formula)
    if explanation:
        st.caption(explanation)


def insight_box(text):
    """Render a key insight callout."""
    st.info(f"**Key Insight:** {text}")


def warning_box(text):
    """Render a caveat box."""
    st.warning(f"**Caveat:** {text}")


def data_error(exc, hint):
    """Show a load failure and halt the page."""
    st.error(f"Could not load data: {exc}")
    st.caption(hint)
    st.stop()


def code_example(code, language="python"):
    """Render a collapsible code example."""
    with st.expander("Show Code"):
        st.code(code, language=language)


def takeaways(points):
    """Render key takeaways as a list."""
    st.subheader("Key Takeaways")
    for p in points:
        st.markdown(f"- {p}")
