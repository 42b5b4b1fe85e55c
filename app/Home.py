"""
Length-of-Stay Report - interactive rendering of the OLS report.
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from losreport.config import DATA_CONFIG, MODEL_CONFIG, get_available_data_path
from losreport.data.load import DataNotFoundError
from losreport.errors import LosReportError
from losreport.models.train import day_scale_metrics, exponentiate_metrics
from losreport.pipeline import run_report
from losreport.report import eda, figures
from losreport.report.render import APPROXIMATION_NOTE

# Page configuration
st.set_page_config(
    page_title="Hospital Length of Stay",
    page_icon="🏥",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #1f77b4;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #666;
        margin-bottom: 2rem;
    }
    .stMetric {
        background-color: #f8f9fa;
        padding: 1rem;
        border-radius: 8px;
    }
</style>
""", unsafe_allow_html=True)

st.markdown('<p class="main-header">🏥 Hospital Length of Stay Report</p>', unsafe_allow_html=True)
st.markdown('<p class="sub-header">OLS regression of log length of stay on admission, severity and capacity features</p>', unsafe_allow_html=True)


@st.cache_data
def get_report(path: str):
    """Run the report pipeline once per data file."""
    return run_report(path)


# Sidebar
st.sidebar.header("Data")
default_path = get_available_data_path() or ""
data_path = st.sidebar.text_input("Admissions CSV", value=default_path)

if not data_path:
    st.warning("No data file found. Run `python run.py generate` first.")
    st.stop()

try:
    result = get_report(data_path)
except (DataNotFoundError, LosReportError) as e:
    st.error(f"Report failed: {e}")
    st.stop()

raw, train = result.raw, result.train
evaluation = result.evaluation

st.sidebar.divider()
st.sidebar.info(f"{len(raw):,} admissions ({len(result.train):,} train / {len(result.test):,} test)")

# KPI Section
st.header("Test Set Performance")

col1, col2, col3, col4, col5 = st.columns(5)
col1.metric("R²", f"{evaluation.r2:.3f}")
col2.metric("Adjusted R²", f"{evaluation.adj_r2:.3f}")
col3.metric("MAE (log)", f"{evaluation.mae:.3f}")
col4.metric("MSE (log)", f"{evaluation.mse:.3f}")
col5.metric("RMSE (log)", f"{evaluation.rmse:.3f}")

st.divider()

tabs = st.tabs(["1. Exploration", "2. Encoding", "3. Model", "4. Evaluation"])

with tabs[0]:
    st.subheader("Distinct Values")
    overview = eda.categorical_overview(raw)
    cols = st.columns(2)
    for i, (col, table) in enumerate(overview.items()):
        with cols[i % 2]:
            st.markdown(f"**{col}**")
            st.dataframe(table, width="stretch")

    st.plotly_chart(figures.category_bar(raw, DATA_CONFIG.stay_column), width="stretch")

    st.subheader("Crosstabs")
    row_var = st.selectbox("Rows", [DATA_CONFIG.admission_column, DATA_CONFIG.severity_column], index=0)
    col_var = st.selectbox("Columns", [DATA_CONFIG.severity_column, DATA_CONFIG.stay_column, DATA_CONFIG.bed_grade_column], index=0)
    if row_var != col_var:
        table = eda.crosstab_table(raw, row_var, col_var, normalize=True)
        st.plotly_chart(figures.crosstab_heatmap(table, f"{col_var} by {row_var} (row %)"), width="stretch")

    st.subheader("Missing Values")
    st.dataframe(eda.missing_values_table(raw), width="stretch")

with tabs[1]:
    st.markdown(f"""
    **Encoding rules**, applied identically to training and testing rows:
    - `Stay_Days` bucket → midpoint in days (More than 100 Days → 105), then natural log
    - `Illness_Severity`: Minor → 1, Moderate → 2, Extreme → 3
    - `Type_of_Admission` → Emergency / Urgent / Trauma indicators (Trauma is the reference level)
    - missing `Bed_Grade` → training mean **{result.params.bed_grade_fill:.4f}**
    """)
    st.dataframe(train[MODEL_CONFIG.feature_columns + ["stay_midpoint", "log_stay_midpoint"]].head(100), width="stretch")

    st.subheader("Correlation with Log Stay")
    st.dataframe(eda.target_correlations(train).to_frame("correlation"), width="stretch")
    st.plotly_chart(figures.correlation_heatmap(eda.correlation_matrix(train)), width="stretch")

    x_var = st.selectbox("Scatter against stay", ["patient_visitors", "available_rooms", "bed_grade"], index=0)
    st.plotly_chart(figures.stay_scatter(train, x_var), width="stretch")

with tabs[2]:
    summary = result.model.summary()
    st.dataframe(summary.style.format("{:.4f}"), width="stretch")
    st.plotly_chart(figures.coefficient_plot(summary), width="stretch")
    st.caption("Intervals are estimate ± 1.96 × standard error (normal approximation).")

with tabs[3]:
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Days (recomputed on exp(predictions))**")
        st.dataframe(pd.Series(day_scale_metrics(evaluation, result.y_test), name="value"), width="stretch")
    with col2:
        st.markdown("**exp(metric) approximation**")
        st.dataframe(pd.Series(exponentiate_metrics(evaluation), name="value"), width="stretch")
    st.info(APPROXIMATION_NOTE)

    st.plotly_chart(figures.residual_histogram(evaluation.residuals), width="stretch")
    st.plotly_chart(figures.predicted_vs_observed(result.y_test, evaluation.predictions), width="stretch")
