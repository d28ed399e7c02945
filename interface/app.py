# interface/app.py
"""
Supplier Price Intelligence - Main Application

Streamlit front-end: supplier file selection, rate/margin inputs, join strategy,
results table, executive summary, keyword search and report download.
All computation goes through the orchestrator and the session's engine.
"""

import tempfile
from pathlib import Path

import streamlit as st

from config import OUTPUT_ROOT, PipelineConfig
from domain.suppliers import DEFAULT_ANCHOR_SUPPLIER, Supplier
from engine.consolidation import JoinStrategy
from services.sync import SyncOrchestrator
from writers.excel_writer import export_catalog
from writers.frames import catalog_to_frame
from writers.palette import SUPPLIER_COLORS

JOIN_LABELS = {
    JoinStrategy.FULL_OUTER: "All products (full outer join)",
    JoinStrategy.ANCHOR: f"{DEFAULT_ANCHOR_SUPPLIER.label} catalog only",
}


class StreamlitListener:
    def __init__(self):
        self.bar = st.progress(0, text="Starting...")
        self.errors = []

    def on_progress(self, stage: str, percent: int) -> None:
        self.bar.progress(min(max(percent, 0), 100), text=stage)

    def on_error(self, stage: str, message: str) -> None:
        self.errors.append((stage, message))
        st.warning(f"⚠️ {stage}: {message}")

    def on_complete(self, result) -> None:
        self.bar.progress(100, text="Done")


# ============================================================================
# PAGE CONFIG
# ============================================================================
st.set_page_config(
    page_title="Price Intelligence",
    page_icon="💊",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ============================================================================
# SESSION STATE INITIALIZATION
# ============================================================================
if "config" not in st.session_state:
    st.session_state.config = PipelineConfig.from_env()
if "result" not in st.session_state:
    st.session_state.result = None

# ============================================================================
# SIDEBAR: CONFIGURATION
# ============================================================================
with st.sidebar:
    st.header("Configuration")
    rate = st.number_input(
        "Exchange rate (Bs per USD)",
        min_value=0.0,
        value=float(st.session_state.config.exchange_rate),
        step=0.01,
        format="%.4f",
    )
    margin = st.slider("Target margin %", 0.0, 100.0, float(st.session_state.config.margin_pct), 0.5)
    strategy = st.radio(
        "Catalog",
        list(JOIN_LABELS),
        format_func=lambda s: JOIN_LABELS[s],
    )
    st.session_state.config = st.session_state.config.with_exchange_rate(rate).with_margin(margin)

# ============================================================================
# FILE SELECTION
# ============================================================================
st.title("📊 Supplier Price Intelligence")

uploads = {}
cols = st.columns(3)
for idx, supplier in enumerate(Supplier):
    with cols[idx % 3]:
        st.markdown(
            f"<span style='color:#{SUPPLIER_COLORS[supplier]};font-weight:bold'>{supplier.label}</span>",
            unsafe_allow_html=True,
        )
        uploaded = st.file_uploader(
            supplier.label,
            type=["csv", "txt", "xlsx"],
            key=f"upload_{supplier.value}",
            label_visibility="collapsed",
        )
        if uploaded is not None:
            uploads[supplier] = uploaded

if uploads and st.button("🚀 Process", type="primary"):
    temp_dir = Path(tempfile.mkdtemp(prefix="price_intel_"))
    files = {}
    for supplier, uploaded in uploads.items():
        path = temp_dir / f"{supplier.value}{Path(uploaded.name).suffix}"
        path.write_bytes(uploaded.getbuffer())
        files[supplier] = path

    listener = StreamlitListener()
    orchestrator = SyncOrchestrator(listener=listener)
    st.session_state.result = orchestrator.execute(files, st.session_state.config, join_strategy=strategy)
    if st.session_state.result is None:
        st.error("❌ Processing failed. See the messages above.")

# ============================================================================
# RESULTS SECTION
# ============================================================================
result = st.session_state.result
if result is not None:
    engine = result.engine
    config = st.session_state.config

    if engine.margin_pct != config.margin_pct or engine.join_strategy != strategy:
        engine.recalculate(config.margin_pct, strategy)

    summary = engine.analytics
    c1, c2, c3, c4 = st.columns(4)
    most_wins = summary.supplier_with_most_wins
    most_losses = summary.supplier_with_most_losses
    best_discount = summary.supplier_with_best_avg_discount
    gaps = engine.gap_products()
    c1.metric("Best prices", most_wins.label if most_wins else "-",
              f"{summary.win_count.get(most_wins, 0)} of {summary.total_products}" if most_wins else None)
    c2.metric("Most expensive", most_losses.label if most_losses else "-")
    c3.metric("Best discounts", best_discount.label if best_discount else "-")
    c4.metric(f"Gaps vs {engine.anchor.label}", f"{len(gaps)} products")

    st.dataframe(catalog_to_frame(engine.catalog), width="stretch", hide_index=True)

    keyword = st.text_input("🔍 Search by molecule / description")
    if keyword:
        matches = engine.cheapest_by_molecule(keyword)
        st.dataframe(catalog_to_frame({e.barcode: e for e in matches}, sort=False), width="stretch", hide_index=True)

    if st.button("📥 Generate Excel report"):
        output = export_catalog(engine.catalog, config.exchange_rate, OUTPUT_ROOT)
        with open(output, "rb") as f:
            st.download_button(
                label="Download report",
                data=f,
                file_name=output.name,
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                type="primary",
            )
